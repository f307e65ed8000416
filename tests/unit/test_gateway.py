"""Tests for the in-process and HTTP planner gateways."""

import json
from typing import Any

import httpx
import pytest

from backend.trip_planner.errors import GatewayError
from backend.trip_planner.models.engine import DestinationOption, GenerationMetadata, PlanOption
from backend.trip_planner.models.trip import TripState
from backend.trip_planner.orchestration.gateway import EngineGateway, HttpGateway


def _gateway(handler) -> HttpGateway:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpGateway(base_url="http://planner.test", client=client)


class TestHttpGateway:
    """Test HttpGateway against a mocked transport."""

    @pytest.mark.asyncio
    async def test_generate_destinations_posts_action(
        self, destinations_payload: dict[str, Any]
    ) -> None:
        seen: dict[str, Any] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=destinations_payload)

        gateway = _gateway(handler)

        destinations = await gateway.generate_destinations(
            "Tokyo", GenerationMetadata(number_of_days=3)
        )

        assert [d.name for d in destinations][0] == "Tokyo"
        assert seen["url"] == "http://planner.test/trip/generate"
        assert seen["body"] == {
            "action": "destinations",
            "user_input": "Tokyo",
            "metadata": {"number_of_days": 3},
        }

    @pytest.mark.asyncio
    async def test_generate_timeline_sends_destination_and_plan(
        self,
        tokyo: DestinationOption,
        plan_b: PlanOption,
        timeline_payload: dict[str, Any],
    ) -> None:
        seen: dict[str, Any] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"timeline": timeline_payload})

        gateway = _gateway(handler)

        result = await gateway.generate_timeline(tokyo, plan_b, GenerationMetadata())

        assert len(result.timeline) == 4
        assert seen["body"]["action"] == "timeline"
        assert seen["body"]["destination"]["name"] == "Tokyo"
        assert seen["body"]["plan"]["id"] == "B"

    @pytest.mark.asyncio
    async def test_error_status_carries_server_detail(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={"detail": "API key not configured"})

        gateway = _gateway(handler)

        with pytest.raises(GatewayError, match="API key not configured") as exc_info:
            await gateway.generate_destinations("Tokyo", GenerationMetadata())

        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_error_without_detail_uses_status_line(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, text="<html>Bad Gateway</html>")

        gateway = _gateway(handler)

        with pytest.raises(GatewayError, match="502"):
            await gateway.generate_destinations("Tokyo", GenerationMetadata())

    @pytest.mark.asyncio
    async def test_transport_error_becomes_gateway_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        gateway = _gateway(handler)

        with pytest.raises(GatewayError, match="connection refused"):
            await gateway.generate_destinations("Tokyo", GenerationMetadata())

    @pytest.mark.asyncio
    async def test_missing_field_in_success_body(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={})

        gateway = _gateway(handler)

        with pytest.raises(GatewayError, match="missing plans"):
            await gateway.generate_plans(
                DestinationOption(
                    id="1",
                    name="Tokyo",
                    country="Japan",
                    description="Capital",
                    best_for=["food"],
                    estimated_budget="$$",
                    climate="Mild",
                ),
                GenerationMetadata(),
            )

    @pytest.mark.asyncio
    async def test_refine_posts_state_and_message(self, ready_state: TripState) -> None:
        seen: dict[str, Any] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"response": "Sure!"})

        gateway = _gateway(handler)

        result = await gateway.refine(ready_state, "Add a museum")

        assert result.response == "Sure!"
        assert result.updated_state is None
        assert seen["body"]["message"] == "Add a museum"
        assert seen["body"]["state"]["stage"] == "itinerary_ready"
        assert len(seen["body"]["state"]["timeline"]) == 3


class TestEngineGateway:
    """Test EngineGateway over a scripted engine."""

    @pytest.mark.asyncio
    async def test_refine_converts_state(self, make_engine, ready_state: TripState) -> None:
        engine, client = make_engine({"response": "Day 2 is already light."})
        gateway = EngineGateway(engine)

        result = await gateway.refine(ready_state, "Make day 2 lighter")

        assert result.response == "Day 2 is already light."
        assert result.updated_state is None
        assert "Day 1 (2025-04-01):" in client.calls[0][0]

    @pytest.mark.asyncio
    async def test_refine_rejects_incomplete_state(self, make_engine) -> None:
        engine, client = make_engine()
        gateway = EngineGateway(engine)

        with pytest.raises(GatewayError) as exc_info:
            await gateway.refine(TripState(), "Make day 2 lighter")

        assert exc_info.value.status_code == 400
        assert client.calls == []

    @pytest.mark.asyncio
    async def test_generate_plans_delegates(
        self, make_engine, tokyo: DestinationOption, plans_payload: dict[str, Any]
    ) -> None:
        engine, _ = make_engine(plans_payload)

        plans = await EngineGateway(engine).generate_plans(tokyo, GenerationMetadata())

        assert [p.id for p in plans] == ["A", "B", "C"]
