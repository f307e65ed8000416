"""Gateways through which a TripSession reaches the planning engine.

EngineGateway calls an in-process engine; HttpGateway talks to the HTTP API.
Both raise TripPlannerError subclasses on failure and nothing else.
"""

import logging
from typing import Any, Protocol, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from backend.trip_planner.config import get_settings
from backend.trip_planner.engine.converters import to_engine_state, to_refine_response
from backend.trip_planner.engine.engine import TripPlannerEngine
from backend.trip_planner.errors import GatewayError
from backend.trip_planner.models.api import GenerateResponse, RefineRequest, RefineResponse
from backend.trip_planner.models.engine import (
    DestinationOption,
    GenerationMetadata,
    PlanOption,
    TimelineResult,
)
from backend.trip_planner.models.trip import TripState

logger = logging.getLogger(__name__)

INCOMPLETE_STATE_DETAIL = "Trip state must include a selected destination, plan and timeline"


class PlannerGateway(Protocol):
    """Protocol for the planning backend seen by a client session."""

    async def generate_destinations(
        self, user_input: str, metadata: GenerationMetadata
    ) -> list[DestinationOption]: ...

    async def generate_plans(
        self, destination: DestinationOption, metadata: GenerationMetadata
    ) -> list[PlanOption]: ...

    async def generate_timeline(
        self, destination: DestinationOption, plan: PlanOption, metadata: GenerationMetadata
    ) -> TimelineResult: ...

    async def refine(self, state: TripState, message: str) -> RefineResponse: ...


class EngineGateway:
    """Gateway calling a TripPlannerEngine in the same process."""

    def __init__(self, engine: TripPlannerEngine):
        self.engine = engine

    async def generate_destinations(
        self, user_input: str, metadata: GenerationMetadata
    ) -> list[DestinationOption]:
        return await self.engine.generate_destinations(user_input, metadata)

    async def generate_plans(
        self, destination: DestinationOption, metadata: GenerationMetadata
    ) -> list[PlanOption]:
        return await self.engine.generate_plan_options(destination, metadata)

    async def generate_timeline(
        self, destination: DestinationOption, plan: PlanOption, metadata: GenerationMetadata
    ) -> TimelineResult:
        return await self.engine.generate_timeline(destination, plan, metadata)

    async def refine(self, state: TripState, message: str) -> RefineResponse:
        engine_state = to_engine_state(state)
        if engine_state is None:
            raise GatewayError(INCOMPLETE_STATE_DETAIL, status_code=400)

        refinement = await self.engine.refine_timeline(engine_state, message)
        return to_refine_response(state, refinement)


def _error_detail(response: httpx.Response) -> str:
    """Extract FastAPI's {"detail": ...} from an error response, falling back to the reason."""
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict) and body.get("detail"):
        detail = body["detail"]
        return detail if isinstance(detail, str) else str(detail)

    return f"Request failed: {response.status_code} {response.reason_phrase}"


ModelT = TypeVar("ModelT", bound=BaseModel)


def _validate(model: type[ModelT], body: Any, path: str) -> ModelT:
    try:
        return model.model_validate(body)
    except ValidationError as e:
        raise GatewayError(
            f"Unexpected response shape from {path}: {e.error_count()} error(s)"
        ) from e


class HttpGateway:
    """Gateway posting to the /trip endpoints of a running planner service."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout_seconds: float | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize HTTP gateway.

        Args:
            base_url: Service root (defaults to settings.backend_url)
            timeout_seconds: Per-request timeout (defaults to settings.http_timeout_seconds)
            client: Optional httpx client (for testing with mocks)
        """
        settings = get_settings()
        self.base_url = (base_url or settings.backend_url).rstrip("/")
        self.timeout_seconds = timeout_seconds or settings.http_timeout_seconds
        self.client = client

    async def _post(self, path: str, payload: dict[str, Any]) -> Any:
        """POST JSON and return the decoded body.

        Raises:
            GatewayError: On transport errors or any non-2xx status
        """
        url = f"{self.base_url}{path}"

        close_client = False
        client = self.client
        if client is None:
            client = httpx.AsyncClient(timeout=self.timeout_seconds)
            close_client = True

        try:
            response = await client.post(url, json=payload)
        except httpx.HTTPError as e:
            logger.error(f"[POST {path}] transport error: {e}")
            raise GatewayError(f"Request to {path} failed: {e}") from e
        finally:
            if close_client:
                await client.aclose()

        if response.is_error:
            detail = _error_detail(response)
            logger.warning(f"[POST {path}] {response.status_code}: {detail}")
            raise GatewayError(detail, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise GatewayError(f"Invalid JSON from {path}") from e

    async def _generate(self, payload: dict[str, Any]) -> GenerateResponse:
        body = await self._post("/trip/generate", payload)
        return _validate(GenerateResponse, body, "/trip/generate")

    async def generate_destinations(
        self, user_input: str, metadata: GenerationMetadata
    ) -> list[DestinationOption]:
        result = await self._generate(
            {
                "action": "destinations",
                "user_input": user_input,
                "metadata": metadata.model_dump(exclude_none=True),
            }
        )
        if result.destinations is None:
            raise GatewayError("Response is missing destinations")
        return result.destinations

    async def generate_plans(
        self, destination: DestinationOption, metadata: GenerationMetadata
    ) -> list[PlanOption]:
        result = await self._generate(
            {
                "action": "plans",
                "destination": destination.model_dump(),
                "metadata": metadata.model_dump(exclude_none=True),
            }
        )
        if result.plans is None:
            raise GatewayError("Response is missing plans")
        return result.plans

    async def generate_timeline(
        self, destination: DestinationOption, plan: PlanOption, metadata: GenerationMetadata
    ) -> TimelineResult:
        result = await self._generate(
            {
                "action": "timeline",
                "destination": destination.model_dump(),
                "plan": plan.model_dump(),
                "metadata": metadata.model_dump(exclude_none=True),
            }
        )
        if result.timeline is None:
            raise GatewayError("Response is missing timeline")
        return result.timeline

    async def refine(self, state: TripState, message: str) -> RefineResponse:
        request = RefineRequest(state=state, message=message)
        body = await self._post("/trip/refine", request.model_dump(mode="json"))
        return _validate(RefineResponse, body, "/trip/refine")
