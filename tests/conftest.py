"""Shared pytest fixtures for all test suites."""

from collections.abc import Iterator
from typing import Any

import pytest

from backend.trip_planner.config import Settings, get_settings
from backend.trip_planner.engine.engine import TripPlannerEngine
from backend.trip_planner.models.common import Coordinates, CostRange, Money, TripStage
from backend.trip_planner.models.engine import (
    DestinationOption,
    LocationCoordinates,
    PlanOption,
    TimelineLocation,
    TimelineRow,
)
from backend.trip_planner.models.trip import ItineraryRow, PlanChoice, TripMetadata, TripState


class FakeGenerativeClient:
    """Scripted generative client.

    Each call pops the next scripted reply; exceptions in the script are raised
    instead of returned. Calls are recorded as (prompt, schema, schema_name).
    """

    model_name = "fake-model"
    provider = "Fake"

    def __init__(self, *replies: Any):
        self.replies = list(replies)
        self.calls: list[tuple[str, dict[str, Any], str]] = []

    async def generate(self, prompt: str, schema: dict[str, Any], *, schema_name: str) -> Any:
        self.calls.append((prompt, schema, schema_name))
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Iterator[None]:
    """Drop the cached settings between tests."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    """Settings with a dummy key (never used for a real call)."""
    return Settings(openai_api_key="sk-test", _env_file=None)


@pytest.fixture
def make_engine(settings: Settings):
    """Factory building an engine over a FakeGenerativeClient with scripted replies."""

    def _make(*replies: Any) -> tuple[TripPlannerEngine, FakeGenerativeClient]:
        client = FakeGenerativeClient(*replies)
        return TripPlannerEngine(client, settings), client

    return _make


def _destination_payload(index: int, name: str, country: str = "Japan") -> dict[str, Any]:
    return {
        "id": str(index),
        "name": name,
        "country": country,
        "description": f"{name} is a great place to visit.",
        "best_for": ["culture", "food"],
        "estimated_budget": "$$",
        "climate": "Mild spring weather",
    }


def _plan_payload(plan_id: str, title: str, pace: str, cost: str) -> dict[str, Any]:
    return {
        "id": plan_id,
        "title": title,
        "description": f"{title} itinerary.",
        "style": title.split()[0],
        "pace": pace,
        "highlights": ["Senso-ji", "Tsukiji Outer Market"],
        "estimated_cost": cost,
        "target_audience": ["couples"],
    }


def _row_payload(
    row_id: str, day: int, time_slot: str, activity: str, **extra: Any
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": row_id,
        "day": day,
        "date": f"2025-04-0{day}",
        "time_slot": time_slot,
        "activity": activity,
        "description": f"{activity} description",
        "location": {"name": f"{activity} venue"},
        "category": "Sightseeing",
    }
    payload.update(extra)
    return payload


@pytest.fixture
def tokyo() -> DestinationOption:
    return DestinationOption.model_validate(_destination_payload(1, "Tokyo"))


@pytest.fixture
def plan_b() -> PlanOption:
    return PlanOption.model_validate(
        _plan_payload("B", "Balanced Highlights", "Moderate", "$1,500-2,500")
    )


@pytest.fixture
def plan_b_choice() -> PlanChoice:
    return PlanChoice(
        id="B",
        label="B",
        name="Balanced Highlights",
        description="Balanced Highlights itinerary.",
        pace="moderate",
        highlights=["Senso-ji", "Tsukiji Outer Market"],
        total_days=2,
        estimated_cost=CostRange(min=1500, max=2500, currency="$"),
        includes=["couples"],
    )


@pytest.fixture
def engine_rows() -> list[TimelineRow]:
    return [
        TimelineRow(
            id="timeline-1-1",
            day=1,
            date="2025-04-01",
            time_slot="09:00-12:00",
            activity="Senso-ji Temple",
            description="Visit the oldest temple in Tokyo",
            location=TimelineLocation(
                name="Senso-ji",
                address="Asakusa, Taito",
                coordinates=LocationCoordinates(lat=35.7148, lng=139.7967),
            ),
            category="Culture",
            estimated_cost="Free",
        ),
        TimelineRow(
            id="timeline-2-1",
            day=2,
            date="2025-04-02",
            time_slot="Evening",
            activity="Izakaya dinner",
            description="Dinner in Shinjuku",
            location=TimelineLocation(name="Omoide Yokocho"),
            category="Fine Dining",
            estimated_cost="$40",
        ),
    ]


@pytest.fixture
def itinerary_rows() -> list[ItineraryRow]:
    return [
        ItineraryRow(
            id="timeline-1-1",
            day=1,
            date="2025-04-01",
            time="09:00-12:00",
            activity="Senso-ji Temple",
            location="Senso-ji",
            coordinates=Coordinates(lat=35.7148, lng=139.7967),
            duration="3 hours",
            category="activity",
            notes="Go early to avoid crowds",
        ),
        ItineraryRow(
            id="timeline-1-2",
            day=1,
            date="2025-04-01",
            time="13:00-13:30",
            activity="Metro to Shibuya",
            location="Asakusa Station",
            duration="30 min",
            category="transport",
            cost=Money(amount=2.5, currency="USD"),
        ),
        ItineraryRow(
            id="timeline-2-1",
            day=2,
            date="2025-04-02",
            time="Afternoon",
            activity="Shinjuku Gyoen",
            location="Shinjuku Gyoen",
            category="free",
            verified=True,
        ),
    ]


@pytest.fixture
def ready_state(
    tokyo: DestinationOption, plan_b_choice: PlanChoice, itinerary_rows: list[ItineraryRow]
) -> TripState:
    """Session state with an itinerary ready for refinement."""
    return TripState(
        stage=TripStage.itinerary_ready,
        user_input="Tokyo",
        destination_options=[tokyo],
        selected_destination=tokyo,
        selected_plan=plan_b_choice,
        plan_options=[plan_b_choice],
        timeline=itinerary_rows,
        metadata=TripMetadata(
            travelers=2,
            departure_date="2025-04-01",
            return_date="2025-04-02",
            budget=3000,
            preferences=["food", "culture"],
        ),
    )


@pytest.fixture
def destinations_payload() -> dict[str, Any]:
    """Raw model output for user_input="Tokyo": the city first, then areas within it."""
    names = ["Tokyo", "Shibuya", "Asakusa", "Shinjuku", "Odaiba"]
    return {"destinations": [_destination_payload(i, n) for i, n in enumerate(names, start=1)]}


@pytest.fixture
def plans_payload() -> dict[str, Any]:
    return {
        "plans": [
            _plan_payload("A", "Relaxed Cultural", "Slow", "$1200-1800"),
            _plan_payload("B", "Balanced Highlights", "Moderate", "$1,500-2,500"),
            _plan_payload("C", "Adventurous Intensive", "Fast", "$$$"),
        ]
    }


@pytest.fixture
def timeline_payload() -> dict[str, Any]:
    """Unsorted rows with a summary whose counts disagree with them."""
    return {
        "timeline": [
            _row_payload("timeline-2-1", 2, "Morning", "Tsukiji Outer Market", category="Food"),
            _row_payload("timeline-1-2", 1, "Evening", "Shibuya Crossing"),
            _row_payload(
                "timeline-1-1",
                1,
                "09:00-12:00",
                "Senso-ji Temple",
                location={"name": "Senso-ji", "coordinates": {"lat": 35.7148}},
                estimated_cost="Free",
            ),
            _row_payload("timeline-2-2", 2, "Afternoon", "Train to Hakone", category="Transport"),
        ],
        "summary": {
            "total_days": 3,
            "total_activities": 10,
            "estimated_total_cost": "$1,500-2,500",
            "key_highlights": ["Senso-ji"],
        },
    }
