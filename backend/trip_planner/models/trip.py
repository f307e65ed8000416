"""Application models - the trip state a client session binds to."""

from typing import Any, Literal

from pydantic import BaseModel, Field

from backend.trip_planner.models.chat import ChatMessage
from backend.trip_planner.models.common import Coordinates, CostRange, Money, TripStage
from backend.trip_planner.models.engine import DestinationOption

PlanLabel = Literal["A", "B", "C"]
PlanPace = Literal["relaxed", "moderate", "intense"]
ItineraryCategory = Literal["transport", "activity", "food", "accommodation", "free"]

PLAN_LABELS: tuple[PlanLabel, ...] = ("A", "B", "C")
ITINERARY_CATEGORIES: frozenset[str] = frozenset(
    ["transport", "activity", "food", "accommodation", "free"]
)


class PlanChoice(BaseModel):
    """Plan option as presented to the user."""

    id: str
    label: PlanLabel
    name: str
    description: str
    pace: PlanPace
    highlights: list[str] = Field(default_factory=list)
    total_days: int
    estimated_cost: CostRange
    includes: list[str] = Field(default_factory=list)


class ItineraryRow(BaseModel):
    """Flat timeline row bound by the client.

    `category` is expected to be one of ITINERARY_CATEGORIES but is typed as a
    plain string: rows coming back from refinement carry the model's category
    lower-cased, which may fall outside that set.
    """

    id: str
    day: int
    date: str
    time: str
    activity: str
    location: str
    coordinates: Coordinates | None = None
    duration: str = ""
    category: str = "activity"
    notes: str | None = None
    cost: Money | None = None
    verified: bool = False
    booking_url: str | None = None
    flight_info: dict[str, Any] | None = None
    hotel_info: dict[str, Any] | None = None


class TripMetadata(BaseModel):
    """Trip parameters collected from the user."""

    travelers: int = 2
    departure_date: str = ""
    return_date: str = ""
    departure_city: str = ""
    budget: float | None = None
    preferences: list[str] = Field(default_factory=list)
    presets: list[str] | None = None


class TripState(BaseModel):
    """Canonical state of one planning session."""

    stage: TripStage = TripStage.initial
    user_input: str = ""
    destination_options: list[DestinationOption] = Field(default_factory=list)
    selected_destination: DestinationOption | None = None
    plan_options: list[PlanChoice] = Field(default_factory=list)
    selected_plan: PlanChoice | None = None
    timeline: list[ItineraryRow] = Field(default_factory=list)
    conversation: list[ChatMessage] = Field(default_factory=list)
    metadata: TripMetadata = Field(default_factory=TripMetadata)
