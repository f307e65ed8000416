"""Models package - re-exports for convenience."""

from backend.trip_planner.models.api import (
    GenerateRequest,
    GenerateResponse,
    RefineRequest,
    RefineResponse,
)
from backend.trip_planner.models.chat import ChatMessage, ChatMessageMetadata
from backend.trip_planner.models.common import Coordinates, CostRange, Money, TripStage
from backend.trip_planner.models.engine import (
    DestinationOption,
    GenerationMetadata,
    LocationCoordinates,
    PlanOption,
    RefinementResponse,
    TimelineLocation,
    TimelineResult,
    TimelineRow,
    TimelineSummary,
    TransportInfo,
    Travelers,
    TripEngineState,
)
from backend.trip_planner.models.trip import ItineraryRow, PlanChoice, TripMetadata, TripState

__all__ = [
    # Common
    "TripStage",
    "Coordinates",
    "Money",
    "CostRange",
    # Engine schema
    "DestinationOption",
    "PlanOption",
    "LocationCoordinates",
    "TimelineLocation",
    "TransportInfo",
    "TimelineRow",
    "TimelineSummary",
    "TimelineResult",
    "Travelers",
    "GenerationMetadata",
    "RefinementResponse",
    "TripEngineState",
    # Application
    "PlanChoice",
    "ItineraryRow",
    "TripMetadata",
    "TripState",
    # Chat
    "ChatMessage",
    "ChatMessageMetadata",
    # API
    "GenerateRequest",
    "GenerateResponse",
    "RefineRequest",
    "RefineResponse",
]
