"""Request/response contracts for the /trip endpoints."""

from pydantic import BaseModel, Field

from backend.trip_planner.models.engine import (
    DestinationOption,
    GenerationMetadata,
    PlanOption,
    TimelineResult,
)
from backend.trip_planner.models.trip import TripState

GENERATE_ACTIONS = ("destinations", "plans", "timeline")


class GenerateRequest(BaseModel):
    """Body of POST /trip/generate.

    `action` selects the stage; the remaining fields are required per action
    and checked by the route so that a missing field yields a 400 with a
    readable message instead of a schema error.
    """

    action: str = Field(..., description="One of: destinations, plans, timeline")
    user_input: str | None = None
    destination: DestinationOption | None = None
    plan: PlanOption | None = None
    metadata: GenerationMetadata = Field(default_factory=GenerationMetadata)


class GenerateResponse(BaseModel):
    """Body returned by POST /trip/generate; exactly one field is set."""

    destinations: list[DestinationOption] | None = None
    plans: list[PlanOption] | None = None
    timeline: TimelineResult | None = None


class RefineRequest(BaseModel):
    """Body of POST /trip/refine."""

    state: TripState
    message: str


class RefineResponse(BaseModel):
    """Body returned by POST /trip/refine.

    `updated_state` is present only when the model changed the timeline.
    """

    response: str
    updated_state: TripState | None = None
    suggested_actions: list[str] | None = None
    changes_summary: str | None = None
