"""Engine schema - the shapes exchanged with the generative model.

Field descriptions double as instructions: they are carried into the JSON
schemas handed to the model (see engine/schemas.py).
"""

from pydantic import BaseModel, ConfigDict, Field


class DestinationOption(BaseModel):
    """Candidate destination proposed for the user's request."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique identifier for the destination")
    name: str = Field(..., description="Name of the destination city/region")
    country: str = Field(..., description="Country where the destination is located")
    description: str = Field(
        ..., description="Brief description highlighting the destination's appeal"
    )
    best_for: list[str] = Field(
        ..., description="Tags describing what this destination is best suited for"
    )
    estimated_budget: str = Field(..., description="Budget estimate (e.g., '$', '$$', '$$$')")
    climate: str = Field(..., description="Expected climate during the travel period")
    image_url: str | None = Field(
        None, description="URL to a representative image (can be placeholder)"
    )


class PlanOption(BaseModel):
    """One of the three plan variants (A/B/C) for a destination."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Plan identifier (A, B, or C)")
    title: str = Field(..., description="Short title for the plan theme")
    description: str = Field(
        ..., description="Detailed description of the plan's focus and approach"
    )
    style: str = Field(
        ..., description="Travel style (e.g., 'Relaxed', 'Balanced', 'Adventurous')"
    )
    pace: str = Field(..., description="Daily pace (e.g., 'Slow', 'Moderate', 'Fast')")
    highlights: list[str] = Field(
        ..., description="Key highlights and activities included in this plan"
    )
    estimated_cost: str = Field(..., description="Budget estimate for this plan")
    target_audience: list[str] = Field(..., description="Who this plan is best suited for")


class LocationCoordinates(BaseModel):
    """Coordinates as returned by the model; either component may be missing."""

    lat: float | None = Field(None, description="Latitude coordinate")
    lng: float | None = Field(None, description="Longitude coordinate")


class TimelineLocation(BaseModel):
    """Venue of a timeline activity."""

    name: str = Field(..., description="Name of the location/venue")
    address: str | None = Field(None, description="Full address or area description")
    coordinates: LocationCoordinates | None = None


class TransportInfo(BaseModel):
    """How the traveler gets to an activity from the previous one."""

    method: str | None = Field(
        None, description="Mode of transport (e.g., 'Walk', 'Taxi', 'Metro', 'Bus')"
    )
    duration: str | None = Field(
        None, description="Travel time to this location from previous activity"
    )
    cost: str | None = Field(None, description="Estimated transport cost")


class TimelineRow(BaseModel):
    """Single scheduled activity in the engine timeline."""

    id: str = Field(..., description="Unique identifier for the timeline row")
    day: int = Field(..., ge=1, description="Day number in the trip (1-based)")
    date: str = Field(..., description="Date in YYYY-MM-DD format")
    time_slot: str = Field(
        ...,
        description="Time range (e.g., '09:00-12:00', 'Morning', 'Afternoon', 'Evening')",
    )
    activity: str = Field(..., description="Name/title of the activity or event")
    description: str = Field(..., description="Detailed description of what to do and expect")
    location: TimelineLocation
    category: str = Field(
        ...,
        description=(
            "Category of activity (e.g., 'Sightseeing', 'Food', 'Transport', "
            "'Accommodation', 'Activity', 'Shopping', 'Culture', 'Nature')"
        ),
    )
    estimated_cost: str | None = Field(
        None, description="Estimated cost for this activity (e.g., '$20-30', 'Free', '$$')"
    )
    estimated_duration: str | None = Field(
        None, description="Expected duration (e.g., '2 hours', '30 min', 'Half day')"
    )
    tips: list[str] | None = Field(None, description="Helpful tips and recommendations")
    booking_required: bool | None = Field(
        None, description="Whether advance booking is recommended or required"
    )
    transport_info: TransportInfo | None = None


class TimelineSummary(BaseModel):
    """Trip overview accompanying a generated timeline."""

    total_days: int = Field(..., description="Total number of days in the trip")
    total_activities: int = Field(..., description="Total number of planned activities")
    estimated_total_cost: str | None = Field(
        None, description="Overall estimated cost for the trip"
    )
    key_highlights: list[str] | None = Field(
        None, description="Main highlights and must-see experiences"
    )


class Travelers(BaseModel):
    """Traveler composition."""

    adults: int
    children: int | None = None
    seniors: int | None = None


class GenerationMetadata(BaseModel):
    """Trip preferences fed into the prompts. Every field is optional."""

    start_date: str | None = None
    end_date: str | None = None
    number_of_days: int | None = None
    budget: str | None = None
    travel_style: str | None = None
    interests: list[str] | None = None
    travelers: Travelers | None = None
    special_requirements: list[str] | None = None
    presets: list[str] | None = None


class TimelineResult(BaseModel):
    """Timeline generation output."""

    timeline: list[TimelineRow] = Field(
        ..., description="Array of timeline rows covering the entire trip"
    )
    summary: TimelineSummary


class RefinementResponse(BaseModel):
    """Structured decision returned for a conversational refinement request."""

    response: str = Field(
        ..., description="Natural language response to the user's refinement request"
    )
    updated_timeline: list[TimelineRow] | None = Field(
        None, description="Updated timeline if changes were made, otherwise null"
    )
    suggested_actions: list[str] | None = Field(
        None, description="Suggested follow-up actions or questions for the user"
    )
    changes_summary: str | None = Field(
        None, description="Summary of changes made to the timeline"
    )


class TripEngineState(BaseModel):
    """Working state handed to the engine while refining an itinerary.

    Built on demand from the application TripState by the converters; never
    persisted.
    """

    destination: DestinationOption
    plan: PlanOption
    timeline: list[TimelineRow]
    summary: TimelineSummary
    metadata: GenerationMetadata
