"""Conversion between the application TripState and the engine's working state.

Both directions are pure: inputs are never mutated and a new model is
returned. The mapping is lossy in places (category "free" becomes "Activity",
cost strings collapse to their digits) and that lossiness is kept as-is.
"""

import logging
import re
from datetime import datetime

from backend.trip_planner.models.api import RefineResponse
from backend.trip_planner.models.common import Coordinates, Money
from backend.trip_planner.models.engine import (
    GenerationMetadata,
    LocationCoordinates,
    PlanOption,
    RefinementResponse,
    TimelineLocation,
    TimelineRow,
    TimelineSummary,
    TransportInfo,
    Travelers,
    TripEngineState,
)
from backend.trip_planner.models.trip import (
    ITINERARY_CATEGORIES,
    ItineraryRow,
    PlanChoice,
    TripState,
)

logger = logging.getLogger(__name__)

DEFAULT_CURRENCY = "USD"

_NON_NUMERIC = re.compile(r"[^0-9.]")


def format_amount(amount: float) -> str:
    """Print integral amounts without decimals (1500.0 -> "1500")."""
    return str(int(amount)) if float(amount).is_integer() else str(amount)


def calculate_days(start_date: str, end_date: str) -> int | None:
    """Inclusive number of days between two ISO dates.

    Order does not matter. Returns None when either date is missing or
    unparseable.
    """
    if not start_date or not end_date:
        return None

    try:
        start = datetime.fromisoformat(start_date).date()
        end = datetime.fromisoformat(end_date).date()
    except ValueError:
        logger.debug(f"Cannot compute trip length from {start_date!r} to {end_date!r}")
        return None

    return abs((end - start).days) + 1


def to_app_coordinates(
    coordinates: LocationCoordinates | None, row_id: str
) -> Coordinates | None:
    """Map model coordinates onto WGS84 ones; missing components default to 0.

    Out-of-range pairs (typically lat and lng swapped) are dropped with a
    warning so that one bad row never fails the whole itinerary.
    """
    if coordinates is None:
        return None

    lat = coordinates.lat or 0
    lng = coordinates.lng or 0
    if not (-90 <= lat <= 90 and -180 <= lng <= 180):
        logger.warning(f"Row {row_id} has out-of-range coordinates ({lat}, {lng}); dropped")
        return None

    return Coordinates(lat=lat, lng=lng)


def _money_to_text(cost: Money | None) -> str | None:
    if cost is None:
        return None
    return f"{cost.currency}{format_amount(cost.amount)}"


def _to_engine_row(row: ItineraryRow) -> TimelineRow:
    coordinates = (
        LocationCoordinates(lat=row.coordinates.lat, lng=row.coordinates.lng)
        if row.coordinates
        else None
    )
    cost_text = _money_to_text(row.cost)

    return TimelineRow(
        id=row.id,
        day=row.day,
        date=row.date,
        time_slot=row.time,
        activity=row.activity,
        description=row.notes or row.activity,
        location=TimelineLocation(
            name=row.location, address=row.location, coordinates=coordinates
        ),
        category="Activity" if row.category == "free" else row.category,
        estimated_cost=cost_text,
        estimated_duration=row.duration,
        tips=[row.notes] if row.notes else None,
        booking_required=row.verified,
        transport_info=(
            TransportInfo(method=row.activity, duration=row.duration, cost=cost_text)
            if row.category == "transport"
            else None
        ),
    )


def plan_choice_to_option(choice: PlanChoice) -> PlanOption:
    """Map a presented plan back onto the engine's plan shape."""
    cost = choice.estimated_cost
    return PlanOption(
        id=choice.id,
        title=choice.name,
        description=choice.description,
        style=choice.pace,
        pace=choice.pace,
        highlights=list(choice.highlights),
        estimated_cost=f"{cost.currency}{format_amount(cost.min)}-{format_amount(cost.max)}",
        target_audience=list(choice.includes),
    )


def to_engine_state(state: TripState) -> TripEngineState | None:
    """Build the engine's working state from the application state.

    Returns None unless a destination and a plan are selected and the
    timeline is non-empty; refinement is impossible without all three.
    """
    destination = state.selected_destination
    selected_plan = state.selected_plan
    if destination is None or selected_plan is None or not state.timeline:
        return None

    plan = plan_choice_to_option(selected_plan)

    timeline = [_to_engine_row(row) for row in state.timeline]

    trip_meta = state.metadata
    budget_text = f"${format_amount(trip_meta.budget)}" if trip_meta.budget else None
    metadata = GenerationMetadata(
        start_date=trip_meta.departure_date or None,
        end_date=trip_meta.return_date or None,
        number_of_days=calculate_days(trip_meta.departure_date, trip_meta.return_date),
        budget=budget_text,
        travel_style=trip_meta.preferences[0] if trip_meta.preferences else None,
        interests=list(trip_meta.preferences),
        travelers=Travelers(adults=trip_meta.travelers),
        special_requirements=[],
    )

    summary = TimelineSummary(
        total_days=len({row.day for row in timeline}),
        total_activities=len(timeline),
        estimated_total_cost=budget_text,
        key_highlights=list(selected_plan.highlights),
    )

    return TripEngineState(
        destination=destination,
        plan=plan,
        timeline=timeline,
        summary=summary,
        metadata=metadata,
    )


def _parse_refined_cost(text: str | None) -> Money | None:
    """Keep only digits and dots; "$20-30" becomes 2030 USD."""
    if not text:
        return None

    digits = _NON_NUMERIC.sub("", text)
    try:
        amount = float(digits)
    except ValueError:
        return None

    return Money(amount=amount, currency=DEFAULT_CURRENCY)


def _from_engine_row(row: TimelineRow) -> ItineraryRow:
    coordinates = to_app_coordinates(row.location.coordinates, row.id)

    category = row.category.lower() or "activity"
    if category not in ITINERARY_CATEGORIES:
        logger.warning(
            f"Refined row {row.id} has category {category!r} outside the itinerary categories"
        )

    return ItineraryRow(
        id=row.id,
        day=row.day,
        date=row.date,
        time=row.time_slot,
        activity=row.activity,
        location=row.location.name,
        coordinates=coordinates,
        duration=row.estimated_duration or "",
        category=category,
        notes=row.description,
        cost=_parse_refined_cost(row.estimated_cost),
        verified=row.booking_required or False,
    )


def update_state_with_refined_timeline(
    state: TripState, refined_timeline: list[TimelineRow]
) -> TripState:
    """Return a copy of state whose timeline is replaced by the refined rows."""
    timeline = [_from_engine_row(row) for row in refined_timeline]
    return state.model_copy(update={"timeline": timeline})


def to_refine_response(state: TripState, refinement: RefinementResponse) -> RefineResponse:
    """Package a refinement for the client; updated_state only when rows changed."""
    updated_state = None
    if refinement.updated_timeline:
        updated_state = update_state_with_refined_timeline(state, refinement.updated_timeline)

    return RefineResponse(
        response=refinement.response,
        updated_state=updated_state,
        suggested_actions=refinement.suggested_actions,
        changes_summary=refinement.changes_summary,
    )
