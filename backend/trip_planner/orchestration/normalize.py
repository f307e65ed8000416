"""Best-effort mapping of free-text model fields onto application enums and amounts.

None of these functions raise: unparseable input falls back to a default
(or None for per-row costs).
"""

import re

from backend.trip_planner.engine.converters import calculate_days, format_amount
from backend.trip_planner.models.common import CostRange, Money
from backend.trip_planner.models.engine import GenerationMetadata, Travelers
from backend.trip_planner.models.trip import ItineraryCategory, PlanPace, TripMetadata

DEFAULT_TRIP_DAYS = 5

_RANGE_COST = re.compile(r"([^\d]*)([\d,]+)\s*[-–]\s*([\d,]+)")
_SINGLE_COST = re.compile(r"([^\d]*)([\d,]+)")
_ROW_COST = re.compile(r"([^\d]*)([\d,.]+)")

_FALLBACK_PLAN_COST = CostRange(min=1000, max=2000, currency="USD")


def map_pace(pace: str) -> PlanPace:
    """Map a free-text pace ("Slow", "Fast-paced", ...) to relaxed/moderate/intense."""
    lower = pace.lower()
    if "relax" in lower or "slow" in lower:
        return "relaxed"
    if "intense" in lower or "fast" in lower or "adventure" in lower:
        return "intense"
    return "moderate"


def map_category(category: str) -> ItineraryCategory:
    """Map a model category ("Fine Dining", "Hotel check-in", ...) to an itinerary category."""
    lower = category.lower()
    if any(word in lower for word in ("transport", "travel", "flight")):
        return "transport"
    if any(word in lower for word in ("food", "dining", "restaurant", "meal")):
        return "food"
    if any(word in lower for word in ("accommodation", "hotel", "lodging")):
        return "accommodation"
    if "free" in lower or "leisure" in lower:
        return "free"
    return "activity"


def _to_number(text: str) -> float | None:
    try:
        return float(text.replace(",", ""))
    except ValueError:
        return None


def parse_plan_cost(cost: str) -> CostRange:
    """Turn a plan's estimated cost text into a numeric band.

    "$1500-2000" -> 1500..2000 "$"; "2000 EUR" -> 1600..2400 (±20%);
    "$$" -> 1000..1500 USD (500 per dollar sign, upper bound ×1.5);
    anything else -> 1000..2000 USD. Currency is whatever precedes the
    first number, or "USD" when nothing does.
    """
    match = _RANGE_COST.search(cost)
    if match:
        low, high = _to_number(match.group(2)), _to_number(match.group(3))
        if low is not None and high is not None:
            return CostRange(min=low, max=high, currency=match.group(1).strip() or "USD")

    match = _SINGLE_COST.search(cost)
    if match:
        amount = _to_number(match.group(2))
        if amount is not None:
            return CostRange(
                min=amount * 0.8, max=amount * 1.2, currency=match.group(1).strip() or "USD"
            )

    dollar_count = cost.count("$")
    if dollar_count > 0:
        base = dollar_count * 500
        return CostRange(min=base, max=base * 1.5, currency="USD")

    return _FALLBACK_PLAN_COST.model_copy()


def parse_cost(cost: str | None) -> Money | None:
    """Parse a per-activity cost ("$25", "¥3,000"); None for empty, "free" or no number."""
    if not cost or cost.lower() == "free":
        return None

    match = _ROW_COST.search(cost)
    if not match:
        return None

    amount = _to_number(match.group(2))
    if amount is None:
        return None

    return Money(amount=amount, currency=match.group(1).strip() or "USD")


def trip_days(metadata: TripMetadata) -> int:
    """Inclusive trip length from the departure/return dates, or 5 when unknown."""
    return calculate_days(metadata.departure_date, metadata.return_date) or DEFAULT_TRIP_DAYS


def to_generation_metadata(metadata: TripMetadata) -> GenerationMetadata:
    """Project the user's trip parameters onto the engine's prompt metadata."""
    return GenerationMetadata(
        start_date=metadata.departure_date or None,
        end_date=metadata.return_date or None,
        number_of_days=calculate_days(metadata.departure_date, metadata.return_date),
        budget=f"${format_amount(metadata.budget)}" if metadata.budget else None,
        travel_style=metadata.preferences[0] if metadata.preferences else None,
        interests=list(metadata.preferences) or None,
        travelers=Travelers(adults=metadata.travelers),
        presets=list(metadata.presets) if metadata.presets else None,
    )
