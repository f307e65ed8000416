"""Tests for free-text normalizers used when presenting generated options."""

import pytest

from backend.trip_planner.models.common import CostRange
from backend.trip_planner.models.trip import TripMetadata
from backend.trip_planner.orchestration.normalize import (
    map_category,
    map_pace,
    parse_cost,
    parse_plan_cost,
    to_generation_metadata,
    trip_days,
)


@pytest.mark.parametrize(
    ("pace", "expected"),
    [
        ("Slow", "relaxed"),
        ("Relaxed and easy", "relaxed"),
        ("Fast", "intense"),
        ("Intense", "intense"),
        ("Adventure-packed", "intense"),
        ("Moderate", "moderate"),
        ("Steady", "moderate"),
    ],
)
def test_map_pace(pace: str, expected: str) -> None:
    assert map_pace(pace) == expected


@pytest.mark.parametrize(
    ("category", "expected"),
    [
        ("Transport", "transport"),
        ("Flight", "transport"),
        ("Fine Dining", "food"),
        ("Meal", "food"),
        ("Hotel check-in", "accommodation"),
        ("Leisure", "free"),
        ("Free time", "free"),
        ("Sightseeing", "activity"),
        ("Culture", "activity"),
    ],
)
def test_map_category(category: str, expected: str) -> None:
    assert map_category(category) == expected


class TestParsePlanCost:
    """Test parse_plan_cost."""

    def test_range_with_symbol(self) -> None:
        assert parse_plan_cost("$1500-2000") == CostRange(min=1500, max=2000, currency="$")

    def test_range_with_thousands_separators_and_en_dash(self) -> None:
        expected = CostRange(min=1200, max=1800, currency="€")
        assert parse_plan_cost("€1,200 – 1,800") == expected

    def test_range_without_prefix_defaults_to_usd(self) -> None:
        assert parse_plan_cost("1500-2000 per person").currency == "USD"

    def test_single_amount_gets_twenty_percent_band(self) -> None:
        cost = parse_plan_cost("$2000")

        assert cost.min == pytest.approx(1600)
        assert cost.max == pytest.approx(2400)
        assert cost.currency == "$"

    def test_dollar_signs_map_to_band(self) -> None:
        assert parse_plan_cost("$$") == CostRange(min=1000, max=1500, currency="USD")
        assert parse_plan_cost("$$$") == CostRange(min=1500, max=2250, currency="USD")

    @pytest.mark.parametrize("text", ["", "Moderate", "varies"])
    def test_fallback(self, text: str) -> None:
        assert parse_plan_cost(text) == CostRange(min=1000, max=2000, currency="USD")


class TestParseCost:
    """Test parse_cost."""

    @pytest.mark.parametrize("text", [None, "", "Free", "free", "Varies"])
    def test_no_cost(self, text: str | None) -> None:
        assert parse_cost(text) is None

    def test_symbol_and_amount(self) -> None:
        cost = parse_cost("$25")

        assert cost is not None
        assert cost.amount == 25
        assert cost.currency == "$"

    def test_range_takes_first_amount(self) -> None:
        cost = parse_cost("¥3,000-5,000")

        assert cost is not None
        assert cost.amount == 3000
        assert cost.currency == "¥"

    def test_bare_number_defaults_to_usd(self) -> None:
        cost = parse_cost("12.50")

        assert cost is not None
        assert cost.amount == 12.5
        assert cost.currency == "USD"


def test_trip_days_is_inclusive_with_default() -> None:
    assert trip_days(TripMetadata(departure_date="2025-04-01", return_date="2025-04-03")) == 3
    assert trip_days(TripMetadata()) == 5


def test_to_generation_metadata_omits_blank_fields() -> None:
    metadata = to_generation_metadata(TripMetadata(travelers=3))

    assert metadata.start_date is None
    assert metadata.end_date is None
    assert metadata.number_of_days is None
    assert metadata.budget is None
    assert metadata.interests is None
    assert metadata.travelers is not None
    assert metadata.travelers.adults == 3


def test_to_generation_metadata_maps_preferences() -> None:
    metadata = to_generation_metadata(
        TripMetadata(
            departure_date="2025-04-01",
            return_date="2025-04-05",
            budget=2500.0,
            preferences=["food", "nightlife"],
        )
    )

    assert metadata.number_of_days == 5
    assert metadata.budget == "$2500"
    assert metadata.travel_style == "food"
    assert metadata.interests == ["food", "nightlife"]
