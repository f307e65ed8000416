"""Tests for timeline ordering and summary repair."""

import pytest

from backend.trip_planner.engine.timeline import repair_summary, sort_timeline
from backend.trip_planner.models.engine import TimelineLocation, TimelineRow, TimelineSummary
from backend.trip_planner.utils.metrics import summary_repairs_total


def _row(row_id: str, day: int, time_slot: str) -> TimelineRow:
    return TimelineRow(
        id=row_id,
        day=day,
        date=f"2025-04-0{day}",
        time_slot=time_slot,
        activity=row_id,
        description=row_id,
        location=TimelineLocation(name="somewhere"),
        category="Activity",
    )


class TestSortTimeline:
    """Test sort_timeline."""

    def test_orders_by_day_then_time_slot(self) -> None:
        rows = [
            _row("d2-evening", 2, "Evening"),
            _row("d1-late", 1, "14:00-16:00"),
            _row("d1-early", 1, "09:00-12:00"),
            _row("d2-afternoon", 2, "Afternoon"),
        ]

        ordered = sort_timeline(rows)

        assert [r.id for r in ordered] == ["d1-early", "d1-late", "d2-afternoon", "d2-evening"]

    def test_uses_plain_string_comparison(self) -> None:
        """Test that slot labels compare by characters, not by time of day."""
        ordered = sort_timeline([_row("morning", 1, "Morning"), _row("afternoon", 1, "Afternoon")])

        assert [r.id for r in ordered] == ["afternoon", "morning"]

    def test_is_stable_for_equal_keys(self) -> None:
        rows = [_row("first", 1, "Morning"), _row("second", 1, "Morning")]

        assert [r.id for r in sort_timeline(rows)] == ["first", "second"]

    def test_does_not_mutate_input(self) -> None:
        rows = [_row("b", 2, "Morning"), _row("a", 1, "Morning")]

        sort_timeline(rows)

        assert [r.id for r in rows] == ["b", "a"]


class TestRepairSummary:
    """Test repair_summary."""

    def test_consistent_summary_is_returned_unchanged(self) -> None:
        rows = [_row("a", 1, "Morning"), _row("b", 2, "Morning")]
        summary = TimelineSummary(total_days=2, total_activities=2)

        assert repair_summary(summary, rows) is summary

    def test_recomputes_disagreeing_counts(self, caplog: pytest.LogCaptureFixture) -> None:
        rows = [_row("a", 1, "Morning"), _row("b", 1, "Evening"), _row("c", 3, "Morning")]
        summary = TimelineSummary(
            total_days=5, total_activities=12, estimated_total_cost="$2000"
        )
        before = summary_repairs_total.labels(field="total_activities")._value.get()

        with caplog.at_level("WARNING"):
            repaired = repair_summary(summary, rows)

        assert repaired.total_activities == 3
        assert repaired.total_days == 2
        assert repaired.estimated_total_cost == "$2000"
        assert summary.total_activities == 12
        assert "doesn't match" in caplog.text
        after = summary_repairs_total.labels(field="total_activities")._value.get()
        assert after == before + 1
