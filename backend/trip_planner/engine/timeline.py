"""Timeline ordering and summary consistency."""

from backend.trip_planner.models.engine import TimelineRow, TimelineSummary
from backend.trip_planner.utils.logging import StructuredGenerationLogger
from backend.trip_planner.utils.metrics import PrometheusGenerationMetrics

_metrics = PrometheusGenerationMetrics()
_structured_log = StructuredGenerationLogger()


def timeline_sort_key(row: TimelineRow) -> tuple[int, str]:
    """Order by day, then by plain string comparison of the time slot.

    This is not a chronological parse: "Afternoon" sorts before "Morning" and
    mixed formats ("09:00-12:00" vs "Evening") compare by characters.
    """
    return (row.day, row.time_slot)


def sort_timeline(rows: list[TimelineRow]) -> list[TimelineRow]:
    """Return a new list sorted by (day, time_slot); equal keys keep input order."""
    return sorted(rows, key=timeline_sort_key)


def repair_summary(summary: TimelineSummary, timeline: list[TimelineRow]) -> TimelineSummary:
    """Recompute summary counts that disagree with the timeline.

    Activity count must equal the number of rows and day count the number of
    distinct days. Mismatches are logged and overwritten, never raised.
    """
    actual = {
        "total_activities": len(timeline),
        "total_days": len({row.day for row in timeline}),
    }
    updates: dict[str, int] = {}

    for field_name, value in actual.items():
        reported = getattr(summary, field_name)
        if reported != value:
            _structured_log.log_summary_repair(field_name, reported, value)
            _metrics.inc_summary_repair(field_name)
            updates[field_name] = value

    return summary.model_copy(update=updates) if updates else summary
