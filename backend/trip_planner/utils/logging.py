"""Structured logging for generative model calls and their soft checks."""

import logging
from typing import Any

logger = logging.getLogger(__name__)


class StructuredGenerationLogger:
    """Structured logger for engine operations.

    Every record carries `extra={"structured": {...}}` with at least the
    stage, so log pipelines can group by stage without parsing messages.
    """

    def log_generation(
        self,
        stage: str,
        outcome: str,
        latency_ms: float,
        model: str | None = None,
        item_count: int | None = None,
        error_reason: str | None = None,
    ) -> None:
        """Log one generative call: INFO on success, WARNING otherwise."""
        log_data: dict[str, Any] = {
            "stage": stage,
            "outcome": outcome,
            "latency_ms": round(latency_ms, 2),
        }

        if model:
            log_data["model"] = model
        if item_count is not None:
            log_data["item_count"] = item_count
        if error_reason:
            log_data["error_reason"] = error_reason

        log_msg = f"Generation: {stage} - {outcome}"

        if outcome == "success":
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})

    def log_count_mismatch(self, stage: str, expected: int, actual: int) -> None:
        """A batch came back with a different size than the prompt asked for."""
        logger.warning(
            f"Expected {expected} {stage}, got {actual}",
            extra={"structured": {"stage": stage, "expected": expected, "actual": actual}},
        )

    def log_summary_repair(self, field_name: str, reported: int, actual: int) -> None:
        """A timeline summary field disagreed with the rows and was overwritten."""
        logger.warning(
            f"Summary {field_name} ({reported}) doesn't match the timeline ({actual})",
            extra={
                "structured": {
                    "stage": "timeline",
                    "field": field_name,
                    "reported": reported,
                    "actual": actual,
                }
            },
        )
