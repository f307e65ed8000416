"""Prometheus metrics for generative model calls."""

from prometheus_client import Counter, Histogram

# Generation metrics
generation_latency_ms = Histogram(
    "generation_latency_ms",
    "Generative model call latency in milliseconds",
    ["stage", "outcome"],
    buckets=[250, 500, 1000, 2000, 4000, 8000, 15000, 30000, 60000],
)

generation_errors_total = Counter(
    "generation_errors_total",
    "Total failed generation operations",
    ["stage", "reason"],
)

# Soft checks on otherwise valid output
generation_count_mismatch_total = Counter(
    "generation_count_mismatch_total",
    "Generated batches whose size differed from the requested count",
    ["stage"],
)

summary_repairs_total = Counter(
    "summary_repairs_total",
    "Timeline summary fields recomputed because they disagreed with the timeline",
    ["field"],
)


class PrometheusGenerationMetrics:
    """Prometheus-backed recorder for the engine's calls and soft checks."""

    def record_latency(self, stage: str, outcome: str, latency_ms: float) -> None:
        generation_latency_ms.labels(stage=stage, outcome=outcome).observe(latency_ms)

    def inc_error(self, stage: str, reason: str) -> None:
        """Count a failed call; reason is the exception class name."""
        generation_errors_total.labels(stage=stage, reason=reason).inc()

    def inc_count_mismatch(self, stage: str) -> None:
        generation_count_mismatch_total.labels(stage=stage).inc()

    def inc_summary_repair(self, field_name: str) -> None:
        summary_repairs_total.labels(field=field_name).inc()
