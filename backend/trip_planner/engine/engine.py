"""Trip planning engine: one schema-constrained generation per stage.

Every operation follows the same path: build prompt, call the generative
client with the stage's response schema, validate the parsed JSON, then
normalize (sorting, summary repair). Any failure aborts the operation and
propagates; nothing partial is returned.
"""

import logging
import time
from collections.abc import Callable
from typing import Any, TypeVar

from backend.trip_planner.config import Settings, get_settings
from backend.trip_planner.engine.prompts import (
    build_destination_prompt,
    build_plan_prompt,
    build_refinement_prompt,
    build_timeline_prompt,
)
from backend.trip_planner.engine.schemas import (
    DESTINATION_SCHEMA,
    PLAN_SCHEMA,
    REFINEMENT_SCHEMA,
    TIMELINE_SCHEMA,
    parse_destinations,
    parse_plans,
    parse_refinement,
    parse_timeline,
)
from backend.trip_planner.engine.timeline import repair_summary, sort_timeline
from backend.trip_planner.errors import TripPlannerError
from backend.trip_planner.llm.client import GenerativeClient
from backend.trip_planner.models.engine import (
    DestinationOption,
    GenerationMetadata,
    PlanOption,
    RefinementResponse,
    TimelineResult,
    TripEngineState,
)
from backend.trip_planner.utils.logging import StructuredGenerationLogger
from backend.trip_planner.utils.metrics import PrometheusGenerationMetrics

logger = logging.getLogger(__name__)

T = TypeVar("T")

PING_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {"ok": {"type": "boolean"}},
    "required": ["ok"],
}


class TripPlannerEngine:
    """Staged trip planner on top of a schema-constrained generative client.

    Construct explicitly and inject wherever it is needed; the engine keeps no
    state between calls.
    """

    def __init__(self, client: GenerativeClient, settings: Settings | None = None):
        """Initialize engine.

        Args:
            client: Generative client used for every stage
            settings: Optional settings (defaults to cached application settings)
        """
        settings = settings or get_settings()
        self.client = client
        self.expected_destination_count = settings.expected_destination_count
        self.expected_plan_count = settings.expected_plan_count
        self._metrics = PrometheusGenerationMetrics()
        self._structured_log = StructuredGenerationLogger()

    async def _generate(
        self,
        stage: str,
        prompt: str,
        schema: dict[str, Any],
        parse: Callable[[Any], T],
    ) -> T:
        """Call the client for one stage and validate the result."""
        start = time.perf_counter()
        try:
            payload = await self.client.generate(prompt, schema, schema_name=stage)
            result = parse(payload)
        except TripPlannerError as e:
            latency_ms = (time.perf_counter() - start) * 1000
            reason = type(e).__name__
            self._metrics.record_latency(stage, "error", latency_ms)
            self._metrics.inc_error(stage, reason)
            self._structured_log.log_generation(
                stage,
                "error",
                latency_ms,
                model=self.client.model_name,
                error_reason=f"{reason}: {e}",
            )
            logger.error(f"[{stage}] generation failed: {e}")
            raise

        latency_ms = (time.perf_counter() - start) * 1000
        self._metrics.record_latency(stage, "success", latency_ms)
        self._structured_log.log_generation(
            stage,
            "success",
            latency_ms,
            model=self.client.model_name,
            item_count=len(result) if isinstance(result, list) else None,
        )
        return result

    def _check_count(self, stage: str, expected: int, actual: int) -> None:
        if actual != expected:
            self._metrics.inc_count_mismatch(stage)
            self._structured_log.log_count_mismatch(stage, expected, actual)

    async def generate_destinations(
        self, user_input: str, metadata: GenerationMetadata | None = None
    ) -> list[DestinationOption]:
        """Generate destination options for free-text user input.

        The count is a soft expectation: a batch of the wrong size is logged
        and returned as-is.
        """
        prompt = build_destination_prompt(user_input, metadata)
        destinations = await self._generate(
            "destinations", prompt, DESTINATION_SCHEMA, parse_destinations
        )

        self._check_count("destinations", self.expected_destination_count, len(destinations))

        return destinations

    async def generate_plan_options(
        self, destination: DestinationOption, metadata: GenerationMetadata | None = None
    ) -> list[PlanOption]:
        """Generate the A/B/C plan options for a destination (soft count check)."""
        prompt = build_plan_prompt(destination, metadata)
        plans = await self._generate("plans", prompt, PLAN_SCHEMA, parse_plans)

        self._check_count("plans", self.expected_plan_count, len(plans))

        return plans

    async def generate_timeline(
        self,
        destination: DestinationOption,
        plan: PlanOption,
        metadata: GenerationMetadata | None = None,
    ) -> TimelineResult:
        """Generate the day-by-day timeline and its summary.

        Rows come back sorted by (day, time_slot) and the summary counts are
        recomputed from the rows whenever the model's numbers disagree.
        """
        prompt = build_timeline_prompt(destination, plan, metadata)
        result = await self._generate("timeline", prompt, TIMELINE_SCHEMA, parse_timeline)

        timeline = sort_timeline(result.timeline)
        summary = repair_summary(result.summary, timeline)

        logger.info(
            f"[timeline] {destination.name} plan {plan.id}: "
            f"{summary.total_activities} activities over {summary.total_days} days"
        )

        return TimelineResult(timeline=timeline, summary=summary)

    async def refine_timeline(
        self, state: TripEngineState, user_message: str
    ) -> RefinementResponse:
        """Answer a refinement request, optionally with a full replacement timeline.

        An absent updated_timeline means the exchange was purely
        conversational; callers keep their current timeline in that case.
        """
        prompt = build_refinement_prompt(state, user_message)
        result = await self._generate("refinement", prompt, REFINEMENT_SCHEMA, parse_refinement)

        if result.updated_timeline:
            result = result.model_copy(
                update={"updated_timeline": sort_timeline(result.updated_timeline)}
            )
            logger.info(f"[refinement] timeline updated ({len(result.updated_timeline)} rows)")
        else:
            logger.info("[refinement] conversational reply, timeline unchanged")

        return result

    def get_model_info(self) -> dict[str, str]:
        """Return the model and provider backing this engine."""
        return {"model": self.client.model_name, "provider": self.client.provider}

    async def validate_api_key(self) -> bool:
        """Check credentials with a minimal round-trip. Never raises."""
        try:
            payload = await self.client.generate(
                'Reply with {"ok": true} if you can read this.', PING_SCHEMA, schema_name="ping"
            )
        except TripPlannerError as e:
            logger.error(f"API key validation failed: {e}")
            return False

        return isinstance(payload, dict) and bool(payload)
