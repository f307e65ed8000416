"""Client-side trip planning session.

TripSession owns the canonical TripState and walks it through the stages
initial -> choose_destination -> choose_plan -> itinerary_ready, with the
refining loop on top. Every operation follows the same pattern: mark busy,
call the gateway, then either advance the state or record an error and leave
the state as it was. Gateway failures never escape as exceptions.
"""

import logging
from typing import Any

from pydantic import ValidationError

from backend.trip_planner.engine.converters import plan_choice_to_option, to_app_coordinates
from backend.trip_planner.errors import TripPlannerError
from backend.trip_planner.models.chat import ChatMessage, ChatMessageMetadata
from backend.trip_planner.models.common import TripStage
from backend.trip_planner.models.engine import DestinationOption, PlanOption, TimelineRow
from backend.trip_planner.models.trip import (
    PLAN_LABELS,
    ItineraryRow,
    PlanChoice,
    TripMetadata,
    TripState,
)
from backend.trip_planner.orchestration.gateway import PlannerGateway
from backend.trip_planner.orchestration.normalize import (
    map_category,
    map_pace,
    parse_cost,
    parse_plan_cost,
    to_generation_metadata,
    trip_days,
)
from backend.trip_planner.orchestration.optimistic import OptimisticAppend

logger = logging.getLogger(__name__)

ITINERARY_READY_MESSAGE = (
    "Great choice! Here's your personalized itinerary. You can chat with me to refine it."
)


def to_plan_choice(plan: PlanOption, index: int, total_days: int) -> PlanChoice:
    """Present a generated plan: label by position, numeric cost band, enum pace."""
    return PlanChoice(
        id=plan.id,
        label=PLAN_LABELS[index] if index < len(PLAN_LABELS) else "A",
        name=plan.title,
        description=plan.description,
        pace=map_pace(plan.pace),
        highlights=list(plan.highlights),
        total_days=total_days,
        estimated_cost=parse_plan_cost(plan.estimated_cost),
        includes=list(plan.target_audience),
    )


def to_itinerary_row(row: TimelineRow) -> ItineraryRow:
    """Flatten a generated timeline row for display."""
    return ItineraryRow(
        id=row.id,
        day=row.day,
        date=row.date,
        time=row.time_slot,
        activity=row.activity,
        location=row.location.name,
        coordinates=to_app_coordinates(row.location.coordinates, row.id),
        duration=row.estimated_duration or "",
        category=map_category(row.category),
        notes=row.description,
        cost=parse_cost(row.estimated_cost),
        verified=row.booking_required or False,
    )


class TripSession:
    """Stateful controller for one user's planning session.

    Attributes:
        state: Current TripState (replaced, never mutated in place)
        is_loading: True while a gateway call is in flight
        error: Message of the last failed operation, cleared when the next starts
    """

    def __init__(self, gateway: PlannerGateway):
        self.gateway = gateway
        self.state = TripState()
        self.is_loading = False
        self.error: str | None = None

    def _begin(self, operation: str) -> bool:
        """Claim the session for one operation; refuse if another is running."""
        if self.is_loading:
            logger.warning(f"[{operation}] rejected: another operation is in progress")
            self.error = "Another request is already in progress"
            return False

        self.is_loading = True
        self.error = None
        return True

    def _fail(self, operation: str, fallback: str, exc: Exception) -> None:
        logger.error(f"[{operation}] {exc}")
        self.error = str(exc) or fallback

    def _append(self, *messages: ChatMessage) -> list[ChatMessage]:
        return [*self.state.conversation, *messages]

    async def generate_destinations(
        self, user_input: str, metadata: TripMetadata | None = None
    ) -> None:
        """Fetch destination options for the user's request."""
        if not self._begin("generate_destinations"):
            return

        metadata = metadata or self.state.metadata
        try:
            destinations = await self.gateway.generate_destinations(
                user_input, to_generation_metadata(metadata)
            )
        except TripPlannerError as e:
            self._fail("generate_destinations", "Failed to generate destinations", e)
            return
        finally:
            self.is_loading = False

        user_message = ChatMessage(
            role="user",
            content=user_input,
            metadata=ChatMessageMetadata(stage=TripStage.initial),
        )
        self.state = self.state.model_copy(
            update={
                "stage": TripStage.choose_destination,
                "user_input": user_input,
                "metadata": metadata,
                "destination_options": destinations,
                "conversation": self._append(user_message),
            }
        )

    async def select_destination(self, destination: DestinationOption) -> None:
        """Select a destination and fetch its A/B/C plan options."""
        if not self._begin("select_destination"):
            return

        metadata = self.state.metadata
        try:
            plans = await self.gateway.generate_plans(
                destination, to_generation_metadata(metadata)
            )
            total_days = trip_days(metadata)
            choices = [to_plan_choice(plan, i, total_days) for i, plan in enumerate(plans)]
        except (TripPlannerError, ValidationError) as e:
            self._fail("select_destination", "Failed to select destination", e)
            return
        finally:
            self.is_loading = False

        user_message = ChatMessage(
            role="user",
            content=f"I'd like to visit {destination.name}, {destination.country}",
            metadata=ChatMessageMetadata(
                stage=TripStage.choose_destination,
                action="select_destination",
                data=destination.model_dump(),
            ),
        )
        self.state = self.state.model_copy(
            update={
                "stage": TripStage.choose_plan,
                "selected_destination": destination,
                "plan_options": choices,
                "conversation": self._append(user_message),
            }
        )

    async def select_plan(self, plan: PlanChoice) -> None:
        """Select a plan and fetch the itinerary for it."""
        destination = self.state.selected_destination
        if destination is None:
            self.error = "No destination selected"
            return

        if not self._begin("select_plan"):
            return

        try:
            result = await self.gateway.generate_timeline(
                destination,
                plan_choice_to_option(plan),
                to_generation_metadata(self.state.metadata),
            )
            timeline = [to_itinerary_row(row) for row in result.timeline]
        except (TripPlannerError, ValidationError) as e:
            self._fail("select_plan", "Failed to select plan", e)
            return
        finally:
            self.is_loading = False

        user_message = ChatMessage(
            role="user",
            content=f"I'd like to go with Plan {plan.label}: {plan.name}",
            metadata=ChatMessageMetadata(
                stage=TripStage.choose_plan,
                action="select_plan",
                data=plan.model_dump(),
            ),
        )
        assistant_message = ChatMessage(
            role="assistant",
            content=ITINERARY_READY_MESSAGE,
            metadata=ChatMessageMetadata(stage=TripStage.itinerary_ready),
        )
        self.state = self.state.model_copy(
            update={
                "stage": TripStage.itinerary_ready,
                "selected_plan": plan,
                "timeline": timeline,
                "conversation": self._append(user_message, assistant_message),
            }
        )

    async def refine_timeline(self, message: str) -> None:
        """Send a refinement request for the current itinerary.

        The user's message shows up in the conversation immediately and is
        removed again (by id) if the request fails. The stage reads
        `refining` while the call is in flight and returns to its previous
        value afterwards. The timeline is replaced only when the response
        carries an updated state.
        """
        if self.state.selected_destination is None or self.state.selected_plan is None:
            self.error = "No destination or plan selected"
            return

        if not self._begin("refine_timeline"):
            return

        optimistic = OptimisticAppend(
            ChatMessage(
                role="user",
                content=message,
                metadata=ChatMessageMetadata(
                    stage=TripStage.itinerary_ready, action="modify_timeline"
                ),
            )
        )
        prior_stage = self.state.stage
        self.state = optimistic.apply(self.state).model_copy(
            update={"stage": TripStage.refining}
        )

        committed = False
        try:
            result = await self.gateway.refine(self.state, message)

            data: dict[str, Any] | None = None
            if result.suggested_actions or result.changes_summary:
                data = {
                    "suggested_actions": result.suggested_actions,
                    "changes_summary": result.changes_summary,
                }

            assistant_message = ChatMessage(
                role="assistant",
                content=result.response,
                metadata=ChatMessageMetadata(stage=TripStage.itinerary_ready, data=data),
            )

            update: dict[str, Any] = {
                "stage": prior_stage,
                "conversation": self._append(assistant_message),
            }
            if result.updated_state is not None:
                update["timeline"] = result.updated_state.timeline

            self.state = self.state.model_copy(update=update)
            committed = True
        except (TripPlannerError, ValidationError) as e:
            self._fail("refine_timeline", "Failed to refine timeline", e)
        finally:
            # The optimistic message never outlives a failed refinement
            if not committed:
                self.state = optimistic.rollback(self.state).model_copy(
                    update={"stage": prior_stage}
                )
            self.is_loading = False

    def reset_trip(self) -> None:
        """Discard everything and start over from the initial stage."""
        self.state = TripState()
        self.error = None

    def update_metadata(self, **changes: Any) -> None:
        """Merge trip parameter changes (travelers, dates, budget, ...)."""
        merged = {**self.state.metadata.model_dump(), **changes}
        self.state = self.state.model_copy(
            update={"metadata": TripMetadata.model_validate(merged)}
        )
