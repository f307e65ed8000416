"""Optimistic conversation updates that can be undone by message id."""

from backend.trip_planner.models.chat import ChatMessage
from backend.trip_planner.models.trip import TripState


class OptimisticAppend:
    """Append a chat message now, remove exactly that message if the call fails.

    Rollback filters by id against the state current at rollback time, so
    messages appended by others in the meantime survive.
    """

    def __init__(self, message: ChatMessage):
        self.message = message

    def apply(self, state: TripState) -> TripState:
        return state.model_copy(update={"conversation": [*state.conversation, self.message]})

    def rollback(self, state: TripState) -> TripState:
        conversation = [m for m in state.conversation if m.id != self.message.id]
        return state.model_copy(update={"conversation": conversation})
