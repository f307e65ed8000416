"""Response schemas handed to the generative model, and their validators.

Each schema is derived from the same pydantic model that validates the
parsed output, so the contract given to the model and the check applied to
its answer cannot drift apart. Validation is isolated in one function per
stage; every structural problem surfaces as InvalidResponseShapeError.
"""

from typing import Any

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from backend.trip_planner.errors import InvalidResponseShapeError
from backend.trip_planner.models.engine import (
    DestinationOption,
    PlanOption,
    RefinementResponse,
    TimelineResult,
    TimelineRow,
)


class DestinationBatch(BaseModel):
    """Envelope for destination generation."""

    destinations: list[DestinationOption] = Field(
        ..., description="Array of exactly 5 destination options"
    )


class PlanBatch(BaseModel):
    """Envelope for plan generation."""

    plans: list[PlanOption] = Field(..., description="Array of exactly 3 plan options (A, B, C)")


DESTINATION_SCHEMA: dict[str, Any] = DestinationBatch.model_json_schema()
PLAN_SCHEMA: dict[str, Any] = PlanBatch.model_json_schema()
TIMELINE_SCHEMA: dict[str, Any] = TimelineResult.model_json_schema()
REFINEMENT_SCHEMA: dict[str, Any] = RefinementResponse.model_json_schema()

RESPONSE_SCHEMAS: dict[str, dict[str, Any]] = {
    "destinations": DESTINATION_SCHEMA,
    "plans": PLAN_SCHEMA,
    "timeline": TIMELINE_SCHEMA,
    "refinement": REFINEMENT_SCHEMA,
}

_destination_list = TypeAdapter(list[DestinationOption])
_plan_list = TypeAdapter(list[PlanOption])
_timeline_rows = TypeAdapter(list[TimelineRow])


def _describe(error: ValidationError) -> str:
    """Compact description of the first validation error."""
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"]) or "<root>"
    return f"{location}: {first['msg']} ({error.error_count()} error(s))"


def _require_object(payload: Any, stage: str) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise InvalidResponseShapeError(stage, "expected a JSON object")
    return payload


def _require_array(payload: dict[str, Any], key: str, stage: str) -> list[Any]:
    value = payload.get(key)
    if not isinstance(value, list):
        raise InvalidResponseShapeError(stage, f"missing {key} array")
    return value


def parse_destinations(payload: Any) -> list[DestinationOption]:
    """Validate destination output; requires a `destinations` array."""
    body = _require_object(payload, "destinations")
    items = _require_array(body, "destinations", "destinations")
    try:
        return _destination_list.validate_python(items)
    except ValidationError as e:
        raise InvalidResponseShapeError("destinations", f"destinations {_describe(e)}") from e


def parse_plans(payload: Any) -> list[PlanOption]:
    """Validate plan output; requires a `plans` array."""
    body = _require_object(payload, "plans")
    items = _require_array(body, "plans", "plans")
    try:
        return _plan_list.validate_python(items)
    except ValidationError as e:
        raise InvalidResponseShapeError("plans", f"plans {_describe(e)}") from e


def parse_timeline(payload: Any) -> TimelineResult:
    """Validate timeline output; requires both `timeline` and `summary`."""
    body = _require_object(payload, "timeline")
    _require_array(body, "timeline", "timeline")
    if not isinstance(body.get("summary"), dict):
        raise InvalidResponseShapeError("timeline", "missing summary object")
    try:
        return TimelineResult.model_validate(body)
    except ValidationError as e:
        raise InvalidResponseShapeError("timeline", _describe(e)) from e


def parse_refinement(payload: Any) -> RefinementResponse:
    """Validate refinement output; requires a non-empty `response` string.

    Null, empty-list and empty-string optional fields all normalize to None,
    so an empty `updated_timeline` means "no changes" rather than "delete
    everything".
    """
    body = _require_object(payload, "refinement")
    response = body.get("response")
    if not isinstance(response, str) or not response.strip():
        raise InvalidResponseShapeError("refinement", "missing or invalid response field")

    try:
        updated = body.get("updated_timeline")
        updated_timeline = _timeline_rows.validate_python(updated) if updated else None
        return RefinementResponse(
            response=response,
            updated_timeline=updated_timeline,
            suggested_actions=body.get("suggested_actions") or None,
            changes_summary=body.get("changes_summary") or None,
        )
    except ValidationError as e:
        raise InvalidResponseShapeError("refinement", _describe(e)) from e
