"""Trip planning endpoints - POST /trip/generate, POST /trip/refine."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from backend.trip_planner.api.deps import get_engine
from backend.trip_planner.engine.converters import to_engine_state, to_refine_response
from backend.trip_planner.engine.engine import TripPlannerEngine
from backend.trip_planner.errors import TripPlannerError
from backend.trip_planner.models.api import (
    GENERATE_ACTIONS,
    GenerateRequest,
    GenerateResponse,
    RefineRequest,
    RefineResponse,
)

router = APIRouter(prefix="/trip", tags=["trip"])
logger = logging.getLogger(__name__)


def _bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def _upstream_failure(operation: str, exc: Exception) -> HTTPException:
    """500 carrying the failure reason, e.g. "Failed to generate plans: Empty response ..."."""
    if isinstance(exc, TripPlannerError):
        detail = f"Failed to {operation}: {exc}"
    else:
        detail = "internal error"
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)


@router.post(
    "/generate",
    response_model=GenerateResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
)
async def generate(
    request: GenerateRequest,
    engine: Annotated[TripPlannerEngine, Depends(get_engine)],
) -> GenerateResponse:
    """Run one generation stage.

    Args:
        request: Stage selector plus the inputs that stage needs
        engine: Planning engine

    Returns:
        GenerateResponse with exactly one of destinations, plans or timeline

    Raises:
        HTTPException: 400 for a missing input or unknown action (no model call
            is made), 500 if generation fails
    """
    action = request.action
    logger.info(f"[POST /trip/generate] action={action}")

    if action not in GENERATE_ACTIONS:
        raise _bad_request(f"Invalid action. Must be one of: {', '.join(GENERATE_ACTIONS)}")

    if action == "destinations":
        if not request.user_input or not request.user_input.strip():
            raise _bad_request("user_input is required for destinations action")
        try:
            destinations = await engine.generate_destinations(
                request.user_input, request.metadata
            )
        except Exception as e:
            logger.error(f"[POST /trip/generate] destinations failed: {e}", exc_info=True)
            raise _upstream_failure("generate destinations", e) from e
        return GenerateResponse(destinations=destinations)

    if action == "plans":
        if request.destination is None:
            raise _bad_request("destination is required for plans action")
        try:
            plans = await engine.generate_plan_options(request.destination, request.metadata)
        except Exception as e:
            logger.error(f"[POST /trip/generate] plans failed: {e}", exc_info=True)
            raise _upstream_failure("generate plans", e) from e
        return GenerateResponse(plans=plans)

    if request.destination is None or request.plan is None:
        raise _bad_request("destination and plan are required for timeline action")
    try:
        timeline = await engine.generate_timeline(
            request.destination, request.plan, request.metadata
        )
    except Exception as e:
        logger.error(f"[POST /trip/generate] timeline failed: {e}", exc_info=True)
        raise _upstream_failure("generate timeline", e) from e

    logger.info(
        f"[POST /trip/generate] timeline ready, {len(timeline.timeline)} rows "
        f"over {timeline.summary.total_days} days"
    )
    return GenerateResponse(timeline=timeline)


@router.post(
    "/refine",
    response_model=RefineResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
)
async def refine(
    request: RefineRequest,
    engine: Annotated[TripPlannerEngine, Depends(get_engine)],
) -> RefineResponse:
    """Refine the current itinerary through conversation.

    Returns:
        RefineResponse; updated_state is present only when the timeline changed

    Raises:
        HTTPException: 400 for a blank message or a state without destination,
            plan and timeline; 500 if generation fails
    """
    if not request.message.strip():
        raise _bad_request("state and message are required")

    engine_state = to_engine_state(request.state)
    if engine_state is None:
        raise _bad_request("Invalid state: destination, plan, and timeline are required")

    logger.info(
        f"[POST /trip/refine] destination={engine_state.destination.name}, "
        f"rows={len(engine_state.timeline)}"
    )

    try:
        refinement = await engine.refine_timeline(engine_state, request.message)
        return to_refine_response(request.state, refinement)
    except Exception as e:
        logger.error(f"[POST /trip/refine] failed: {e}", exc_info=True)
        raise _upstream_failure("refine timeline", e) from e
