"""FastAPI dependencies for the trip planning routes."""

import logging
from typing import Annotated

from fastapi import Depends, HTTPException, status

from backend.trip_planner.config import Settings, get_settings
from backend.trip_planner.engine.engine import TripPlannerEngine
from backend.trip_planner.errors import ConfigurationError
from backend.trip_planner.llm.client import get_llm_client

logger = logging.getLogger(__name__)


async def get_engine(
    settings: Annotated[Settings, Depends(get_settings)],
) -> TripPlannerEngine:
    """Build the planning engine for a request.

    Raises:
        HTTPException: 500 "API key not configured" if no credentials are set
    """
    try:
        client = get_llm_client(settings)
    except ConfigurationError as e:
        logger.error(f"Engine unavailable: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="API key not configured",
        ) from e

    return TripPlannerEngine(client, settings)
