"""Health check endpoints."""

import json
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Response, status

from backend.trip_planner.api.deps import get_engine
from backend.trip_planner.engine.engine import TripPlannerEngine

router = APIRouter()


@router.get("/health")
async def health() -> dict[str, str]:
    """Simple health check for Docker/k8s.

    Returns:
        200 OK always (application is running)
    """
    return {"status": "ok"}


@router.get("/health/llm", response_model=None)
async def health_llm(
    engine: Annotated[TripPlannerEngine, Depends(get_engine)],
) -> dict[str, Any] | Response:
    """Generative model check: configured model plus a credential round-trip.

    Returns:
        200 with model info if the key works
        503 if the round-trip fails (500 if no key is configured at all)
    """
    info = engine.get_model_info()
    key_valid = await engine.validate_api_key()

    body: dict[str, Any] = {
        "status": "ok" if key_valid else "degraded",
        "model": info["model"],
        "provider": info["provider"],
        "api_key_valid": key_valid,
    }

    if not key_valid:
        return Response(
            content=json.dumps(body),
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            media_type="application/json",
        )

    return body
