"""FastAPI application."""

from fastapi import FastAPI

from backend.trip_planner.api.routes.health import router as health_router
from backend.trip_planner.api.routes.metrics import router as metrics_router
from backend.trip_planner.api.routes.trip import router as trip_router

app = FastAPI(title="Trip Planner API", version="0.1.0")

# Register routes
app.include_router(health_router, tags=["health"])
app.include_router(metrics_router, tags=["metrics"])
app.include_router(trip_router, tags=["trip"])


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "Trip Planner API", "version": "0.1.0"}
