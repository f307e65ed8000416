"""Common types and enums shared across engine and application models."""

from enum import Enum

from pydantic import BaseModel, Field


class TripStage(str, Enum):
    """Lifecycle stage of a trip planning session."""

    initial = "initial"
    choose_destination = "choose_destination"
    choose_plan = "choose_plan"
    itinerary_ready = "itinerary_ready"
    refining = "refining"


class Coordinates(BaseModel):
    """Geographic coordinates (WGS84)."""

    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class Money(BaseModel):
    """Monetary amount in major currency units."""

    amount: float
    currency: str = "USD"


class CostRange(BaseModel):
    """Numeric cost band derived from a free-text estimate."""

    min: float
    max: float
    currency: str = "USD"
