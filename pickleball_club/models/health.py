"""Pydantic models for the health endpoint."""

from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ClubSummary(BaseModel):
    """Public summary of the club's configuration."""

    name: str
    timezone: str
    currency: str = Field(..., min_length=3, max_length=3)
    booking_advance_days: int
    cancellation_hours: int
    max_bookings_per_user: int
    auto_release_minutes: int
    slot_minutes: int = Field(..., description="Court time per match including the maintenance buffer")


class HealthResponse(BaseModel):
    """Health report for the running application context."""

    status: Literal["ok", "degraded"]
    profile: str | None = Field(None, description="Configuration profile the context was built with")
    components: list[str] = Field(default_factory=list, description="Components in construction order")
    datasource: Literal["up", "down"]
    club: ClubSummary
    checked_at: datetime = Field(default_factory=_utcnow)
