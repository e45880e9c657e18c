"""Domain events published by the flight layer."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import BaseModel, Field

from globeview.models.aircraft import AircraftState


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class LayerEvent(BaseModel):
    """Base class for events delivered through the event bus."""

    timestamp: datetime = Field(
        default_factory=_utcnow, description="When the event was published (UTC)"
    )


class FlightSelected(LayerEvent):
    """The user picked an aircraft on the render surface."""

    event_type: Literal["flight_selected"] = "flight_selected"
    icao24: str = Field(..., description="Transponder address of the picked aircraft")
    flight: Optional[AircraftState] = Field(
        default=None,
        description="Latest known state, or None if it left the universe",
    )


class FlightFetchFailed(LayerEvent):
    """Fetching state vectors failed; the universe was reset."""

    event_type: Literal["flight_fetch_failed"] = "flight_fetch_failed"
    message: str = Field(..., description="Human-readable error message")


class VisibleCountChanged(LayerEvent):
    """The number of rendered aircraft changed."""

    event_type: Literal["visible_count_changed"] = "visible_count_changed"
    count: int = Field(..., ge=0, description="Aircraft currently rendered")


__all__ = [
    "FlightFetchFailed",
    "FlightSelected",
    "LayerEvent",
    "VisibleCountChanged",
]
