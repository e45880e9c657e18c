"""Scene snapshot models served to browser clients."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field

from globeview.models.aircraft import AircraftState


class SceneEntityView(BaseModel):
    """One drawn entity, ready to be mirrored into a Cesium viewer."""

    entity_id: str = Field(..., description="Render-surface entity id")
    style: str = Field(..., description="billboard or model")
    longitude: float
    latitude: float
    height: float
    heading: float = Field(..., description="Heading in degrees")
    position: tuple[float, float, float] = Field(
        ..., description="ECEF position in metres"
    )
    orientation: Optional[tuple[float, float, float, float]] = Field(
        default=None, description="Model orientation quaternion (x, y, z, w)"
    )
    rotation: Optional[float] = Field(
        default=None, description="Billboard rotation in radians"
    )
    graphics: dict[str, Any] = Field(
        default_factory=dict, description="Model or billboard graphics options"
    )


class PickRequest(BaseModel):
    """Click position on the viewer canvas."""

    x: float = Field(..., description="Pixel column from the left edge")
    y: float = Field(..., description="Pixel row from the top edge")


class PickResponse(BaseModel):
    """Aircraft under the clicked point."""

    icao24: str
    flight: Optional[AircraftState] = None


__all__ = ["PickRequest", "PickResponse", "SceneEntityView"]
