"""Camera snapshots consumed by the LOD engine."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, Field

from globeview.rendering.geometry import Cartesian3, cartesian_from_degrees


@dataclass(frozen=True)
class CameraState:
    """Read-only camera pose sampled for a single selection pass."""

    position: Cartesian3
    height: float
    longitude: float
    latitude: float

    @classmethod
    def from_degrees(cls, longitude: float, latitude: float, height: float) -> CameraState:
        return cls(
            position=cartesian_from_degrees(longitude, latitude, height),
            height=height,
            longitude=longitude,
            latitude=latitude,
        )


class CameraUpdate(BaseModel):
    """Camera pose reported by the host viewer."""

    longitude: float = Field(..., ge=-180.0, le=180.0, description="Camera longitude")
    latitude: float = Field(..., ge=-90.0, le=90.0, description="Camera latitude")
    height: float = Field(
        ..., gt=0.0, description="Camera height above the ellipsoid in metres"
    )


class ViewportUpdate(BaseModel):
    """Canvas size reported by the host viewer."""

    width: int = Field(..., gt=0, description="Viewport width in pixels")
    height: int = Field(..., gt=0, description="Viewport height in pixels")


__all__ = ["CameraState", "CameraUpdate", "ViewportUpdate"]
