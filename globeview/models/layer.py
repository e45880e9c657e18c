"""Flight layer options and status models."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from globeview.config import settings


class LayerOptions(BaseModel):
    """Options the host UI passes to the flight layer."""

    show_flights: bool = Field(
        default_factory=lambda: settings.show_flights,
        description="Whether the flight layer is enabled",
    )
    use_3d_models: bool = Field(
        default_factory=lambda: settings.use_3d_models,
        description="Draw oriented 3D models instead of flat billboards",
    )
    max_flight_distance: float = Field(
        default_factory=lambda: settings.max_flight_distance,
        gt=0.0,
        description="Upper bound in metres for the LOD distance ceiling",
    )


class LayerStatus(BaseModel):
    """Snapshot of the flight layer for the host UI."""

    enabled: bool
    options: LayerOptions
    universe_size: int = Field(..., description="Airborne aircraft in the last snapshot")
    visible_count: int = Field(..., description="Aircraft currently rendered")
    last_error: Optional[str] = Field(
        default=None, description="Message of the last failed fetch, if any"
    )


__all__ = ["LayerOptions", "LayerStatus"]
