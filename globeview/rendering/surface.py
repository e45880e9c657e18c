"""Render-surface contract consumed by the flight layer.

The selection and reconciliation services only talk to a ``RenderSurface``.
Anything that draws entities (the in-process ``HeadlessScene``, a bridge to a
browser Cesium viewer, a test fake) implements this protocol.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Protocol

from globeview.models.camera import CameraState

CameraListener = Callable[[], None]


class EntityStyle(str, Enum):
    """How an aircraft entity is drawn."""

    BILLBOARD = "billboard"
    MODEL = "model"

    @classmethod
    def for_models(cls, use_3d_models: bool) -> EntityStyle:
        return cls.MODEL if use_3d_models else cls.BILLBOARD


@dataclass(frozen=True)
class GeoPosition:
    """Geodetic position in degrees with height in metres."""

    longitude: float
    latitude: float
    height: float


@dataclass(frozen=True)
class ScreenPoint:
    """Pixel coordinates with the origin in the top-left corner."""

    x: float
    y: float


class RenderSurface(Protocol):
    """Interface to the engine that draws flight entities."""

    def create_entity(
        self,
        entity_id: str,
        position: GeoPosition,
        heading: float,
        style: EntityStyle,
    ) -> Any:
        """Draw a new entity and return an opaque handle for it."""

    def update_entity(self, handle: Any, position: GeoPosition, heading: float) -> None:
        """Move and rotate an existing entity in place."""

    def remove_entity(self, handle: Any) -> None:
        """Remove an entity and release its visual resources."""

    def pick(self, screen_point: ScreenPoint) -> str | None:
        """Return the id of the entity under ``screen_point``, if any."""

    def on_camera_changed(self, callback: CameraListener) -> Callable[[], None]:
        """Register a camera listener and return a function that removes it."""

    def camera_state(self) -> CameraState | None:
        """Current camera pose, or None while the viewport is not ready."""


__all__ = [
    "CameraListener",
    "EntityStyle",
    "GeoPosition",
    "RenderSurface",
    "ScreenPoint",
]
