"""In-process render surface that keeps flight entities as scene data.

``HeadlessScene`` owns the Cesium-ready geometry of every entity (ECEF
position, model orientation or billboard rotation, graphics options) so a
browser viewer can mirror it. It also stands in for the viewer camera and
implements picking with a nadir-looking pinhole projection.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import math
from typing import Any, Callable

from globeview.config import settings
from globeview.models.camera import CameraState
from globeview.models.scene import SceneEntityView
from globeview.rendering.geometry import (
    Cartesian3,
    Quaternion,
    cartesian_from_degrees,
    east_north_up_axes,
    heading_pitch_roll_quaternion,
    to_radians,
)
from globeview.rendering.surface import (
    CameraListener,
    EntityStyle,
    GeoPosition,
    ScreenPoint,
)

logger = logging.getLogger("globeview.scene")

FIELD_OF_VIEW = to_radians(60.0)


def _model_graphics(uri: str) -> dict[str, Any]:
    return {
        "uri": uri,
        "scale": 50,
        "minimumPixelSize": 32,
        "maximumScale": 2000,
        "runAnimations": False,
        "color": [1.0, 1.0, 1.0, 0.95],
    }


def _billboard_graphics(image: str) -> dict[str, Any]:
    return {
        "image": image,
        "scale": 0.5,
        "alignedAxis": [0.0, 0.0, 1.0],
    }


@dataclass
class SceneEntity:
    entity_id: str
    style: EntityStyle
    geo: GeoPosition
    heading: float
    position: Cartesian3
    orientation: Quaternion | None = None
    rotation: float | None = None
    graphics: dict[str, Any] = field(default_factory=dict)

    def place(self, geo: GeoPosition, heading: float) -> None:
        self.geo = geo
        self.heading = heading
        self.position = cartesian_from_degrees(geo.longitude, geo.latitude, geo.height)
        if self.style is EntityStyle.MODEL:
            self.orientation = heading_pitch_roll_quaternion(
                self.position, to_radians(heading)
            )
            self.rotation = None
        else:
            self.orientation = None
            self.rotation = to_radians(heading)

    def to_view(self) -> SceneEntityView:
        orientation = None
        if self.orientation is not None:
            q = self.orientation
            orientation = (q.x, q.y, q.z, q.w)
        return SceneEntityView(
            entity_id=self.entity_id,
            style=self.style.value,
            longitude=self.geo.longitude,
            latitude=self.geo.latitude,
            height=self.geo.height,
            heading=self.heading,
            position=(self.position.x, self.position.y, self.position.z),
            orientation=orientation,
            rotation=self.rotation,
            graphics=dict(self.graphics),
        )


class HeadlessScene:
    """``RenderSurface`` implementation backed by plain Python objects."""

    def __init__(
        self,
        *,
        viewport_width: int | None = None,
        viewport_height: int | None = None,
        pick_tolerance: float | None = None,
        model_uri: str | None = None,
        billboard_image: str | None = None,
    ) -> None:
        self.viewport_width = viewport_width or settings.viewport_width
        self.viewport_height = viewport_height or settings.viewport_height
        self.pick_tolerance = pick_tolerance or settings.pick_tolerance_px
        self.model_uri = model_uri or settings.flight_model_uri
        self.billboard_image = billboard_image or settings.flight_billboard_image
        self._entities: dict[str, SceneEntity] = {}
        self._listeners: list[CameraListener] = []
        self._camera: CameraState | None = None

    # Camera -------------------------------------------------------------

    def set_camera(self, longitude: float, latitude: float, height: float) -> None:
        self._camera = CameraState.from_degrees(longitude, latitude, height)
        self._notify_camera_changed()

    def set_viewport(self, width: int, height: int) -> None:
        self.viewport_width = width
        self.viewport_height = height
        self._notify_camera_changed()

    def camera_state(self) -> CameraState | None:
        if self._camera is None or self.viewport_width <= 0 or self.viewport_height <= 0:
            return None
        return self._camera

    def on_camera_changed(self, callback: CameraListener) -> Callable[[], None]:
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _notify_camera_changed(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                logger.exception("Camera listener failed")

    # Entities -----------------------------------------------------------

    def create_entity(
        self,
        entity_id: str,
        position: GeoPosition,
        heading: float,
        style: EntityStyle,
    ) -> SceneEntity:
        if entity_id in self._entities:
            logger.debug("Replacing existing scene entity %s", entity_id)
            del self._entities[entity_id]

        if style is EntityStyle.MODEL:
            graphics = _model_graphics(self.model_uri)
        else:
            graphics = _billboard_graphics(self.billboard_image)
        entity = SceneEntity(
            entity_id=entity_id,
            style=style,
            geo=position,
            heading=heading,
            position=Cartesian3(0.0, 0.0, 0.0),
            graphics=graphics,
        )
        entity.place(position, heading)
        self._entities[entity_id] = entity
        return entity

    def update_entity(self, handle: SceneEntity, position: GeoPosition, heading: float) -> None:
        if self._entities.get(handle.entity_id) is not handle:
            raise KeyError(f"Entity {handle.entity_id} is not in the scene")
        handle.place(position, heading)

    def remove_entity(self, handle: SceneEntity) -> None:
        if self._entities.get(handle.entity_id) is handle:
            del self._entities[handle.entity_id]

    def get(self, entity_id: str) -> SceneEntity | None:
        return self._entities.get(entity_id)

    def entities(self) -> list[SceneEntity]:
        return list(self._entities.values())

    def __len__(self) -> int:
        return len(self._entities)

    # Picking ------------------------------------------------------------

    def project(self, position: Cartesian3) -> ScreenPoint | None:
        """Screen coordinates of ``position``, or None if it cannot be seen."""

        camera = self.camera_state()
        if camera is None:
            return None

        # Hidden behind the horizon.
        if (camera.position - position).dot(position) < 0:
            return None

        east, north, up = east_north_up_axes(camera.position)
        offset = position - camera.position
        depth = -offset.dot(up)
        if depth <= 0:
            return None

        focal = (self.viewport_height / 2.0) / math.tan(FIELD_OF_VIEW / 2.0)
        return ScreenPoint(
            x=self.viewport_width / 2.0 + focal * offset.dot(east) / depth,
            y=self.viewport_height / 2.0 - focal * offset.dot(north) / depth,
        )

    def pick(self, screen_point: ScreenPoint) -> str | None:
        best_id: str | None = None
        best_distance = self.pick_tolerance
        for entity in self._entities.values():
            projected = self.project(entity.position)
            if projected is None:
                continue
            distance = math.hypot(projected.x - screen_point.x, projected.y - screen_point.y)
            if distance <= best_distance:
                best_id = entity.entity_id
                best_distance = distance
        return best_id


__all__ = ["HeadlessScene", "SceneEntity"]
