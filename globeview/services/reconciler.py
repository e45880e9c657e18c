"""Keep the render surface in sync with the selected aircraft."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Iterable

from globeview.models.aircraft import AircraftState
from globeview.rendering.surface import EntityStyle, GeoPosition, RenderSurface

logger = logging.getLogger("globeview.reconciler")


@dataclass
class RenderedEntity:
    """An aircraft currently drawn on the surface."""

    entity_id: str
    icao24: str
    handle: Any
    position: GeoPosition
    heading: float
    style: EntityStyle


@dataclass
class ReconcileResult:
    created: int = 0
    updated: int = 0
    removed: int = 0
    failed: int = 0

    @property
    def mutations(self) -> int:
        return self.created + self.updated + self.removed


def _position_of(flight: AircraftState) -> GeoPosition:
    return GeoPosition(
        longitude=flight.longitude,
        latitude=flight.latitude,
        height=flight.baro_altitude,
    )


class EntityReconciler:
    """Owns every flight entity on a render surface.

    ``reconcile`` diffs the drawn entities against the desired aircraft:
    stale ones are removed, new ones created and the rest moved in place.
    Entities whose position and heading did not change are left alone.
    """

    def __init__(self, surface: RenderSurface, *, use_3d_models: bool = False) -> None:
        self.surface = surface
        self.style = EntityStyle.for_models(use_3d_models)
        self._rendered: dict[str, RenderedEntity] = {}

    @property
    def rendered_ids(self) -> frozenset[str]:
        return frozenset(self._rendered)

    def get(self, icao24: str) -> RenderedEntity | None:
        return self._rendered.get(icao24)

    def __len__(self) -> int:
        return len(self._rendered)

    def reconcile(self, flights: Iterable[AircraftState]) -> ReconcileResult:
        result = ReconcileResult()
        desired = {flight.icao24: flight for flight in flights}

        for icao24 in [key for key in self._rendered if key not in desired]:
            self._remove(icao24)
            result.removed += 1

        for icao24, flight in desired.items():
            entity = self._rendered.get(icao24)
            if entity is None:
                if self._create(flight):
                    result.created += 1
                else:
                    result.failed += 1
            elif self._update(entity, flight):
                result.updated += 1

        if result.mutations or result.failed:
            logger.debug(
                "Reconciled flights: created=%s updated=%s removed=%s failed=%s",
                result.created,
                result.updated,
                result.removed,
                result.failed,
            )
        return result

    def set_style(self, use_3d_models: bool) -> bool:
        """Switch between billboards and 3D models.

        Existing entities cannot be converted, so a change removes them all;
        the next ``reconcile`` recreates them in the new style.
        """

        style = EntityStyle.for_models(use_3d_models)
        if style == self.style:
            return False
        removed = self.clear()
        self.style = style
        logger.info("Flight entity style set to %s; removed %s entities", style.value, removed)
        return True

    def clear(self) -> int:
        count = len(self._rendered)
        for icao24 in list(self._rendered):
            self._remove(icao24)
        return count

    def _create(self, flight: AircraftState) -> bool:
        position = _position_of(flight)
        try:
            handle = self.surface.create_entity(
                flight.entity_id, position, flight.true_track, self.style
            )
        except Exception as exc:
            logger.warning("Failed to create entity for %s: %s", flight.icao24, exc)
            return False

        self._rendered[flight.icao24] = RenderedEntity(
            entity_id=flight.entity_id,
            icao24=flight.icao24,
            handle=handle,
            position=position,
            heading=flight.true_track,
            style=self.style,
        )
        return True

    def _update(self, entity: RenderedEntity, flight: AircraftState) -> bool:
        position = _position_of(flight)
        if position == entity.position and flight.true_track == entity.heading:
            return False
        try:
            self.surface.update_entity(entity.handle, position, flight.true_track)
        except Exception as exc:
            logger.warning("Failed to update entity for %s: %s", flight.icao24, exc)
            return False
        entity.position = position
        entity.heading = flight.true_track
        return True

    def _remove(self, icao24: str) -> None:
        entity = self._rendered.pop(icao24)
        try:
            self.surface.remove_entity(entity.handle)
        except Exception as exc:
            logger.warning("Failed to remove entity for %s: %s", icao24, exc)


__all__ = ["EntityReconciler", "ReconcileResult", "RenderedEntity"]
