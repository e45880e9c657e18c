"""Translate render-surface clicks into aircraft selections."""

from __future__ import annotations

import logging

from globeview.models.aircraft import icao24_from_entity_id
from globeview.models.events import FlightSelected
from globeview.rendering.surface import RenderSurface, ScreenPoint
from globeview.services.events import EventBus
from globeview.services.universe import FlightUniverse

logger = logging.getLogger("globeview.interaction")


class InteractionBridge:
    def __init__(
        self,
        surface: RenderSurface,
        universe: FlightUniverse,
        events: EventBus,
    ) -> None:
        self.surface = surface
        self.universe = universe
        self.events = events

    def handle_click(self, screen_point: ScreenPoint) -> FlightSelected | None:
        """Publish ``FlightSelected`` if a flight entity is under the point."""

        icao24 = icao24_from_entity_id(self.surface.pick(screen_point))
        if icao24 is None:
            return None

        flight = self.universe.get(icao24)
        if flight is None:
            logger.debug("Picked aircraft %s is no longer in the universe", icao24)
        event = FlightSelected(icao24=icao24, flight=flight)
        self.events.publish(event)
        return event


__all__ = ["InteractionBridge"]
