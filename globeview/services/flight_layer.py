"""Flight layer controller: fetch, select and reconcile on camera changes."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional, Protocol

from globeview.config import settings
from globeview.ingestors.opensky import OpenSkyIngestor
from globeview.models.aircraft import AircraftState
from globeview.models.events import FlightFetchFailed, VisibleCountChanged
from globeview.models.layer import LayerOptions, LayerStatus
from globeview.rendering.surface import RenderSurface
from globeview.services.events import EventBus
from globeview.services.lod import select_candidates
from globeview.services.reconciler import EntityReconciler, ReconcileResult
from globeview.services.throttle import Throttle
from globeview.services.universe import FlightUniverse

logger = logging.getLogger("globeview.flight_layer")


class FlightSource(Protocol):
    """Anything that can produce the current airborne snapshot."""

    async def fetch_states(self) -> list[AircraftState]:
        """Return every airborne aircraft, raising on failure."""


class FlightLayer:
    """Drive the flight entities of one render surface.

    The layer is either disabled or enabled. Enabling subscribes to camera
    changes and performs an initial fetch; disabling unsubscribes, cancels
    any pending throttled pass and tears down every entity and the cached
    universe. Camera notifications are throttled and each pass selects the
    aircraft for the current camera and reconciles the surface against them.
    """

    def __init__(
        self,
        surface: RenderSurface,
        *,
        ingestor: Optional[FlightSource] = None,
        events: Optional[EventBus] = None,
        universe: Optional[FlightUniverse] = None,
        options: Optional[LayerOptions] = None,
        throttle_interval: float | None = None,
    ) -> None:
        self.surface = surface
        self.ingestor = ingestor or OpenSkyIngestor()
        self.events = events or EventBus()
        self.universe = universe or FlightUniverse()
        self.options = options or LayerOptions()
        self.reconciler = EntityReconciler(
            surface, use_3d_models=self.options.use_3d_models
        )
        if throttle_interval is None:
            throttle_interval = settings.camera_throttle_seconds
        self._throttle = Throttle(self.update_visible_flights, throttle_interval)
        self._unsubscribe_camera: Callable[[], None] | None = None
        self._enabled = False
        self._busy = False
        # Bumped on every enable/disable so a fetch that outlives the state it
        # started in is discarded.
        self._generation = 0
        self._visible_count = 0
        self.last_error: str | None = None

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def visible_count(self) -> int:
        return self._visible_count

    def status(self) -> LayerStatus:
        return LayerStatus(
            enabled=self._enabled,
            options=self.options,
            universe_size=len(self.universe),
            visible_count=self._visible_count,
            last_error=self.last_error,
        )

    async def enable(self) -> None:
        if self._enabled:
            return
        self._enabled = True
        self._generation += 1
        self._unsubscribe_camera = self.surface.on_camera_changed(self._on_camera_changed)
        logger.info("Flight layer enabled")
        await self.refresh()

    def disable(self) -> None:
        was_enabled = self._enabled
        self._enabled = False
        self._generation += 1

        self._throttle.cancel()
        if self._unsubscribe_camera is not None:
            self._unsubscribe_camera()
            self._unsubscribe_camera = None

        removed = self.reconciler.clear()
        self.universe.clear()
        self._set_visible_count(0)
        if was_enabled:
            logger.info("Flight layer disabled; removed %s entities", removed)

    async def apply_options(self, options: LayerOptions) -> LayerStatus:
        previous = self.options
        self.options = options

        if not options.show_flights:
            self.disable()
            self.reconciler.set_style(options.use_3d_models)
            return self.status()

        style_changed = self.reconciler.set_style(options.use_3d_models)
        if not self._enabled:
            await self.enable()
        elif style_changed or options.max_flight_distance != previous.max_flight_distance:
            # Reuses the cached universe; no refetch.
            self.update_visible_flights()
        return self.status()

    async def refresh(self) -> int:
        """Fetch a new snapshot and redraw. Returns the universe size."""

        if not self._enabled:
            logger.debug("Flight layer disabled; skipping fetch")
            return 0

        generation = self._generation
        try:
            flights = await self.ingestor.fetch_states()
        except Exception as exc:
            if generation != self._generation:
                return 0
            message = str(exc) or type(exc).__name__
            logger.warning("Error fetching flights: %s", message)
            self.last_error = message
            self.universe.clear()
            self.update_visible_flights()
            self.events.publish(FlightFetchFailed(message=message))
            return 0

        if generation != self._generation:
            logger.debug("Discarding flight fetch that finished after a layer toggle")
            return 0

        self.last_error = None
        count = self.universe.replace(flights)
        self.update_visible_flights()
        return count

    def update_visible_flights(self) -> ReconcileResult | None:
        """Select aircraft for the current camera and reconcile the surface.

        Returns None when nothing was done: the layer is disabled, a pass is
        already running, or the camera is not ready yet.
        """

        if not self._enabled:
            return None
        if self._busy:
            logger.debug("Flight selection already running; skipping")
            return None

        self._busy = True
        try:
            flights = self.universe.snapshot()
            if flights:
                camera = self.surface.camera_state()
                if camera is None:
                    logger.debug("Camera not ready; leaving flight entities untouched")
                    # A style switch may already have cleared the surface.
                    self._set_visible_count(len(self.reconciler))
                    return None
                candidates = select_candidates(
                    camera,
                    flights,
                    max_flight_distance=self.options.max_flight_distance,
                )
                selected = [candidate.flight for candidate in candidates]
            else:
                selected = []
            result = self.reconciler.reconcile(selected)
        finally:
            self._busy = False

        self._set_visible_count(len(self.reconciler))
        return result

    async def run_polling(self, interval: float) -> None:
        """Refresh every ``interval`` seconds until cancelled."""

        logger.info("Polling flights every %.1f s", interval)
        while True:
            try:
                if self._enabled:
                    await self.refresh()
            except asyncio.CancelledError:
                logger.info("Flight polling cancelled")
                raise
            except Exception as exc:  # pragma: no cover - defensive logging
                logger.warning("Flight polling error: %s", exc)
            await asyncio.sleep(interval)

    def _on_camera_changed(self) -> None:
        if self._enabled:
            self._throttle()

    def _set_visible_count(self, count: int) -> None:
        if count == self._visible_count:
            return
        self._visible_count = count
        self.events.publish(VisibleCountChanged(count=count))


__all__ = ["FlightLayer", "FlightSource"]
