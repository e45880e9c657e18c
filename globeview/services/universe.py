"""Latest-known snapshot of airborne aircraft."""

from __future__ import annotations

import logging
from typing import Iterable, Iterator

from globeview.models.aircraft import AircraftState

logger = logging.getLogger("globeview.universe")


class FlightUniverse:
    """Snapshot of the most recent successful fetch, keyed by icao24.

    ``replace`` swaps the whole snapshot at once, so aircraft missing from a
    newer fetch disappear instead of lingering from older ones.
    """

    def __init__(self) -> None:
        self._flights: dict[str, AircraftState] = {}

    def replace(self, flights: Iterable[AircraftState]) -> int:
        snapshot = {flight.icao24: flight for flight in flights}
        self._flights = snapshot
        logger.debug("Universe replaced with %s aircraft", len(snapshot))
        return len(snapshot)

    def clear(self) -> None:
        self._flights = {}

    def get(self, icao24: str) -> AircraftState | None:
        return self._flights.get(icao24)

    def snapshot(self) -> tuple[AircraftState, ...]:
        return tuple(self._flights.values())

    def __len__(self) -> int:
        return len(self._flights)

    def __contains__(self, icao24: object) -> bool:
        return icao24 in self._flights

    def __iter__(self) -> Iterator[AircraftState]:
        return iter(self.snapshot())


__all__ = ["FlightUniverse"]
