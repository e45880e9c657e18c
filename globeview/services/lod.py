"""Level-of-detail selection of the aircraft worth drawing.

The camera height picks a tier: the higher the camera, the further out
aircraft may be and the fewer of them are drawn. Within a tier every aircraft
gets a priority from its distance to the camera and its altitude, and the
best ones up to the tier budget are kept.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import Iterable

from globeview.models.aircraft import AircraftState
from globeview.models.camera import CameraState
from globeview.rendering.geometry import cartesian_from_degrees

logger = logging.getLogger("globeview.lod")

DISTANCE_WEIGHT = 0.7
ALTITUDE_WEIGHT = 0.3
ALTITUDE_CEILING_M = 15000.0
PRIORITY_EPSILON = 0.01


@dataclass(frozen=True)
class LodTier:
    name: str
    min_height: float
    max_distance: float
    max_entities: int
    priority_radius: float


# Ordered from the highest camera to the lowest. ``max_distance`` is a cap
# applied on top of the host's max_flight_distance; None means uncapped.
_TIER_TABLE: tuple[tuple[str, float, float | None, int, float], ...] = (
    ("global", 10_000_000.0, None, 1000, 20_000_000.0),
    ("continental", 5_000_000.0, 50_000_000.0, 1500, 10_000_000.0),
    ("regional", 1_000_000.0, 20_000_000.0, 2000, 5_000_000.0),
    ("local", 100_000.0, 10_000_000.0, 2500, 2_000_000.0),
    ("detail", 0.0, 5_000_000.0, 2500, 500_000.0),
)


@dataclass(frozen=True)
class Candidate:
    flight: AircraftState
    distance: float
    priority: float


def tier_for_height(height: float, max_flight_distance: float) -> LodTier:
    """Return the LOD tier for a camera ``height`` in metres."""

    for name, min_height, cap, max_entities, priority_radius in _TIER_TABLE:
        if height > min_height or min_height == 0.0:
            max_distance = max_flight_distance if cap is None else min(max_flight_distance, cap)
            return LodTier(
                name=name,
                min_height=min_height,
                max_distance=max_distance,
                max_entities=max_entities,
                priority_radius=priority_radius,
            )
    raise AssertionError("LOD tier table has no ground tier")  # pragma: no cover


def priority_score(distance: float, altitude: float, priority_radius: float) -> float:
    """Closer and higher aircraft score higher; result is in [0, 1]."""

    closeness = 1.0 - min(distance / priority_radius, 1.0)
    elevation = min(max(altitude, 0.0) / ALTITUDE_CEILING_M, 1.0)
    return DISTANCE_WEIGHT * closeness + ALTITUDE_WEIGHT * elevation


def _sort_key(candidate: Candidate) -> tuple[int, float]:
    # Priorities are compared in fixed PRIORITY_EPSILON-wide bands; inside a
    # band the closer aircraft wins. This is not a pairwise "within epsilon"
    # rule: two priorities closer than epsilon but on opposite sides of a
    # band edge still order by priority.
    return (-math.floor(candidate.priority / PRIORITY_EPSILON), candidate.distance)


def select_candidates(
    camera: CameraState,
    flights: Iterable[AircraftState],
    *,
    max_flight_distance: float,
) -> list[Candidate]:
    """Pick the aircraft to render for ``camera``, best first."""

    tier = tier_for_height(camera.height, max_flight_distance)

    candidates: list[Candidate] = []
    for flight in flights:
        position = cartesian_from_degrees(
            flight.longitude, flight.latitude, flight.baro_altitude
        )
        distance = camera.position.distance(position)
        if distance > tier.max_distance:
            continue
        candidates.append(
            Candidate(
                flight=flight,
                distance=distance,
                priority=priority_score(
                    distance, flight.baro_altitude, tier.priority_radius
                ),
            )
        )

    candidates.sort(key=_sort_key)
    selected = candidates[: tier.max_entities]
    logger.debug(
        "LOD tier %s at %.0f m: %s in range, %s selected",
        tier.name,
        camera.height,
        len(candidates),
        len(selected),
    )
    return selected


__all__ = [
    "Candidate",
    "LodTier",
    "PRIORITY_EPSILON",
    "priority_score",
    "select_candidates",
    "tier_for_height",
]
