"""OpenSky ingestor for the global airborne aircraft snapshot.

OpenSky encodes each state vector positionally:

0: icao24           8: on_ground
1: callsign         9: velocity
2: origin_country   10: true_track
3: time_position    11: vertical_rate
4: last_contact     12: sensors
5: longitude        13: geo_altitude
6: latitude         14: squawk
7: baro_altitude    15: spi
                    16: position_source
                    17: category
"""

from __future__ import annotations

import logging
import math
from typing import Any, Optional

import httpx

from globeview.config import settings
from globeview.models.aircraft import (
    DEFAULT_ALTITUDE_M,
    DEFAULT_HEADING_DEG,
    AircraftState,
)

logger = logging.getLogger("globeview.ingestors.opensky")


class FlightFetchError(RuntimeError):
    """The state-vector snapshot could not be fetched or decoded."""


def _field(row: list[Any] | tuple[Any, ...], index: int) -> Any:
    return row[index] if len(row) > index else None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _finite_float(value: Any) -> float | None:
    if not _is_number(value):
        return None
    value = float(value)
    return value if math.isfinite(value) else None


def _lenient_float(value: Any) -> float | None:
    """Accept numbers and numeric strings, like the feed sometimes sends."""

    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    return _finite_float(value)


def _optional_int(value: Any) -> int | None:
    return int(value) if _is_number(value) and math.isfinite(value) else None


def _optional_bool(value: Any) -> bool | None:
    return value if isinstance(value, bool) else None


def _optional_str(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    return value.strip() or None


def _sensors(value: Any) -> list[int] | None:
    if not isinstance(value, list):
        return None
    sensors = (_optional_int(sensor) for sensor in value)
    return [sensor for sensor in sensors if sensor is not None]


def parse_state_vector(row: Any) -> Optional[AircraftState]:
    """Decode one positional OpenSky row into an airborne ``AircraftState``.

    Rows without an id, with an invalid position, or that are not explicitly
    airborne are ignored. Optional fields are checked one by one and fall
    back to None or the documented defaults instead of rejecting the row.
    """

    if not isinstance(row, (list, tuple)):
        return None

    icao24 = _optional_str(_field(row, 0))
    if icao24 is None:
        return None

    longitude = _finite_float(_field(row, 5))
    latitude = _finite_float(_field(row, 6))
    if longitude is None or not -180.0 <= longitude <= 180.0:
        return None
    if latitude is None or not -90.0 <= latitude <= 90.0:
        return None

    # Missing or null on_ground is treated as unknown and skipped.
    if _field(row, 8) is not False:
        return None

    baro_altitude = _lenient_float(_field(row, 7))
    true_track = _lenient_float(_field(row, 10))
    callsign = _field(row, 1)
    origin_country = _field(row, 2)

    return AircraftState(
        icao24=icao24,
        callsign=callsign.strip() if isinstance(callsign, str) else "",
        origin_country=origin_country if isinstance(origin_country, str) else "",
        time_position=_optional_int(_field(row, 3)),
        last_contact=_optional_int(_field(row, 4)),
        longitude=longitude,
        latitude=latitude,
        baro_altitude=DEFAULT_ALTITUDE_M if baro_altitude is None else baro_altitude,
        on_ground=False,
        velocity=_finite_float(_field(row, 9)),
        true_track=DEFAULT_HEADING_DEG if true_track is None else true_track,
        vertical_rate=_finite_float(_field(row, 11)),
        sensors=_sensors(_field(row, 12)),
        geo_altitude=_finite_float(_field(row, 13)),
        squawk=_optional_str(_field(row, 14)),
        spi=_optional_bool(_field(row, 15)),
        position_source=_optional_int(_field(row, 16)),
        category=_optional_int(_field(row, 17)),
    )


def decode_states(payload: Any) -> list[AircraftState]:
    """Decode a ``/states/all`` body, raising if the envelope is malformed."""

    if not isinstance(payload, dict):
        raise FlightFetchError("OpenSky response is not a JSON object")

    raw_states = payload.get("states")
    if not isinstance(raw_states, list):
        raise FlightFetchError("OpenSky response has no states array")

    flights: list[AircraftState] = []
    for row in raw_states:
        flight = parse_state_vector(row)
        if flight:
            flights.append(flight)

    logger.debug(
        "Decoded %s airborne aircraft from %s state vectors",
        len(flights),
        len(raw_states),
    )
    return flights


class OpenSkyIngestor:
    """Fetch every live state vector from the OpenSky REST API."""

    def __init__(
        self,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url or settings.opensky_states_url
        self.timeout = timeout or settings.opensky_timeout
        self.transport = transport

    async def fetch_states(self) -> list[AircraftState]:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.get(self.base_url)
        except httpx.TimeoutException as exc:
            logger.warning("OpenSky request timed out: %s", exc)
            raise FlightFetchError("OpenSky request timed out") from exc
        except httpx.RequestError as exc:
            logger.warning("OpenSky request failed: %s", exc)
            raise FlightFetchError("OpenSky request failed") from exc

        if response.status_code == 429:
            logger.warning("OpenSky rate limit encountered: %s", response.text)
            raise FlightFetchError("OpenSky rate limit exceeded")
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "OpenSky returned HTTP %s: %s", exc.response.status_code, exc
            )
            raise FlightFetchError(
                f"OpenSky returned HTTP {exc.response.status_code}"
            ) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            logger.warning("Failed to parse OpenSky JSON response: %s", exc)
            raise FlightFetchError("OpenSky response is not valid JSON") from exc

        try:
            flights = decode_states(payload)
        except FlightFetchError as exc:
            logger.warning("Malformed OpenSky response: %s", exc)
            raise

        logger.info("Fetched %s airborne aircraft from OpenSky", len(flights))
        return flights


__all__ = [
    "FlightFetchError",
    "OpenSkyIngestor",
    "decode_states",
    "parse_state_vector",
]
