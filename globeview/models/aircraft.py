"""Models for airborne aircraft decoded from OpenSky state vectors."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

FLIGHT_ENTITY_PREFIX = "flight_"
DEFAULT_ALTITUDE_M = 10000.0
DEFAULT_HEADING_DEG = 0.0


def flight_entity_id(icao24: str) -> str:
    """Render-surface entity id for an aircraft."""

    return f"{FLIGHT_ENTITY_PREFIX}{icao24}"


def icao24_from_entity_id(entity_id: str | None) -> str | None:
    """Extract the transponder address from a flight entity id.

    Returns None for ids that do not belong to the flight layer.
    """

    if not entity_id or not entity_id.startswith(FLIGHT_ENTITY_PREFIX):
        return None
    icao24 = entity_id[len(FLIGHT_ENTITY_PREFIX):]
    return icao24 or None


class AircraftState(BaseModel):
    """Normalized state vector of one airborne aircraft."""

    icao24: str = Field(..., description="ICAO 24-bit transponder address (hex)")
    callsign: str = Field(default="", description="Callsign, trimmed; may be blank")
    origin_country: str = Field(default="", description="Country of registration")
    time_position: Optional[int] = Field(
        default=None, description="Epoch seconds of the last position update"
    )
    last_contact: Optional[int] = Field(
        default=None, description="Epoch seconds of the last message received"
    )
    longitude: float = Field(..., description="WGS84 longitude in decimal degrees")
    latitude: float = Field(..., description="WGS84 latitude in decimal degrees")
    baro_altitude: float = Field(
        default=DEFAULT_ALTITUDE_M, description="Barometric altitude in metres"
    )
    on_ground: bool = Field(default=False, description="Surface position report")
    velocity: Optional[float] = Field(default=None, description="Ground speed in m/s")
    true_track: float = Field(
        default=DEFAULT_HEADING_DEG, description="Track angle in degrees, 0 = north"
    )
    vertical_rate: Optional[float] = Field(
        default=None, description="Vertical rate in m/s"
    )
    sensors: Optional[list[int]] = Field(
        default=None, description="Receiver ids that contributed to the vector"
    )
    geo_altitude: Optional[float] = Field(
        default=None, description="Geometric altitude in metres"
    )
    squawk: Optional[str] = Field(default=None, description="Transponder code")
    spi: Optional[bool] = Field(default=None, description="Special purpose indicator")
    position_source: Optional[int] = Field(
        default=None, description="0=ADS-B, 1=ASTERIX, 2=MLAT, 3=FLARM"
    )
    category: Optional[int] = Field(default=None, description="Aircraft category")

    model_config = ConfigDict(extra="ignore", frozen=True)

    @property
    def entity_id(self) -> str:
        return flight_entity_id(self.icao24)


__all__ = [
    "AircraftState",
    "DEFAULT_ALTITUDE_M",
    "DEFAULT_HEADING_DEG",
    "FLIGHT_ENTITY_PREFIX",
    "flight_entity_id",
    "icao24_from_entity_id",
]
