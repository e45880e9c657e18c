"""Data ingestors for GlobeView."""

from .opensky import FlightFetchError, OpenSkyIngestor, decode_states, parse_state_vector

__all__ = [
    "FlightFetchError",
    "OpenSkyIngestor",
    "decode_states",
    "parse_state_vector",
]
