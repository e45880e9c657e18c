"""Pydantic models for the GlobeView flight layer."""

from .aircraft import AircraftState, flight_entity_id, icao24_from_entity_id
from .camera import CameraState, CameraUpdate, ViewportUpdate
from .events import FlightFetchFailed, FlightSelected, LayerEvent, VisibleCountChanged
from .layer import LayerOptions, LayerStatus
from .scene import PickRequest, PickResponse, SceneEntityView

__all__ = [
    "AircraftState",
    "CameraState",
    "CameraUpdate",
    "FlightFetchFailed",
    "FlightSelected",
    "LayerEvent",
    "LayerOptions",
    "LayerStatus",
    "PickRequest",
    "PickResponse",
    "SceneEntityView",
    "ViewportUpdate",
    "VisibleCountChanged",
    "flight_entity_id",
    "icao24_from_entity_id",
]
