"""Request dependencies resolving the objects wired up in the lifespan."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from globeview.rendering.scene import HeadlessScene
from globeview.services import EventBus, FlightLayer, InteractionBridge


def _state(request: Request, name: str):
    value = getattr(request.app.state, name, None)
    if value is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Flight layer is not running",
        )
    return value


def get_flight_layer(request: Request) -> FlightLayer:
    return _state(request, "flight_layer")


def get_scene(request: Request) -> HeadlessScene:
    return _state(request, "scene")


def get_event_bus(request: Request) -> EventBus:
    return _state(request, "event_bus")


def get_interaction_bridge(request: Request) -> InteractionBridge:
    return _state(request, "interaction")
