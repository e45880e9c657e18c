"""Flight layer endpoints used by the host UI."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, status

from globeview.models import AircraftState, LayerOptions, LayerStatus
from globeview.services import EventBus, FlightLayer

from .deps import get_event_bus, get_flight_layer

router = APIRouter(prefix="/api/v1/flights", tags=["flights"])

logger = logging.getLogger("globeview.api.flights")


@router.get("/layer", response_model=LayerStatus, summary="Flight layer status")
async def get_layer_status(layer: FlightLayer = Depends(get_flight_layer)) -> LayerStatus:
    return layer.status()


@router.put("/layer", response_model=LayerStatus, summary="Update flight layer options")
async def update_layer_options(
    options: LayerOptions, layer: FlightLayer = Depends(get_flight_layer)
) -> LayerStatus:
    """Enable/disable the layer, switch entity style or change the distance cap."""

    logger.info(
        "Layer options: show_flights=%s use_3d_models=%s max_flight_distance=%s",
        options.show_flights,
        options.use_3d_models,
        options.max_flight_distance,
    )
    return await layer.apply_options(options)


@router.post("/refresh", response_model=LayerStatus, summary="Fetch flights now")
async def refresh_flights(layer: FlightLayer = Depends(get_flight_layer)) -> LayerStatus:
    if not layer.enabled:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Flight layer is disabled",
        )
    await layer.refresh()
    return layer.status()


@router.get("/events", summary="Recent flight layer events")
async def list_events(
    limit: int = Query(default=50, ge=1, le=100),
    events: EventBus = Depends(get_event_bus),
) -> list[dict[str, Any]]:
    return [event.model_dump(mode="json") for event in events.recent(limit)]


@router.get("/{icao24}", response_model=AircraftState, summary="Latest state of one aircraft")
async def get_flight(
    icao24: str, layer: FlightLayer = Depends(get_flight_layer)
) -> AircraftState:
    flight = layer.universe.get(icao24)
    if flight is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Aircraft not found")
    return flight
