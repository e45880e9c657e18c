"""Scene endpoints: camera updates, entity snapshots and picking."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status

from globeview.models import (
    CameraUpdate,
    PickRequest,
    PickResponse,
    SceneEntityView,
    ViewportUpdate,
)
from globeview.rendering.scene import HeadlessScene
from globeview.rendering.surface import ScreenPoint
from globeview.services import InteractionBridge

from .deps import get_interaction_bridge, get_scene

router = APIRouter(prefix="/api/v1/scene", tags=["scene"])


@router.put("/camera", status_code=status.HTTP_204_NO_CONTENT, summary="Move the camera")
async def update_camera(
    camera: CameraUpdate, scene: HeadlessScene = Depends(get_scene)
) -> Response:
    scene.set_camera(camera.longitude, camera.latitude, camera.height)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/viewport", status_code=status.HTTP_204_NO_CONTENT, summary="Resize the viewport")
async def update_viewport(
    viewport: ViewportUpdate, scene: HeadlessScene = Depends(get_scene)
) -> Response:
    scene.set_viewport(viewport.width, viewport.height)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/entities", response_model=list[SceneEntityView], summary="Drawn entities")
async def list_entities(scene: HeadlessScene = Depends(get_scene)) -> list[SceneEntityView]:
    return [entity.to_view() for entity in scene.entities()]


@router.post("/pick", response_model=PickResponse, summary="Select the aircraft under a point")
async def pick_flight(
    point: PickRequest,
    bridge: InteractionBridge = Depends(get_interaction_bridge),
) -> PickResponse:
    selected = bridge.handle_click(ScreenPoint(x=point.x, y=point.y))
    if selected is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No aircraft at point")
    return PickResponse(icao24=selected.icao24, flight=selected.flight)
