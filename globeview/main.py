from __future__ import annotations

import asyncio
import contextlib
import logging
import time

from fastapi import FastAPI, Request

from globeview.api import api_router
from globeview.config import settings
from globeview.ingestors import OpenSkyIngestor
from globeview.models import LayerOptions
from globeview.rendering.scene import HeadlessScene
from globeview.services import EventBus, FlightLayer, InteractionBridge

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger("globeview")


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application startup and shutdown lifecycle."""

    scene = HeadlessScene()
    event_bus = EventBus()
    layer = FlightLayer(
        scene,
        ingestor=OpenSkyIngestor(),
        events=event_bus,
        options=LayerOptions(show_flights=False),
    )
    app.state.scene = scene
    app.state.event_bus = event_bus
    app.state.flight_layer = layer
    app.state.interaction = InteractionBridge(scene, layer.universe, event_bus)

    if settings.show_flights:
        await layer.apply_options(LayerOptions())
        logger.info("Flight layer enabled at startup")

    if settings.flight_poll_interval:
        app.state.poll_task = asyncio.create_task(
            layer.run_polling(settings.flight_poll_interval)
        )
        logger.info("Flight polling started")

    try:
        yield
    finally:
        task = getattr(app.state, "poll_task", None)
        if task:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        layer.disable()


app = FastAPI(title="GlobeView Flight Layer", lifespan=lifespan)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log basic request information for observability."""

    start_time = time.time()
    response = await call_next(request)
    duration_ms = (time.time() - start_time) * 1000
    logger.info(
        "HTTP %s %s -> %s (%.2f ms)",
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
    )
    return response


app.include_router(api_router)


@app.get("/", summary="Root")
def read_root() -> dict[str, str]:
    """Basic root endpoint for quick verification."""

    return {"message": "GlobeView flight layer is running"}
