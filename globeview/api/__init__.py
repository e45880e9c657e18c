"""API routers for the GlobeView flight layer."""

from fastapi import APIRouter

from .flights import router as flights_router
from .health import router as health_router
from .scene import router as scene_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(flights_router)
api_router.include_router(scene_router)

__all__ = ["api_router"]
