"""Configuration settings for the GlobeView flight layer service."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger("globeview.config")


def _get_bool(env_var: str, default: bool = False) -> bool:
    """Parse an environment variable into a boolean with a default."""

    value = os.getenv(env_var)
    if value is None:
        return default

    return value.lower() in {"1", "true", "yes", "on"}


def _get_optional_float(env_var: str) -> float | None:
    """Parse an optional positive float; unset, empty or invalid values disable it."""

    value = os.getenv(env_var)
    if not value:
        return None
    try:
        parsed = float(value)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r", env_var, value)
        return None
    return parsed if parsed > 0 else None


@dataclass
class Settings:
    """Application configuration loaded from environment variables."""

    globeview_env: str = os.getenv("GLOBEVIEW_ENV", "local")
    log_level: str = os.getenv("GLOBEVIEW_LOG_LEVEL", "INFO")

    # OpenSky state vectors
    opensky_states_url: str = os.getenv(
        "OPENSKY_STATES_URL",
        "https://opensky-network.org/api/states/all",
    )
    opensky_timeout: float = float(os.getenv("OPENSKY_TIMEOUT", "15.0"))

    # Polling is off unless explicitly configured; OpenSky rate limits
    # anonymous clients aggressively.
    flight_poll_interval: float | None = _get_optional_float(
        "FLIGHT_POLL_INTERVAL_SECONDS"
    )
    camera_throttle_seconds: float = float(
        os.getenv("FLIGHT_CAMERA_THROTTLE_SECONDS", "0.1")
    )

    # Layer defaults handed to the flight layer at startup
    show_flights: bool = _get_bool("SHOW_FLIGHTS", default=False)
    use_3d_models: bool = _get_bool("USE_3D_FLIGHT_MODELS", default=False)
    max_flight_distance: float = float(os.getenv("MAX_FLIGHT_DISTANCE_M", "100000000"))

    # Entity graphics
    flight_model_uri: str = os.getenv("FLIGHT_MODEL_URI", "/models/plane.glb")
    flight_billboard_image: str = os.getenv(
        "FLIGHT_BILLBOARD_IMAGE",
        "https://maps.google.com/mapfiles/kml/shapes/airports.png",
    )

    # Headless scene
    viewport_width: int = int(os.getenv("SCENE_VIEWPORT_WIDTH", "1280"))
    viewport_height: int = int(os.getenv("SCENE_VIEWPORT_HEIGHT", "720"))
    pick_tolerance_px: float = float(os.getenv("SCENE_PICK_TOLERANCE_PX", "16"))


settings = Settings()

__all__ = ["settings", "Settings"]
