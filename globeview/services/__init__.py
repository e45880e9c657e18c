"""Service-layer components of the flight layer."""

from .events import EventBus
from .flight_layer import FlightLayer, FlightSource
from .interaction import InteractionBridge
from .lod import Candidate, LodTier, select_candidates, tier_for_height
from .reconciler import EntityReconciler, ReconcileResult, RenderedEntity
from .throttle import Throttle
from .universe import FlightUniverse

__all__ = [
    "Candidate",
    "EntityReconciler",
    "EventBus",
    "FlightLayer",
    "FlightSource",
    "FlightUniverse",
    "InteractionBridge",
    "LodTier",
    "ReconcileResult",
    "RenderedEntity",
    "Throttle",
    "select_candidates",
    "tier_for_height",
]
