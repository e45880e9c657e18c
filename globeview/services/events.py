"""Typed publish/subscribe channel between the flight layer and the UI."""

from __future__ import annotations

from collections import deque
import contextlib
import logging
from typing import Callable, TypeVar

from globeview.models.events import LayerEvent

logger = logging.getLogger("globeview.events")

E = TypeVar("E", bound=LayerEvent)

HISTORY_SIZE = 100


class EventBus:
    """Deliver layer events to subscribers registered per event class.

    Handlers run synchronously in subscription order. A handler that raises
    is logged and skipped; the remaining handlers still receive the event.
    """

    def __init__(self, history_size: int = HISTORY_SIZE) -> None:
        self._handlers: dict[type[LayerEvent], list[Callable[[LayerEvent], None]]] = {}
        self._history: deque[LayerEvent] = deque(maxlen=history_size)

    def subscribe(
        self, event_type: type[E], handler: Callable[[E], None]
    ) -> Callable[[], None]:
        handlers = self._handlers.setdefault(event_type, [])
        handlers.append(handler)  # type: ignore[arg-type]

        def unsubscribe() -> None:
            with contextlib.suppress(ValueError):
                handlers.remove(handler)  # type: ignore[arg-type]

        return unsubscribe

    def publish(self, event: LayerEvent) -> None:
        self._history.append(event)
        for event_type, handlers in list(self._handlers.items()):
            if not isinstance(event, event_type):
                continue
            for handler in list(handlers):
                try:
                    handler(event)
                except Exception:
                    logger.exception(
                        "Event handler failed for %s", type(event).__name__
                    )

    def recent(self, limit: int | None = None) -> list[LayerEvent]:
        events = list(self._history)
        if limit is not None:
            events = events[-limit:] if limit > 0 else []
        return events


__all__ = ["EventBus"]
