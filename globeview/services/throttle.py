"""Trailing-edge throttle for high-frequency notifications."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

logger = logging.getLogger("globeview.throttle")


class Throttle:
    """Run ``func`` at most once per ``interval`` seconds.

    The first call schedules a run ``interval`` seconds later on the running
    event loop; calls made before that run are folded into it. ``cancel``
    drops a pending run synchronously, so nothing fires after it returns.
    """

    def __init__(self, func: Callable[[], object], interval: float) -> None:
        if interval < 0:
            raise ValueError("Throttle interval must be non-negative")
        self.func = func
        self.interval = interval
        self._handle: asyncio.TimerHandle | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def __call__(self) -> None:
        if self._handle is not None:
            return
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.interval, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        try:
            self.func()
        except Exception:
            logger.exception("Throttled call failed")


__all__ = ["Throttle"]
