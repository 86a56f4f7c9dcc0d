"""
Debounced map-bounds tracking.

Every viewport-settled event restarts a single timer; only the last event in
a burst fetches landmarks (trailing-edge debounce). Responses are rendered in
the order they resolve, so a slow, older request can overwrite a newer one.
"""
from __future__ import annotations

import logging
import threading
from typing import Callable, List, Optional

from domain.models import BoundingBox, Landmark

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 1.0


class BoundsTracker:
    def __init__(
        self,
        fetch: Callable[[BoundingBox], List[Landmark]],
        on_result: Callable[[List[Landmark]], None],
        on_error: Optional[Callable[[Exception], None]] = None,
        delay: float = DEFAULT_DEBOUNCE_SECONDS,
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
    ):
        self.fetch = fetch
        self.on_result = on_result
        self.on_error = on_error
        self.delay = delay
        self.timer_factory = timer_factory
        self._timer: Optional[threading.Timer] = None
        self._pending_bounds: Optional[BoundingBox] = None
        # Bumped on every schedule; a timer whose generation is stale does nothing
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None

    def viewport_settled(self, bounds: BoundingBox) -> None:
        """Record a new viewport and restart the debounce timer."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            self._pending_bounds = bounds
            timer = self.timer_factory(self.delay, self._fire, args=(self._generation,))
            timer.daemon = True
            self._timer = timer
        timer.start()

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            self._pending_bounds = None
            self._generation += 1

    def flush(self) -> None:
        """Run the pending fetch now instead of waiting for the timer."""
        with self._lock:
            if self._timer is None:
                return
            self._timer.cancel()
            generation = self._generation
        self._fire(generation)

    def _fire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self._pending_bounds is None:
                return
            bounds = self._pending_bounds
            self._pending_bounds = None
            self._timer = None

        try:
            landmarks = self.fetch(bounds)
        except Exception as exc:
            logger.warning("Failed to load landmarks for %s: %s", bounds.cache_key(), exc)
            if self.on_error is not None:
                self.on_error(exc)
            self.on_result([])
            return
        self.on_result(landmarks)
