"""Per-key debounced calls."""

from __future__ import annotations

import threading
from typing import Any, Callable, Dict, List, Tuple

from loguru import logger


DEBOUNCE_DELAY = 0.15

_Call = Tuple[threading.Timer, Callable[..., Any], Tuple[Any, ...]]


class DebouncedScheduler:
    """Coalesce bursts of calls for the same key into one.

    Scheduling a key that already has a pending call cancels that call and
    restarts the delay. There is no mutual exclusion between calls that have
    already started.
    """

    def __init__(self, delay: float = DEBOUNCE_DELAY) -> None:
        self.delay = delay
        self._lock = threading.Lock()
        self._pending: Dict[str, _Call] = {}

    def schedule(self, key: str, fn: Callable[..., Any], *args: Any) -> None:
        with self._lock:
            previous = self._pending.pop(key, None)
            if previous is not None:
                previous[0].cancel()
            timer = threading.Timer(self.delay, self._fire, args=(key,))
            timer.daemon = True
            self._pending[key] = (timer, fn, args)
            timer.start()

    def _fire(self, key: str) -> None:
        with self._lock:
            call = self._pending.pop(key, None)
        if call is None:
            return
        _, fn, args = call
        self._run(key, fn, args)

    @staticmethod
    def _run(key: str, fn: Callable[..., Any], args: Tuple[Any, ...]) -> None:
        try:
            fn(*args)
        except Exception:
            logger.exception("Debounced call for {} failed", key)

    def pending(self) -> List[str]:
        with self._lock:
            return list(self._pending)

    def flush(self) -> int:
        """Run every pending call now, in scheduling order.

        Returns the number of calls run.
        """

        with self._lock:
            calls = list(self._pending.items())
            self._pending.clear()
        for key, (timer, fn, args) in calls:
            timer.cancel()
            self._run(key, fn, args)
        return len(calls)

    def cancel_all(self) -> None:
        with self._lock:
            calls = list(self._pending.values())
            self._pending.clear()
        for timer, _, _ in calls:
            timer.cancel()


__all__ = ["DEBOUNCE_DELAY", "DebouncedScheduler"]
