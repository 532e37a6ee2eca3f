from __future__ import annotations

import time
from typing import Any, Callable, Optional

from ..core.constants import AUTOSAVE_DEBOUNCE_SECONDS

_NOTHING = object()


class Debouncer:
    """Run `callback` at most once per quiet period of `wait` seconds.

    Each push() replaces the pending value and restarts the window, so the
    latest value wins. Nothing runs in the background: the owner calls
    tick() to fire an expired window and flush() on step change or close.
    """

    def __init__(
        self,
        callback: Callable[[Any], None],
        *,
        wait: float = AUTOSAVE_DEBOUNCE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._callback = callback
        self._wait = wait
        self._clock = clock
        self._value: Any = _NOTHING
        self._deadline: Optional[float] = None

    @property
    def pending(self) -> bool:
        return self._value is not _NOTHING

    def push(self, value: Any) -> None:
        self._value = value
        self._deadline = self._clock() + self._wait

    def tick(self) -> bool:
        """Fire if the quiet period has elapsed; returns whether it fired."""
        if not self.pending or self._clock() < self._deadline:
            return False
        self._fire()
        return True

    def flush(self) -> bool:
        if not self.pending:
            return False
        self._fire()
        return True

    def cancel(self) -> None:
        self._value = _NOTHING
        self._deadline = None

    def _fire(self) -> None:
        value = self._value
        self.cancel()
        self._callback(value)
