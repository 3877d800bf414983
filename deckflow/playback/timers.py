"""Autoplay timer and its cancellation token."""

from __future__ import annotations

import threading
from typing import Callable, Optional, Protocol


class Cancellable(Protocol):
    def cancel(self) -> None:
        ...


TimerFactory = Callable[[float, Callable[[], None]], Cancellable]


class RepeatingTimer:
    """Calls ``callback`` every ``interval`` seconds on a daemon thread."""

    def __init__(self, interval: float, callback: Callable[[], None]) -> None:
        self.interval = interval
        self.callback = callback
        self._stopped = threading.Event()
        self._thread = threading.Thread(target=self._run, name="deckflow-autoplay", daemon=True)
        self._thread.start()

    def _run(self) -> None:
        while not self._stopped.wait(self.interval):
            self.callback()

    def cancel(self) -> None:
        self._stopped.set()


def repeating_timer_factory(interval: float, callback: Callable[[], None]) -> RepeatingTimer:
    return RepeatingTimer(interval, callback)


class AutoplayToken:
    """Handle for one autoplay run; cancelling it stops the timer for good."""

    def __init__(self) -> None:
        self._timer: Optional[Cancellable] = None
        self._cancelled = False
        self._lock = threading.Lock()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def attach(self, timer: Cancellable) -> None:
        with self._lock:
            if self._cancelled:
                timer.cancel()
                return
            self._timer = timer

    def cancel(self) -> None:
        with self._lock:
            if self._cancelled:
                return
            self._cancelled = True
            timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel()
