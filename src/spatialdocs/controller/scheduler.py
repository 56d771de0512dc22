"""
Timers
======
Every suspension point of the board is a fire-once timer: animation windows,
"one frame later" layout passes and resize debouncing. Controllers only see
the small `Scheduler` protocol so tests can drive time by hand; the app uses
`QtScheduler`, which is backed by single-shot QTimers on the Qt event loop.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional, Protocol

from PySide6.QtCore import QObject, QTimer

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...

    @property
    def active(self) -> bool: ...


class Scheduler(Protocol):
    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle: ...


class _QtTimerHandle:
    def __init__(self, timer: QTimer, owner: QtScheduler) -> None:
        self._timer: Optional[QTimer] = timer
        self._owner = owner

    @property
    def active(self) -> bool:
        return self._timer is not None

    def cancel(self) -> None:
        if self._timer is None:
            return
        self._timer.stop()
        self._owner._release(self._timer)
        self._timer = None

    def _done(self) -> None:
        if self._timer is not None:
            self._owner._release(self._timer)
            self._timer = None


class QtScheduler(QObject):
    """Scheduler running callbacks from the Qt event loop."""

    def __init__(self, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._timers: set[QTimer] = set()

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle:
        timer = QTimer(self)
        timer.setSingleShot(True)
        timer.setInterval(max(int(delay_ms), 0))
        handle = _QtTimerHandle(timer, self)

        def fire() -> None:
            handle._done()
            callback()

        timer.timeout.connect(fire)
        self._timers.add(timer)
        timer.start()
        return handle

    def _release(self, timer: QTimer) -> None:
        if timer in self._timers:
            self._timers.discard(timer)
            timer.deleteLater()


class Debouncer:
    """Collapse bursts of calls into one call `delay_ms` after the last."""

    def __init__(self, scheduler: Scheduler, delay_ms: int, callback: Callable[[], None]) -> None:
        self._scheduler = scheduler
        self._delay_ms = delay_ms
        self._callback = callback
        self._handle: Optional[TimerHandle] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None and self._handle.active

    def trigger(self) -> None:
        self.cancel()
        self._handle = self._scheduler.call_later(self._delay_ms, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        self._callback()
