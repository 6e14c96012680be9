"""``QTimer``-backed frame source for :class:`~ideasphere.animation.AnimationScheduler`."""

from __future__ import annotations

from typing import Callable, Optional

from PyQt5 import QtCore

__all__ = ["QtFrameSource"]


class QtFrameSource(QtCore.QObject):
    """Fire the scheduler callback on every timer tick of the GUI thread."""

    def __init__(self, parent: Optional[QtCore.QObject] = None, interval_ms: int = 16) -> None:
        super().__init__(parent)
        self._callback: Optional[Callable[[], None]] = None
        self._interval_ms = max(int(interval_ms), 0)
        self._timer = QtCore.QTimer(self)
        self._timer.timeout.connect(self._on_timeout)

    @property
    def active(self) -> bool:
        return self._timer.isActive()

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    def start(self, callback: Callable[[], None]) -> None:
        self._callback = callback
        if self._interval_ms > 0 and not self._timer.isActive():
            self._timer.start(self._interval_ms)

    def stop(self) -> None:
        self._timer.stop()
        self._callback = None

    def set_interval(self, interval_ms: int) -> None:
        """Update the refresh interval; ``0`` pauses the timer."""

        interval_ms = max(int(interval_ms), 0)
        if interval_ms == self._interval_ms:
            return
        self._interval_ms = interval_ms
        if interval_ms <= 0:
            if self._timer.isActive():
                self._timer.stop()
            return
        if self._timer.isActive():
            self._timer.setInterval(interval_ms)
        elif self._callback is not None:
            self._timer.start(interval_ms)

    def _on_timeout(self) -> None:
        callback = self._callback
        if callback is not None:
            callback()
