"""Idle auto-rotation driven one display refresh at a time."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Optional, Protocol

from .model import AutoRotating, InteractionState, ViewState

logger = logging.getLogger(__name__)

__all__ = ["ROTATION_STEP", "advance", "FrameSource", "ManualFrameSource", "AnimationScheduler"]

ROTATION_STEP = 0.003


def advance(view: ViewState, state: InteractionState, ticks: int = 1, step: float = ROTATION_STEP) -> ViewState:
    """Return ``view`` rotated by ``step`` per tick, only while auto-rotating.

    Any other state returns the very same ``view`` object.
    """

    if ticks <= 0 or not isinstance(state, AutoRotating):
        return view
    return replace(view, rotation_y=view.rotation_y + step * ticks)


class FrameSource(Protocol):
    def start(self, callback: Callable[[], None]) -> None: ...

    def stop(self) -> None: ...


class ManualFrameSource:
    """Frame source fired explicitly, for tests and offscreen rendering."""

    def __init__(self) -> None:
        self._callback: Optional[Callable[[], None]] = None

    @property
    def active(self) -> bool:
        return self._callback is not None

    def start(self, callback: Callable[[], None]) -> None:
        self._callback = callback

    def stop(self) -> None:
        self._callback = None

    def fire(self, count: int = 1) -> int:
        fired = 0
        for _ in range(count):
            callback = self._callback
            if callback is None:
                break
            callback()
            fired += 1
        return fired


class AnimationScheduler:
    """Connects a frame source to a controller's ``advance``.

    ``start``/``stop`` may be called any number of times. ``close`` is final:
    the source is released and the scheduler refuses to start again.
    """

    def __init__(
        self,
        controller,
        source: Optional[FrameSource] = None,
        on_frame: Optional[Callable[[], None]] = None,
    ) -> None:
        self.controller = controller
        self.source: FrameSource = source if source is not None else ManualFrameSource()
        self.on_frame = on_frame
        self._running = False
        self._closed = False
        self._in_tick = False
        self.ticks = 0

    @property
    def running(self) -> bool:
        return self._running

    @property
    def closed(self) -> bool:
        return self._closed

    def start(self) -> None:
        if self._closed:
            raise RuntimeError("animation scheduler has been closed")
        if self._running:
            return
        self._running = True
        self.source.start(self.tick)
        logger.debug("animation started")

    def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        self.source.stop()
        logger.debug("animation stopped after %d ticks", self.ticks)

    def close(self) -> None:
        self.stop()
        self._closed = True

    def tick(self) -> bool:
        """Run one frame. Returns ``True`` when the view rotated."""

        if self._closed or not self._running or self._in_tick:
            return False
        self._in_tick = True
        try:
            changed = self.controller.advance(1)
            self.ticks += 1
            if self.on_frame is not None:
                self.on_frame()
        finally:
            self._in_tick = False
        return changed
