"""Pointer, wheel and selection handling for the sphere view.

The controller owns the only mutable copies of :class:`ViewState` and of the
interaction state. Both are immutable values that are replaced in one
assignment, so a frame that reads :attr:`InteractionController.view` always
sees a consistent snapshot.

State machine::

    AutoRotating --down--> Dragging --up/leave--> AutoRotating
    AutoRotating --click satellite--> Inspecting(item)
    Inspecting --click center/background, dismiss, set as core--> AutoRotating

Events that make no sense in the current state are ignored.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, List, Optional, Sequence

from .animation import advance
from .config import Settings
from .model import (
    AutoRotating,
    Dragging,
    Idea,
    Inspecting,
    InteractionState,
    Point3D,
    PointerEvent,
    PointerPhase,
    PointerTrack,
    ViewState,
)

logger = logging.getLogger(__name__)

__all__ = ["InteractionController", "RecenterCallback", "clamp"]

RecenterCallback = Callable[[str], None]


def clamp(value: float, minimum: float, maximum: float) -> float:
    return max(minimum, min(maximum, value))


class InteractionController:
    """Tagged-state controller mutating the camera in response to input."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        on_recenter: Optional[RecenterCallback] = None,
    ) -> None:
        self.settings = settings or Settings()
        self.on_recenter = on_recenter
        self._view = self.initial_view()
        self._state: InteractionState = AutoRotating()
        self._points: List[Point3D] = []

    # ------------------------------------------------------------------ state
    @property
    def view(self) -> ViewState:
        return self._view

    @property
    def state(self) -> InteractionState:
        return self._state

    @property
    def selected(self) -> Optional[Idea]:
        if isinstance(self._state, Inspecting):
            return self._state.item
        return None

    @property
    def points(self) -> Sequence[Point3D]:
        return self._points

    def initial_view(self) -> ViewState:
        s = self.settings
        return ViewState(s.initial_rotation_x, s.initial_rotation_y, s.initial_zoom)

    def _set_state(self, state: InteractionState) -> None:
        if type(state) is not type(self._state):
            logger.debug("interaction %s -> %s", self._state.name, state.name)
        self._state = state

    def set_view(self, view: ViewState) -> None:
        """Install a whole view value, clamping the zoom into range."""

        s = self.settings
        self._view = replace(view, zoom=clamp(view.zoom, s.zoom_min, s.zoom_max))

    def reset(self, points: Sequence[Point3D]) -> None:
        """Adopt a freshly generated point set; the camera is kept."""

        self._points = list(points)
        self._set_state(AutoRotating())

    def reset_view(self) -> None:
        self._view = self.initial_view()

    def find_point(self, node_id: str) -> Optional[Point3D]:
        """Return the last point carrying ``node_id``."""

        found = None
        for point in self._points:
            if point.id == node_id:
                found = point
        return found

    def selected_index(self) -> Optional[int]:
        """Index in :attr:`points` of the inspected node.

        The point carrying the inspected item itself wins; otherwise the last
        satellite with the same id.
        """

        item = self.selected
        if item is None:
            return None
        index = None
        for idx, point in enumerate(self._points):
            if point.is_center:
                continue
            if point.item is item:
                return idx
            if point.id == item.id:
                index = idx
        return index

    # ---------------------------------------------------------------- pointer
    def handle_pointer(self, event: PointerEvent) -> bool:
        """Feed one pointer sample. Returns ``True`` when it changed anything."""

        phase = event.phase
        if phase is PointerPhase.DOWN:
            return self._pointer_down(event.x, event.y)
        if phase is PointerPhase.MOVE:
            return self._pointer_move(event.x, event.y)
        if phase in (PointerPhase.UP, PointerPhase.LEAVE):
            return self._pointer_release()
        return False

    def _pointer_down(self, x: float, y: float) -> bool:
        if not isinstance(self._state, AutoRotating):
            # Inspection freezes the camera; a second pointer is not tracked.
            logger.debug("pointer down ignored while %s", self._state.name)
            return False
        self._set_state(Dragging(PointerTrack(x, y)))
        return True

    def _pointer_move(self, x: float, y: float) -> bool:
        state = self._state
        if not isinstance(state, Dragging):
            return False
        dx = x - state.track.x
        dy = y - state.track.y
        k = self.settings.drag_sensitivity
        view = self._view
        self._view = replace(
            view,
            rotation_x=view.rotation_x - dy * k,
            rotation_y=view.rotation_y + dx * k,
        )
        self._state = Dragging(PointerTrack(x, y))
        return True

    def _pointer_release(self) -> bool:
        if not isinstance(self._state, Dragging):
            logger.debug("pointer release ignored while %s", self._state.name)
            return False
        self._set_state(AutoRotating())
        return True

    def wheel(self, delta_y: float) -> bool:
        if isinstance(self._state, Inspecting):
            return False
        s = self.settings
        zoom = clamp(self._view.zoom - delta_y * s.wheel_sensitivity, s.zoom_min, s.zoom_max)
        if zoom == self._view.zoom:
            return False
        self._view = replace(self._view, zoom=zoom)
        return True

    # -------------------------------------------------------------- selection
    def click_node(self, node_id: str) -> bool:
        """Handle a click on a node.

        Always returns ``True`` for a known node: the click is consumed and the
        host must not also report a background click for it.
        """

        point = self.find_point(node_id)
        if point is None:
            logger.debug("click on unknown node %r ignored", node_id)
            return False
        if point.is_center:
            return self.click_center()
        if point.item is None:
            return True
        return self.click_item(point.item)

    def click_center(self) -> bool:
        """Click on the center node: ends inspection, otherwise does nothing."""

        if isinstance(self._state, Inspecting):
            self._set_state(AutoRotating())
        return True

    def click_item(self, item: Idea) -> bool:
        """Click on the satellite carrying ``item``."""

        if not isinstance(self._state, Dragging):
            self._set_state(Inspecting(item))
        return True

    def click_background(self) -> bool:
        if isinstance(self._state, Inspecting):
            self._set_state(AutoRotating())
            return True
        return False

    def dismiss(self) -> bool:
        """Close the detail view, as the overlay's close button does."""

        return self.click_background()

    def set_as_core(self) -> Optional[str]:
        """Ask the idea source to recenter on the inspected item.

        The selection is cleared before the callback runs, so a callback that
        synchronously installs a new item list finds the controller idle.
        Returns the phrase sent, or ``None`` when nothing was inspected.
        """

        state = self._state
        if not isinstance(state, Inspecting):
            logger.debug("set_as_core ignored outside inspection")
            return None
        phrase = state.item.phrase
        self._set_state(AutoRotating())
        callback = self.on_recenter
        if callback is not None:
            try:
                callback(phrase)
            except Exception:
                logger.exception("recenter callback failed for %r", phrase)
        return phrase

    # -------------------------------------------------------------- animation
    def advance(self, ticks: int = 1) -> bool:
        """Apply ``ticks`` auto-rotation steps when idle."""

        view = advance(self._view, self._state, ticks, self.settings.rotation_step)
        if view is self._view:
            return False
        self._view = view
        return True
