"""Per-frame pipeline tying layout, projection, sorting and interaction together."""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence, Tuple

from .animation import AnimationScheduler, FrameSource
from .config import Settings
from .depth import build_render_list
from .interaction import InteractionController, RecenterCallback
from .layout import LayoutCache
from .model import Frame, Idea, Point3D, PointerEvent, RenderItem, Viewport
from .projection import project, project_segments
from .wireframe import globe_wireframe

logger = logging.getLogger(__name__)

__all__ = ["IdeaSphereEngine"]


class IdeaSphereEngine:
    """Owns the point set and produces one :class:`Frame` per refresh."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        on_recenter: Optional[RecenterCallback] = None,
        source: Optional[FrameSource] = None,
    ) -> None:
        self.settings = settings or Settings()
        self.controller = InteractionController(self.settings, on_recenter)
        self.scheduler = AnimationScheduler(self.controller, source)
        self._layout = LayoutCache()
        self.items: Tuple[Idea, ...] = ()
        self.center_label = ""
        self.last_frame: Optional[Frame] = None
        self._last_item_count = -1
        self._last_visible_count = -1
        self._last_bounds = ""
        self.set_items((), "")

    # ------------------------------------------------------------------ helpers
    @property
    def points(self) -> Sequence[Point3D]:
        return self.controller.points

    @property
    def on_recenter(self) -> Optional[RecenterCallback]:
        return self.controller.on_recenter

    @on_recenter.setter
    def on_recenter(self, callback: Optional[RecenterCallback]) -> None:
        self.controller.on_recenter = callback

    def set_items(self, items: Sequence[Idea], center_label: str) -> None:
        """Install a new idea list; the layout is rebuilt and selection cleared."""

        self.items = tuple(items)
        self.center_label = str(center_label or "")
        points = self._layout.get(self.items, self.settings.radius)
        self.controller.reset(points)
        self.last_frame = None
        logger.info("showing %d ideas around %r", len(self.items), self.center_label)

    def reset_view(self) -> None:
        self.controller.reset_view()

    # -------------------------------------------------------------------- frame
    def step(self, width: Optional[float] = None, height: Optional[float] = None) -> Frame:
        s = self.settings
        if not width or width <= 0:
            width = s.viewport_width
        if not height or height <= 0:
            height = s.viewport_height
        viewport = Viewport(float(width), float(height))
        # One snapshot per frame: the controller swaps whole values.
        view = self.controller.view
        state = self.controller.state

        projected = [project(p, view, viewport, s.focal_length, s.near_plane) for p in self.points]
        items = build_render_list(
            projected,
            view.zoom,
            center_label=self.center_label,
            selected_index=self.controller.selected_index(),
            behind_threshold=s.behind_threshold,
        )
        wireframe: List[List[Tuple[float, float]]] = []
        if s.show_wireframe:
            for line in globe_wireframe(s.radius):
                wireframe.extend(project_segments(line, view, viewport, s.focal_length, s.near_plane))
        center = items[-1] if items and items[-1].is_center else None
        frame = Frame(items, wireframe, state, view, viewport.width, viewport.height, center)
        self.last_frame = frame
        self._report(frame)
        return frame

    def _report(self, frame: Frame) -> None:
        count = len(frame.items)
        visible = sum(1 for it in frame.items if not (it.is_behind or it.is_culled))
        if count:
            min_x = min(it.screen_x for it in frame.items)
            max_x = max(it.screen_x for it in frame.items)
            min_y = min(it.screen_y for it in frame.items)
            max_y = max(it.screen_y for it in frame.items)
            bounds = f"x=[{min_x:.0f},{max_x:.0f}] y=[{min_y:.0f},{max_y:.0f}]"
        else:
            bounds = "none"
        if (
            count != self._last_item_count
            or visible != self._last_visible_count
            or bounds != self._last_bounds
        ) and logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "step rendered %d nodes (%d in front) width=%.0f height=%.0f zoom=%.2f screen=%s",
                count,
                visible,
                frame.width,
                frame.height,
                frame.view.zoom,
                bounds,
            )
        self._last_item_count = count
        self._last_visible_count = visible
        self._last_bounds = bounds

    # -------------------------------------------------------------------- input
    def node_at(self, x: float, y: float, frame: Optional[Frame] = None) -> Optional[RenderItem]:
        """Return the topmost drawn node under ``(x, y)`` in ``frame``."""

        frame = frame or self.last_frame or self.step()
        s = self.settings
        for item in reversed(frame.items):
            if item.is_culled:
                continue
            base = s.center_radius if item.is_center else s.node_hit_radius
            if math.hypot(x - item.screen_x, y - item.screen_y) <= base * item.perspective_scale:
                return item
        return None

    def click_at(self, x: float, y: float) -> Optional[RenderItem]:
        """Dispatch a click as either a node click or a background click.

        A node hit never reaches the background handler. The hit is routed by
        its own flags and item, never looked up again by id.
        """

        hit = self.node_at(x, y)
        if hit is None:
            self.controller.click_background()
        elif hit.is_center:
            self.controller.click_center()
        elif hit.item is not None:
            self.controller.click_item(hit.item)
        return hit

    def handle_pointer(self, event: PointerEvent) -> bool:
        return self.controller.handle_pointer(event)

    def wheel(self, delta_y: float) -> bool:
        return self.controller.wheel(delta_y)

    def set_as_core(self) -> Optional[str]:
        return self.controller.set_as_core()

    def dismiss(self) -> bool:
        return self.controller.dismiss()
