"""Qt widget painting the idea sphere and feeding it pointer input.

The widget is a thin host around :class:`~ideasphere.engine.IdeaSphereEngine`:

* a :class:`QtFrameSource` ticks the animation scheduler and schedules a
  repaint on every frame;
* mouse, touch-synthesised mouse and wheel events become
  :class:`~ideasphere.model.PointerEvent` values;
* each paint asks the engine for a :class:`~ideasphere.model.Frame` and draws
  it back to front with ``QPainter``.

:func:`IdeaSphereViewWidget` picks an OpenGL-backed widget when available and
falls back to a raster ``QWidget``. Both expose the same API.
"""

from __future__ import annotations

import logging
import os
from typing import Callable, Optional, Sequence, Tuple

from PyQt5 import QtCore, QtGui, QtWidgets

from ..config import Settings
from ..engine import IdeaSphereEngine
from ..model import Frame, Idea, PointerEvent, PointerPhase, RenderItem
from .detail_panel import IdeaDetailPanel
from .frame_source import QtFrameSource

logger = logging.getLogger(__name__)

__all__ = ["IdeaSphereViewWidget"]

HINT_TEXT = "Scroll to zoom · Drag to rotate · Click a node for details"
_BEHIND_COLOR = "#334155"
_LABEL_COLOR = "#E2E8F0"


def _create_opengl_functions() -> Tuple[Optional[object], Optional[BaseException]]:
    """Safely instantiate ``QOpenGLFunctions`` when available.

    Returns ``(functions, error)``; ``functions`` is ``None`` when the binding
    is missing or fails to initialise, and ``error`` explains why.
    """

    factory = getattr(QtGui, "QOpenGLFunctions", None)
    if factory is None:
        return None, AttributeError("PyQt5.QtGui has no attribute 'QOpenGLFunctions'")
    try:
        functions = factory()
    except Exception as exc:  # pragma: no cover - depends on bindings
        return None, exc
    try:
        functions.initializeOpenGLFunctions()
    except Exception as exc:  # pragma: no cover - depends on runtime GL state
        return None, exc
    return functions, None


def _color(value: str, alpha: float = 1.0) -> QtGui.QColor:
    color = QtGui.QColor(value)
    if not color.isValid():
        color = QtGui.QColor("#2DD4BF")
    color.setAlphaF(max(0.0, min(1.0, alpha)))
    return color


class _ViewWidgetBase:
    """Common behaviour shared by both the OpenGL and raster backends."""

    def _init_view_widget(self, settings: Optional[Settings]) -> None:
        self.settings = settings or Settings()
        self.setAttribute(QtCore.Qt.WA_OpaquePaintEvent, True)
        self.setAutoFillBackground(False)
        self.setCursor(QtCore.Qt.SizeAllCursor)
        self.setMinimumSize(320, 240)
        self._frame_source = QtFrameSource(self, self.settings.frame_interval_ms)
        self.engine = IdeaSphereEngine(self.settings, source=self._frame_source)
        self.engine.scheduler.on_frame = self.update
        self._press_pos: Optional[QtCore.QPoint] = None

        self.detail = IdeaDetailPanel(self, accent=self.settings.accent)
        self.detail.closeRequested.connect(self._on_detail_close)
        self.detail.coreRequested.connect(self._on_detail_core)

        self.engine.scheduler.start()

    # ------------------------------------------------------------------ API
    def set_items(self, items: Sequence[Idea], center_label: str) -> None:
        self.engine.set_items(items, center_label)
        self._sync_detail()
        self.update()

    def set_recenter_callback(self, callback: Optional[Callable[[str], None]]) -> None:
        self.engine.on_recenter = callback

    def reset_view(self) -> None:
        self.engine.reset_view()
        self.update()

    def shutdown(self) -> None:
        """Stop the animation for good; called when the view is torn down."""

        self.engine.scheduler.close()

    # ------------------------------------------------------------------ input
    def mousePressEvent(self, event: QtGui.QMouseEvent) -> None:  # type: ignore[override]
        if event.button() != QtCore.Qt.LeftButton:
            return
        self._press_pos = event.pos()
        self.engine.handle_pointer(PointerEvent(PointerPhase.DOWN, event.x(), event.y()))
        event.accept()

    def mouseMoveEvent(self, event: QtGui.QMouseEvent) -> None:  # type: ignore[override]
        if self.engine.handle_pointer(PointerEvent(PointerPhase.MOVE, event.x(), event.y())):
            self.update()
        event.accept()

    def mouseReleaseEvent(self, event: QtGui.QMouseEvent) -> None:  # type: ignore[override]
        if event.button() != QtCore.Qt.LeftButton:
            return
        self.engine.handle_pointer(PointerEvent(PointerPhase.UP, event.x(), event.y()))
        press = self._press_pos
        self._press_pos = None
        # A press that travelled further than a drag distance is a rotation, not a click.
        if press is not None and (event.pos() - press).manhattanLength() < QtWidgets.QApplication.startDragDistance():
            frame = self.engine.last_frame
            if frame is None or (frame.width, frame.height) != (self.width(), self.height()):
                self.engine.step(self.width(), self.height())
            self.engine.click_at(event.x(), event.y())
            self._sync_detail()
        self.update()
        event.accept()

    def leaveEvent(self, event: QtCore.QEvent) -> None:  # type: ignore[override]
        self._press_pos = None
        self.engine.handle_pointer(PointerEvent(PointerPhase.LEAVE))
        super().leaveEvent(event)

    def wheelEvent(self, event: QtGui.QWheelEvent) -> None:  # type: ignore[override]
        # Qt reports scrolling away from the user as positive; browsers use negative deltaY.
        delta = event.angleDelta().y()
        if delta and self.engine.wheel(-float(delta)):
            self.update()
        event.accept()

    def _on_detail_close(self) -> None:
        self.engine.dismiss()
        self._sync_detail()
        self.update()

    def _on_detail_core(self) -> None:
        phrase = self.engine.set_as_core()
        if phrase is not None:
            logger.info("recenter requested on %r", phrase)
        self._sync_detail()
        self.update()

    def _sync_detail(self) -> None:
        idea = self.engine.controller.selected
        if idea is None:
            self.detail.clear()
            return
        if self.detail.idea != idea or not self.detail.isVisible():
            self.detail.show_idea(idea)
        self._place_detail()

    def _place_detail(self) -> None:
        panel = self.detail
        x = max(0, (self.width() - panel.width()) // 2)
        y = max(0, (self.height() - panel.height()) // 2)
        panel.move(x, y)

    def _on_resize(self) -> None:
        if self.detail.isVisible():
            self._place_detail()
        self.update()

    # ------------------------------------------------------------------ OpenGL hooks
    def _apply_clear_color(self) -> None:
        gl = getattr(self, "_gl", None)
        if gl is None:
            return
        color = _color(self.settings.background)
        gl.glClearColor(color.redF(), color.greenF(), color.blueF(), 1.0)

    # ------------------------------------------------------------------ Rendering helpers
    def _render_with_painter(self, painter: QtGui.QPainter) -> None:
        painter.setRenderHint(QtGui.QPainter.Antialiasing, True)
        painter.fillRect(self.rect(), _color(self.settings.background))
        width = max(1, self.width())
        height = max(1, self.height())
        frame = self.engine.step(width, height)
        self._draw_wireframe(painter, frame)
        self._draw_links(painter, frame)
        for item in frame.items:
            if item.is_culled:
                continue
            if item.is_center:
                self._draw_center(painter, item)
            else:
                self._draw_node(painter, item)
        self._draw_hint(painter, height)

    def _draw_wireframe(self, painter: QtGui.QPainter, frame: Frame) -> None:
        if not frame.wireframe:
            return
        pen = QtGui.QPen(_color(self.settings.accent, 0.08), 1.0)
        pen.setCosmetic(True)
        painter.setPen(pen)
        painter.setBrush(QtCore.Qt.NoBrush)
        for line in frame.wireframe:
            if len(line) < 2:
                continue
            path = QtGui.QPainterPath(QtCore.QPointF(*line[0]))
            for x, y in line[1:]:
                path.lineTo(x, y)
            painter.drawPath(path)

    def _draw_links(self, painter: QtGui.QPainter, frame: Frame) -> None:
        center = frame.center
        if center is None or not self.settings.show_links:
            return
        origin = QtCore.QPointF(center.screen_x, center.screen_y)
        for item in frame.items:
            if item.is_center or item.is_culled:
                continue
            pen = QtGui.QPen(_color(self.settings.accent, item.link_opacity), 1.0)
            pen.setCosmetic(True)
            painter.setPen(pen)
            painter.drawLine(QtCore.QLineF(origin, QtCore.QPointF(item.screen_x, item.screen_y)))

    def _draw_node(self, painter: QtGui.QPainter, item: RenderItem) -> None:
        scale = item.perspective_scale
        radius = 6.0 * scale * (1.5 if item.is_selected else 1.0)
        painter.save()
        if item.is_behind and not item.is_selected:
            painter.setOpacity(0.3)
            fill = _color(_BEHIND_COLOR)
        elif item.is_selected:
            fill = QtGui.QColor("white")
        else:
            fill = _color(self.settings.accent)
        painter.setPen(QtCore.Qt.NoPen)
        painter.setBrush(fill)
        painter.drawEllipse(QtCore.QPointF(item.screen_x, item.screen_y), radius, radius)

        if not item.is_behind or item.is_selected:
            font = QtGui.QFont(painter.font())
            font.setPointSizeF(max(6.0, 9.0 * scale))
            painter.setFont(font)
            metrics = QtGui.QFontMetricsF(font)
            text_w = metrics.horizontalAdvance(item.label) + 16.0
            text_h = metrics.height() + 6.0
            rect = QtCore.QRectF(item.screen_x - text_w / 2.0, item.screen_y + radius + 4.0, text_w, text_h)
            border = _color(self.settings.accent) if item.is_selected else _color("#334155", 0.5)
            painter.setPen(QtGui.QPen(border, 1.0))
            painter.setBrush(_color("#000000", 0.6))
            painter.drawRoundedRect(rect, text_h / 2.0, text_h / 2.0)
            painter.setPen(QtGui.QColor("white") if item.is_selected else _color(_LABEL_COLOR, 0.8))
            painter.drawText(rect, QtCore.Qt.AlignCenter, item.label)
        painter.restore()

    def _draw_center(self, painter: QtGui.QPainter, item: RenderItem) -> None:
        scale = item.perspective_scale
        radius = self.settings.center_radius * scale
        center = QtCore.QPointF(item.screen_x, item.screen_y)
        painter.save()
        glow = QtGui.QRadialGradient(center, radius * 1.6)
        glow.setColorAt(0.0, _color(self.settings.accent, 0.35))
        glow.setColorAt(1.0, _color(self.settings.accent, 0.0))
        painter.setPen(QtCore.Qt.NoPen)
        painter.setBrush(QtGui.QBrush(glow))
        painter.drawEllipse(center, radius * 1.6, radius * 1.6)

        painter.setPen(QtGui.QPen(_color(self.settings.accent, 0.5), 1.0))
        painter.setBrush(_color("#000000", 0.8))
        painter.drawEllipse(center, radius, radius)

        font = QtGui.QFont(painter.font())
        font.setBold(True)
        font.setPointSizeF(max(8.0, 15.0 * scale))
        painter.setFont(font)
        painter.setPen(_color(self.settings.accent))
        box = QtCore.QRectF(center.x() - radius, center.y() - radius, radius * 2.0, radius * 2.0)
        painter.drawText(box, QtCore.Qt.AlignCenter | QtCore.Qt.TextWordWrap, item.label)
        painter.restore()

    def _draw_hint(self, painter: QtGui.QPainter, height: int) -> None:
        painter.save()
        painter.setPen(_color("#94A3B8"))
        painter.drawText(QtCore.QPointF(24.0, height - 24.0), HINT_TEXT)
        painter.restore()


class _OpenGLViewWidget(_ViewWidgetBase, QtWidgets.QOpenGLWidget):
    """OpenGL-backed renderer when the system can create a GL context."""

    def __init__(self, parent: Optional[QtWidgets.QWidget] = None, settings: Optional[Settings] = None) -> None:
        QtWidgets.QOpenGLWidget.__init__(self, parent)
        self._gl: Optional[object] = None
        self._init_view_widget(settings)

    def initializeGL(self) -> None:  # pragma: no cover - requires GUI context
        self._gl, error = _create_opengl_functions()
        if error is not None:  # pragma: no cover - depends on bindings/runtime
            logger.warning("OpenGL initialisation failed: %s. Falling back to painter clears.", error)
        self._apply_clear_color()

    def resizeGL(self, width: int, height: int) -> None:  # pragma: no cover - requires GUI context
        del width, height

    def paintGL(self) -> None:  # pragma: no cover - requires GUI context
        if self._gl is not None:
            # GL_COLOR_BUFFER_BIT
            self._gl.glClear(0x00004000)
        painter = QtGui.QPainter(self)
        try:
            self._render_with_painter(painter)
        finally:
            painter.end()

    def resizeEvent(self, event: QtGui.QResizeEvent) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        self._on_resize()


class _RasterViewWidget(_ViewWidgetBase, QtWidgets.QWidget):
    """Fallback renderer using the traditional raster ``QWidget`` backend."""

    def __init__(self, parent: Optional[QtWidgets.QWidget] = None, settings: Optional[Settings] = None) -> None:
        QtWidgets.QWidget.__init__(self, parent)
        self._init_view_widget(settings)

    def paintEvent(self, event: QtGui.QPaintEvent) -> None:  # type: ignore[override]
        del event
        painter = QtGui.QPainter(self)
        try:
            self._render_with_painter(painter)
        finally:
            painter.end()

    def resizeEvent(self, event: QtGui.QResizeEvent) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        self._on_resize()


def _should_use_opengl(force_backend: Optional[str]) -> bool:
    if force_backend == "raster":
        return False
    if force_backend == "opengl":
        return True

    env_backend = os.environ.get("IDEASPHERE_FORCE_BACKEND", "").strip().lower()
    if env_backend == "raster":
        return False
    if env_backend == "opengl":
        return True
    return hasattr(QtWidgets, "QOpenGLWidget")


def IdeaSphereViewWidget(
    parent: Optional[QtWidgets.QWidget] = None,
    *,
    settings: Optional[Settings] = None,
    force_backend: Optional[str] = None,
) -> QtWidgets.QWidget:
    """Factory returning the best available renderer widget.

    Parameters
    ----------
    parent:
        Parent widget used by Qt for ownership.
    settings:
        Engine and rendering settings; defaults to :class:`Settings()`.
    force_backend:
        ``"opengl"`` forces the OpenGL widget while ``"raster"`` selects the
        plain ``QWidget`` implementation. ``None`` or ``"auto"`` falls back to
        the ``IDEASPHERE_FORCE_BACKEND`` environment variable, then to OpenGL
        when the binding provides it.
    """

    settings = settings or Settings()
    if force_backend in (None, "auto") and settings.backend != "auto":
        force_backend = settings.backend
    if _should_use_opengl(force_backend):
        try:
            widget = _OpenGLViewWidget(parent, settings)
            setattr(widget, "backend_name", "opengl")
            setattr(widget, "uses_opengl", True)
            return widget
        except Exception as exc:
            logger.warning("Unable to initialise OpenGL backend (%r). Using raster widget instead.", exc)
    widget = _RasterViewWidget(parent, settings)
    setattr(widget, "backend_name", "raster")
    setattr(widget, "uses_opengl", False)
    return widget
