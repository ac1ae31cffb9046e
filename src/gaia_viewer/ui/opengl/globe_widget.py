"""Qt OpenGL widget that runs the frame loop around the globe renderer."""

from __future__ import annotations

import logging
from typing import Callable, List, Sequence

import moderngl
import numpy as np
from PySide6.QtCore import QPointF, QRectF, QSize, Qt, QTimer, Signal
from PySide6.QtGui import (
    QColor,
    QFont,
    QKeyEvent,
    QMouseEvent,
    QPainter,
    QPainterPath,
    QPen,
    QSurfaceFormat,
    QWheelEvent,
)
from PySide6.QtOpenGLWidgets import QOpenGLWidget

from gaia_viewer.events import InputEvent, PointerMotion
from gaia_viewer.globe_math import perspective
from gaia_viewer.models import FeatureRecord
from gaia_viewer.render_params import FrameParameters
from gaia_viewer.renderer import FeatureRenderer, FrameContext, PlacedLabel, RendererInitError
from gaia_viewer.state import InputRouter, ViewerState
from gaia_viewer.ui.constants import (
    CLEAR_COLOR,
    FAR_PLANE,
    FIELD_OF_VIEW_DEG,
    FRAME_INTERVAL_MS,
    NEAR_PLANE,
    OVERLAY_BACKGROUND,
    OVERLAY_FONT_PX,
    OVERLAY_RECT,
    OVERLAY_TEXT_COLOR,
    OVERLAY_TEXT_POS,
    WINDOW_SIZE,
)
from gaia_viewer.ui.fps_counter import FPSCounter, overlay_text
from gaia_viewer.ui.input_adapter import key_event, pointer_events, wheel_steps
from gaia_viewer.ui.opengl.globe_renderer import GlobeFeatureRenderer

logger = logging.getLogger(__name__)

RendererFactory = Callable[[moderngl.Context, Sequence[FeatureRecord]], FeatureRenderer]


def _qcolor(rgba: Sequence[float]) -> QColor:
    return QColor.fromRgbF(*(float(c) for c in rgba))


class GlobeWidget(QOpenGLWidget):
    """Frame loop: applies input, captures per-frame decisions, calls the renderer."""

    initFailed = Signal(object)
    stateChanged = Signal()

    def __init__(
        self,
        records: Sequence[FeatureRecord],
        parent=None,
        renderer_factory: RendererFactory = GlobeFeatureRenderer,
    ) -> None:
        super().__init__(parent)
        fmt = QSurfaceFormat()
        fmt.setVersion(3, 3)
        fmt.setProfile(QSurfaceFormat.OpenGLContextProfile.CoreProfile)
        fmt.setDepthBufferSize(24)
        self.setFormat(fmt)
        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self._records = list(records)
        self._renderer_factory = renderer_factory
        self._ctx: moderngl.Context | None = None
        self._renderer: FeatureRenderer | None = None
        self._projection = np.identity(4, dtype=np.float32)
        self._state = ViewerState()
        self._router = InputRouter(self._state)
        self._fps_counter = FPSCounter()
        self._fps = 0
        self._labels: List[PlacedLabel] = []
        self._frame_timer = QTimer(self)
        self._frame_timer.setInterval(FRAME_INTERVAL_MS)
        self._frame_timer.timeout.connect(self.update)

    @property
    def state(self) -> ViewerState:
        return self._state

    def sizeHint(self) -> QSize:  # pragma: no cover - Qt hook
        return QSize(*WINDOW_SIZE)

    # ------------------------------------------------------------------
    # Qt / ModernGL lifecycle hooks
    # ------------------------------------------------------------------
    def initializeGL(self) -> None:  # pragma: no cover - GPU init
        try:
            self._ctx = moderngl.create_context(require=330)
            self._renderer = self._renderer_factory(self._ctx, self._records)
        except Exception as exc:
            error = RendererInitError("Could not create renderer")
            error.__cause__ = exc
            logger.exception("Renderer initialisation failed")
            self._ctx = None
            self._renderer = None
            self.initFailed.emit(error)
            return
        self._frame_timer.start()

    def resizeGL(self, width: int, height: int) -> None:  # pragma: no cover - Qt hook
        aspect = width / max(height, 1)
        self._projection = perspective(FIELD_OF_VIEW_DEG, aspect, NEAR_PLANE, FAR_PLANE)

    def paintGL(self) -> None:  # pragma: no cover - Qt hook
        if self._ctx is None or self._renderer is None:
            return
        self._bind_default_framebuffer()
        self._ctx.clear(*CLEAR_COLOR, depth=1.0)

        camera = self._state.camera
        frame = FrameContext(
            mvp=self._projection @ camera.view_matrix(),
            look_direction=camera.look_at(),
            camera_height=camera.camera_height(),
            viewport=(self.width(), self.height()),
        )
        params = FrameParameters.capture(self._state)
        self._labels = self._renderer.render(frame, params)
        self._fps = self._fps_counter.tick()

        painter = QPainter(self)
        try:
            painter.setRenderHint(QPainter.RenderHint.Antialiasing)
            self._paint_labels(painter)
            self._paint_overlay(painter, params.camera_height)
        finally:
            painter.end()

    def _bind_default_framebuffer(self) -> None:
        if self._ctx is None:
            return
        framebuffer = self._ctx.detect_framebuffer()
        framebuffer.use()
        dpr = self.devicePixelRatioF() if hasattr(self, "devicePixelRatioF") else 1.0
        width_px = max(int(self.width() * dpr), 1)
        height_px = max(int(self.height() * dpr), 1)
        self._ctx.viewport = (0, 0, width_px, height_px)

    def _paint_labels(self, painter: QPainter) -> None:  # pragma: no cover - Qt paint
        for label in self._labels:
            style = label.style
            font = QFont(painter.font())
            font.setPixelSize(max(int(style.scale), 1))
            path = QPainterPath()
            path.addText(QPointF(0.0, 0.0), font, style.text)
            bounds = path.boundingRect()
            path.translate(label.x - bounds.center().x(), label.y - bounds.center().y())
            painter.setPen(QPen(_qcolor(style.border_color), style.border_width * 2))
            painter.setBrush(Qt.BrushStyle.NoBrush)
            painter.drawPath(path)
            painter.fillPath(path, _qcolor(style.text_color))

    def _paint_overlay(self, painter: QPainter, camera_height: float) -> None:  # pragma: no cover
        painter.fillRect(QRectF(*OVERLAY_RECT), _qcolor(OVERLAY_BACKGROUND))
        font = QFont(painter.font())
        font.setPixelSize(OVERLAY_FONT_PX)
        painter.setFont(font)
        painter.setPen(_qcolor(OVERLAY_TEXT_COLOR))
        painter.drawText(QPointF(*OVERLAY_TEXT_POS), overlay_text(self._fps, camera_height))

    def release_gl(self) -> None:  # pragma: no cover - GPU teardown
        self._frame_timer.stop()
        if self._renderer is None:
            return
        self.makeCurrent()
        try:
            self._renderer.release()
        finally:
            self.doneCurrent()
        self._renderer = None

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------
    def dispatch(self, event: InputEvent) -> None:
        mode = self._state.map_mode
        labels = self._state.labels_enabled
        self._router.dispatch(event)
        if mode is not self._state.map_mode or labels != self._state.labels_enabled:
            self.stateChanged.emit()
        self.update()

    def mousePressEvent(self, event: QMouseEvent) -> None:  # pragma: no cover - Qt hook
        pos = event.position()
        for core_event in pointer_events(pos.x(), pos.y(), event.button(), pressed=True):
            self.dispatch(core_event)
        super().mousePressEvent(event)

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:  # pragma: no cover - Qt hook
        pos = event.position()
        for core_event in pointer_events(pos.x(), pos.y(), event.button(), pressed=False):
            self.dispatch(core_event)
        super().mouseReleaseEvent(event)

    def mouseMoveEvent(self, event: QMouseEvent) -> None:  # pragma: no cover - Qt hook
        pos = event.position()
        self.dispatch(PointerMotion(pos.x(), pos.y()))
        super().mouseMoveEvent(event)

    def wheelEvent(self, event: QWheelEvent) -> None:  # pragma: no cover - Qt hook
        scroll = wheel_steps(event.angleDelta().y(), event.pixelDelta().y())
        if scroll is not None:
            self.dispatch(scroll)
        super().wheelEvent(event)

    def keyPressEvent(self, event: QKeyEvent) -> None:  # pragma: no cover - Qt hook
        press = key_event(event.key(), event.text())
        if press is not None:
            self.dispatch(press)
        super().keyPressEvent(event)
