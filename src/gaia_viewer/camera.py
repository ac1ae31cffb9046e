"""Orbit camera around the unit globe, driven by toolkit-neutral input events."""

from __future__ import annotations

import logging
import math
import numbers

import numpy as np

from gaia_viewer.events import (
    InputEvent,
    Key,
    KeyPress,
    PointerButton,
    PointerMotion,
    PointerPress,
    PointerRelease,
    Scroll,
    key_value,
)
from gaia_viewer.globe_math import look_at as _look_at

logger = logging.getLogger(__name__)

GLOBE_RADIUS = 1.0
DEFAULT_ALTITUDE = 2.0
# Lower bound keeps the eye outside the near plane of the 0.001 projection.
MIN_ALTITUDE = 0.005
MAX_ALTITUDE = 10.0
DEFAULT_PITCH_RAD = math.radians(20.0)
PITCH_LIMIT_RAD = math.radians(89.5)

ROTATION_RAD_PER_PIXEL = 0.0025  # per unit of altitude
PITCH_DRAG_RATIO = 0.6
KEY_ROTATION_RAD = 0.05  # per unit of altitude
ZOOM_RATE_PER_STEP = 0.12
MAX_ZOOM_STEPS_PER_EVENT = 100.0

_WORLD_UP = np.array([0.0, 0.0, 1.0], dtype=np.float32)
_ORIGIN = np.zeros(3, dtype=np.float32)


def _finite(value: object) -> bool:
    return isinstance(value, numbers.Real) and math.isfinite(value)


class CameraController:
    """Yaw/pitch/altitude orbit camera looking at the globe center.

    Altitude is the distance from the globe surface and is the one number
    the rest of the viewer uses for zoom-dependent decisions.
    """

    def __init__(
        self,
        *,
        altitude: float = DEFAULT_ALTITUDE,
        azimuth_rad: float = 0.0,
        pitch_rad: float = DEFAULT_PITCH_RAD,
    ) -> None:
        self._default_altitude = altitude
        self._default_azimuth = azimuth_rad
        self._default_pitch = pitch_rad
        self._dragging = False
        self._pointer: tuple[float, float] | None = None
        self.reset()

    def reset(self) -> None:
        self.azimuth_rad = self._default_azimuth % (2 * math.pi)
        self.pitch_rad = self._default_pitch
        self._altitude = self._default_altitude
        self._clamp()

    def _clamp(self) -> None:
        self.pitch_rad = float(np.clip(self.pitch_rad, -PITCH_LIMIT_RAD, PITCH_LIMIT_RAD))
        self._altitude = float(np.clip(self._altitude, MIN_ALTITUDE, MAX_ALTITUDE))

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------
    def event(self, e: InputEvent) -> None:
        """Apply one input event; anything unrecognised is ignored."""
        if isinstance(e, PointerMotion):
            self._on_motion(e.x, e.y)
        elif isinstance(e, PointerPress):
            if e.button == PointerButton.PRIMARY:
                self._dragging = True
        elif isinstance(e, PointerRelease):
            if e.button == PointerButton.PRIMARY:
                self._dragging = False
        elif isinstance(e, Scroll):
            self.zoom_by_steps(e.steps)
        elif isinstance(e, KeyPress):
            self._on_key(key_value(e.key))

    def _on_motion(self, x: float, y: float) -> None:
        if not (_finite(x) and _finite(y)):
            logger.debug("Ignoring non-finite pointer position (%s, %s)", x, y)
            return
        last = self._pointer
        self._pointer = (x, y)
        if not self._dragging or last is None:
            return
        dx = x - last[0]
        dy = y - last[1]
        scale = ROTATION_RAD_PER_PIXEL * self._altitude
        self.rotate_by(-dx * scale)
        self.tilt_by(dy * scale * PITCH_DRAG_RATIO)

    def _on_key(self, key: str) -> None:
        step = KEY_ROTATION_RAD * self._altitude
        if key == Key.LEFT:
            self.rotate_by(step)
        elif key == Key.RIGHT:
            self.rotate_by(-step)
        elif key == Key.UP:
            self.tilt_by(step)
        elif key == Key.DOWN:
            self.tilt_by(-step)
        elif key == Key.ZOOM_IN:
            self.zoom_by_steps(1.0)
        elif key == Key.ZOOM_OUT:
            self.zoom_by_steps(-1.0)
        elif key == Key.RESET:
            self.reset()

    def rotate_by(self, delta_rad: float) -> None:
        if not _finite(delta_rad):
            return
        self.azimuth_rad = (self.azimuth_rad + delta_rad) % (2 * math.pi)

    def tilt_by(self, delta_rad: float) -> None:
        if not _finite(delta_rad):
            return
        self.pitch_rad += delta_rad
        self._clamp()

    def zoom_by_steps(self, steps: float) -> None:
        if not _finite(steps):
            logger.debug("Ignoring non-finite zoom step %s", steps)
            return
        steps = float(np.clip(steps, -MAX_ZOOM_STEPS_PER_EVENT, MAX_ZOOM_STEPS_PER_EVENT))
        self._altitude *= math.exp(-ZOOM_RATE_PER_STEP * steps)
        self._clamp()

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------
    def position(self) -> np.ndarray:
        distance = GLOBE_RADIUS + self._altitude
        cos_pitch = math.cos(self.pitch_rad)
        return np.array(
            [
                distance * cos_pitch * math.cos(self.azimuth_rad),
                distance * cos_pitch * math.sin(self.azimuth_rad),
                distance * math.sin(self.pitch_rad),
            ],
            dtype=np.float32,
        )

    def view_matrix(self) -> np.ndarray:
        return _look_at(self.position(), _ORIGIN, _WORLD_UP)

    def look_at(self) -> np.ndarray:
        """Unit forward vector from the eye towards the globe center."""
        eye = self.position()
        return (-eye / np.linalg.norm(eye)).astype(np.float32)

    def camera_height(self) -> float:
        return self._altitude
