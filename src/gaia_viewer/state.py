"""Viewer state and the router that applies input events to it."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict

from gaia_viewer.camera import CameraController
from gaia_viewer.events import InputEvent, Key, KeyPress, key_value
from gaia_viewer.map_modes import MapMode

logger = logging.getLogger(__name__)

MODE_KEYS: Dict[str, MapMode] = {
    Key.DIGIT_1.value: MapMode.TERRAIN,
    Key.DIGIT_2.value: MapMode.ALL,
    Key.DIGIT_3.value: MapMode.OECD,
    Key.DIGIT_4.value: MapMode.INCOME,
    Key.DIGIT_5.value: MapMode.EXCEPTIONAL,
}
LABELS_TOGGLE_KEY = Key.DIGIT_0.value


@dataclass
class ViewerState:
    """Everything the per-frame decisions depend on."""

    camera: CameraController = field(default_factory=CameraController)
    map_mode: MapMode = MapMode.TERRAIN
    labels_enabled: bool = False


class InputRouter:
    """Applies input events to a :class:`ViewerState` in arrival order."""

    def __init__(self, state: ViewerState) -> None:
        self._state = state

    @property
    def state(self) -> ViewerState:
        return self._state

    def dispatch(self, event: InputEvent) -> None:
        # The camera sees every event, mode keys included.
        self._state.camera.event(event)
        if not isinstance(event, KeyPress):
            return
        key = key_value(event.key)
        if not isinstance(key, str):
            logger.debug("Ignoring key press with non-string key %r", key)
            return
        mode = MODE_KEYS.get(key)
        if mode is not None:
            if mode is not self._state.map_mode:
                logger.info("Map mode %s -> %s", self._state.map_mode.title, mode.title)
            self._state.map_mode = mode
        elif key == LABELS_TOGGLE_KEY:
            self._state.labels_enabled = not self._state.labels_enabled
            logger.info("Labels %s", "enabled" if self._state.labels_enabled else "disabled")
