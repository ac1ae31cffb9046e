"""Translate Qt input into the viewer's toolkit-neutral events."""

from __future__ import annotations

from typing import Dict, List, Optional

from PySide6.QtCore import Qt

from gaia_viewer.events import (
    InputEvent,
    Key,
    KeyPress,
    PointerButton,
    PointerMotion,
    PointerPress,
    PointerRelease,
    Scroll,
)

QT_KEYS: Dict[Qt.Key, Key] = {
    Qt.Key.Key_0: Key.DIGIT_0,
    Qt.Key.Key_1: Key.DIGIT_1,
    Qt.Key.Key_2: Key.DIGIT_2,
    Qt.Key.Key_3: Key.DIGIT_3,
    Qt.Key.Key_4: Key.DIGIT_4,
    Qt.Key.Key_5: Key.DIGIT_5,
    Qt.Key.Key_Left: Key.LEFT,
    Qt.Key.Key_Right: Key.RIGHT,
    Qt.Key.Key_Up: Key.UP,
    Qt.Key.Key_Down: Key.DOWN,
    Qt.Key.Key_Plus: Key.ZOOM_IN,
    Qt.Key.Key_Equal: Key.ZOOM_IN,
    Qt.Key.Key_Minus: Key.ZOOM_OUT,
    Qt.Key.Key_R: Key.RESET,
}

QT_BUTTONS: Dict[Qt.MouseButton, PointerButton] = {
    Qt.MouseButton.LeftButton: PointerButton.PRIMARY,
    Qt.MouseButton.RightButton: PointerButton.SECONDARY,
    Qt.MouseButton.MiddleButton: PointerButton.MIDDLE,
}

WHEEL_NOTCH = 120.0


def key_event(qt_key: int, text: str = "") -> Optional[KeyPress]:
    """Map a Qt key code; keys outside the table fall back to their text."""
    try:
        key = QT_KEYS.get(Qt.Key(qt_key))
    except ValueError:
        key = None
    if key is not None:
        return KeyPress(key.value)
    if text:
        return KeyPress(text.lower())
    return None


def pointer_events(x: float, y: float, button: Qt.MouseButton, pressed: bool) -> List[InputEvent]:
    """Events for a mouse press or release at (x, y): position first, then button."""
    events: List[InputEvent] = [PointerMotion(x, y)]
    mapped = QT_BUTTONS.get(button)
    if mapped is not None:
        events.append(PointerPress(mapped) if pressed else PointerRelease(mapped))
    return events


def wheel_steps(angle_delta_y: int, pixel_delta_y: int = 0) -> Optional[Scroll]:
    delta = angle_delta_y if angle_delta_y != 0 else pixel_delta_y
    if delta == 0:
        return None
    return Scroll(delta / WHEEL_NOTCH)
