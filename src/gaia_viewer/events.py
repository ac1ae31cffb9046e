"""Toolkit-neutral input events consumed by the camera and the input router."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class Key(str, Enum):
    DIGIT_0 = "0"
    DIGIT_1 = "1"
    DIGIT_2 = "2"
    DIGIT_3 = "3"
    DIGIT_4 = "4"
    DIGIT_5 = "5"
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"
    ZOOM_IN = "+"
    ZOOM_OUT = "-"
    RESET = "r"


class PointerButton(str, Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"
    MIDDLE = "middle"


@dataclass(frozen=True)
class PointerMotion:
    """Absolute pointer position in widget pixels."""

    x: float
    y: float


@dataclass(frozen=True)
class PointerPress:
    button: PointerButton


@dataclass(frozen=True)
class PointerRelease:
    button: PointerButton


@dataclass(frozen=True)
class Scroll:
    """Wheel movement in notches; positive scrolls away from the user (zoom in)."""

    steps: float


@dataclass(frozen=True)
class KeyPress:
    key: str


InputEvent = Union[PointerMotion, PointerPress, PointerRelease, Scroll, KeyPress]


def key_value(key: str) -> str:
    """Plain string value of a key, whether given as :class:`Key` or text."""
    return key.value if isinstance(key, Key) else key
