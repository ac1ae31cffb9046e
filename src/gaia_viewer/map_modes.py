"""Map display modes: which features are drawn and in what fill color."""

from __future__ import annotations

import colorsys
import time
from enum import Enum
from typing import Dict, Tuple

from gaia_viewer.models import (
    INCOME_GROUP_FIELD,
    INCOME_HIGH_NON_OECD,
    INCOME_HIGH_OECD,
    INCOME_LOW,
    INCOME_LOWER_MIDDLE,
    INCOME_UPPER_MIDDLE,
    Color,
    FeatureAttributes,
    FeatureSchemaError,
)

COLOR_BUCKET_COUNT = 13
BUCKET_SATURATION = 1.0
BUCKET_LIGHTNESS = 0.3
BUCKET_ALPHA = 64

INCOME_ALPHA = 100
INCOME_PALETTE: Dict[str, Tuple[int, int, int]] = {
    INCOME_HIGH_OECD: (0, 255, 0),
    INCOME_HIGH_NON_OECD: (50, 200, 0),
    INCOME_UPPER_MIDDLE: (100, 150, 0),
    INCOME_LOWER_MIDDLE: (150, 200, 0),
    INCOME_LOW: (255, 0, 0),
}

EXCEPTIONAL_ADMIN = "United States of America"
EXCEPTIONAL_HUE_DEG_PER_SEC = 100.0
EXCEPTIONAL_LIGHTNESS = 0.5
EXCEPTIONAL_ALPHA = 100


def hsl_to_rgb(hue_deg: float, saturation: float, lightness: float) -> Tuple[int, int, int]:
    """Convert HSL (hue in degrees, s/l in 0..1) to 8-bit RGB."""
    r, g, b = colorsys.hls_to_rgb((hue_deg % 360.0) / 360.0, lightness, saturation)
    return (round(r * 255), round(g * 255), round(b * 255))


def bucket_hue(bucket: int) -> float:
    """Hue in degrees for a 13-color map bucket; bucket 13 wraps onto bucket 0."""
    return (360.0 * (bucket / COLOR_BUCKET_COUNT)) % 360.0


def clock_hue(now: float) -> float:
    return (float(int(now)) * EXCEPTIONAL_HUE_DEG_PER_SEC) % 360.0


class MapMode(Enum):
    """Mutually exclusive display styles, selected with the number keys."""

    TERRAIN = "terrain"
    ALL = "all"
    OECD = "oecd"
    INCOME = "income"
    EXCEPTIONAL = "exceptional"

    @property
    def title(self) -> str:
        return self.name.capitalize()

    def should_show(self, attrs: FeatureAttributes) -> bool:
        if self is MapMode.TERRAIN:
            return False
        if self is MapMode.ALL or self is MapMode.INCOME:
            return True
        if self is MapMode.OECD:
            return attrs.income_group == INCOME_HIGH_OECD
        return attrs.admin == EXCEPTIONAL_ADMIN

    def color(self, attrs: FeatureAttributes, now: float | None = None) -> Color:
        """Fill color for ``attrs`` in this mode.

        ``now`` is the wall-clock time in seconds used by the cycling
        EXCEPTIONAL color; it defaults to the current time.

        Raises:
            FeatureSchemaError: INCOME mode with an income group outside the
                five known categories.
        """
        if self in (MapMode.TERRAIN, MapMode.ALL, MapMode.OECD):
            r, g, b = hsl_to_rgb(
                bucket_hue(attrs.color_bucket), BUCKET_SATURATION, BUCKET_LIGHTNESS
            )
            return (r, g, b, BUCKET_ALPHA)
        if self is MapMode.INCOME:
            try:
                r, g, b = INCOME_PALETTE[attrs.income_group]
            except KeyError as exc:
                raise FeatureSchemaError(
                    INCOME_GROUP_FIELD,
                    attrs.admin,
                    f"unknown income group '{attrs.income_group}'",
                ) from exc
            return (r, g, b, INCOME_ALPHA)
        if now is None:
            now = time.time()
        r, g, b = hsl_to_rgb(clock_hue(now), 1.0, EXCEPTIONAL_LIGHTNESS)
        return (r, g, b, EXCEPTIONAL_ALPHA)


__all__: Tuple[str, ...] = (
    "EXCEPTIONAL_ADMIN",
    "INCOME_PALETTE",
    "MapMode",
    "bucket_hue",
    "hsl_to_rgb",
)
