"""Per-frame decisions handed to the feature renderer.

A :class:`FrameParameters` snapshot is captured once per frame from the
viewer state and passed to the renderer, which calls back into it for every
feature it is about to draw. The snapshot is immutable, so input that
arrives while a frame is being drawn only affects the next frame.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional, Protocol

from gaia_viewer.map_modes import MapMode
from gaia_viewer.models import Color, FeatureAttributes, LabelStyle

if TYPE_CHECKING:
    from gaia_viewer.state import ViewerState

LABEL_VISIBILITY_LIMIT = 1.5

CAPITAL_LABEL_SCALE = 30.0
LABEL_SCALE = 20.0
CAPITAL_TEXT_COLOR = (1.0, 1.0, 0.0, 1.0)
TEXT_COLOR = (1.0, 1.0, 1.0, 1.0)
BORDER_COLOR = (0.0, 0.0, 0.0, 1.0)
BORDER_WIDTH = 1.0

# (upper altitude bound, level); finest detail closest to the surface.
LOD_THRESHOLDS: tuple[tuple[float, int], ...] = (
    (0.1, 5),
    (0.2, 4),
    (0.5, 3),
    (0.7, 2),
)
COARSEST_LOD = 1


def lod_level(altitude: float) -> int:
    """Level of detail (1 coarse .. 5 fine) to request at ``altitude``."""
    for upper, level in LOD_THRESHOLDS:
        if altitude < upper:
            return level
    return COARSEST_LOD


class RenderParameters(Protocol):
    """What a feature renderer may ask about each feature during one frame."""

    def polygon_color(self, attrs: FeatureAttributes) -> Optional[Color]:
        ...

    def label_style(self, attrs: FeatureAttributes) -> Optional[LabelStyle]:
        ...

    def lod_level(self, altitude: float) -> int:
        ...


@dataclass(frozen=True)
class FrameParameters:
    """Read-only view of the viewer state for a single frame."""

    map_mode: MapMode
    labels_enabled: bool
    camera_height: float
    timestamp: float

    @classmethod
    def capture(
        cls,
        state: ViewerState,
        clock: Callable[[], float] = time.time,
    ) -> FrameParameters:
        return cls(
            map_mode=state.map_mode,
            labels_enabled=state.labels_enabled,
            camera_height=state.camera.camera_height(),
            timestamp=clock(),
        )

    def polygon_color(self, attrs: FeatureAttributes) -> Optional[Color]:
        """Fill color for the feature, or ``None`` when it is not drawn."""
        if not self.map_mode.should_show(attrs):
            return None
        return self.map_mode.color(attrs, now=self.timestamp)

    def label_style(self, attrs: FeatureAttributes) -> Optional[LabelStyle]:
        if not self.labels_enabled:
            return None
        # Features with a larger min_zoom need the camera closer to be labeled.
        if self.camera_height * attrs.min_zoom > LABEL_VISIBILITY_LIMIT:
            return None
        if attrs.is_capital:
            scale, text_color = CAPITAL_LABEL_SCALE, CAPITAL_TEXT_COLOR
        else:
            scale, text_color = LABEL_SCALE, TEXT_COLOR
        return LabelStyle(
            text=attrs.name,
            scale=scale,
            text_color=text_color,
            border_color=BORDER_COLOR,
            border_width=BORDER_WIDTH,
        )

    def lod_level(self, altitude: float) -> int:
        return lod_level(altitude)
