"""Per-frame choice of which feature markers and labels to draw."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence, Set

import numpy as np

from gaia_viewer.globe_math import lonlat_to_unit, project_to_screen
from gaia_viewer.models import FeatureRecord, FeatureSchemaError
from gaia_viewer.render_params import RenderParameters
from gaia_viewer.renderer import FrameContext, PlacedLabel

logger = logging.getLogger(__name__)

# Markers float just above the surface so they win the depth test.
MARKER_LIFT = 1.003
MARKER_STRIDE = 7  # xyz + rgba


@dataclass(frozen=True)
class FeatureSelection:
    """Marker vertex rows (xyz + rgba floats) and labels for one frame."""

    markers: np.ndarray
    labels: List[PlacedLabel]
    level: int


class FeatureSelector:
    """Culls feature anchors to the visible hemisphere and queries ``params`` for each."""

    def __init__(self, records: Sequence[FeatureRecord]) -> None:
        self.records = list(records)
        self.anchors = np.array(
            [lonlat_to_unit(r.longitude_deg, r.latitude_deg) for r in self.records],
            dtype=np.float32,
        ).reshape(-1, 3)
        self._reported: Set[str] = set()

    def visible(self, frame: FrameContext) -> np.ndarray:
        """Indices of anchors on the camera side of the horizon circle."""
        to_eye = -np.asarray(frame.look_direction, dtype=np.float32)
        horizon = 1.0 / (1.0 + frame.camera_height)
        return np.flatnonzero(self.anchors @ to_eye > horizon)

    def select(self, frame: FrameContext, params: RenderParameters) -> FeatureSelection:
        level = params.lod_level(frame.camera_height)
        width, height = frame.viewport
        markers: list[np.ndarray] = []
        labels: List[PlacedLabel] = []
        for index in self.visible(frame):
            record = self.records[index]
            try:
                color = params.polygon_color(record.attributes)
                style = params.label_style(record.attributes)
            except FeatureSchemaError as exc:
                if record.attributes.admin not in self._reported:
                    self._reported.add(record.attributes.admin)
                    logger.warning("Skipping feature: %s", exc)
                continue
            position = self.anchors[index] * MARKER_LIFT
            if color is not None:
                rgba = np.asarray(color, dtype=np.float32) / 255.0
                markers.append(np.concatenate([position, rgba]))
            if style is not None:
                screen = project_to_screen(frame.mvp, position, width, height)
                if screen is not None:
                    labels.append(PlacedLabel(x=screen[0], y=screen[1], style=style))

        rows = np.asarray(markers, dtype=np.float32).reshape(-1, MARKER_STRIDE)
        return FeatureSelection(markers=rows, labels=labels, level=level)
