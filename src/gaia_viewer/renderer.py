"""Contract between the frame loop and the feature renderer."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List

import numpy as np

from gaia_viewer.models import LabelStyle
from gaia_viewer.render_params import RenderParameters


class RendererInitError(RuntimeError):
    """Raised when the GL context or the renderer cannot be created."""


@dataclass(frozen=True)
class FrameContext:
    """Camera-derived inputs for one frame."""

    mvp: np.ndarray
    look_direction: np.ndarray
    camera_height: float
    viewport: tuple[int, int]


@dataclass(frozen=True)
class PlacedLabel:
    """A label the renderer decided to show, positioned in widget pixels."""

    x: float
    y: float
    style: LabelStyle


class FeatureRenderer(ABC):
    """Draws the globe and its features for one frame.

    ``render`` is called exactly once per frame. Implementations call back
    into ``params`` for each feature and treat ``None`` as "skip". Text
    is not rasterised here; labels are returned for the caller to paint.
    """

    @abstractmethod
    def render(self, frame: FrameContext, params: RenderParameters) -> List[PlacedLabel]:
        """Draw the frame and return the labels to overlay."""

    def release(self) -> None:
        """Free GPU resources; the default implementation holds none."""
