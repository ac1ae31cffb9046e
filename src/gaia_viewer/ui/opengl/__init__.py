"""ModernGL globe view and its reference feature renderer."""

from .globe_renderer import GlobeFeatureRenderer
from .globe_widget import GlobeWidget

__all__ = ["GlobeFeatureRenderer", "GlobeWidget"]
