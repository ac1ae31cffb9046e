"""Shared UI constants for the Gaia globe viewer."""

from __future__ import annotations

from importlib import resources
from pathlib import Path

WINDOW_TITLE = "Gaia"
WINDOW_SIZE = (960, 520)
CLEAR_COLOR = (0.3, 0.3, 0.3, 1.0)
FIELD_OF_VIEW_DEG = 45.0  # an eighth of a full turn
NEAR_PLANE = 0.001
FAR_PLANE = 100.0
FRAME_INTERVAL_MS = 16

GLOBE_FALLBACK_COLOR = (38, 70, 96)
FEATURE_POINT_SIZE_PER_LOD = 2.5

OVERLAY_BACKGROUND = (1.0, 1.0, 1.0, 1.0)
OVERLAY_RECT = (0, 0, 200, 15)
OVERLAY_TEXT_COLOR = (0.0, 0.0, 0.0, 1.0)
OVERLAY_FONT_PX = 10
OVERLAY_TEXT_POS = (10, 10)

RESOURCE_DIR = Path(resources.files("gaia_viewer") / "resources")
TEXTURE_DIR = RESOURCE_DIR / "textures"
TERRAIN_TEXTURE_FILE = TEXTURE_DIR / "terrain.jpg"
DEFAULT_FEATURES_FILE = RESOURCE_DIR / "features" / "countries_sample.geojson"
