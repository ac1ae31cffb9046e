"""Interactive styled globe viewer: orbit camera and per-feature render decisions."""

__version__ = "0.1.0"
