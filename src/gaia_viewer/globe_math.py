"""Small shared helpers for globe math transforms."""

from __future__ import annotations

import math
from typing import Tuple

import numpy as np


def perspective(fov_deg: float, aspect: float, near: float, far: float) -> np.ndarray:
    f = 1.0 / math.tan(math.radians(fov_deg) / 2.0)
    proj = np.zeros((4, 4), dtype=np.float32)
    proj[0, 0] = f / max(aspect, 1e-6)
    proj[1, 1] = f
    proj[2, 2] = (far + near) / (near - far)
    proj[2, 3] = (2 * far * near) / (near - far)
    proj[3, 2] = -1.0
    return proj


def look_at(eye: np.ndarray, target: np.ndarray, up: np.ndarray) -> np.ndarray:
    forward = np.asarray(target - eye, dtype=np.float32)
    forward /= np.linalg.norm(forward)
    right = np.cross(forward, up)
    right /= np.linalg.norm(right)
    real_up = np.cross(right, forward)
    view = np.identity(4, dtype=np.float32)
    view[0, :3] = right
    view[1, :3] = real_up
    view[2, :3] = -forward
    view[:3, 3] = -view[:3, :3] @ eye
    return view


def lonlat_to_unit(longitude_deg: float, latitude_deg: float) -> np.ndarray:
    """Point on the unit globe for a geographic position (+Z is north)."""
    lon = math.radians(longitude_deg)
    lat = math.radians(latitude_deg)
    return np.array(
        [
            math.cos(lat) * math.cos(lon),
            math.cos(lat) * math.sin(lon),
            math.sin(lat),
        ],
        dtype=np.float32,
    )


def project_to_screen(
    mvp: np.ndarray,
    point: np.ndarray,
    width: int,
    height: int,
) -> tuple[float, float] | None:
    """Project a world-space point to widget pixels (origin top-left).

    Returns ``None`` for points behind the camera.
    """
    clip = mvp @ np.array([point[0], point[1], point[2], 1.0], dtype=np.float32)
    if clip[3] <= 1e-6:
        return None
    ndc = clip[:3] / clip[3]
    x = (float(ndc[0]) + 1.0) * 0.5 * width
    y = (1.0 - float(ndc[1])) * 0.5 * height
    return (x, y)


def gl_bytes(mat: np.ndarray) -> bytes:
    return np.asarray(mat, dtype=np.float32).T.tobytes()


__all__: Tuple[str, ...] = (
    "gl_bytes",
    "lonlat_to_unit",
    "look_at",
    "perspective",
    "project_to_screen",
)
