"""Reference moderngl renderer: a lit globe with one marker per feature."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence

import moderngl
import numpy as np
from matplotlib import image as mpl_image

from gaia_viewer.feature_selection import MARKER_STRIDE, FeatureSelector
from gaia_viewer.globe_math import gl_bytes
from gaia_viewer.models import FeatureRecord
from gaia_viewer.render_params import RenderParameters
from gaia_viewer.renderer import FeatureRenderer, FrameContext, PlacedLabel
from gaia_viewer.ui.constants import (
    FEATURE_POINT_SIZE_PER_LOD,
    GLOBE_FALLBACK_COLOR,
    TERRAIN_TEXTURE_FILE,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MeshBuffers:
    """Container for shared vertex/index buffers."""

    vbo: moderngl.Buffer
    ibo: moderngl.Buffer
    index_element_size: int


def _load_image(path: Path) -> np.ndarray | None:
    if not path.exists():
        return None
    try:
        data = mpl_image.imread(path)
    except (OSError, ValueError) as exc:
        logger.warning("Could not read texture %s: %s", path, exc)
        return None
    array = np.asarray(data)
    if array.dtype != np.uint8:
        array = np.clip(array, 0.0, 1.0)
        array = (array * 255).astype(np.uint8)
    if array.ndim == 2:
        array = np.stack([array, array, array], axis=-1)
    if array.shape[-1] == 1:
        array = np.repeat(array, 3, axis=-1)
    return np.ascontiguousarray(array)


def _generate_sphere(segments_lon: int, segments_lat: int) -> tuple[np.ndarray, np.ndarray]:
    """Unit sphere with position, normal and equirectangular uv per vertex."""
    vertices: list[list[float]] = []
    indices: list[int] = []
    for j in range(segments_lat + 1):
        v = j / segments_lat
        lat = math.pi / 2 - math.pi * v
        for i in range(segments_lon + 1):
            u = i / segments_lon
            lon = -math.pi + 2 * math.pi * u
            x = math.cos(lat) * math.cos(lon)
            y = math.cos(lat) * math.sin(lon)
            z = math.sin(lat)
            vertices.append([x, y, z, x, y, z, u, v])
    row = segments_lon + 1
    for j in range(segments_lat):
        for i in range(segments_lon):
            a = j * row + i
            b = a + row
            indices.extend([a, b, b + 1, a, b + 1, a + 1])
    return np.array(vertices, dtype=np.float32), np.array(indices, dtype=np.uint32)


class GlobeFeatureRenderer(FeatureRenderer):
    """Textured globe with one marker per feature anchor."""

    def __init__(self, ctx: moderngl.Context, records: Sequence[FeatureRecord]) -> None:
        self._ctx = ctx
        self._selector = FeatureSelector(records)
        self._last_lod: int | None = None
        self._compile_programs()
        self._globe = self._create_mesh_buffers(*_generate_sphere(180, 90))
        self._globe_vao = self._ctx.vertex_array(
            self._programs["globe"],
            [(self._globe.vbo, "3f 3f 2f", "in_pos", "in_normal", "in_uv")],
            self._globe.ibo,
            index_element_size=self._globe.index_element_size,
        )
        capacity = max(len(self._selector.records), 1) * MARKER_STRIDE * 4
        self._marker_vbo = self._ctx.buffer(reserve=capacity, dynamic=True)
        self._marker_vao = self._ctx.vertex_array(
            self._programs["marker"],
            [(self._marker_vbo, "3f 4f", "in_pos", "in_color")],
        )
        self._terrain_texture = self._load_terrain_texture()
        logger.debug("Globe renderer ready with %d feature(s)", len(self._selector.records))

    def _compile_programs(self) -> None:
        globe_vs = """
            #version 330
            uniform mat4 mvp;
            in vec3 in_pos;
            in vec3 in_normal;
            in vec2 in_uv;
            out vec2 v_uv;
            out vec3 v_normal;
            void main() {
                gl_Position = mvp * vec4(in_pos, 1.0);
                v_uv = in_uv;
                v_normal = in_normal;
            }
        """
        globe_fs = """
            #version 330
            uniform sampler2D tex;
            uniform vec3 light_dir;
            in vec2 v_uv;
            in vec3 v_normal;
            out vec4 fragColor;
            void main() {
                float diffuse = max(dot(normalize(v_normal), -light_dir), 0.0);
                vec3 color = texture(tex, v_uv).rgb * (0.35 + 0.65 * diffuse);
                fragColor = vec4(color, 1.0);
            }
        """
        marker_vs = """
            #version 330
            uniform mat4 mvp;
            uniform float point_size;
            in vec3 in_pos;
            in vec4 in_color;
            out vec4 v_color;
            void main() {
                gl_Position = mvp * vec4(in_pos, 1.0);
                gl_PointSize = point_size;
                v_color = in_color;
            }
        """
        marker_fs = """
            #version 330
            in vec4 v_color;
            out vec4 fragColor;
            void main() {
                if (length(gl_PointCoord - vec2(0.5)) > 0.5) {
                    discard;
                }
                fragColor = v_color;
            }
        """
        self._programs = {
            "globe": self._ctx.program(vertex_shader=globe_vs, fragment_shader=globe_fs),
            "marker": self._ctx.program(vertex_shader=marker_vs, fragment_shader=marker_fs),
        }

    def _create_mesh_buffers(self, vertices: np.ndarray, indices: np.ndarray) -> MeshBuffers:
        return MeshBuffers(
            vbo=self._ctx.buffer(vertices.tobytes()),
            ibo=self._ctx.buffer(indices.tobytes()),
            index_element_size=indices.dtype.itemsize,
        )

    def _load_terrain_texture(self) -> moderngl.Texture:
        terrain = _load_image(TERRAIN_TEXTURE_FILE)
        if terrain is None:
            logger.info("No terrain texture at %s, using solid color", TERRAIN_TEXTURE_FILE)
            return self._create_solid_texture(GLOBE_FALLBACK_COLOR)
        texture = self._ctx.texture(terrain.shape[1::-1], terrain.shape[2], terrain.tobytes())
        texture.build_mipmaps()
        texture.filter = (moderngl.LINEAR_MIPMAP_LINEAR, moderngl.LINEAR)
        return texture

    def _create_solid_texture(self, color: tuple[int, ...]) -> moderngl.Texture:
        components = len(color)
        data = np.array(color, dtype=np.uint8).reshape(1, 1, components)
        texture = self._ctx.texture((1, 1), components, data.tobytes())
        texture.filter = (moderngl.LINEAR, moderngl.LINEAR)
        return texture

    # ------------------------------------------------------------------
    # FeatureRenderer
    # ------------------------------------------------------------------
    def render(self, frame: FrameContext, params: RenderParameters) -> List[PlacedLabel]:
        self._restore_gl_state()
        self._draw_globe(frame)

        selection = self._selector.select(frame, params)
        if selection.level != self._last_lod:
            logger.debug("Level of detail %s -> %d", self._last_lod, selection.level)
            self._last_lod = selection.level

        self._draw_markers(frame, selection.markers, selection.level)
        return selection.labels

    def _restore_gl_state(self) -> None:
        # QPainter on the same context resets these after every frame.
        self._ctx.enable(
            moderngl.DEPTH_TEST | moderngl.CULL_FACE | moderngl.BLEND | moderngl.PROGRAM_POINT_SIZE
        )
        self._ctx.blend_func = (moderngl.SRC_ALPHA, moderngl.ONE_MINUS_SRC_ALPHA)

    def _draw_globe(self, frame: FrameContext) -> None:
        prog = self._programs["globe"]
        prog["mvp"].write(gl_bytes(frame.mvp))
        prog["light_dir"].value = tuple(float(c) for c in frame.look_direction)
        prog["tex"].value = 0
        self._terrain_texture.use(location=0)
        self._globe_vao.render()

    def _draw_markers(self, frame: FrameContext, markers: np.ndarray, level: int) -> None:
        if len(markers) == 0:
            return
        self._marker_vbo.write(markers.tobytes())
        prog = self._programs["marker"]
        prog["mvp"].write(gl_bytes(frame.mvp))
        prog["point_size"].value = FEATURE_POINT_SIZE_PER_LOD * (level + 1)
        self._marker_vao.render(mode=moderngl.POINTS, vertices=len(markers))

    def release(self) -> None:
        for resource in (
            self._globe_vao,
            self._marker_vao,
            self._globe.vbo,
            self._globe.ibo,
            self._marker_vbo,
            self._terrain_texture,
            *self._programs.values(),
        ):
            resource.release()
