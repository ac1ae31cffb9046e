"""Tests for the per-frame polygon color, label and level-of-detail decisions."""

from __future__ import annotations

import numpy as np
import pytest

from gaia_viewer.camera import CameraController
from gaia_viewer.map_modes import EXCEPTIONAL_ADMIN, MapMode
from gaia_viewer.models import INCOME_HIGH_OECD, INCOME_LOW, FeatureAttributes
from gaia_viewer.render_params import FrameParameters, lod_level
from gaia_viewer.state import ViewerState


def _attrs(**overrides) -> FeatureAttributes:
    values = dict(
        name="Berlin",
        admin="Germany",
        income_group=INCOME_HIGH_OECD,
        color_bucket=3,
        is_capital=False,
        min_zoom=1.0,
    )
    values.update(overrides)
    return FeatureAttributes(**values)


def _params(
    mode: MapMode = MapMode.ALL,
    labels: bool = True,
    height: float = 0.5,
    timestamp: float = 0.0,
) -> FrameParameters:
    return FrameParameters(
        map_mode=mode, labels_enabled=labels, camera_height=height, timestamp=timestamp
    )


@pytest.mark.parametrize(
    ("altitude", "expected"),
    [
        (0.0, 5),
        (0.05, 5),
        (0.0999, 5),
        (0.1, 4),
        (0.19, 4),
        (0.2, 3),
        (0.49, 3),
        (0.5, 2),
        (0.69, 2),
        (0.7, 1),
        (10.0, 1),
    ],
)
def test_lod_level_boundaries(altitude, expected):
    assert lod_level(altitude) == expected
    assert _params().lod_level(altitude) == expected


def test_lod_level_is_non_increasing():
    levels = np.array([lod_level(a) for a in np.linspace(0.0, 2.0, 401)])
    assert np.all(np.diff(levels) <= 0)
    assert set(levels) == {1, 2, 3, 4, 5}


def test_oecd_scenario_then_terrain_hides_feature():
    attrs = _attrs(income_group=INCOME_HIGH_OECD, color_bucket=3)
    oecd = _params(mode=MapMode.OECD)
    color = oecd.polygon_color(attrs)
    assert color == MapMode.OECD.color(attrs)
    assert color[3] == 64

    terrain = _params(mode=MapMode.TERRAIN)
    assert not MapMode.TERRAIN.should_show(attrs)
    assert terrain.polygon_color(attrs) is None


def test_polygon_color_skips_hidden_features():
    assert _params(mode=MapMode.OECD).polygon_color(_attrs(income_group=INCOME_LOW)) is None
    assert _params(mode=MapMode.EXCEPTIONAL).polygon_color(_attrs()) is None


def test_exceptional_color_uses_frame_timestamp():
    us = _attrs(admin=EXCEPTIONAL_ADMIN)
    params = _params(mode=MapMode.EXCEPTIONAL, timestamp=0.0)
    assert params.polygon_color(us) == (255, 0, 0, 100)
    assert params.polygon_color(us) == params.polygon_color(us)


def test_label_style_none_when_labels_disabled():
    for height in (0.005, 0.5, 10.0):
        params = _params(labels=False, height=height)
        assert params.label_style(_attrs(min_zoom=0.0)) is None
        assert params.label_style(_attrs(is_capital=True, min_zoom=0.0)) is None


def test_label_style_hidden_above_zoom_threshold():
    attrs = _attrs(min_zoom=1.7)
    assert _params(height=1.0).label_style(attrs) is None  # 1.7 > 1.5
    assert _params(height=0.5).label_style(attrs) is not None  # 0.85
    # exactly on the limit still shows
    assert _params(height=1.5).label_style(_attrs(min_zoom=1.0)) is not None


def test_label_style_for_capital_and_regular_features():
    params = _params(height=0.2)
    capital = params.label_style(_attrs(name="Berlin", is_capital=True))
    assert capital is not None
    assert capital.text == "Berlin"
    assert capital.scale == 30.0
    assert capital.text_color == (1.0, 1.0, 0.0, 1.0)
    assert capital.border_color == (0.0, 0.0, 0.0, 1.0)
    assert capital.border_width == 1.0

    regular = params.label_style(_attrs(name="Germany", is_capital=False))
    assert regular is not None
    assert regular.scale == 20.0
    assert regular.text_color == (1.0, 1.0, 1.0, 1.0)
    assert regular.border_color == (0.0, 0.0, 0.0, 1.0)
    assert regular.border_width == 1.0


def test_capture_snapshots_state_and_clock():
    state = ViewerState(
        camera=CameraController(altitude=0.3),
        map_mode=MapMode.INCOME,
        labels_enabled=True,
    )
    params = FrameParameters.capture(state, clock=lambda: 42.0)
    assert params.map_mode is MapMode.INCOME
    assert params.labels_enabled is True
    assert params.camera_height == pytest.approx(0.3)
    assert params.timestamp == 42.0

    state.map_mode = MapMode.TERRAIN
    state.labels_enabled = False
    assert params.polygon_color(_attrs()) is not None
    assert params.label_style(_attrs()) is not None
