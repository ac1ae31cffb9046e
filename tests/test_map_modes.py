"""Unit tests for map-mode visibility and fill colors."""

from __future__ import annotations

import numpy as np
import pytest

from gaia_viewer.map_modes import (
    EXCEPTIONAL_ADMIN,
    INCOME_PALETTE,
    MapMode,
    bucket_hue,
    hsl_to_rgb,
)
from gaia_viewer.models import (
    INCOME_GROUPS,
    INCOME_HIGH_OECD,
    INCOME_LOW,
    FeatureAttributes,
    FeatureSchemaError,
)


def _attrs(**overrides) -> FeatureAttributes:
    values = dict(
        name="Germany",
        admin="Germany",
        income_group=INCOME_HIGH_OECD,
        color_bucket=0,
        is_capital=False,
        min_zoom=1.7,
    )
    values.update(overrides)
    return FeatureAttributes(**values)


def test_terrain_never_shows_any_feature():
    for group in INCOME_GROUPS:
        for admin in ("Germany", EXCEPTIONAL_ADMIN):
            assert not MapMode.TERRAIN.should_show(_attrs(income_group=group, admin=admin))


def test_all_and_income_always_show():
    for group in INCOME_GROUPS:
        assert MapMode.ALL.should_show(_attrs(income_group=group))
        assert MapMode.INCOME.should_show(_attrs(income_group=group))


def test_oecd_shows_only_high_income_oecd():
    assert MapMode.OECD.should_show(_attrs(income_group=INCOME_HIGH_OECD))
    for group in INCOME_GROUPS[1:]:
        assert not MapMode.OECD.should_show(_attrs(income_group=group))


def test_exceptional_shows_only_designated_admin():
    assert MapMode.EXCEPTIONAL.should_show(_attrs(admin=EXCEPTIONAL_ADMIN))
    for admin in ("Germany", "United States", "united states of america", ""):
        assert not MapMode.EXCEPTIONAL.should_show(_attrs(admin=admin))


def test_bucket_color_uses_fixed_lightness_and_alpha():
    assert MapMode.ALL.color(_attrs(color_bucket=0)) == (153, 0, 0, 64)
    r, g, b, a = MapMode.OECD.color(_attrs(color_bucket=5))
    assert a == 64
    assert max(r, g, b) == 153  # s=1, l=0.3 peaks at 0.6


def test_bucket_hue_increases_then_wraps():
    hues = np.array([bucket_hue(bucket) for bucket in range(13)])
    assert hues[0] == 0.0
    assert np.all(np.diff(hues) > 0)
    assert hues[-1] < 360.0
    assert bucket_hue(13) == bucket_hue(0)
    assert MapMode.ALL.color(_attrs(color_bucket=13)) == MapMode.ALL.color(
        _attrs(color_bucket=0)
    )


def test_terrain_uses_bucket_color_too():
    attrs = _attrs(color_bucket=4)
    assert MapMode.TERRAIN.color(attrs) == MapMode.ALL.color(attrs)


def test_income_palette_is_deterministic():
    for group in INCOME_GROUPS:
        first = MapMode.INCOME.color(_attrs(income_group=group))
        second = MapMode.INCOME.color(_attrs(income_group=group, color_bucket=9))
        assert first == second == (*INCOME_PALETTE[group], 100)
    assert MapMode.INCOME.color(_attrs(income_group=INCOME_HIGH_OECD)) == (0, 255, 0, 100)
    assert MapMode.INCOME.color(_attrs(income_group=INCOME_LOW)) == (255, 0, 0, 100)


def test_income_color_rejects_unknown_group():
    with pytest.raises(FeatureSchemaError) as excinfo:
        MapMode.INCOME.color(_attrs(income_group="6. Unknown"))
    assert excinfo.value.field == "INCOME_GRP"
    assert excinfo.value.feature == "Germany"


def test_exceptional_color_cycles_with_clock_not_feature():
    us = _attrs(admin=EXCEPTIONAL_ADMIN)
    other = _attrs(admin="Germany", color_bucket=8)
    assert MapMode.EXCEPTIONAL.color(us, now=0.0) == (255, 0, 0, 100)
    assert MapMode.EXCEPTIONAL.color(us, now=0.9) == MapMode.EXCEPTIONAL.color(other, now=0.2)
    assert MapMode.EXCEPTIONAL.color(us, now=1.0) != MapMode.EXCEPTIONAL.color(us, now=0.0)
    # 18 s * 100 deg/s is a whole number of turns
    assert MapMode.EXCEPTIONAL.color(us, now=18.0) == MapMode.EXCEPTIONAL.color(us, now=0.0)


def test_hsl_to_rgb_primaries():
    assert hsl_to_rgb(0.0, 1.0, 0.5) == (255, 0, 0)
    assert hsl_to_rgb(120.0, 1.0, 0.5) == (0, 255, 0)
    assert hsl_to_rgb(240.0, 1.0, 0.5) == (0, 0, 255)
    assert hsl_to_rgb(360.0, 1.0, 0.5) == (255, 0, 0)
