"""Tests for loading feature tables from disk."""

from __future__ import annotations

import json
import logging

import pandas as pd
import pytest

from gaia_viewer.services.feature_importer import FeatureImportError, load_feature_records
from gaia_viewer.ui.constants import DEFAULT_FEATURES_FILE


def _feature(admin, lon, lat, **props):
    properties = {
        "ADMIN": admin,
        "NAME": admin,
        "INCOME_GRP": "3. Upper middle income",
        "MAPCOLOR13": 5,
        "ADM0CAP": 0,
        "min_zoom": 1.7,
    }
    properties.update(props)
    return {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [lon, lat]},
        "properties": properties,
    }


def _write_collection(path, features):
    path.write_text(json.dumps({"type": "FeatureCollection", "features": features}))
    return path


def test_geojson_skips_invalid_rows(tmp_path, caplog):
    path = _write_collection(
        tmp_path / "features.geojson",
        [
            _feature("Brazil", -49.5, -12.1),
            _feature("Broken", 0.0, 0.0, MAPCOLOR13="blue"),
            _feature("Nowhere", 10.0, 95.0),
            _feature("Kenya", 37.9, 0.5, INCOME_GRP="5. Low income"),
        ],
    )
    with caplog.at_level(logging.WARNING):
        records = load_feature_records(path)

    assert [r.attributes.admin for r in records] == ["Brazil", "Kenya"]
    assert records[0].longitude_deg == pytest.approx(-49.5)
    assert records[0].latitude_deg == pytest.approx(-12.1)
    assert "Broken" in caplog.text
    assert "MAPCOLOR13" in caplog.text
    assert "Skipped 2 invalid feature(s)" in caplog.text


def test_label_anchor_wins_over_geometry(tmp_path):
    path = _write_collection(
        tmp_path / "features.json",
        [_feature("Chile", 0.0, 0.0, LABEL_X=-72.3, LABEL_Y=-38.1)],
    )
    (record,) = load_feature_records(path)
    assert record.longitude_deg == pytest.approx(-72.3)
    assert record.latitude_deg == pytest.approx(-38.1)


def test_csv_table(tmp_path):
    path = tmp_path / "features.csv"
    pd.DataFrame(
        [
            {
                "ADMIN": "Japan",
                "NAME": "Tokyo",
                "INCOME_GRP": "1. High income: OECD",
                "MAPCOLOR13": 4,
                "ADM0CAP": 1,
                "min_zoom": 2.5,
                "LABEL_X": 139.69,
                "LABEL_Y": 35.69,
            },
            {
                "ADMIN": "India",
                "NAME": "India",
                "INCOME_GRP": "4. Lower middle income",
                "MAPCOLOR13": 2,
                "ADM0CAP": 0,
                "min_zoom": 1.7,
                "LABEL_X": 79.36,
                "LABEL_Y": 22.69,
            },
        ]
    ).to_csv(path, index=False)

    records = load_feature_records(path)
    assert [r.attributes.name for r in records] == ["Tokyo", "India"]
    assert records[0].attributes.is_capital is True
    assert records[1].attributes.color_bucket == 2


def test_missing_file(tmp_path):
    with pytest.raises(FeatureImportError, match="File not found"):
        load_feature_records(tmp_path / "absent.geojson")


def test_unsupported_suffix(tmp_path):
    path = tmp_path / "features.shp"
    path.write_bytes(b"\x00")
    with pytest.raises(FeatureImportError, match="Unsupported file type"):
        load_feature_records(path)


def test_not_a_feature_collection(tmp_path):
    path = tmp_path / "features.json"
    path.write_text(json.dumps([1, 2, 3]))
    with pytest.raises(FeatureImportError, match="FeatureCollection"):
        load_feature_records(path)


def test_malformed_json(tmp_path):
    path = tmp_path / "features.geojson"
    path.write_text("{not json")
    with pytest.raises(FeatureImportError, match="Could not read"):
        load_feature_records(path)


def test_all_rows_invalid(tmp_path):
    path = _write_collection(
        tmp_path / "features.geojson",
        [_feature("Broken", 0.0, 0.0, INCOME_GRP="unknown")],
    )
    with pytest.raises(FeatureImportError, match="No valid features"):
        load_feature_records(path)


def test_bundled_sample_loads():
    records = load_feature_records(DEFAULT_FEATURES_FILE)
    assert len(records) == 12
    admins = {r.attributes.admin for r in records}
    assert "United States of America" in admins
    capitals = {r.attributes.name for r in records if r.attributes.is_capital}
    assert capitals == {"Paris", "Luxembourg", "Tokyo"}


def test_malformed_properties_and_geometry_are_skipped(tmp_path, caplog):
    bad_geometry = _feature("Peru", 0.0, 0.0)
    bad_geometry["geometry"] = [1, 2]
    bad_coordinates = _feature("Chad", 0.0, 0.0)
    bad_coordinates["geometry"] = {"type": "Point", "coordinates": 7}
    path = _write_collection(
        tmp_path / "features.geojson",
        [
            _feature("Brazil", -49.5, -12.1),
            {"type": "Feature", "geometry": None, "properties": ["oops"]},
            bad_geometry,
            bad_coordinates,
        ],
    )
    with caplog.at_level(logging.WARNING):
        records = load_feature_records(path)

    assert [r.attributes.admin for r in records] == ["Brazil"]
    assert "expected a mapping, got list" in caplog.text
    assert "Skipped 3 invalid feature(s)" in caplog.text
