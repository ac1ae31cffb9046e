"""Utilities for loading feature attribute tables from GeoJSON or CSV files."""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, List, Mapping

import pandas as pd

from gaia_viewer.models import FeatureAttributes, FeatureRecord, FeatureSchemaError

logger = logging.getLogger(__name__)

LABEL_X_FIELD = "LABEL_X"
LABEL_Y_FIELD = "LABEL_Y"


@dataclass
class FeatureImportError(Exception):
    """Raised when the feature file cannot be read at all."""

    message: str

    def __str__(self) -> str:
        return self.message


def load_feature_records(path: str | Path) -> List[FeatureRecord]:
    """Load features from a GeoJSON FeatureCollection or a CSV table.

    Rows that violate the attribute schema are logged and skipped.
    """

    file_path = Path(path).expanduser()
    if not file_path.exists():
        raise FeatureImportError(f"File not found: {file_path}")

    rows = _read_rows(file_path)
    records: List[FeatureRecord] = []
    skipped = 0
    for index, (properties, geometry) in enumerate(rows, start=1):
        try:
            records.append(_build_record(properties, geometry))
        except FeatureSchemaError as exc:
            skipped += 1
            logger.warning("Skipping feature %d in %s: %s", index, file_path.name, exc)

    if not records:
        raise FeatureImportError(f"No valid features were found in {file_path}.")
    if skipped:
        logger.warning("Skipped %d invalid feature(s) in %s", skipped, file_path.name)
    logger.info("Loaded %d feature(s) from %s", len(records), file_path)
    return records


def _build_record(
    properties: Mapping[str, Any], geometry: Mapping[str, Any] | None
) -> FeatureRecord:
    attributes = FeatureAttributes.from_properties(properties)
    longitude, latitude = _anchor(properties, geometry, attributes.admin)
    return FeatureRecord(
        attributes=attributes, longitude_deg=longitude, latitude_deg=latitude
    )


def _anchor(
    properties: Mapping[str, Any],
    geometry: Mapping[str, Any] | None,
    feature: str,
) -> tuple[float, float]:
    if LABEL_X_FIELD in properties and LABEL_Y_FIELD in properties:
        x, y = properties[LABEL_X_FIELD], properties[LABEL_Y_FIELD]
        field_name = LABEL_X_FIELD
    elif geometry and geometry.get("type") == "Point":
        coords = geometry.get("coordinates")
        if not isinstance(coords, (list, tuple)) or len(coords) < 2:
            raise FeatureSchemaError("geometry", feature, "point has no coordinates")
        x, y = coords[0], coords[1]
        field_name = "geometry"
    else:
        raise FeatureSchemaError(
            LABEL_X_FIELD, feature, "no label anchor or point geometry"
        )
    try:
        longitude, latitude = float(x), float(y)
    except (TypeError, ValueError) as exc:
        raise FeatureSchemaError(field_name, feature, f"invalid anchor: {exc}") from exc
    if not (math.isfinite(longitude) and -90.0 <= latitude <= 90.0):
        raise FeatureSchemaError(
            field_name, feature, f"anchor out of range ({longitude}, {latitude})"
        )
    return longitude, latitude


def _read_rows(
    file_path: Path,
) -> Iterable[tuple[Mapping[str, Any], Mapping[str, Any] | None]]:
    """Return (properties, geometry) pairs from GeoJSON or CSV input."""

    suffix = file_path.suffix.lower()
    if suffix == ".csv":
        try:
            df = pd.read_csv(file_path)
        except (OSError, ValueError) as exc:
            raise FeatureImportError(f"Could not read {file_path}: {exc}") from exc
        return [(row.to_dict(), None) for _, row in df.iterrows()]
    if suffix in {".json", ".geojson"}:
        try:
            with file_path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except (OSError, ValueError) as exc:
            raise FeatureImportError(f"Could not read {file_path}: {exc}") from exc
        features = payload.get("features") if isinstance(payload, dict) else None
        if not isinstance(features, list):
            raise FeatureImportError(
                f"{file_path} is not a GeoJSON FeatureCollection."
            )
        return [
            (feature.get("properties") or {}, _geometry(feature))
            for feature in features
            if isinstance(feature, dict)
        ]

    raise FeatureImportError(
        f"Unsupported file type '{suffix}'. Please select GeoJSON or CSV."
    )


def _geometry(feature: Mapping[str, Any]) -> Mapping[str, Any] | None:
    geometry = feature.get("geometry")
    # Anything but a geometry object leaves the row to the label-anchor columns.
    return geometry if isinstance(geometry, Mapping) else None
