"""Dataclasses shared between the decision logic, importers and the renderer."""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from typing import Any, Mapping, Tuple

Color = Tuple[int, int, int, int]
RGBAF = Tuple[float, float, float, float]

INCOME_HIGH_OECD = "1. High income: OECD"
INCOME_HIGH_NON_OECD = "2. High income: nonOECD"
INCOME_UPPER_MIDDLE = "3. Upper middle income"
INCOME_LOWER_MIDDLE = "4. Lower middle income"
INCOME_LOW = "5. Low income"

# Ordered from highest to lowest income.
INCOME_GROUPS: Tuple[str, ...] = (
    INCOME_HIGH_OECD,
    INCOME_HIGH_NON_OECD,
    INCOME_UPPER_MIDDLE,
    INCOME_LOWER_MIDDLE,
    INCOME_LOW,
)

# Natural Earth column names read by the decision logic.
COLOR_BUCKET_FIELD = "MAPCOLOR13"
INCOME_GROUP_FIELD = "INCOME_GRP"
ADMIN_FIELD = "ADMIN"
NAME_FIELD = "NAME"
CAPITAL_FIELD = "ADM0CAP"
MIN_ZOOM_FIELD = "min_zoom"


@dataclass
class FeatureSchemaError(Exception):
    """Raised when a feature record does not match the attribute schema."""

    field: str
    feature: str
    message: str

    def __str__(self) -> str:
        return f"Feature '{self.feature}', field '{self.field}': {self.message}"


def _feature_label(properties: Mapping[str, Any]) -> str:
    for key in (ADMIN_FIELD, NAME_FIELD):
        value = properties.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return "<unnamed>"


def _require_str(properties: Mapping[str, Any], field_name: str, feature: str) -> str:
    if field_name not in properties:
        raise FeatureSchemaError(field_name, feature, "missing required attribute")
    value = properties[field_name]
    if not isinstance(value, str):
        raise FeatureSchemaError(
            field_name, feature, f"expected string, got {type(value).__name__}"
        )
    return value


def _require_number(
    properties: Mapping[str, Any], field_name: str, feature: str
) -> float:
    if field_name not in properties:
        raise FeatureSchemaError(field_name, feature, "missing required attribute")
    value = properties[field_name]
    # bool is an int subclass but never a valid numeric attribute
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise FeatureSchemaError(
            field_name, feature, f"expected number, got {type(value).__name__}"
        )
    number = float(value)
    if not math.isfinite(number):
        raise FeatureSchemaError(field_name, feature, f"expected finite number, got {value}")
    return number


@dataclass(frozen=True)
class FeatureAttributes:
    """Typed view of the attributes the viewer reads from one map feature."""

    name: str
    admin: str
    income_group: str
    color_bucket: int
    is_capital: bool
    min_zoom: float

    @classmethod
    def from_properties(cls, properties: Mapping[str, Any]) -> FeatureAttributes:
        """Validate a raw property mapping and build the typed record.

        Raises:
            FeatureSchemaError: naming the first offending field and the feature.
        """
        if not isinstance(properties, Mapping):
            raise FeatureSchemaError(
                "properties",
                "<unnamed>",
                f"expected a mapping, got {type(properties).__name__}",
            )
        feature = _feature_label(properties)
        name = _require_str(properties, NAME_FIELD, feature)
        admin = _require_str(properties, ADMIN_FIELD, feature)
        income_group = _require_str(properties, INCOME_GROUP_FIELD, feature)
        if income_group not in INCOME_GROUPS:
            raise FeatureSchemaError(
                INCOME_GROUP_FIELD, feature, f"unknown income group '{income_group}'"
            )
        bucket = _require_number(properties, COLOR_BUCKET_FIELD, feature)
        if bucket < 0:
            raise FeatureSchemaError(
                COLOR_BUCKET_FIELD, feature, f"color bucket must not be negative, got {bucket:g}"
            )
        capital = _require_number(properties, CAPITAL_FIELD, feature)
        min_zoom = _require_number(properties, MIN_ZOOM_FIELD, feature)
        if min_zoom < 0:
            raise FeatureSchemaError(
                MIN_ZOOM_FIELD, feature, f"min_zoom must not be negative, got {min_zoom:g}"
            )
        return cls(
            name=name,
            admin=admin,
            income_group=income_group,
            color_bucket=int(bucket),
            is_capital=capital == 1.0,
            min_zoom=min_zoom,
        )


@dataclass(frozen=True)
class LabelStyle:
    """How a single feature label should be drawn this frame."""

    text: str
    scale: float
    text_color: RGBAF
    border_color: RGBAF
    border_width: float


@dataclass(frozen=True)
class FeatureRecord:
    """A validated feature plus the anchor the renderer places it at."""

    attributes: FeatureAttributes
    longitude_deg: float
    latitude_deg: float
