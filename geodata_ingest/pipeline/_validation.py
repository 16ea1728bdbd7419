"""Validation helpers for GeoJSON ingestion.

Responsibilities:
- Document shape validation (JSON, ``FeatureCollection``, ``features`` list)
- Coordinate bounds checking against the configured region
"""

from __future__ import annotations

import copy
import json
from collections.abc import Mapping
from typing import TYPE_CHECKING

from geodata_ingest.core.constants import FEATURE_COLLECTION
from geodata_ingest.core.exceptions import ValidationError

if TYPE_CHECKING:
    from geodata_ingest.models.contracts import FeatureCollection
    from geodata_ingest.models.coordinates import BoundingBox, LonLat


# ---------------------------------------------------------------------------
# Exceptions (public API, re-exported from __init__)
# ---------------------------------------------------------------------------


class DocumentParseError(ValidationError):
    """Raised when a source is not valid JSON or not a FeatureCollection."""

    default_stage = "process_geojson"
    default_code = "GEOJSON_PARSE_FAILED"


class CoordinateError(ValidationError):
    """Base for per-coordinate failures resolved by the discard policy."""

    default_stage = "process_geojson"
    default_code = "COORDINATE_INVALID"


class UnrecognizedCoordinateEncoding(CoordinateError):
    """Raised when a coordinate matches none of the known encodings."""

    default_code = "COORDINATE_UNRECOGNIZED"


class OutOfRangeCoordinate(CoordinateError):
    """Raised when a repaired coordinate lies outside the bounding box."""

    default_code = "COORDINATE_OUT_OF_RANGE"


class DegenerateGeometry(CoordinateError):
    """Raised when a repaired LineString or Polygon is too short or unclosed."""

    default_code = "GEOMETRY_DEGENERATE"


# ---------------------------------------------------------------------------
# Document validation
# ---------------------------------------------------------------------------


def parse_document(raw: str | bytes | Mapping[str, object]) -> FeatureCollection:
    """Parse and shape-check a GeoJSON FeatureCollection.

    Accepts raw JSON text/bytes or an already-decoded mapping.  A mapping
    is deep-copied so later repairs never touch the caller's object.

    Raises:
        DocumentParseError: If the input is not valid JSON, the root is
            not an object, ``type`` is not ``"FeatureCollection"``,
            ``features`` is missing or not a list, or any feature is
            not an object.
    """
    if isinstance(raw, Mapping):
        data: object = copy.deepcopy(dict(raw))
    else:
        if isinstance(raw, bytes):
            try:
                raw = raw.decode("utf-8-sig")
            except UnicodeDecodeError as exc:
                msg = f"Document is not UTF-8: {exc}"
                raise DocumentParseError(msg) from exc
        if not raw.strip():
            msg = "Document is empty"
            raise DocumentParseError(msg)
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            msg = f"Not valid JSON: {exc}"
            raise DocumentParseError(msg) from exc

    if not isinstance(data, dict):
        msg = f"Document root must be an object, got {type(data).__name__}"
        raise DocumentParseError(msg)

    if data.get("type") != FEATURE_COLLECTION:
        msg = f"Not a FeatureCollection: type is {data.get('type')!r}"
        raise DocumentParseError(msg)

    features = data.get("features")
    if not isinstance(features, list):
        msg = "FeatureCollection has no 'features' array"
        raise DocumentParseError(msg)

    for idx, feature in enumerate(features):
        if not isinstance(feature, dict):
            msg = f"Feature at index {idx} must be an object, got {type(feature).__name__}"
            raise DocumentParseError(msg)

    return data  # type: ignore[return-value]


# ---------------------------------------------------------------------------
# Coordinate validation
# ---------------------------------------------------------------------------


def is_within_bounds(pair: LonLat, box: BoundingBox) -> bool:
    """Return ``True`` iff ``(lon, lat)`` lies inside *box* (edges included)."""
    lon, lat = pair
    return box.contains(lon, lat)


def validate_coordinate(pair: LonLat, box: BoundingBox) -> None:
    """Check a repaired ``(lon, lat)`` pair against the region.

    Raises:
        OutOfRangeCoordinate: If the pair lies outside *box*.
    """
    if not is_within_bounds(pair, box):
        lon, lat = pair
        msg = (
            f"Coordinate ({lon}, {lat}) outside bounding box "
            f"lon [{box.lon_min}, {box.lon_max}] lat [{box.lat_min}, {box.lat_max}]"
        )
        raise OutOfRangeCoordinate(msg)
