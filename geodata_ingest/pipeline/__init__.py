"""GeoJSON coordinate normalisation pipeline.

Repairs the coordinate encodings found in the project extracts before
the data reaches the dashboard map.

The pipeline is split into focused stages:
- **_classifier**: raw value → ``CoordinateEncoding``
- **_repair**: encoding → ``(lon, lat)``, recursion over lines and polygons
- **_validation**: document shape check, bounding-box range check
- **_processor**: per-feature classify → repair → validate, report

Supported geometry:
- Point: repaired, then discarded or substituted per ``discard_policy``
- LineString / Polygon: every vertex repaired; whole-feature discard by
  default, vertex dropping under ``compound_policy="drop_vertices"``
- Anything else: passed through untouched
"""

from __future__ import annotations

from geodata_ingest.pipeline._classifier import (
    classify_coordinate,
    parse_pair,
    reconstruct_split_decimal,
    to_float,
)
from geodata_ingest.pipeline._processor import ProcessingResult, process_feature_collection
from geodata_ingest.pipeline._repair import (
    CompoundRepair,
    repair_coordinate,
    repair_geometry_coordinates,
    repair_position,
)
from geodata_ingest.pipeline._validation import (
    CoordinateError,
    DegenerateGeometry,
    DocumentParseError,
    OutOfRangeCoordinate,
    UnrecognizedCoordinateEncoding,
    is_within_bounds,
    parse_document,
    validate_coordinate,
)

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    "CompoundRepair",
    "CoordinateError",
    "DegenerateGeometry",
    "DocumentParseError",
    "OutOfRangeCoordinate",
    "ProcessingResult",
    "UnrecognizedCoordinateEncoding",
    "classify_coordinate",
    "is_within_bounds",
    "parse_document",
    "parse_pair",
    "process_feature_collection",
    "reconstruct_split_decimal",
    "repair_coordinate",
    "repair_geometry_coordinates",
    "repair_position",
    "to_float",
    "validate_coordinate",
]
