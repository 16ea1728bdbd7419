"""Data models and schemas.

Defines the data structures used throughout the pipeline:
- BoundingBox, CoordinateEncoding: coordinate classification and region
- FeatureCollection, Feature, Geometry: GeoJSON document contracts
- ProcessingReport, DiagnosticResult: run outcomes returned to callers
"""

from geodata_ingest.models.contracts import Feature, FeatureCollection, Geometry
from geodata_ingest.models.coordinates import (
    BoundingBox,
    CoordinateEncoding,
    LonLat,
    ModelValidationError,
)
from geodata_ingest.models.report import (
    CoordinateIssue,
    DiagnosticDetails,
    DiagnosticResult,
    ProcessingReport,
)

__all__ = [
    "BoundingBox",
    "CoordinateEncoding",
    "CoordinateIssue",
    "DiagnosticDetails",
    "DiagnosticResult",
    "Feature",
    "FeatureCollection",
    "Geometry",
    "LonLat",
    "ModelValidationError",
    "ProcessingReport",
]
