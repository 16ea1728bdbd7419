"""Pydantic report models returned to callers after each run.

- ``ProcessingReport``: outcome counts of one ``process_feature_collection`` run
- ``CoordinateIssue``: one feature that was discarded, substituted or trimmed
- ``DiagnosticResult``: read-only health check of a GeoJSON source

Reports are plain data: the pipeline fills them in, callers log them,
show them in the dashboard, or serialise them with ``model_dump()``.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

IssueAction = Literal["discarded", "substituted", "vertices_dropped"]
DiagnosticStatus = Literal["success", "warning", "error"]


class CoordinateIssue(BaseModel):
    """A feature whose coordinates could not be used as-is.

    Attributes:
        feature_index: Zero-based index in the input collection.
        feature_id: ``id`` of the feature, when it has one.
        geometry_type: GeoJSON geometry type of the feature.
        code: Error code of the underlying coordinate error
            (``COORDINATE_UNRECOGNIZED``, ``COORDINATE_OUT_OF_RANGE``,
            ``GEOMETRY_DEGENERATE``), or ``GEOMETRY_TRIMMED`` for a
            feature kept after dropping vertices.
        message: Human-readable description.
        action: What the pipeline did about it.
    """

    feature_index: int
    feature_id: str = ""
    geometry_type: str = ""
    code: str
    message: str
    action: IssueAction


class ProcessingReport(BaseModel):
    """Counts for one run over one FeatureCollection.

    ``total == valid + corrected + substituted + discarded + passed_through``.

    Attributes:
        source: Name of the file or URL processed (informational).
        discard_policy: Policy in force for irreparable Points.
        compound_policy: Policy in force for LineString/Polygon geometries.
        total: Features in the input collection.
        valid: Features kept with coordinates unchanged.
        corrected: Features kept with repaired coordinates.
        substituted: Points whose coordinates were replaced by the fallback.
        discarded: Features removed from the output.
        passed_through: Features with no geometry or an uninterpreted type.
        issues: One entry per discarded, substituted or trimmed feature.
    """

    source: str = ""
    discard_policy: str
    compound_policy: str
    total: int = 0
    valid: int = 0
    corrected: int = 0
    substituted: int = 0
    discarded: int = 0
    passed_through: int = 0
    issues: list[CoordinateIssue] = Field(default_factory=list)

    def summary(self) -> dict[str, int]:
        """Return the ``{total, corrected, valid, discarded}`` report surface."""
        return {
            "total": self.total,
            "corrected": self.corrected,
            "valid": self.valid,
            "discarded": self.discarded,
        }


class DiagnosticDetails(BaseModel):
    """Statistics gathered by a diagnostic pass."""

    features_count: int = 0
    valid_coordinates: int = 0
    repairable_coordinates: int = 0
    invalid_coordinates: int = 0
    empty_features: int = 0
    invalid_geometries: int = 0
    coordinate_issues: list[str] = Field(default_factory=list)
    properties: list[str] = Field(default_factory=list)
    geometry_types: dict[str, int] = Field(default_factory=dict)
    missing_properties: list[str] = Field(default_factory=list)


class DiagnosticResult(BaseModel):
    """Health of one GeoJSON source.

    Attributes:
        file_name: Source name shown in reports.
        status: ``"success"``, ``"warning"`` or ``"error"``.
        message: One-line verdict.
        details: Statistics; ``None`` when the source could not be read.
        suggested_fix: Operator hint, if any.
        error: Error text when the source could not be read or parsed.
    """

    file_name: str
    status: DiagnosticStatus
    message: str
    details: DiagnosticDetails | None = None
    suggested_fix: str | None = None
    error: str | None = None
