"""Read-only health checks for GeoJSON sources.

Answers "what would the pipeline do to this file?" without changing it:
how many coordinates are already valid, how many the pipeline can
repair, how many it would drop, and whether line/polygon shapes are
geometrically valid (via shapely).  Results render to a Markdown report
for operators.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from typing import TYPE_CHECKING

from shapely.errors import GEOSException
from shapely.geometry import shape
from shapely.validation import explain_validity

from geodata_ingest.core.config import IngestConfig
from geodata_ingest.core.constants import LINE_STRING, POINT, POLYGON
from geodata_ingest.core.exceptions import PipelineError
from geodata_ingest.models.report import DiagnosticDetails, DiagnosticResult
from geodata_ingest.pipeline import (
    CoordinateError,
    DocumentParseError,
    parse_document,
    repair_geometry_coordinates,
    repair_position,
)
from geodata_ingest.utils.helpers import source_name

if TYPE_CHECKING:
    from pathlib import Path

    from geodata_ingest.services.loader import GeoJsonLoader

logger = logging.getLogger("geodata_ingest.services.diagnostics")

DEFAULT_MAX_FEATURES = 10_000
MAX_REPORTED_ISSUES = 10
MAX_REPORTED_PROPERTIES = 20


def diagnose_feature_collection(
    document: str | bytes | Mapping[str, object],
    *,
    file_name: str,
    config: IngestConfig | None = None,
    required_properties: Sequence[str] = (),
    max_features: int = DEFAULT_MAX_FEATURES,
) -> DiagnosticResult:
    """Check one document and classify its health.

    Status rules, first match wins:
    no features → warning; any irreparable coordinate → error; any
    repairable coordinate, empty geometry or invalid shape → warning;
    missing required properties → warning; more than *max_features*
    → warning; otherwise success.
    """
    config = config or IngestConfig()
    try:
        collection = parse_document(document)
    except DocumentParseError as exc:
        return DiagnosticResult(
            file_name=file_name,
            status="error",
            message="Invalid GeoJSON structure",
            error=exc.message,
            suggested_fix="Check that the file is UTF-8 JSON with a FeatureCollection root",
        )

    features = collection["features"]
    details = DiagnosticDetails(features_count=len(features))
    geometry_types: Counter[str] = Counter()
    properties: dict[str, None] = {}
    issues: list[str] = []

    for idx, feature in enumerate(features):
        feature_props = feature.get("properties")
        if isinstance(feature_props, dict):
            properties.update(dict.fromkeys(str(k) for k in feature_props))

        geometry = feature.get("geometry")
        if not isinstance(geometry, dict):
            continue
        geometry_type = str(geometry.get("type", ""))
        if geometry_type:
            geometry_types[geometry_type] += 1

        coords = geometry.get("coordinates")
        if geometry_type not in (POINT, LINE_STRING, POLYGON):
            continue
        if coords is None or coords == []:
            details.empty_features += 1
            issues.append(f"Feature {idx}: empty coordinates")
            continue

        if geometry_type == POINT:
            _diagnose_point(idx, coords, config, details, issues)
        else:
            _diagnose_compound(idx, geometry_type, coords, config, details, issues)

    details.geometry_types = dict(geometry_types)
    details.properties = list(properties)[:MAX_REPORTED_PROPERTIES]
    details.coordinate_issues = issues[:MAX_REPORTED_ISSUES]
    details.missing_properties = [p for p in required_properties if p not in properties]

    result = _classify(file_name, details, len(issues), max_features)
    logger.info(
        "Diagnosed GeoJSON | file=%s | status=%s | features=%d | valid=%d | "
        "repairable=%d | invalid=%d",
        file_name,
        result.status,
        details.features_count,
        details.valid_coordinates,
        details.repairable_coordinates,
        details.invalid_coordinates,
    )
    return result


def diagnose_sources(
    sources: Iterable[str | Path],
    *,
    loader: GeoJsonLoader,
    required_properties: Sequence[str] = (),
    max_features: int = DEFAULT_MAX_FEATURES,
) -> list[DiagnosticResult]:
    """Diagnose several sources through *loader*; load failures become errors."""
    results: list[DiagnosticResult] = []
    for source, outcome in loader.load_many(sources).items():
        name = source_name(source)
        if isinstance(outcome, PipelineError):
            results.append(
                DiagnosticResult(
                    file_name=name,
                    status="error",
                    message=f"Could not load {name}",
                    error=outcome.message,
                    suggested_fix=(
                        "Retry later"
                        if outcome.retryable
                        else "Check that the source path or URL exists"
                    ),
                )
            )
            continue
        results.append(
            diagnose_feature_collection(
                outcome,
                file_name=name,
                config=loader.config,
                required_properties=required_properties,
                max_features=max_features,
            )
        )

    counts = Counter(r.status for r in results)
    logger.info(
        "Diagnosed %d GeoJSON source(s) | success=%d | warning=%d | error=%d",
        len(results),
        counts["success"],
        counts["warning"],
        counts["error"],
    )
    return results


def generate_diagnostic_report(results: Sequence[DiagnosticResult]) -> str:
    """Render diagnostic results as a Markdown report."""
    counts = Counter(r.status for r in results)
    lines = [
        "# GeoJSON Diagnostic Report",
        "",
        "## Summary",
        "",
        f"- **Total files**: {len(results)}",
        f"- **Success**: {counts['success']}",
        f"- **Warnings**: {counts['warning']}",
        f"- **Errors**: {counts['error']}",
        "",
        "## Files",
        "",
    ]

    for result in results:
        lines.append(f"### {result.file_name}")
        lines.append("")
        lines.append(f"**Status**: {result.status.upper()}")
        lines.append(f"**Message**: {result.message}")
        lines.append("")
        if result.details is not None:
            d = result.details
            lines.append("**Statistics**:")
            lines.append(f"- Features: {d.features_count}")
            lines.append(f"- Valid coordinates: {d.valid_coordinates}")
            lines.append(f"- Repairable coordinates: {d.repairable_coordinates}")
            lines.append(f"- Invalid coordinates: {d.invalid_coordinates}")
            if d.invalid_geometries:
                lines.append(f"- Invalid geometries: {d.invalid_geometries}")
            if d.geometry_types:
                types = ", ".join(f"{t}({n})" for t, n in sorted(d.geometry_types.items()))
                lines.append(f"- Geometry types: {types}")
            lines.append("")
        if result.suggested_fix:
            lines.append(f"**Suggested fix**: {result.suggested_fix}")
            lines.append("")
        if result.error:
            lines.append(f"**Error**: {result.error}")
            lines.append("")

    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _diagnose_point(
    idx: int,
    coords: object,
    config: IngestConfig,
    details: DiagnosticDetails,
    issues: list[str],
) -> None:
    try:
        lon, lat = repair_position(coords, config)
    except CoordinateError as exc:
        details.invalid_coordinates += 1
        issues.append(f"Feature {idx}: {exc.message}")
        return
    if [lon, lat] == coords:
        details.valid_coordinates += 1
    else:
        details.repairable_coordinates += 1
        issues.append(f"Feature {idx}: repairable coordinates {coords!r} -> [{lon}, {lat}]")


def _diagnose_compound(
    idx: int,
    geometry_type: str,
    coords: object,
    config: IngestConfig,
    details: DiagnosticDetails,
    issues: list[str],
) -> None:
    try:
        outcome = repair_geometry_coordinates(geometry_type, coords, config)
    except CoordinateError as exc:
        details.invalid_coordinates += 1
        issues.append(f"Feature {idx}: {exc.message}")
        return

    if outcome.coordinates == coords:
        details.valid_coordinates += 1
    else:
        details.repairable_coordinates += 1
        issues.append(f"Feature {idx}: repairable {geometry_type} coordinates")

    reason = _shape_problem(geometry_type, outcome.coordinates)
    if reason:
        details.invalid_geometries += 1
        issues.append(f"Feature {idx}: invalid {geometry_type} ({reason})")


def _shape_problem(geometry_type: str, coordinates: list[object]) -> str:
    """Return why shapely rejects the geometry, or ``""`` if it is valid."""
    try:
        geom = shape({"type": geometry_type, "coordinates": coordinates})
    except (GEOSException, ValueError, TypeError, IndexError) as exc:
        return str(exc) or type(exc).__name__
    if geom.is_empty:
        return "empty geometry"
    if not geom.is_valid:
        return explain_validity(geom)
    return ""


def _classify(
    file_name: str,
    details: DiagnosticDetails,
    issue_count: int,
    max_features: int,
) -> DiagnosticResult:
    status = "success"
    message = f"File {file_name} is valid"
    suggested_fix: str | None = None

    if details.features_count == 0:
        status = "warning"
        message = "File is empty (no features)"
    elif details.invalid_coordinates > 0:
        status = "error"
        message = f"{details.invalid_coordinates} invalid coordinate(s) found"
        suggested_fix = "Run repair_file with the discard or substitute policy"
    elif issue_count > 0:
        status = "warning"
        message = f"{issue_count} minor coordinate issue(s)"
        suggested_fix = "Coordinates are repaired automatically when loaded"
    elif details.missing_properties:
        status = "warning"
        message = f"Missing required properties: {', '.join(details.missing_properties)}"
    elif details.features_count > max_features:
        status = "warning"
        message = (
            f"Large file ({details.features_count} features, "
            f"recommended maximum {max_features})"
        )
        suggested_fix = "Consider simplifying or splitting the file"

    return DiagnosticResult(
        file_name=file_name,
        status=status,  # type: ignore[arg-type]
        message=message,
        details=details,
        suggested_fix=suggested_fix,
    )
