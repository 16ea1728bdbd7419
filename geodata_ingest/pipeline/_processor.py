"""FeatureCollection processor: classify → repair → validate every feature.

Point geometries follow the configured discard policy; LineString and
Polygon geometries follow the compound policy and are never given a
fallback vertex.  Any other geometry type, and features without a
geometry, pass through untouched.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from geodata_ingest.core.config import IngestConfig
from geodata_ingest.core.constants import (
    GEOMETRY_TRIMMED,
    LINE_STRING,
    POINT,
    POLICY_SUBSTITUTE,
    POLYGON,
)
from geodata_ingest.models.report import CoordinateIssue, IssueAction, ProcessingReport
from geodata_ingest.pipeline._repair import repair_geometry_coordinates, repair_position
from geodata_ingest.pipeline._validation import CoordinateError, parse_document

if TYPE_CHECKING:
    from geodata_ingest.models.contracts import Feature, FeatureCollection, Geometry

logger = logging.getLogger("geodata_ingest.pipeline")

_COMPOUND_TYPES = frozenset({LINE_STRING, POLYGON})


@dataclass(frozen=True, slots=True)
class ProcessingResult:
    """Output of one run: the corrected document and its report."""

    collection: FeatureCollection
    report: ProcessingReport


def process_feature_collection(
    document: str | bytes | Mapping[str, object],
    config: IngestConfig | None = None,
    *,
    source: str = "",
) -> ProcessingResult:
    """Normalise every feature's coordinates in a FeatureCollection.

    Args:
        document: Raw GeoJSON text/bytes or a decoded mapping.  Never
            mutated; the result holds a corrected copy.
        config: Region and policies; defaults to ``IngestConfig()``.
        source: File name or URL, recorded in the report and logs.

    Returns:
        A ``ProcessingResult`` whose collection keeps the input's
        top-level members and feature order, minus discarded features.

    Raises:
        DocumentParseError: If the document is not a valid
            FeatureCollection.  No partial output is produced.
    """
    config = config or IngestConfig()
    collection = parse_document(document)
    report = ProcessingReport(
        source=source,
        discard_policy=config.discard_policy,
        compound_policy=config.compound_policy,
    )

    kept: list[Feature] = []
    for idx, feature in enumerate(collection["features"]):
        report.total += 1
        if _process_feature(idx, feature, config, report):
            kept.append(feature)
    collection["features"] = kept

    logger.info(
        "Processed GeoJSON | source=%s | total=%d | valid=%d | corrected=%d | "
        "substituted=%d | discarded=%d | passed_through=%d | policy=%s",
        source or "<memory>",
        report.total,
        report.valid,
        report.corrected,
        report.substituted,
        report.discarded,
        report.passed_through,
        config.discard_policy,
    )
    return ProcessingResult(collection=collection, report=report)


# ---------------------------------------------------------------------------
# Per-feature handling
# ---------------------------------------------------------------------------


def _process_feature(
    idx: int, feature: Feature, config: IngestConfig, report: ProcessingReport
) -> bool:
    """Repair *feature* in place; return ``False`` if it must be discarded."""
    geometry = feature.get("geometry")
    if not isinstance(geometry, dict):
        report.passed_through += 1
        return True

    geometry_type = geometry.get("type", "")
    if geometry_type == POINT:
        return _process_point(idx, feature, geometry, config, report)
    if geometry_type in _COMPOUND_TYPES:
        return _process_compound(idx, feature, geometry, config, report)

    report.passed_through += 1
    return True


def _process_point(
    idx: int,
    feature: Feature,
    geometry: Geometry,
    config: IngestConfig,
    report: ProcessingReport,
) -> bool:
    original = geometry.get("coordinates")
    try:
        lon, lat = repair_position(original, config)
    except CoordinateError as exc:
        if config.discard_policy == POLICY_SUBSTITUTE:
            geometry["coordinates"] = list(config.fallback_coordinate)
            report.substituted += 1
            _record_issue(report, idx, feature, POINT, exc, "substituted")
            return True
        report.discarded += 1
        _record_issue(report, idx, feature, POINT, exc, "discarded")
        return False

    repaired = [lon, lat]
    if repaired == original:
        report.valid += 1
    else:
        geometry["coordinates"] = repaired
        report.corrected += 1
    return True


def _process_compound(
    idx: int,
    feature: Feature,
    geometry: Geometry,
    config: IngestConfig,
    report: ProcessingReport,
) -> bool:
    geometry_type = str(geometry.get("type", ""))
    original = geometry.get("coordinates")
    try:
        outcome = repair_geometry_coordinates(geometry_type, original, config)
    except CoordinateError as exc:
        report.discarded += 1
        _record_issue(report, idx, feature, geometry_type, exc, "discarded")
        return False

    if outcome.dropped_vertices or outcome.dropped_rings:
        message = (
            f"Dropped {outcome.dropped_vertices} vertex(es) and "
            f"{outcome.dropped_rings} interior ring(s)"
        )
        report.issues.append(
            CoordinateIssue(
                feature_index=idx,
                feature_id=_feature_id(feature),
                geometry_type=geometry_type,
                code=GEOMETRY_TRIMMED,
                message=message,
                action="vertices_dropped",
            )
        )
        logger.warning(
            "Trimmed feature | index=%d | id=%s | type=%s | %s",
            idx,
            _feature_id(feature),
            geometry_type,
            message,
        )

    if outcome.coordinates == original:
        report.valid += 1
    else:
        geometry["coordinates"] = outcome.coordinates
        report.corrected += 1
    return True


def _record_issue(
    report: ProcessingReport,
    idx: int,
    feature: Feature,
    geometry_type: str,
    exc: CoordinateError,
    action: IssueAction,
) -> None:
    feature_id = _feature_id(feature)
    report.issues.append(
        CoordinateIssue(
            feature_index=idx,
            feature_id=feature_id,
            geometry_type=geometry_type,
            code=exc.code,
            message=exc.message,
            action=action,
        )
    )
    logger.warning(
        "Coordinate issue | index=%d | id=%s | type=%s | code=%s | action=%s | %s",
        idx,
        feature_id,
        geometry_type,
        exc.code,
        action,
        exc.message,
    )


def _feature_id(feature: Feature) -> str:
    """Best identifier for logs: ``id``, else ``identificador``/``id`` property."""
    if feature.get("id") is not None:
        return str(feature["id"])
    properties = feature.get("properties")
    if isinstance(properties, dict):
        for key in ("identificador", "id"):
            if properties.get(key) is not None:
                return str(properties[key])
    return ""
