"""Coordinate repair for GeoJSON ingestion.

Responsibilities:
- Turn a classified coordinate into a ``(lon, lat)`` pair
- Repair and range-check single positions
- Recurse over LineString and Polygon coordinate arrays
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from geodata_ingest.core.constants import (
    COMPOUND_DROP_VERTICES,
    LINE_STRING,
    MIN_LINE_POSITIONS,
    MIN_RING_POSITIONS,
    POLYGON,
)
from geodata_ingest.models.coordinates import CoordinateEncoding
from geodata_ingest.pipeline._classifier import (
    classify_coordinate,
    parse_pair,
    reconstruct_split_decimal,
)
from geodata_ingest.pipeline._validation import (
    CoordinateError,
    DegenerateGeometry,
    UnrecognizedCoordinateEncoding,
    validate_coordinate,
)

if TYPE_CHECKING:
    from geodata_ingest.core.config import IngestConfig
    from geodata_ingest.models.coordinates import LonLat

logger = logging.getLogger("geodata_ingest.pipeline")


@dataclass(frozen=True, slots=True)
class CompoundRepair:
    """Result of repairing a LineString or Polygon coordinate array.

    Attributes:
        coordinates: Repaired coordinates in GeoJSON nesting.
        dropped_vertices: Positions removed under ``drop_vertices``.
        dropped_rings: Interior rings removed under ``drop_vertices``.
    """

    coordinates: list[object]
    dropped_vertices: int = 0
    dropped_rings: int = 0


# ---------------------------------------------------------------------------
# Single positions
# ---------------------------------------------------------------------------


def repair_coordinate(value: object, encoding: CoordinateEncoding) -> LonLat:
    """Convert a classified coordinate into ``(lon, lat)``.

    Raises:
        UnrecognizedCoordinateEncoding: If *encoding* is ``UNRECOGNIZED``
            or the value does not actually hold that encoding.
    """
    if encoding is CoordinateEncoding.SPLIT_DECIMAL:
        rebuilt = reconstruct_split_decimal(value)
        if rebuilt is not None:
            return rebuilt
    elif encoding in (CoordinateEncoding.ALREADY_VALID, CoordinateEncoding.SWAPPED):
        pair = parse_pair(value)
        if pair is not None:
            a, b = pair
            return (b, a) if encoding is CoordinateEncoding.SWAPPED else (a, b)

    msg = f"Unrecognized coordinate encoding: {value!r}"
    raise UnrecognizedCoordinateEncoding(msg)


def repair_position(value: object, config: IngestConfig) -> LonLat:
    """Classify, repair and range-check one position.

    Raises:
        UnrecognizedCoordinateEncoding: If the value matches no encoding.
        OutOfRangeCoordinate: If the repaired pair is outside the region.
    """
    encoding = classify_coordinate(value, config.classification_box)
    pair = repair_coordinate(value, encoding)
    validate_coordinate(pair, config.bounding_box)
    return pair


# ---------------------------------------------------------------------------
# Compound geometries
# ---------------------------------------------------------------------------


def repair_geometry_coordinates(
    geometry_type: str,
    coordinates: object,
    config: IngestConfig,
) -> CompoundRepair:
    """Repair every leaf position of a LineString or Polygon.

    Under ``all_or_nothing`` any irreparable leaf rejects the geometry.
    Under ``drop_vertices`` bad leaves are removed and rings re-closed.
    Either way the result must be well-formed: a line needs 2 positions,
    a polygon at least one ring, and every ring 4 positions with the
    first equal to the last.

    Raises:
        CoordinateError: If the geometry cannot be repaired.
        DegenerateGeometry: If the repaired geometry is too short or a
            ring is not closed.
        ValueError: If *geometry_type* is not LineString or Polygon.
    """
    drop = config.compound_policy == COMPOUND_DROP_VERTICES

    if geometry_type == LINE_STRING:
        positions, dropped = _repair_positions(coordinates, config, drop=drop, label="LineString")
        if len(positions) < MIN_LINE_POSITIONS:
            msg = f"LineString has {len(positions)} usable position(s), need {MIN_LINE_POSITIONS}"
            raise DegenerateGeometry(msg)
        return CompoundRepair(coordinates=positions, dropped_vertices=dropped)

    if geometry_type == POLYGON:
        return _repair_polygon(coordinates, config, drop=drop)

    msg = f"Unsupported compound geometry type: {geometry_type}"
    raise ValueError(msg)


def _repair_polygon(coordinates: object, config: IngestConfig, *, drop: bool) -> CompoundRepair:
    if not isinstance(coordinates, list | tuple):
        msg = f"Polygon coordinates must be an array of rings, got {type(coordinates).__name__}"
        raise UnrecognizedCoordinateEncoding(msg)
    if not coordinates:
        msg = "Polygon has no rings"
        raise DegenerateGeometry(msg)

    rings: list[object] = []
    dropped_vertices = 0
    dropped_rings = 0
    for ring_idx, ring in enumerate(coordinates):
        label = f"Polygon ring {ring_idx}"
        try:
            positions, dropped = _repair_positions(ring, config, drop=drop, label=label)
            if drop:
                positions = _close_ring(positions, dropped)
            _check_ring(positions, label)
        except CoordinateError:
            if not drop or ring_idx == 0:
                raise
            logger.debug("Dropping unusable interior ring | ring=%d", ring_idx)
            dropped_rings += 1
            continue
        dropped_vertices += dropped
        rings.append(positions)

    return CompoundRepair(
        coordinates=rings,
        dropped_vertices=dropped_vertices,
        dropped_rings=dropped_rings,
    )


def _check_ring(positions: list[list[float]], label: str) -> None:
    """A linear ring needs 4 positions and must end where it starts."""
    if len(positions) < MIN_RING_POSITIONS:
        msg = f"{label} has {len(positions)} usable position(s), need {MIN_RING_POSITIONS}"
        raise DegenerateGeometry(msg)
    if positions[0] != positions[-1]:
        msg = f"{label} is not closed: first {positions[0]} != last {positions[-1]}"
        raise DegenerateGeometry(msg)


def _repair_positions(
    positions: object,
    config: IngestConfig,
    *,
    drop: bool,
    label: str,
) -> tuple[list[list[float]], int]:
    """Repair a flat array of positions; return ``(repaired, dropped_count)``."""
    if not isinstance(positions, list | tuple):
        msg = f"{label} coordinates must be an array of positions, got {type(positions).__name__}"
        raise UnrecognizedCoordinateEncoding(msg)

    repaired: list[list[float]] = []
    dropped = 0
    for idx, value in enumerate(positions):
        try:
            lon, lat = repair_position(value, config)
        except CoordinateError as exc:
            if not drop:
                msg = f"{label} position {idx}: {exc.message}"
                raise type(exc)(msg) from exc
            logger.debug("Dropping vertex | %s | index=%d | value=%r", label, idx, value)
            dropped += 1
            continue
        repaired.append([lon, lat])
    return repaired, dropped


def _close_ring(positions: list[list[float]], dropped: int) -> list[list[float]]:
    """Re-close a ring whose closing vertex may have been dropped."""
    if dropped and len(positions) >= 2 and positions[0] != positions[-1]:
        return [*positions, list(positions[0])]
    return positions
