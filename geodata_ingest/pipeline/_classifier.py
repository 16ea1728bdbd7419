"""Coordinate classification for GeoJSON ingestion.

Recognises the encodings seen in the municipal project extracts:

- ``[lon, lat]``           already valid
- ``[lat, lon]``           swapped
- ``[3, 424204, -76, 491289]``  split-decimal, meaning ``(3.424204, -76.491289)``

Everything here is a pure function of its input.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from geodata_ingest.models.coordinates import CoordinateEncoding

if TYPE_CHECKING:
    from geodata_ingest.models.coordinates import BoundingBox, LonLat

SPLIT_DECIMAL_ARITY = 4
PAIR_ARITY = 2


def to_float(value: object) -> float | None:
    """Coerce a number or numeric string to a finite float.

    Returns ``None`` for booleans, ``None``, non-numeric strings, NaN and
    infinities.
    """
    if isinstance(value, bool) or not isinstance(value, int | float | str):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(result):
        return None
    return result


def _as_sequence(value: object) -> list[object] | None:
    if isinstance(value, list | tuple):
        return list(value)
    return None


def reconstruct_split_decimal(value: object) -> LonLat | None:
    """Rebuild ``(lon, lat)`` from a split-decimal 4-element value.

    The integer and fractional parts are joined verbatim around a decimal
    point: ``[3, 424204, -76, 491289]`` gives ``(-76.491289, 3.424204)``.
    Returns ``None`` if the value is not 4 elements long or either
    number does not parse.
    """
    items = _as_sequence(value)
    if items is None or len(items) != SPLIT_DECIMAL_ARITY:
        return None
    if any(isinstance(part, bool) or part is None for part in items):
        return None
    lat_int, lat_frac, lon_int, lon_frac = (str(part).strip() for part in items)
    lat = to_float(f"{lat_int}.{lat_frac}")
    lon = to_float(f"{lon_int}.{lon_frac}")
    if lat is None or lon is None:
        return None
    return (lon, lat)


def parse_pair(value: object) -> tuple[float, float] | None:
    """Return the two elements of a 2-element value as floats, in input order."""
    items = _as_sequence(value)
    if items is None or len(items) != PAIR_ARITY:
        return None
    a = to_float(items[0])
    b = to_float(items[1])
    if a is None or b is None:
        return None
    return (a, b)


def classify_coordinate(value: object, plausible_box: BoundingBox) -> CoordinateEncoding:
    """Tag the encoding of a raw coordinate value.

    Args:
        value: A raw coordinate as found in ``geometry.coordinates``.
        plausible_box: Region whose lon/lat ranges decide the order of a
            2-element value.

    Returns:
        ``ALREADY_VALID`` if ``[lon, lat]`` falls in the region,
        ``SWAPPED`` if ``[lat, lon]`` does, ``SPLIT_DECIMAL`` for any
        4-element value that reconstructs to two finite numbers, and
        ``UNRECOGNIZED`` otherwise.
    """
    items = _as_sequence(value)
    if items is None:
        return CoordinateEncoding.UNRECOGNIZED

    if len(items) == SPLIT_DECIMAL_ARITY:
        if reconstruct_split_decimal(items) is None:
            return CoordinateEncoding.UNRECOGNIZED
        return CoordinateEncoding.SPLIT_DECIMAL

    pair = parse_pair(items)
    if pair is None:
        return CoordinateEncoding.UNRECOGNIZED

    a, b = pair
    # Overlapping ranges can match both orders; the written order wins.
    if plausible_box.contains_lon(a) and plausible_box.contains_lat(b):
        return CoordinateEncoding.ALREADY_VALID
    if plausible_box.contains_lat(a) and plausible_box.contains_lon(b):
        return CoordinateEncoding.SWAPPED
    return CoordinateEncoding.UNRECOGNIZED
