"""Named constants shared by the pipeline, the loader and configuration.

No magic strings: policies and GeoJSON type names are compared against
these names everywhere.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Region defaults (Santiago de Cali metropolitan area)
# ---------------------------------------------------------------------------

DEFAULT_LON_MIN: float = -78.0
DEFAULT_LON_MAX: float = -75.0
DEFAULT_LAT_MIN: float = 2.0
DEFAULT_LAT_MAX: float = 5.0

DEFAULT_FALLBACK_COORDINATE: tuple[float, float] = (-76.5320, 3.4516)
"""City centre as ``(lon, lat)``, substituted under the ``substitute`` policy."""

# WGS 84 coordinate bounds
MIN_LONGITUDE = -180.0
MAX_LONGITUDE = 180.0
MIN_LATITUDE = -90.0
MAX_LATITUDE = 90.0

# ---------------------------------------------------------------------------
# Policies
# ---------------------------------------------------------------------------

POLICY_DISCARD = "discard"
POLICY_SUBSTITUTE = "substitute"
DISCARD_POLICIES = frozenset({POLICY_DISCARD, POLICY_SUBSTITUTE})

COMPOUND_ALL_OR_NOTHING = "all_or_nothing"
COMPOUND_DROP_VERTICES = "drop_vertices"
COMPOUND_POLICIES = frozenset({COMPOUND_ALL_OR_NOTHING, COMPOUND_DROP_VERTICES})

# ---------------------------------------------------------------------------
# GeoJSON
# ---------------------------------------------------------------------------

FEATURE_COLLECTION = "FeatureCollection"
POINT = "Point"
LINE_STRING = "LineString"
POLYGON = "Polygon"

# Minimum positions: 2 for a line, 3 distinct + closure for a ring
MIN_LINE_POSITIONS = 2
MIN_RING_POSITIONS = 4

# Issue code for a feature kept after dropping vertices or interior rings
GEOMETRY_TRIMMED = "GEOMETRY_TRIMMED"

DEFAULT_FETCH_TIMEOUT_S: float = 30.0
BACKUP_SUFFIX = ".backup"
