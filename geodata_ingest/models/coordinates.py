"""Coordinate models for the ingestion pipeline.

- ``CoordinateEncoding``: classification tag for a raw coordinate value
- ``BoundingBox``: inclusive lon/lat range for a deployment region

Design notes:
- Frozen dataclasses, validated in ``__post_init__``.
- Coordinates are always ``(lon, lat)`` tuples once repaired.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from geodata_ingest.core.constants import (
    MAX_LATITUDE,
    MAX_LONGITUDE,
    MIN_LATITUDE,
    MIN_LONGITUDE,
)
from geodata_ingest.core.exceptions import ValidationError

LonLat = tuple[float, float]


class ModelValidationError(ValueError, ValidationError):
    """Raised when a domain model is constructed with invalid field values.

    Attributes:
        model: Name of the model class that failed validation.
        field_name: The field that violated the invariant.
        value: The invalid value.
    """

    default_stage = "model_validation"
    default_code = "MODEL_VALIDATION_FAILED"

    def __init__(self, model: str, field_name: str, value: object, message: str) -> None:
        self.model = model
        self.field_name = field_name
        self.value = value
        formatted = f"{model}.{field_name}={value!r}: {message}"
        ValidationError.__init__(self, formatted)


class CoordinateEncoding(enum.Enum):
    """How a raw coordinate value is laid out.

    Values:
        ALREADY_VALID: ``[lon, lat]`` inside the plausible region.
        SWAPPED:       ``[lat, lon]`` inside the plausible region.
        SPLIT_DECIMAL: ``[lat_int, lat_frac, lon_int, lon_frac]``.
        UNRECOGNIZED:  Matches no known layout.
    """

    ALREADY_VALID = "already-valid"
    SWAPPED = "swapped"
    SPLIT_DECIMAL = "split-decimal"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """Inclusive longitude/latitude range in WGS 84 degrees.

    Attributes:
        lon_min: Western edge.
        lon_max: Eastern edge.
        lat_min: Southern edge.
        lat_max: Northern edge.
    """

    lon_min: float
    lon_max: float
    lat_min: float
    lat_max: float

    def __post_init__(self) -> None:
        _check_range("lon_min", self.lon_min, MIN_LONGITUDE, MAX_LONGITUDE)
        _check_range("lon_max", self.lon_max, MIN_LONGITUDE, MAX_LONGITUDE)
        _check_range("lat_min", self.lat_min, MIN_LATITUDE, MAX_LATITUDE)
        _check_range("lat_max", self.lat_max, MIN_LATITUDE, MAX_LATITUDE)
        if self.lon_min > self.lon_max:
            raise ModelValidationError(
                "BoundingBox", "lon_min", self.lon_min, f"must be <= lon_max ({self.lon_max})"
            )
        if self.lat_min > self.lat_max:
            raise ModelValidationError(
                "BoundingBox", "lat_min", self.lat_min, f"must be <= lat_max ({self.lat_max})"
            )

    def contains_lon(self, value: float) -> bool:
        return self.lon_min <= value <= self.lon_max

    def contains_lat(self, value: float) -> bool:
        return self.lat_min <= value <= self.lat_max

    def contains(self, lon: float, lat: float) -> bool:
        """Whether ``(lon, lat)`` lies inside the box (edges included)."""
        return self.contains_lon(lon) and self.contains_lat(lat)

    def to_list(self) -> list[float]:
        """Return ``[lon_min, lon_max, lat_min, lat_max]``."""
        return [self.lon_min, self.lon_max, self.lat_min, self.lat_max]

    @classmethod
    def from_string(cls, text: str) -> BoundingBox:
        """Parse ``"lon_min,lon_max,lat_min,lat_max"``.

        Raises:
            ValueError: If the text does not hold exactly four numbers.
        """
        parts = [p.strip() for p in text.split(",")]
        if len(parts) != 4:
            msg = f"expected 4 comma-separated numbers, got {len(parts)}"
            raise ValueError(msg)
        lon_min, lon_max, lat_min, lat_max = (float(p) for p in parts)
        return cls(lon_min=lon_min, lon_max=lon_max, lat_min=lat_min, lat_max=lat_max)


def _check_range(field_name: str, value: float, low: float, high: float) -> None:
    if not low <= value <= high:
        raise ModelValidationError(
            "BoundingBox", field_name, value, f"must be between {low} and {high}"
        )
