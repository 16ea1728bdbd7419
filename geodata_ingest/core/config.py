"""Ingestion configuration loaded from environment variables.

All configuration values default to the Santiago de Cali deployment.
Callers either construct ``IngestConfig`` directly or load it once with
``IngestConfig.from_env()`` and pass it to the pipeline.

Fail-fast validation:
    ``from_env()`` raises ``ConfigValidationError`` if any value is out
    of its valid range, so bad configuration is caught at startup rather
    than halfway through a batch of files.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from geodata_ingest.core.constants import (
    COMPOUND_ALL_OR_NOTHING,
    COMPOUND_POLICIES,
    DEFAULT_FALLBACK_COORDINATE,
    DEFAULT_FETCH_TIMEOUT_S,
    DEFAULT_LAT_MAX,
    DEFAULT_LAT_MIN,
    DEFAULT_LON_MAX,
    DEFAULT_LON_MIN,
    DISCARD_POLICIES,
    POLICY_DISCARD,
)
from geodata_ingest.core.exceptions import PipelineError
from geodata_ingest.models.coordinates import BoundingBox, LonLat, ModelValidationError


class ConfigValidationError(PipelineError):
    """Raised when configuration values are out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
        message: Human-readable description of the valid range.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


def default_bounding_box() -> BoundingBox:
    return BoundingBox(
        lon_min=DEFAULT_LON_MIN,
        lon_max=DEFAULT_LON_MAX,
        lat_min=DEFAULT_LAT_MIN,
        lat_max=DEFAULT_LAT_MAX,
    )


@dataclass(frozen=True, slots=True)
class IngestConfig:
    """Immutable ingestion configuration.

    Attributes:
        bounding_box: Region a repaired coordinate must fall inside.
        plausible_box: Region used to recognise coordinate order while
            classifying. Defaults to ``bounding_box`` when ``None``.
        fallback_coordinate: ``(lon, lat)`` substituted for irreparable
            Points under the ``substitute`` policy.
        discard_policy: ``"discard"`` or ``"substitute"``.
        compound_policy: ``"all_or_nothing"`` (reject the whole
            LineString/Polygon) or ``"drop_vertices"``.
        fetch_timeout_s: HTTP timeout for the loader service.
    """

    bounding_box: BoundingBox = field(default_factory=default_bounding_box)
    plausible_box: BoundingBox | None = None
    fallback_coordinate: LonLat = DEFAULT_FALLBACK_COORDINATE
    discard_policy: str = POLICY_DISCARD
    compound_policy: str = COMPOUND_ALL_OR_NOTHING
    fetch_timeout_s: float = DEFAULT_FETCH_TIMEOUT_S

    def __post_init__(self) -> None:
        _validate(self)

    @property
    def classification_box(self) -> BoundingBox:
        """Box used by the classifier to decide lat/lon order."""
        return self.plausible_box if self.plausible_box is not None else self.bounding_box

    @classmethod
    def from_env(cls) -> IngestConfig:
        """Load and validate configuration from environment variables.

        Raises:
            ConfigValidationError: If a value is malformed or out of range.
        """
        bbox_text = os.getenv("GEODATA_BBOX", "")
        plausible_text = os.getenv("GEODATA_PLAUSIBLE_BBOX", "")
        fallback_text = os.getenv("GEODATA_FALLBACK_COORDINATE", "")

        bounding_box = (
            _parse_box("GEODATA_BBOX", bbox_text) if bbox_text else default_bounding_box()
        )
        plausible_box = (
            _parse_box("GEODATA_PLAUSIBLE_BBOX", plausible_text) if plausible_text else None
        )
        fallback = (
            _parse_pair("GEODATA_FALLBACK_COORDINATE", fallback_text)
            if fallback_text
            else DEFAULT_FALLBACK_COORDINATE
        )
        timeout_text = os.getenv("GEODATA_FETCH_TIMEOUT_S", str(DEFAULT_FETCH_TIMEOUT_S))
        try:
            timeout = float(timeout_text)
        except ValueError as exc:
            raise ConfigValidationError(
                "GEODATA_FETCH_TIMEOUT_S", timeout_text, "must be a number (seconds)"
            ) from exc

        return cls(
            bounding_box=bounding_box,
            plausible_box=plausible_box,
            fallback_coordinate=fallback,
            discard_policy=os.getenv("GEODATA_DISCARD_POLICY", POLICY_DISCARD),
            compound_policy=os.getenv("GEODATA_COMPOUND_POLICY", COMPOUND_ALL_OR_NOTHING),
            fetch_timeout_s=timeout,
        )


def _parse_box(key: str, text: str) -> BoundingBox:
    try:
        return BoundingBox.from_string(text)
    except ModelValidationError as exc:
        raise ConfigValidationError(key, text, exc.message) from exc
    except ValueError as exc:
        raise ConfigValidationError(key, text, "expected lon_min,lon_max,lat_min,lat_max") from exc


def _parse_pair(key: str, text: str) -> LonLat:
    parts = [p.strip() for p in text.split(",")]
    if len(parts) != 2:
        raise ConfigValidationError(key, text, "expected lon,lat")
    try:
        return (float(parts[0]), float(parts[1]))
    except ValueError as exc:
        raise ConfigValidationError(key, text, "expected lon,lat") from exc


def _validate(config: IngestConfig) -> None:
    """Validate configuration values.  Raises ``ConfigValidationError``."""
    if config.discard_policy not in DISCARD_POLICIES:
        raise ConfigValidationError(
            "GEODATA_DISCARD_POLICY",
            config.discard_policy,
            f"must be one of {sorted(DISCARD_POLICIES)}",
        )

    if config.compound_policy not in COMPOUND_POLICIES:
        raise ConfigValidationError(
            "GEODATA_COMPOUND_POLICY",
            config.compound_policy,
            f"must be one of {sorted(COMPOUND_POLICIES)}",
        )

    if len(config.fallback_coordinate) != 2:
        raise ConfigValidationError(
            "GEODATA_FALLBACK_COORDINATE",
            config.fallback_coordinate,
            "must be a (lon, lat) pair",
        )

    lon, lat = config.fallback_coordinate
    if not config.bounding_box.contains(lon, lat):
        raise ConfigValidationError(
            "GEODATA_FALLBACK_COORDINATE",
            config.fallback_coordinate,
            f"must lie inside the bounding box {config.bounding_box.to_list()}",
        )

    if not config.fetch_timeout_s > 0:
        raise ConfigValidationError(
            "GEODATA_FETCH_TIMEOUT_S",
            config.fetch_timeout_s,
            "must be > 0 (seconds)",
        )
