"""Tests for coordinate classification.

Covers:
- 2-element values: already valid, swapped, out of range
- Numeric-string coercion and non-numeric rejection
- 4-element split-decimal reconstruction
- Unsupported arities and non-sequence values
"""

from __future__ import annotations

import pytest

from geodata_ingest.models.coordinates import BoundingBox, CoordinateEncoding
from geodata_ingest.pipeline import (
    classify_coordinate,
    parse_pair,
    reconstruct_split_decimal,
    to_float,
)

CALI = BoundingBox(lon_min=-78.0, lon_max=-75.0, lat_min=2.0, lat_max=5.0)


class TestToFloat:
    """Numeric coercion used by the classifier."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(3, 3.0), (-76.5, -76.5), ("3.4516", 3.4516), (" -76.532 ", -76.532)],
    )
    def test_numbers_and_numeric_strings(self, value: object, expected: float) -> None:
        assert to_float(value) == pytest.approx(expected)

    @pytest.mark.parametrize(
        "value", [None, True, False, "abc", "", "nan", "inf", float("nan"), [1], {}]
    )
    def test_rejected_values(self, value: object) -> None:
        assert to_float(value) is None


class TestTwoElementValues:
    """Order detection for ``[a, b]`` values."""

    def test_lon_lat_is_already_valid(self) -> None:
        assert classify_coordinate([-76.532, 3.4516], CALI) is CoordinateEncoding.ALREADY_VALID

    def test_lat_lon_is_swapped(self) -> None:
        assert classify_coordinate([3.4516, -76.532], CALI) is CoordinateEncoding.SWAPPED

    def test_numeric_strings_are_coerced(self) -> None:
        assert classify_coordinate(["3.4516", "-76.532"], CALI) is CoordinateEncoding.SWAPPED

    def test_tuple_input(self) -> None:
        assert classify_coordinate((-76.532, 3.4516), CALI) is CoordinateEncoding.ALREADY_VALID

    def test_range_edges_are_inclusive(self) -> None:
        assert classify_coordinate([-78.0, 5.0], CALI) is CoordinateEncoding.ALREADY_VALID
        assert classify_coordinate([2.0, -75.0], CALI) is CoordinateEncoding.SWAPPED

    def test_out_of_range_is_unrecognized(self) -> None:
        assert classify_coordinate([999, 999], CALI) is CoordinateEncoding.UNRECOGNIZED

    def test_other_region_is_unrecognized(self) -> None:
        # Bogotá lies outside the Cali plausible box
        assert classify_coordinate([-74.08, 4.6], CALI) is CoordinateEncoding.UNRECOGNIZED

    def test_non_numeric_is_unrecognized(self) -> None:
        assert classify_coordinate(["x", -76.5], CALI) is CoordinateEncoding.UNRECOGNIZED

    def test_null_element_is_unrecognized(self) -> None:
        assert classify_coordinate([None, 3.4], CALI) is CoordinateEncoding.UNRECOGNIZED

    def test_overlapping_ranges_prefer_written_order(self) -> None:
        box = BoundingBox(lon_min=0.0, lon_max=10.0, lat_min=0.0, lat_max=10.0)
        assert classify_coordinate([1.0, 2.0], box) is CoordinateEncoding.ALREADY_VALID

    def test_classification_uses_the_given_box(self) -> None:
        madrid = BoundingBox(lon_min=-4.0, lon_max=-3.0, lat_min=40.0, lat_max=41.0)
        assert classify_coordinate([40.4168, -3.7038], madrid) is CoordinateEncoding.SWAPPED


class TestSplitDecimal:
    """4-element ``[lat_int, lat_frac, lon_int, lon_frac]`` values."""

    def test_classified_as_split_decimal(self) -> None:
        value = [3, 424204, -76, 491289]
        assert classify_coordinate(value, CALI) is CoordinateEncoding.SPLIT_DECIMAL

    def test_reconstruction(self) -> None:
        assert reconstruct_split_decimal([3, 424204, -76, 491289]) == (-76.491289, 3.424204)

    def test_string_parts_keep_leading_zeros(self) -> None:
        assert reconstruct_split_decimal(["3", "042", "-76", "005"]) == (-76.005, 3.042)

    def test_split_decimal_is_unconditional(self) -> None:
        # Range is the validator's job, not the classifier's
        value = [45, 1, 120, 2]
        assert classify_coordinate(value, CALI) is CoordinateEncoding.SPLIT_DECIMAL

    def test_unparseable_parts_are_unrecognized(self) -> None:
        value = [3.5, 424204, -76, 491289]  # "3.5.424204"
        assert reconstruct_split_decimal(value) is None
        assert classify_coordinate(value, CALI) is CoordinateEncoding.UNRECOGNIZED

    def test_non_numeric_parts_are_unrecognized(self) -> None:
        assert classify_coordinate(["a", 1, -76, 2], CALI) is CoordinateEncoding.UNRECOGNIZED

    def test_null_part_is_unrecognized(self) -> None:
        assert classify_coordinate([3, None, -76, 2], CALI) is CoordinateEncoding.UNRECOGNIZED


class TestUnsupportedShapes:
    """Arity and type checks."""

    @pytest.mark.parametrize(
        "value",
        [[], [3.4], [-76.5, 3.4, 1000.0], [1, 2, 3, 4, 5], None, "3.4,-76.5", 3.4, {"lat": 3}],
    )
    def test_unrecognized(self, value: object) -> None:
        assert classify_coordinate(value, CALI) is CoordinateEncoding.UNRECOGNIZED

    def test_parse_pair_requires_two_elements(self) -> None:
        assert parse_pair([1.0, 2.0, 3.0]) is None
        assert parse_pair(["1", 2]) == (1.0, 2.0)
