"""Tests for the read-only diagnostics service.

Covers:
- Status rules (empty, invalid, repairable, missing properties, large)
- Shapely geometry validity for lines and polygons
- Multi-source diagnosis through the loader, including load failures
- Markdown report rendering
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx

from geodata_ingest.models.report import DiagnosticDetails, DiagnosticResult
from geodata_ingest.services.diagnostics import (
    diagnose_feature_collection,
    diagnose_sources,
    generate_diagnostic_report,
)
from geodata_ingest.services.loader import GeoJsonLoader

if TYPE_CHECKING:
    from pathlib import Path


def _feature(geometry_type: str, coordinates: object, **properties: object) -> dict[str, object]:
    return {
        "type": "Feature",
        "properties": dict(properties),
        "geometry": {"type": geometry_type, "coordinates": coordinates},
    }


def _collection(*features: dict[str, object]) -> dict[str, object]:
    return {"type": "FeatureCollection", "features": list(features)}


BOWTIE = [[[-76.55, 3.40], [-76.54, 3.41], [-76.54, 3.40], [-76.55, 3.41], [-76.55, 3.40]]]


class TestStatusRules:
    """First matching rule decides the status."""

    def test_valid_file_is_success(self) -> None:
        doc = _collection(_feature("Point", [-76.532, 3.4516], identificador="EQ-1"))
        result = diagnose_feature_collection(doc, file_name="ok.geojson")

        assert result.status == "success"
        assert result.message == "File ok.geojson is valid"
        assert result.details is not None
        assert result.details.valid_coordinates == 1
        assert result.suggested_fix is None

    def test_empty_collection_is_warning(self, empty_geojson: Path) -> None:
        result = diagnose_feature_collection(empty_geojson.read_bytes(), file_name="empty")
        assert result.status == "warning"
        assert result.message == "File is empty (no features)"

    def test_mixed_file_is_error(self, equipamientos_geojson: Path) -> None:
        result = diagnose_feature_collection(
            equipamientos_geojson.read_bytes(), file_name=equipamientos_geojson.name
        )
        details = result.details
        assert details is not None

        assert result.status == "error"
        assert result.message == "1 invalid coordinate(s) found"
        assert details.features_count == 6
        assert details.valid_coordinates == 1
        assert details.repairable_coordinates == 3
        assert details.invalid_coordinates == 1
        assert details.geometry_types == {"Point": 5}
        assert details.properties == ["identificador", "nombre_up", "avance_obra"]

    def test_repairable_only_is_warning(self) -> None:
        doc = _collection(_feature("Point", [3.4516, -76.532]))
        result = diagnose_feature_collection(doc, file_name="swapped.geojson")
        assert result.status == "warning"
        assert result.message == "1 minor coordinate issue(s)"
        assert result.details is not None
        assert result.details.repairable_coordinates == 1

    def test_empty_coordinates_is_warning(self) -> None:
        doc = _collection(_feature("Point", []))
        result = diagnose_feature_collection(doc, file_name="blank.geojson")
        assert result.status == "warning"
        assert result.details is not None
        assert result.details.empty_features == 1

    def test_missing_required_properties(self) -> None:
        doc = _collection(_feature("Point", [-76.532, 3.4516], nombre_up="Sede"))
        result = diagnose_feature_collection(
            doc,
            file_name="props.geojson",
            required_properties=("identificador", "nombre_up"),
        )
        assert result.status == "warning"
        assert result.message == "Missing required properties: identificador"

    def test_large_file_is_warning(self) -> None:
        doc = _collection(*[_feature("Point", [-76.532, 3.4516]) for _ in range(3)])
        result = diagnose_feature_collection(doc, file_name="big.geojson", max_features=2)
        assert result.status == "warning"
        assert result.message.startswith("Large file (3 features")

    def test_parse_error(self, not_json_geojson: Path) -> None:
        result = diagnose_feature_collection(not_json_geojson.read_bytes(), file_name="broken")
        assert result.status == "error"
        assert result.message == "Invalid GeoJSON structure"
        assert result.details is None
        assert result.error

    def test_source_document_untouched(self) -> None:
        doc = _collection(_feature("Point", [3.4516, -76.532]))
        diagnose_feature_collection(doc, file_name="x")
        assert doc["features"][0]["geometry"]["coordinates"] == [3.4516, -76.532]  # type: ignore[index]


class TestGeometryValidity:
    """Lines and polygons are also checked with shapely."""

    def test_vial_file(self, vial_geojson: Path) -> None:
        result = diagnose_feature_collection(vial_geojson.read_bytes(), file_name="vial")
        details = result.details
        assert details is not None

        assert details.valid_coordinates == 2  # VIA-001, VIA-004
        assert details.repairable_coordinates == 1  # VIA-002
        assert details.invalid_coordinates == 1  # VIA-003
        assert details.invalid_geometries == 0
        assert details.geometry_types == {"LineString": 3, "Polygon": 1, "MultiLineString": 1}

    def test_self_intersecting_polygon(self) -> None:
        result = diagnose_feature_collection(
            _collection(_feature("Polygon", BOWTIE)), file_name="bowtie"
        )
        details = result.details
        assert details is not None

        assert details.valid_coordinates == 1
        assert details.invalid_geometries == 1
        assert result.status == "warning"
        assert "invalid Polygon" in details.coordinate_issues[0]

    def test_single_point_line_is_invalid(self) -> None:
        result = diagnose_feature_collection(
            _collection(_feature("LineString", [[-76.5, 3.4]])), file_name="stub"
        )
        assert result.status == "error"
        assert result.details is not None
        assert result.details.invalid_coordinates == 1

    def test_issue_list_is_capped(self) -> None:
        doc = _collection(*[_feature("Point", [999, 999]) for _ in range(15)])
        result = diagnose_feature_collection(doc, file_name="bad")
        assert result.details is not None
        assert result.details.invalid_coordinates == 15
        assert len(result.details.coordinate_issues) == 10


class TestDiagnoseSources:
    """Several sources through one loader."""

    def test_files_and_missing_source(self, equipamientos_geojson: Path, data_dir: Path) -> None:
        with GeoJsonLoader() as loader:
            results = diagnose_sources(
                [equipamientos_geojson, data_dir / "missing.geojson"],
                loader=loader,
            )

        assert [r.file_name for r in results] == [
            "01_equipamientos_mixed.geojson",
            "missing.geojson",
        ]
        missing = results[1]
        assert missing.status == "error"
        assert missing.message == "Could not load missing.geojson"
        assert missing.suggested_fix == "Check that the source path or URL exists"
        assert "not found" in (missing.error or "")

    def test_server_error_suggests_retry(self) -> None:
        client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(503)))
        url = "https://datos.example.gov.co/geodata/vias.geojson"
        results = diagnose_sources([url], loader=GeoJsonLoader(client=client))

        assert results[0].file_name == "vias.geojson"
        assert results[0].status == "error"
        assert results[0].suggested_fix == "Retry later"

    def test_malformed_source(self, not_json_geojson: Path) -> None:
        results = diagnose_sources([not_json_geojson], loader=GeoJsonLoader())
        assert results[0].status == "error"


class TestMarkdownReport:
    """Operator-facing report."""

    def test_summary_and_sections(self) -> None:
        results = [
            DiagnosticResult(
                file_name="ok.geojson",
                status="success",
                message="File ok.geojson is valid",
                details=DiagnosticDetails(
                    features_count=2, valid_coordinates=2, geometry_types={"Point": 2}
                ),
            ),
            DiagnosticResult(
                file_name="gone.geojson",
                status="error",
                message="Could not load gone.geojson",
                error="GeoJSON file not found: gone.geojson",
                suggested_fix="Check that the source path or URL exists",
            ),
        ]
        report = generate_diagnostic_report(results)

        assert report.startswith("# GeoJSON Diagnostic Report")
        assert "- **Total files**: 2" in report
        assert "- **Success**: 1" in report
        assert "- **Errors**: 1" in report
        assert "### ok.geojson" in report
        assert "**Status**: SUCCESS" in report
        assert "- Geometry types: Point(2)" in report
        assert "**Error**: GeoJSON file not found: gone.geojson" in report

    def test_empty_results(self) -> None:
        report = generate_diagnostic_report([])
        assert "- **Total files**: 0" in report
