"""Shared pytest fixtures for the GeoJSON ingestion test suite."""

from pathlib import Path

import pytest

from geodata_ingest.core.config import IngestConfig

# ---------------------------------------------------------------------------
# Path fixtures
# ---------------------------------------------------------------------------

TESTS_DIR = Path(__file__).parent
DATA_DIR = TESTS_DIR / "data"
EDGE_CASES_DIR = DATA_DIR / "edge_cases"


@pytest.fixture()
def data_dir() -> Path:
    """Return the path to the test data directory."""
    return DATA_DIR


@pytest.fixture()
def edge_cases_dir() -> Path:
    """Return the path to the edge-cases test data directory."""
    return EDGE_CASES_DIR


# ---------------------------------------------------------------------------
# Sample GeoJSON file fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def equipamientos_geojson(data_dir: Path) -> Path:
    """Points: valid, swapped, split-decimal, out of range, string, null geometry."""
    return data_dir / "01_equipamientos_mixed.geojson"


@pytest.fixture()
def vial_geojson(data_dir: Path) -> Path:
    """LineStrings (valid, swapped, one bad vertex), a Polygon and a MultiLineString."""
    return data_dir / "02_infraestructura_vial.geojson"


@pytest.fixture()
def not_json_geojson(edge_cases_dir: Path) -> Path:
    """Path to a truncated file that is not valid JSON."""
    return edge_cases_dir / "11_malformed_not_json.geojson"


@pytest.fixture()
def not_collection_geojson(edge_cases_dir: Path) -> Path:
    """Path to valid JSON whose root is a single Feature."""
    return edge_cases_dir / "12_not_feature_collection.geojson"


@pytest.fixture()
def empty_geojson(edge_cases_dir: Path) -> Path:
    """Path to a FeatureCollection with no features."""
    return edge_cases_dir / "13_empty_collection.geojson"


# ---------------------------------------------------------------------------
# Configuration fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def discard_config() -> IngestConfig:
    """Default Cali region, irreparable Points discarded."""
    return IngestConfig()


@pytest.fixture()
def substitute_config() -> IngestConfig:
    """Default Cali region, irreparable Points moved to the fallback."""
    return IngestConfig(discard_policy="substitute")

