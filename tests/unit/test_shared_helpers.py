"""Tests for shared helper functions."""

from __future__ import annotations

from pathlib import Path

import pytest

from geodata_ingest.utils.helpers import is_http_url, source_name


class TestIsHttpUrl:
    @pytest.mark.parametrize(
        "source",
        ["https://datos.example.gov.co/vias.geojson", "HTTP://host/x.geojson"],
    )
    def test_urls(self, source: str) -> None:
        assert is_http_url(source) is True

    @pytest.mark.parametrize(
        "source",
        ["data/vias.geojson", "/tmp/vias.geojson", "file:///tmp/vias.geojson", ""],
    )
    def test_paths(self, source: str) -> None:
        assert is_http_url(source) is False

    def test_path_object_never_url(self) -> None:
        assert is_http_url(Path("https:/host/x.geojson")) is False


class TestSourceName:
    def test_file_path(self) -> None:
        assert source_name("/data/unidades_proyecto/equipamientos.geojson") == (
            "equipamientos.geojson"
        )

    def test_path_object(self) -> None:
        assert source_name(Path("data") / "vias.geojson") == "vias.geojson"

    def test_url_strips_query(self) -> None:
        assert source_name("https://host/geodata/vias.geojson?v=2") == "vias.geojson"

    def test_url_without_path(self) -> None:
        assert source_name("https://host") == "https://host"
