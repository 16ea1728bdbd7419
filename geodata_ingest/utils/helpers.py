"""Shared helper functions used by the loader, diagnostics and file helpers."""

from __future__ import annotations

from pathlib import Path
from urllib.parse import urlparse

_HTTP_SCHEMES = frozenset({"http", "https"})


def is_http_url(source: str | Path) -> bool:
    """Return ``True`` if *source* is an ``http(s)://`` URL rather than a path."""
    if isinstance(source, Path):
        return False
    return urlparse(source).scheme.lower() in _HTTP_SCHEMES


def source_name(source: str | Path) -> str:
    """Short display name for a source: file name, or the last URL path segment.

    Examples:
        - ``"/data/unidades_proyecto/equipamientos.geojson"`` → ``"equipamientos.geojson"``
        - ``"https://host/geodata/vias.geojson?v=2"`` → ``"vias.geojson"``
    """
    if is_http_url(source):
        path = urlparse(str(source)).path.rstrip("/")
        return path.rsplit("/", 1)[-1] or str(source)
    return Path(source).name or str(source)
