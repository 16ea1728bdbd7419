"""GeoJSON document contracts (RFC 7946 subset).

The pipeline works on plain JSON dicts, exactly as they come out of
``json.loads``; these ``TypedDict`` definitions document the shapes it
reads and writes.  Input documents are only trusted after
``parse_document`` has checked them, and coordinates are ``object``
on input because repairing them is the point of the pipeline.
"""

from __future__ import annotations

from typing import TypedDict


class Geometry(TypedDict, total=False):
    """A GeoJSON geometry object as read from a source file."""

    type: str
    coordinates: object


class Feature(TypedDict, total=False):
    """A GeoJSON feature: geometry plus arbitrary properties."""

    type: str
    id: str | int
    geometry: Geometry | None
    properties: dict[str, object] | None


class FeatureCollection(TypedDict):
    """A GeoJSON ``FeatureCollection`` document."""

    type: str
    features: list[Feature]
