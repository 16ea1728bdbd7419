"""GeoJSON Coordinate Ingestion Pipeline.

Normalises municipal project GeoJSON (equipment sites, road works) before
it reaches the dashboard map: detects swapped and split-decimal
coordinates, repairs them to ``(lon, lat)`` order, and range-checks the
result against the deployment region.
"""

__version__ = "0.1.0"
