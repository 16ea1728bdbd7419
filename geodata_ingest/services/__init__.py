"""Services used by the dashboard data layer and batch jobs.

- GeoJsonLoader: load GeoJSON from files or URLs with an explicit cache
- diagnostics: read-only health checks and Markdown reports
"""

from geodata_ingest.services.diagnostics import (
    diagnose_feature_collection,
    diagnose_sources,
    generate_diagnostic_report,
)
from geodata_ingest.services.loader import GeoJsonFetchError, GeoJsonLoader, GeoJsonSourceError

__all__ = [
    "GeoJsonFetchError",
    "GeoJsonLoader",
    "GeoJsonSourceError",
    "diagnose_feature_collection",
    "diagnose_sources",
    "generate_diagnostic_report",
]
