"""GeoJSON loader service with an explicit, per-instance cache.

Loads FeatureCollections from local files or ``http(s)://`` URLs, checks
their shape, and keeps the parsed documents until they are invalidated.
The dashboard data layer holds one loader instead of module-level cache
variables, and asks it for normalised data with ``load_normalized``.

Error mapping:
- missing file, unreadable file, HTTP 4xx   → ``GeoJsonSourceError`` (permanent)
- network failure, HTTP 5xx / 429           → ``GeoJsonFetchError`` (retryable)
- malformed document                        → ``DocumentParseError``
"""

from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import TYPE_CHECKING

import httpx

from geodata_ingest.core.config import IngestConfig
from geodata_ingest.core.exceptions import PermanentError, PipelineError, TransientError
from geodata_ingest.pipeline import parse_document, process_feature_collection
from geodata_ingest.utils.helpers import is_http_url

if TYPE_CHECKING:
    from collections.abc import Iterable
    from types import TracebackType

    from geodata_ingest.models.contracts import FeatureCollection
    from geodata_ingest.pipeline import ProcessingResult

    LoadOutcome = FeatureCollection | ProcessingResult | PipelineError

logger = logging.getLogger("geodata_ingest.services.loader")

HTTP_TOO_MANY_REQUESTS = 429
HTTP_SERVER_ERROR = 500


class GeoJsonSourceError(PermanentError):
    """Raised when a source does not exist or the server refuses it."""

    default_stage = "load_geojson"
    default_code = "GEOJSON_SOURCE_UNAVAILABLE"


class GeoJsonFetchError(TransientError):
    """Raised when fetching a source fails in a way worth retrying."""

    default_stage = "load_geojson"
    default_code = "GEOJSON_FETCH_FAILED"


class GeoJsonLoader:
    """Load, cache and normalise GeoJSON sources.

    Args:
        config: Pipeline configuration (region, policies, fetch timeout).
        client: Optional ``httpx.Client``.  When omitted the loader
            creates one on first HTTP use and closes it in ``close()``.
        use_cache: Keep parsed documents between calls.
    """

    def __init__(
        self,
        config: IngestConfig | None = None,
        *,
        client: httpx.Client | None = None,
        use_cache: bool = True,
    ) -> None:
        self._config = config or IngestConfig()
        self._client = client
        self._owns_client = client is None
        self._use_cache = use_cache
        self._cache: dict[str, FeatureCollection] = {}

    @property
    def config(self) -> IngestConfig:
        return self._config

    # -- context manager ---------------------------------------------------

    def __enter__(self) -> GeoJsonLoader:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client if this loader created it."""
        if self._owns_client and self._client is not None:
            self._client.close()
            self._client = None

    # -- public API --------------------------------------------------------

    def load(self, source: str | Path) -> FeatureCollection:
        """Return the parsed FeatureCollection for *source*.

        Cached documents are returned as copies, so callers may mutate
        the result freely.

        Raises:
            GeoJsonSourceError: The source is missing or refused.
            GeoJsonFetchError: A retryable network failure occurred.
            DocumentParseError: The content is not a FeatureCollection.
        """
        key = self._cache_key(source)
        if self._use_cache and key in self._cache:
            logger.debug("GeoJSON cache hit | source=%s", key)
            return copy.deepcopy(self._cache[key])

        raw = self._fetch(key) if is_http_url(source) else self._read_file(Path(source))
        document = parse_document(raw)
        logger.info(
            "Loaded GeoJSON | source=%s | features=%d | bytes=%d",
            key,
            len(document["features"]),
            len(raw),
        )

        if self._use_cache:
            self._cache[key] = document
            return copy.deepcopy(document)
        return document

    def load_normalized(self, source: str | Path) -> ProcessingResult:
        """Load *source* and run it through ``process_feature_collection``."""
        return process_feature_collection(self.load(source), self._config, source=str(source))

    def load_many(
        self,
        sources: Iterable[str | Path],
        *,
        normalized: bool = False,
    ) -> dict[str, LoadOutcome]:
        """Load several sources in order, isolating failures per source.

        Returns:
            A mapping from each source (as passed, converted to ``str``)
            to its document, or to its ``ProcessingResult`` when
            *normalized* is true, or to the ``PipelineError`` it raised.
        """
        outcomes: dict[str, LoadOutcome] = {}
        for source in sources:
            try:
                outcomes[str(source)] = (
                    self.load_normalized(source) if normalized else self.load(source)
                )
            except PipelineError as exc:
                logger.warning(
                    "GeoJSON source failed | source=%s | code=%s | retryable=%s | %s",
                    source,
                    exc.code,
                    exc.retryable,
                    exc.message,
                )
                outcomes[str(source)] = exc

        failed = sum(isinstance(o, PipelineError) for o in outcomes.values())
        logger.info(
            "Loaded GeoJSON batch | sources=%d | loaded=%d | failed=%d",
            len(outcomes),
            len(outcomes) - failed,
            failed,
        )
        return outcomes

    def invalidate(self, source: str | Path | None = None) -> None:
        """Drop *source* from the cache, or every entry when ``None``."""
        if source is None:
            self._cache.clear()
            logger.debug("GeoJSON cache cleared")
            return
        self._cache.pop(self._cache_key(source), None)
        logger.debug("GeoJSON cache entry invalidated | source=%s", source)

    def cache_stats(self) -> dict[str, object]:
        """Return ``{"size": int, "keys": [...]}`` for the current cache."""
        return {"size": len(self._cache), "keys": list(self._cache)}

    # -- internals ---------------------------------------------------------

    @staticmethod
    def _cache_key(source: str | Path) -> str:
        """URLs as given; file paths resolved so every spelling shares an entry."""
        if is_http_url(source):
            return str(source)
        return str(Path(source).resolve())

    def _read_file(self, path: Path) -> bytes:
        try:
            return path.read_bytes()
        except FileNotFoundError as exc:
            msg = f"GeoJSON file not found: {path}"
            raise GeoJsonSourceError(msg) from exc
        except OSError as exc:
            msg = f"Cannot read GeoJSON file {path}: {exc}"
            raise GeoJsonSourceError(msg) from exc

    def _get_client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(
                timeout=self._config.fetch_timeout_s,
                follow_redirects=True,
            )
        return self._client

    def _fetch(self, url: str) -> bytes:
        try:
            response = self._get_client().get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            msg = f"HTTP {status} fetching {url}"
            if status >= HTTP_SERVER_ERROR or status == HTTP_TOO_MANY_REQUESTS:
                raise GeoJsonFetchError(msg) from exc
            raise GeoJsonSourceError(msg) from exc
        except httpx.HTTPError as exc:
            msg = f"Network error fetching {url}: {exc}"
            raise GeoJsonFetchError(msg) from exc
        return response.content
