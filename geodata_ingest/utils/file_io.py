"""Read, repair and write GeoJSON files on disk.

``repair_file`` is the batch counterpart of ``GeoJsonLoader.load_normalized``:
it rewrites a source file with corrected coordinates, keeping a one-time
``.backup`` copy of the original next to it.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from geodata_ingest.core.constants import BACKUP_SUFFIX
from geodata_ingest.pipeline import DocumentParseError, parse_document, process_feature_collection

if TYPE_CHECKING:
    from geodata_ingest.core.config import IngestConfig
    from geodata_ingest.models.contracts import FeatureCollection
    from geodata_ingest.models.report import ProcessingReport

logger = logging.getLogger("geodata_ingest.utils.file_io")


def read_document(path: Path | str) -> FeatureCollection:
    """Read a GeoJSON file and check its shape.

    Raises:
        DocumentParseError: If the file cannot be read or is not a
            FeatureCollection.
    """
    return parse_document(_read_bytes(Path(path)))


def write_document(path: Path | str, document: FeatureCollection) -> None:
    """Write *document* as indented UTF-8 JSON, keeping non-ASCII text as-is."""
    Path(path).write_text(
        json.dumps(document, indent=2, ensure_ascii=False) + "\n",
        encoding="utf-8",
    )


def backup_path_for(path: Path | str) -> Path:
    """``equipamientos.geojson`` → ``equipamientos.geojson.backup``."""
    path = Path(path)
    return path.with_name(path.name + BACKUP_SUFFIX)


def repair_file(
    path: Path | str,
    config: IngestConfig | None = None,
    *,
    backup: bool = True,
    output_path: Path | str | None = None,
) -> ProcessingReport:
    """Normalise a GeoJSON file and write the corrected document.

    Args:
        path: Source file.
        config: Region and policies; defaults to ``IngestConfig()``.
        backup: Copy the original to ``<name>.backup`` first.  An existing
            backup is never overwritten, so it always holds the first
            original.
        output_path: Where to write; defaults to *path* (in place).

    Returns:
        The run's ``ProcessingReport``.

    Raises:
        DocumentParseError: If the source is unreadable or malformed.
            Nothing is written in that case.
    """
    path = Path(path)
    raw = _read_bytes(path)
    result = process_feature_collection(raw, config, source=path.name)

    if backup:
        backup_file = backup_path_for(path)
        if not backup_file.exists():
            backup_file.write_bytes(raw)
            logger.info("Backup created | path=%s", backup_file)

    target = Path(output_path) if output_path is not None else path
    write_document(target, result.collection)
    logger.info(
        "Repaired GeoJSON file | source=%s | target=%s | %s",
        path,
        target,
        result.report.summary(),
    )
    return result.report


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _read_bytes(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as exc:
        msg = f"Cannot read GeoJSON file: {exc}"
        raise DocumentParseError(msg) from exc
