"""Directory scanning — find the files the pipeline can ingest."""

from __future__ import annotations

import logging
from pathlib import Path

from docintel.ingestion.formats import DocumentFormat
from docintel.ingestion.models import SourceFile

logger = logging.getLogger(__name__)


def scan_directory(directory: str | Path) -> list[SourceFile]:
    """List the supported regular files directly inside *directory*.

    Only the immediate directory level is scanned.  The result is sorted by
    file name so downstream ordering never depends on how the filesystem
    enumerates entries.  A missing or unreadable directory is not an error:
    it is logged and yields an empty list.

    Parameters
    ----------
    directory:
        Directory to scan.

    Returns
    -------
    list[SourceFile]
        Eligible files, each tagged with its resolved format.
    """
    root = Path(directory)
    if not root.is_dir():
        logger.warning("Directory not found or not a directory: %s", root)
        return []

    try:
        entries = list(root.iterdir())
    except OSError as exc:
        logger.error("IO error while accessing directory %s: %s", root, exc)
        return []

    files: list[SourceFile] = []
    for entry in sorted(entries, key=lambda p: p.name):
        fmt = DocumentFormat.from_path(entry)
        if fmt is None or not entry.is_file():
            continue
        files.append(SourceFile(entry, fmt))

    logger.debug("Found %d supported files in %s", len(files), root)
    return files
