"""In-process cache of per-file segments and vectors.

Entries are keyed by resolved file path and validated against the file's
modification time and size, so an edited file is re-ingested and
re-embedded on the next query while unchanged files are reused.  The cache
lives only as long as the retriever holding it; nothing is written to disk.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from docintel.ingestion.models import Segment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    """Segments and index-aligned vectors of one file version."""

    mtime_ns: int
    size: int
    segments: tuple[Segment, ...]
    vectors: tuple[tuple[float, ...], ...]


def file_fingerprint(path: Path) -> tuple[int, int] | None:
    """Return ``(st_mtime_ns, st_size)`` for *path*, or ``None`` if it cannot be read."""
    try:
        stat = path.stat()
    except OSError:
        return None
    return stat.st_mtime_ns, stat.st_size


class SegmentCache:
    """Map ``path -> (segments, vectors)`` for files that have not changed."""

    def __init__(self) -> None:
        self._entries: dict[Path, CacheEntry] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, path: Path) -> CacheEntry | None:
        """Return the entry for *path* if the file is unchanged, else ``None``."""
        key = path.resolve()
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            return None
        if file_fingerprint(path) != (entry.mtime_ns, entry.size):
            logger.debug("Cache entry stale for %s", path.name)
            return None
        return entry

    def put(
        self,
        path: Path,
        fingerprint: tuple[int, int] | None,
        segments: Iterable[Segment],
        vectors: Iterable[Iterable[float]],
    ) -> bool:
        """Store the segments and vectors computed for *path*.

        *fingerprint* is the ``(mtime_ns, size)`` taken before the file was
        read.  If the file no longer matches it, the results describe an older
        version: nothing is stored, any existing entry is dropped, and
        ``False`` is returned.
        """
        segments = tuple(segments)
        vectors = tuple(tuple(v) for v in vectors)
        if len(segments) != len(vectors):
            raise ValueError(f"Got {len(vectors)} vectors for {len(segments)} segments")
        key = path.resolve()
        if fingerprint is None or file_fingerprint(path) != fingerprint:
            logger.debug("Not caching %s: file changed while it was ingested", path.name)
            with self._lock:
                self._entries.pop(key, None)
            return False
        entry = CacheEntry(fingerprint[0], fingerprint[1], segments, vectors)
        with self._lock:
            self._entries[key] = entry
        return True

    def prune(self, keep: Iterable[Path]) -> int:
        """Drop entries for every path not in *keep*; return how many were dropped."""
        keep_keys = {p.resolve() for p in keep}
        with self._lock:
            stale = [key for key in self._entries if key not in keep_keys]
            for key in stale:
                del self._entries[key]
        if stale:
            logger.debug("Pruned %d cache entries", len(stale))
        return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
