"""Supported document formats and their file extensions."""

from __future__ import annotations

from enum import Enum
from pathlib import Path


class DocumentFormat(str, Enum):
    """Closed set of formats the ingestion pipeline can extract."""

    TEXT = "text"
    MARKDOWN = "markdown"
    PDF = "pdf"
    DOCX = "docx"
    CSV = "csv"
    JSON = "json"

    @classmethod
    def from_path(cls, path: str | Path) -> DocumentFormat | None:
        """Return the format for *path*'s extension, or ``None`` if unsupported."""
        return _EXTENSIONS.get(Path(path).suffix.lower())


_EXTENSIONS: dict[str, DocumentFormat] = {
    ".txt": DocumentFormat.TEXT,
    ".md": DocumentFormat.MARKDOWN,
    ".markdown": DocumentFormat.MARKDOWN,
    ".pdf": DocumentFormat.PDF,
    ".docx": DocumentFormat.DOCX,
    ".csv": DocumentFormat.CSV,
    ".json": DocumentFormat.JSON,
}

SUPPORTED_EXTENSIONS: frozenset[str] = frozenset(_EXTENSIONS)
