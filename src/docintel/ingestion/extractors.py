"""Format extractors — turn one file into an ordered list of text lines.

Each extractor is a plain callable ``(path) -> list[str]`` that raises on
failure.  :data:`DEFAULT_EXTRACTORS` maps every :class:`DocumentFormat` to
its built-in implementation; callers can pass their own mapping to the
orchestrator to override or stub a format.
"""

from __future__ import annotations

import csv
import json
import logging
import re
from collections.abc import Callable, Iterator, Mapping
from pathlib import Path
from typing import Any

from docintel.errors import ExtractionError
from docintel.ingestion.formats import DocumentFormat

logger = logging.getLogger(__name__)

Extractor = Callable[[Path], list[str]]


# ---------------------------------------------------------------------------
# Built-in extractors
# ---------------------------------------------------------------------------


def extract_text(path: Path) -> list[str]:
    """Read a UTF-8 text file line by line."""
    return path.read_text(encoding="utf-8").splitlines()


_MD_FENCE = re.compile(r"^\s*(```|~~~)")
_MD_HEADING = re.compile(r"^\s{0,3}#{1,6}\s*")
_MD_LIST = re.compile(r"^\s*(?:[-*+]|\d+[.)])\s+")
_MD_QUOTE = re.compile(r"^\s*>\s?")
_MD_IMAGE = re.compile(r"!\[([^\]]*)\]\([^)]*\)")
_MD_LINK = re.compile(r"\[([^\]]+)\]\([^)]*\)")
_MD_EMPHASIS = re.compile(r"(\*\*|\*|`)(?=\S)(.+?)(?<=\S)\1")
_MD_UNDERSCORE = re.compile(r"\b(__|_)(?=\S)(.+?)(?<=\S)\1\b")
_MD_RULE = re.compile(r"^\s*([-*_])(\s*\1){2,}\s*$")


def extract_markdown(path: Path) -> list[str]:
    """Read a Markdown file and strip the most common inline markup.

    Code fences and horizontal rules are dropped; headings, list markers and
    block quotes lose their prefix; links and images keep their label.
    """
    lines: list[str] = []
    for raw in path.read_text(encoding="utf-8").splitlines():
        if _MD_FENCE.match(raw) or _MD_RULE.match(raw):
            continue
        line = _MD_HEADING.sub("", raw)
        line = _MD_QUOTE.sub("", line)
        line = _MD_LIST.sub("", line)
        line = _MD_IMAGE.sub(r"\1", line)
        line = _MD_LINK.sub(r"\1", line)
        line = _MD_EMPHASIS.sub(r"\2", line)
        line = _MD_UNDERSCORE.sub(r"\2", line)
        lines.append(line.strip())
    return lines


def extract_pdf(path: Path) -> list[str]:
    """Extract the text layer of a PDF, one entry per line."""
    from langchain_community.document_loaders import PyPDFLoader

    pages = PyPDFLoader(str(path)).load()
    return [line for page in pages for line in page.page_content.splitlines()]


def extract_docx(path: Path) -> list[str]:
    """Extract paragraph text from a Word document."""
    from docx import Document

    doc = Document(str(path))
    return [para.text for para in doc.paragraphs if para.text.strip()]


def extract_csv(path: Path) -> list[str]:
    """Render each non-empty CSV row as its cells joined with ``", "``."""
    with open(path, newline="", encoding="utf-8") as fh:
        return [", ".join(cell.strip() for cell in row) for row in csv.reader(fh) if any(c.strip() for c in row)]


def _flatten_json(value: Any, prefix: str = "") -> Iterator[str]:
    if isinstance(value, dict):
        for key, item in value.items():
            yield from _flatten_json(item, f"{prefix}.{key}" if prefix else str(key))
    elif isinstance(value, list):
        for index, item in enumerate(value):
            yield from _flatten_json(item, f"{prefix}[{index}]")
    else:
        rendered = value if isinstance(value, str) else json.dumps(value)
        yield f"{prefix}: {rendered}" if prefix else rendered


def extract_json(path: Path) -> list[str]:
    """Flatten a JSON document into ``dotted.key: value`` lines."""
    with open(path, encoding="utf-8") as fh:
        return list(_flatten_json(json.load(fh)))


DEFAULT_EXTRACTORS: Mapping[DocumentFormat, Extractor] = {
    DocumentFormat.TEXT: extract_text,
    DocumentFormat.MARKDOWN: extract_markdown,
    DocumentFormat.PDF: extract_pdf,
    DocumentFormat.DOCX: extract_docx,
    DocumentFormat.CSV: extract_csv,
    DocumentFormat.JSON: extract_json,
}


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


def extract(
    path: Path,
    fmt: DocumentFormat | None = None,
    extractors: Mapping[DocumentFormat, Extractor] | None = None,
) -> list[str]:
    """Extract *path* with the extractor registered for its format.

    Parameters
    ----------
    path:
        File to read.
    fmt:
        Pre-resolved format.  Derived from the extension when omitted.
    extractors:
        Registry to dispatch through (defaults to :data:`DEFAULT_EXTRACTORS`).

    Raises
    ------
    ExtractionError
        When the format is unsupported or the extractor fails.
    """
    fmt = fmt or DocumentFormat.from_path(path)
    registry = DEFAULT_EXTRACTORS if extractors is None else extractors
    extractor = registry.get(fmt) if fmt is not None else None
    if extractor is None:
        raise ExtractionError(f"No extractor registered for {path.name}")

    try:
        lines = extractor(path)
    except ExtractionError:
        raise
    except Exception as exc:
        raise ExtractionError(f"Content extraction failed for {path.name}: {exc}") from exc

    logger.debug("Extracted %d lines from %s", len(lines), path.name)
    return lines
