"""LangChain tool definitions exposed to a conversational agent.

Tools are built by :func:`build_knowledge_base_tools` around an existing
:class:`~docintel.retrieval.retriever.ContextRetriever`, so a test can bind
them to a retriever backed by a fake embedding model.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from langchain_core.tools import tool

from docintel.config import settings
from docintel.errors import ExtractionError
from docintel.ingestion.extractors import extract
from docintel.retrieval.retriever import ContextRetriever

logger = logging.getLogger(__name__)

BLOCK_SEPARATOR = "\n---\n"
TRUNCATION_MARKER = "... [Text truncated for brevity]"


def _resolve_in(directory: Path, file_name: str) -> Path:
    """Resolve *file_name* inside *directory*, refusing paths that escape it."""
    root = directory.resolve()
    path = (root / file_name).resolve()
    if path.parent != root:
        raise ExtractionError(f"{file_name!r} is not a file in {root}")
    return path


def read_document(directory: Path, file_name: str, max_chars: int = settings.summary_max_chars) -> str:
    """Return the full text of one document, truncated beyond *max_chars*."""
    path = _resolve_in(directory, file_name)
    text = "\n".join(extract(path))
    if len(text) > max_chars:
        text = text[:max_chars] + TRUNCATION_MARKER
    return text


def build_knowledge_base_tools(
    retriever: ContextRetriever,
    *,
    max_chars: int = settings.summary_max_chars,
) -> list[Any]:
    """Create the search and summarise tools bound to *retriever*'s directory.

    Returns
    -------
    list
        ``[search_documents, summarize_document]`` LangChain tools.
    """
    directory = retriever.directory

    @tool
    def search_documents(query: str) -> str:
        """Search for snippets across all documents in the knowledge base.

        Every snippet starts with 'Source File: <name>' so claims can be cited.
        """
        blocks = retriever.retrieve(query)
        logger.info("search_documents returned %d blocks for %r", len(blocks), query)
        return BLOCK_SEPARATOR.join(block.text for block in blocks)

    @tool
    def summarize_document(file_name: str) -> str:
        """Return the full content of one document by its exact file name (e.g. roadmap.pdf).

        Use this when the user asks to summarize or summarise a specific file.
        """
        try:
            text = read_document(directory, file_name, max_chars)
        except ExtractionError as exc:
            logger.warning("summarize_document could not read %r: %s", file_name, exc)
            return f"Error: Could not find or read {file_name}. Ensure the name is correct."
        return f"Full Content of {file_name}:\n{text}"

    return [search_documents, summarize_document]
