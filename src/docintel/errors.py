"""Exception hierarchy.

Two families matter to callers:

- :class:`ExtractionError` is raised per file.  The ingestion orchestrator
  contains it at the task boundary, so it never reaches a retrieval caller.
- :class:`RetrievalError` aborts the current query.  Callers decide whether
  to answer without context or report the failure.
"""

from __future__ import annotations


class DocIntelError(Exception):
    """Base class for all errors raised by this package."""


class ExtractionError(DocIntelError):
    """A single file could not be turned into text."""


class RetrievalError(DocIntelError):
    """The current retrieval cannot produce a ranking."""


class EmbeddingServiceError(RetrievalError):
    """The embedding service failed or returned a malformed response."""


class DimensionMismatchError(RetrievalError):
    """A query vector and a segment vector have different lengths."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(f"Vector dimensionality mismatch: expected {expected}, got {actual}")
        self.expected = expected
        self.actual = actual
