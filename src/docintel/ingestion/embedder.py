"""Embedding gateway — the single seam to the external embedding service."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, TypeVar

import numpy as np
from langchain_core.embeddings import Embeddings

from docintel.config import settings
from docintel.errors import EmbeddingServiceError
from docintel.ingestion.models import Segment

if TYPE_CHECKING:
    from langchain_huggingface import HuggingFaceEmbeddings

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _all_finite(vectors: Sequence[Sequence[float]]) -> bool:
    return bool(np.isfinite(np.asarray(vectors, dtype=np.float64)).all())


def get_embedding_function() -> HuggingFaceEmbeddings:
    """Return the configured sentence-transformer embedding function."""
    from langchain_huggingface import HuggingFaceEmbeddings

    return HuggingFaceEmbeddings(model_name=settings.embedding_model)


class EmbeddingGateway:
    """Wrap a LangChain :class:`Embeddings` with retries and response checks.

    The gateway holds no per-query state and may be shared between threads
    and between retriever calls.

    Parameters
    ----------
    embeddings:
        Any LangChain embeddings implementation.
    batch_size:
        Number of texts per service call in :meth:`embed_batch`.  *None*
        sends every text in a single call.
    max_retries:
        Attempts per service call before giving up.
    backoff_seconds:
        Base delay between attempts, doubled after each failure.
    """

    def __init__(
        self,
        embeddings: Embeddings,
        *,
        batch_size: int | None = settings.embedding_batch_size,
        max_retries: int = settings.embedding_max_retries,
        backoff_seconds: float = settings.embedding_retry_backoff_seconds,
    ) -> None:
        if batch_size is not None and batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        if max_retries < 1:
            raise ValueError(f"max_retries must be at least 1, got {max_retries}")
        self._embeddings = embeddings
        self.batch_size = batch_size
        self.max_retries = max_retries
        self.backoff_seconds = backoff_seconds

    @classmethod
    def from_settings(cls) -> EmbeddingGateway:
        """Build a gateway around the default HuggingFace embedding model."""
        return cls(get_embedding_function())

    # -- public API -----------------------------------------------------------

    def embed_query(self, text: str) -> list[float]:
        """Embed a single query string."""
        vector = self._call("embed_query", lambda: self._embeddings.embed_query(text))
        if not vector:
            raise EmbeddingServiceError("Embedding service returned an empty query vector")
        if not _all_finite([vector]):
            raise EmbeddingServiceError("Embedding service returned a non-finite query vector")
        return list(vector)

    def embed_batch(self, segments: Sequence[Segment]) -> list[list[float]]:
        """Embed *segments*, returning one vector per segment in input order.

        Raises
        ------
        EmbeddingServiceError
            When the service keeps failing, or returns a different number of
            vectors than texts sent, an empty vector, vectors of unequal
            length, or non-finite components.  No partial result is ever
            returned.
        """
        if not segments:
            return []

        texts = [segment.text for segment in segments]
        step = self.batch_size or len(texts)
        vectors: list[list[float]] = []
        for start in range(0, len(texts), step):
            batch = texts[start : start + step]
            result = self._call("embed_documents", lambda batch=batch: self._embeddings.embed_documents(batch))
            if len(result) != len(batch):
                raise EmbeddingServiceError(
                    f"Embedding service returned {len(result)} vectors for {len(batch)} texts"
                )
            vectors.extend(list(v) for v in result)
            logger.debug("Embedded %d / %d segments", len(vectors), len(texts))

        dim = len(vectors[0])
        if dim == 0 or any(len(v) != dim for v in vectors):
            raise EmbeddingServiceError("Embedding service returned vectors of inconsistent dimensionality")
        if not _all_finite(vectors):
            raise EmbeddingServiceError("Embedding service returned vectors with NaN or infinite components")

        logger.info("Embedded %d segments (dim=%d)", len(vectors), dim)
        return vectors

    # -- internals ------------------------------------------------------------

    def _call(self, operation: str, fn: Callable[[], T]) -> T:
        last_exc: Exception | None = None
        for attempt in range(1, self.max_retries + 1):
            try:
                return fn()
            except Exception as exc:
                last_exc = exc
                if attempt < self.max_retries:
                    wait = self.backoff_seconds * 2 ** (attempt - 1)
                    logger.warning(
                        "Retry %d/%d for %s (wait %.1fs): %s", attempt, self.max_retries, operation, wait, exc
                    )
                    time.sleep(wait)
        raise EmbeddingServiceError(
            f"Embedding service failed for {operation} after {self.max_retries} attempts: {last_exc}"
        ) from last_exc
