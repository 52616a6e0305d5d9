"""Shared pytest configuration and fixtures."""

from __future__ import annotations

import threading

import pytest
from langchain_core.embeddings import Embeddings

from docintel.ingestion.embedder import EmbeddingGateway

VOCABULARY = ["cat", "sat", "dog", "run", "fast", "and", "alpha", "beta", "gamma"]


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring external services")


class KeywordEmbeddings(Embeddings):
    """Deterministic fake: one component per vocabulary term, valued by its substring count.

    Texts that share more terms with the query point in a closer direction,
    which is all the ranking tests need.
    """

    def __init__(self, vocabulary: list[str] | None = None) -> None:
        self.vocabulary = vocabulary or VOCABULARY
        self.query_calls: list[str] = []
        self.document_calls: list[list[str]] = []
        self._lock = threading.Lock()

    def _vector(self, text: str) -> list[float]:
        lowered = text.lower()
        return [float(lowered.count(term)) for term in self.vocabulary]

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        with self._lock:
            self.document_calls.append(list(texts))
        return [self._vector(t) for t in texts]

    def embed_query(self, text: str) -> list[float]:
        with self._lock:
            self.query_calls.append(text)
        return self._vector(text)

    @property
    def total_calls(self) -> int:
        return len(self.query_calls) + len(self.document_calls)


class FailingEmbeddings(Embeddings):
    """Fake embedding service that is always unreachable."""

    def __init__(self) -> None:
        self.attempts = 0

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        self.attempts += 1
        raise ConnectionError("embedding service unreachable")

    def embed_query(self, text: str) -> list[float]:
        self.attempts += 1
        raise ConnectionError("embedding service unreachable")


@pytest.fixture()
def keyword_embeddings() -> KeywordEmbeddings:
    return KeywordEmbeddings()


@pytest.fixture()
def gateway(keyword_embeddings: KeywordEmbeddings) -> EmbeddingGateway:
    return EmbeddingGateway(keyword_embeddings, batch_size=None, max_retries=1, backoff_seconds=0.0)
