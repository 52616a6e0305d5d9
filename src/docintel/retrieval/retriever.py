"""Context retriever — directory in, ranked attributed blocks out.

This module is the **primary public interface** for retrieval.  It composes
scanning, concurrent ingestion, embedding, scoring and top-k selection
against a directory bound at construction time.  Every call works from the
files as they are on disk at that moment; unless a
:class:`~docintel.retrieval.cache.SegmentCache` is injected, nothing carries
over from one call to the next.

Usage::

    from docintel.ingestion.embedder import EmbeddingGateway
    from docintel.retrieval.retriever import ContextRetriever

    retriever = ContextRetriever("./data", EmbeddingGateway.from_settings())
    for block in retriever.retrieve("What does the roadmap say about Q3?"):
        print(block.text)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from docintel.config import settings
from docintel.ingestion.chunker import Chunker
from docintel.ingestion.embedder import EmbeddingGateway
from docintel.ingestion.extractors import Extractor
from docintel.ingestion.formats import DocumentFormat
from docintel.ingestion.models import Segment, SourceFile
from docintel.ingestion.orchestrator import IngestionOrchestrator
from docintel.ingestion.scanner import scan_directory
from docintel.retrieval.cache import SegmentCache, file_fingerprint
from docintel.retrieval.models import AttributedBlock, ScoredSegment
from docintel.retrieval.ranker import assemble_context, select_top_k
from docintel.retrieval.similarity import score_segments

logger = logging.getLogger(__name__)


class ContextRetriever:
    """Rank the segments of a directory's documents against a query.

    Parameters
    ----------
    directory:
        Directory whose immediate files form the corpus.
    gateway:
        Embedding gateway shared by every call.
    top_k:
        Default number of blocks returned by :meth:`retrieve`.
    chunker:
        Optional chunker override.
    extractors:
        Optional format → extractor registry override.
    max_workers:
        Upper bound on concurrent file tasks.
    timeout:
        Ingestion deadline in seconds (*None* waits indefinitely).
    cache:
        Optional per-file cache reused across calls.
    """

    def __init__(
        self,
        directory: str | Path,
        gateway: EmbeddingGateway,
        *,
        top_k: int = settings.top_k,
        chunker: Chunker | None = None,
        extractors: Mapping[DocumentFormat, Extractor] | None = None,
        max_workers: int = settings.max_workers,
        timeout: float | None = settings.ingest_timeout_seconds,
        cache: SegmentCache | None = None,
    ) -> None:
        self.directory = Path(directory)
        self.top_k = top_k
        self._gateway = gateway
        self._orchestrator = IngestionOrchestrator(chunker, extractors, max_workers=max_workers, timeout=timeout)
        self._cache = cache

    @classmethod
    def from_settings(cls, directory: str | Path | None = None) -> ContextRetriever:
        """Build a retriever wired to the configured embedding model."""
        return cls(
            directory or settings.data_dir,
            EmbeddingGateway.from_settings(),
            cache=SegmentCache() if settings.cache_enabled else None,
        )

    # -- public API -----------------------------------------------------------

    def rank(self, query: str, *, k: int | None = None) -> list[ScoredSegment]:
        """Return the top-*k* scored segments for *query*, best first.

        Raises
        ------
        RetrievalError
            When embedding fails or vector dimensions disagree.
        """
        k = self.top_k if k is None else k
        if not query.strip():
            logger.warning("Ignoring blank query")
            return []

        logger.info("Starting retrieval for directory: %s", self.directory)
        files = scan_directory(self.directory)
        segments, vectors = self._build_corpus(files)
        if not segments:
            logger.warning("No content found at: %s", self.directory)
            return []

        logger.info("Querying %d segments with text: %r", len(segments), query)
        query_vector = self._gateway.embed_query(query)
        scores = score_segments(query_vector, segments, vectors)
        return select_top_k(scores, k)

    def retrieve(self, query: str, *, k: int | None = None) -> list[AttributedBlock]:
        """Return the top-*k* attributed context blocks for *query*."""
        return assemble_context(self.rank(query, k=k))

    # -- LangChain compat -----------------------------------------------------

    def as_langchain_retriever(self, k: int | None = None) -> Any:
        """Return a LangChain-compatible retriever over this directory.

        Each document's ``page_content`` is the attributed block text, so the
        source label travels with the content into the prompt.
        """
        from langchain_core.documents import Document
        from langchain_core.retrievers import BaseRetriever

        outer = self

        class _LCRetriever(BaseRetriever):
            """Adapter that satisfies LangChain's retriever protocol."""

            def _get_relevant_documents(self_inner, query: str, **kwargs: Any) -> list[Document]:  # type: ignore[override]  # noqa: N805
                return [
                    Document(page_content=block.text, metadata=block.citation.model_dump())
                    for block in outer.retrieve(query, k=k)
                ]

        return _LCRetriever()

    # -- internals ------------------------------------------------------------

    def _build_corpus(self, files: Sequence[SourceFile]) -> tuple[list[Segment], list[list[float]]]:
        """Ingest and embed *files*, reusing cached files when possible.

        The corpus is assembled in *files* order, independent of which files
        came from the cache and which were computed now.
        """
        cached: dict[Path, tuple[Sequence[Segment], Sequence[Sequence[float]]]] = {}
        stale: list[SourceFile] = []
        if self._cache is not None:
            self._cache.prune(f.path for f in files)
        for source_file in files:
            entry = self._cache.get(source_file.path) if self._cache is not None else None
            if entry is None:
                stale.append(source_file)
            else:
                cached[source_file.path] = (entry.segments, entry.vectors)

        if cached:
            logger.debug("Reusing %d cached files, ingesting %d", len(cached), len(stale))

        # Fingerprints must predate extraction; put() rejects files edited since.
        fingerprints = {f.path: file_fingerprint(f.path) for f in stale} if self._cache is not None else {}
        report = self._orchestrator.ingest(stale)
        fresh_vectors = self._gateway.embed_batch(report.segments)

        offset = 0
        for path, file_segments in report.segments_by_file.items():
            file_vectors = fresh_vectors[offset : offset + len(file_segments)]
            offset += len(file_segments)
            cached[path] = (file_segments, file_vectors)
            if self._cache is not None:
                self._cache.put(path, fingerprints[path], file_segments, file_vectors)

        segments: list[Segment] = []
        vectors: list[list[float]] = []
        for source_file in files:
            if source_file.path not in cached:
                continue
            file_segments, file_vectors = cached[source_file.path]
            segments.extend(file_segments)
            vectors.extend(list(v) for v in file_vectors)
        return segments, vectors
