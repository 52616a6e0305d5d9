"""Concurrent ingestion — extract and chunk many files on a worker pool.

Every file is handled by its own task.  A task that raises is contained at
the task boundary: the failure is logged and recorded in the
:class:`~docintel.ingestion.models.IngestionReport`, and the file simply
contributes no segments.  Results are collected on the calling thread after
all tasks finish, in input order rather than completion order, so the corpus
is identical from run to run.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from concurrent.futures import Future, ThreadPoolExecutor, wait

from docintel.config import settings
from docintel.ingestion.chunker import Chunker
from docintel.ingestion.extractors import DEFAULT_EXTRACTORS, Extractor, extract
from docintel.ingestion.formats import DocumentFormat
from docintel.ingestion.models import IngestionFailure, IngestionReport, Segment, SourceDocument, SourceFile

logger = logging.getLogger(__name__)


class IngestionOrchestrator:
    """Fan out extraction + chunking over a bounded thread pool.

    Parameters
    ----------
    chunker:
        Splits each document into segments.  A default :class:`Chunker` is
        built from settings when *None*.
    extractors:
        Format → extractor registry.  Defaults to the built-in extractors.
    max_workers:
        Upper bound on concurrently running file tasks.
    timeout:
        Deadline in seconds for the whole pass.  Files still pending when it
        expires are recorded as failures.  *None* waits indefinitely.
    """

    def __init__(
        self,
        chunker: Chunker | None = None,
        extractors: Mapping[DocumentFormat, Extractor] | None = None,
        *,
        max_workers: int = settings.max_workers,
        timeout: float | None = settings.ingest_timeout_seconds,
    ) -> None:
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        self._chunker = chunker or Chunker()
        self._extractors = DEFAULT_EXTRACTORS if extractors is None else extractors
        self.max_workers = max_workers
        self.timeout = timeout

    # -- public API -----------------------------------------------------------

    def ingest(self, files: Sequence[SourceFile]) -> IngestionReport:
        """Extract and chunk *files*, isolating per-file failures.

        Blocks until every task has completed, failed, or missed the
        deadline.

        Returns
        -------
        IngestionReport
            Segments per successful file plus one failure record per
            unsuccessful file.
        """
        report = IngestionReport()
        if not files:
            return report

        workers = min(self.max_workers, len(files))
        logger.debug("Ingesting %d files with %d workers", len(files), workers)

        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="ingest")
        futures: list[Future[list[Segment]]] = [executor.submit(self._process, source_file) for source_file in files]
        _, pending = wait(futures, timeout=self.timeout)
        # Do not block on stragglers once the deadline has passed.
        executor.shutdown(wait=not pending, cancel_futures=True)

        for source_file, future in zip(files, futures):
            name = source_file.path.name
            if future in pending:
                logger.error("Ingestion timed out for %s after %ss", name, self.timeout)
                report.failures.append(IngestionFailure(source_file.path, "timed out"))
                continue
            try:
                report.segments_by_file[source_file.path] = future.result()
            except Exception as exc:
                logger.error("Failed to ingest %s: %s", name, exc)
                report.failures.append(IngestionFailure(source_file.path, str(exc)))

        logger.info(
            "Created %d segments from %d files (%d failed)",
            len(report.segments),
            len(files),
            len(report.failures),
        )
        return report

    # -- internals ------------------------------------------------------------

    def _process(self, source_file: SourceFile) -> list[Segment]:
        path = source_file.path
        logger.debug("Extracting and chunking: %s", path.name)
        lines = extract(path, source_file.format, self._extractors)
        document = SourceDocument(path=path, source=path.name, text=" ".join(lines))
        return self._chunker.split(document.text, document.source)
