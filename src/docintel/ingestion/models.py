"""Domain models for documents, segments and ingestion outcomes."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import NamedTuple

from pydantic import BaseModel, ConfigDict

from docintel.ingestion.formats import DocumentFormat


class SourceFile(NamedTuple):
    """A scanned file together with the format resolved from its extension."""

    path: Path
    format: DocumentFormat


class SourceDocument(BaseModel):
    """The full extracted text of one file.

    Attributes
    ----------
    path:
        Location of the file on disk; the document's identity.
    source:
        File name used for attribution.
    text:
        Extracted lines joined into a single blob.
    """

    model_config = ConfigDict(frozen=True)

    path: Path
    source: str
    text: str


class Segment(BaseModel):
    """A bounded chunk of a document, the atomic unit of ranking.

    Segments are frozen and compare structurally, so they can key a score
    mapping.  Two chunks with identical text from different files (or from
    different positions in the same file) are distinct.

    Attributes
    ----------
    text:
        The chunk content.
    source:
        File name of the originating document.
    position:
        Ordinal position of the chunk within its document.
    """

    model_config = ConfigDict(frozen=True)

    text: str
    source: str
    position: int = 0


@dataclass
class IngestionFailure:
    """A file that contributed nothing to the corpus, and why."""

    path: Path
    reason: str


@dataclass
class IngestionReport:
    """Outcome of one ingestion pass.

    Attributes
    ----------
    segments_by_file:
        Segments per successfully ingested file, in input order.
    failures:
        Files whose task raised or missed the deadline.
    """

    segments_by_file: dict[Path, list[Segment]] = field(default_factory=dict)
    failures: list[IngestionFailure] = field(default_factory=list)

    @property
    def segments(self) -> list[Segment]:
        """All segments flattened in file order."""
        return [segment for segments in self.segments_by_file.values() for segment in segments]
