"""Domain models for scored segments and attributed context blocks."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from docintel.ingestion.models import Segment

UNKNOWN_SOURCE = "Unknown"


class ScoredSegment(BaseModel):
    """A segment paired with its cosine similarity to the query."""

    model_config = ConfigDict(frozen=True)

    segment: Segment
    score: float = Field(ge=-1.0, le=1.0)


class Citation(BaseModel):
    """Provenance record linking a context block back to its source file.

    Attributes
    ----------
    source:
        File name the block was extracted from.
    chunk_index:
        Ordinal position of the chunk within the source document.
    score:
        Cosine similarity between the query and the chunk.
    """

    model_config = ConfigDict(frozen=True)

    source: str = UNKNOWN_SOURCE
    chunk_index: int | None = None
    score: float | None = None


class AttributedBlock(BaseModel):
    """A retrieved passage labelled with its source so it can be cited verbatim."""

    model_config = ConfigDict(frozen=True)

    content: str
    citation: Citation

    @property
    def text(self) -> str:
        """Plain-text rendering handed to the answer generator."""
        return f"Source File: {self.citation.source}\nContent: {self.content}"
