"""Top-k selection and context assembly."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from docintel.ingestion.models import Segment
from docintel.retrieval.models import UNKNOWN_SOURCE, AttributedBlock, Citation, ScoredSegment


def select_top_k(scores: Mapping[Segment, float], k: int) -> list[ScoredSegment]:
    """Return the *k* highest-scoring segments, best first.

    The sort is stable, so equal scores keep the mapping's (corpus) order.
    Fewer than *k* segments are all returned; an empty mapping returns ``[]``.
    """
    if k < 0:
        raise ValueError(f"k must be non-negative, got {k}")
    ranked = sorted(scores.items(), key=lambda item: item[1], reverse=True)
    return [ScoredSegment(segment=segment, score=score) for segment, score in ranked[:k]]


def to_block(scored: ScoredSegment) -> AttributedBlock:
    """Wrap a scored segment as an :class:`AttributedBlock`."""
    segment = scored.segment
    citation = Citation(
        source=segment.source or UNKNOWN_SOURCE,
        chunk_index=segment.position,
        score=scored.score,
    )
    return AttributedBlock(content=segment.text, citation=citation)


def assemble_context(ranked: Iterable[ScoredSegment]) -> list[AttributedBlock]:
    """Attribute every ranked segment to its source file, preserving order."""
    return [to_block(scored) for scored in ranked]


def format_match(scored: ScoredSegment, snippet_length: int = 100) -> str:
    """Render one match as a single terminal line.

    Example: ``[Score: 0.8123] (Source: notes.txt) alpha beta``
    """
    snippet = scored.segment.text.replace("\n", " ")
    if len(snippet) > snippet_length:
        snippet = snippet[: max(snippet_length - 3, 0)] + "..."
    source = scored.segment.source or UNKNOWN_SOURCE
    return f"[Score: {scored.score:.4f}] (Source: {source}) {snippet}"
