"""
Retrieval — cosine scoring, top-k selection, and context assembly.

Public surface
--------------
- :class:`ContextRetriever` — main entry point: query in, attributed blocks out.
- :class:`SegmentCache` — optional per-file cache shared across queries.
- :class:`AttributedBlock`, :class:`Citation`, :class:`ScoredSegment` — data models.
- :func:`cosine_similarity`, :func:`select_top_k` — the ranking primitives.
"""

from docintel.retrieval.cache import SegmentCache
from docintel.retrieval.models import AttributedBlock, Citation, ScoredSegment
from docintel.retrieval.ranker import assemble_context, select_top_k
from docintel.retrieval.retriever import ContextRetriever
from docintel.retrieval.similarity import cosine_similarity, score_segments

__all__ = [
    "AttributedBlock",
    "Citation",
    "ContextRetriever",
    "ScoredSegment",
    "SegmentCache",
    "assemble_context",
    "cosine_similarity",
    "score_segments",
    "select_top_k",
]
