"""Cosine similarity scoring between a query vector and segment vectors."""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

import numpy as np

from docintel.errors import DimensionMismatchError, RetrievalError
from docintel.ingestion.models import Segment

logger = logging.getLogger(__name__)


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Return the cosine similarity of *a* and *b* in ``[-1.0, 1.0]``.

    Accumulation happens in float64 regardless of the input precision, and
    each vector is scaled by its largest component first so that very large
    magnitudes cannot overflow.  A zero-magnitude vector on either side
    scores exactly ``0.0``.

    Raises
    ------
    DimensionMismatchError
        When the vectors have different lengths.
    RetrievalError
        When either vector has a NaN or infinite component.
    """
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    if va.shape != vb.shape:
        raise DimensionMismatchError(va.size, vb.size)
    if not (np.isfinite(va).all() and np.isfinite(vb).all()):
        raise RetrievalError("Cannot score a vector with non-finite components")

    scale_a = float(np.max(np.abs(va), initial=0.0))
    scale_b = float(np.max(np.abs(vb), initial=0.0))
    if scale_a == 0.0 or scale_b == 0.0:
        return 0.0
    va = va / scale_a
    vb = vb / scale_b

    norm_sq_a = float(np.dot(va, va))
    norm_sq_b = float(np.dot(vb, vb))
    score = float(np.dot(va, vb)) / math.sqrt(norm_sq_a * norm_sq_b)
    if not math.isfinite(score):
        raise RetrievalError(f"Cosine similarity is not finite: {score}")
    # Rounding can push |score| a hair past 1.
    return max(-1.0, min(1.0, score))


def score_segments(
    query_vector: Sequence[float],
    segments: Sequence[Segment],
    vectors: Sequence[Sequence[float]],
) -> dict[Segment, float]:
    """Score every segment against the query.

    Parameters
    ----------
    query_vector:
        Embedding of the query.
    segments:
        Corpus segments in corpus order.
    vectors:
        Embeddings index-aligned with *segments*.

    Returns
    -------
    dict[Segment, float]
        Score per segment, in corpus order.
    """
    if len(segments) != len(vectors):
        raise ValueError(f"Got {len(vectors)} vectors for {len(segments)} segments")

    logger.debug("Scoring %d segments", len(segments))
    return {segment: cosine_similarity(query_vector, vector) for segment, vector in zip(segments, vectors)}
