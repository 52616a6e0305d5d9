"""FastAPI application exposing the retriever as a REST API."""

from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from docintel import __version__
from docintel.errors import RetrievalError
from docintel.retrieval.retriever import ContextRetriever

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Document Intelligence Retrieval API",
    version=__version__,
    description="Ranks a document folder against a query and returns source-attributed context.",
)


@lru_cache(maxsize=1)
def get_retriever() -> ContextRetriever:
    """Build the process-wide retriever from settings on first use."""
    return ContextRetriever.from_settings()


# ── Request / Response schemas ────────────────────────────────────────
class RetrieveRequest(BaseModel):
    """Incoming query."""

    query: str
    top_k: int | None = Field(default=None, ge=0)


class BlockPayload(BaseModel):
    """One attributed context block."""

    source: str
    chunk_index: int | None = None
    score: float | None = None
    text: str


class RetrieveResponse(BaseModel):
    """Ranked context for the query, best first."""

    query: str
    blocks: list[BlockPayload] = []


# ── Error handling ────────────────────────────────────────────────────
@app.exception_handler(RetrievalError)
async def retrieval_error_handler(request: Request, exc: RetrievalError) -> JSONResponse:
    """Report a failed retrieval without leaking internals."""
    logger.error("Retrieval failed for %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=502,
        content={"error": "retrieval_failed", "detail": "Retrieval failed"},
    )


# ── Routes ────────────────────────────────────────────────────────────
@app.get("/health")
async def health() -> dict[str, str]:
    """Liveness probe."""
    return {"status": "ok"}


@app.post("/retrieve", response_model=RetrieveResponse)
def retrieve(request: RetrieveRequest, retriever: ContextRetriever = Depends(get_retriever)) -> RetrieveResponse:
    """Rank the configured directory against the query."""
    blocks = retriever.retrieve(request.query, k=request.top_k)
    return RetrieveResponse(
        query=request.query,
        blocks=[
            BlockPayload(
                source=block.citation.source,
                chunk_index=block.citation.chunk_index,
                score=block.citation.score,
                text=block.text,
            )
            for block in blocks
        ],
    )
