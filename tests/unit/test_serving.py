"""Unit tests for the serving layer."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from conftest import FailingEmbeddings
from fastapi.testclient import TestClient

from docintel.ingestion.embedder import EmbeddingGateway
from docintel.retrieval.retriever import ContextRetriever
from docintel.serving.app import app, get_retriever


@pytest.fixture()
def client() -> Iterator[TestClient]:
    yield TestClient(app)
    app.dependency_overrides.clear()


def _use(retriever: ContextRetriever) -> None:
    app.dependency_overrides[get_retriever] = lambda: retriever


def test_health_endpoint(client: TestClient) -> None:
    """GET /health should return 200 with status ok."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


class TestRetrieveEndpoint:
    def test_returns_ranked_blocks(self, client: TestClient, tmp_path: Path, gateway: EmbeddingGateway) -> None:
        (tmp_path / "a.txt").write_text("alpha", encoding="utf-8")
        (tmp_path / "b.txt").write_text("beta", encoding="utf-8")
        _use(ContextRetriever(tmp_path, gateway))

        response = client.post("/retrieve", json={"query": "alpha", "top_k": 1})

        assert response.status_code == 200
        body = response.json()
        assert body["query"] == "alpha"
        assert len(body["blocks"]) == 1
        block = body["blocks"][0]
        assert block["source"] == "a.txt"
        assert block["chunk_index"] == 0
        assert block["score"] == pytest.approx(1.0)
        assert block["text"] == "Source File: a.txt\nContent: alpha"

    def test_empty_folder_returns_no_blocks(self, client: TestClient, tmp_path: Path, gateway: EmbeddingGateway) -> None:
        _use(ContextRetriever(tmp_path, gateway))
        response = client.post("/retrieve", json={"query": "alpha"})
        assert response.status_code == 200
        assert response.json() == {"query": "alpha", "blocks": []}

    def test_negative_top_k_rejected(self, client: TestClient, tmp_path: Path, gateway: EmbeddingGateway) -> None:
        _use(ContextRetriever(tmp_path, gateway))
        response = client.post("/retrieve", json={"query": "alpha", "top_k": -1})
        assert response.status_code == 422

    def test_embedding_outage_maps_to_502(self, client: TestClient, tmp_path: Path) -> None:
        (tmp_path / "a.txt").write_text("alpha", encoding="utf-8")
        _use(ContextRetriever(tmp_path, EmbeddingGateway(FailingEmbeddings(), max_retries=1)))

        response = client.post("/retrieve", json={"query": "alpha"})

        assert response.status_code == 502
        assert response.json() == {"error": "retrieval_failed", "detail": "Retrieval failed"}
