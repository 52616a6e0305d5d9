"""Unit tests for the agent-facing knowledge base tools."""

from __future__ import annotations

from pathlib import Path

import pytest

from docintel.errors import ExtractionError
from docintel.ingestion.embedder import EmbeddingGateway
from docintel.retrieval.retriever import ContextRetriever
from docintel.tools import TRUNCATION_MARKER, build_knowledge_base_tools, read_document


@pytest.fixture()
def kb_dir(tmp_path: Path) -> Path:
    (tmp_path / "a.txt").write_text("alpha", encoding="utf-8")
    (tmp_path / "b.txt").write_text("alpha beta", encoding="utf-8")
    return tmp_path


@pytest.fixture()
def tools(kb_dir: Path, gateway: EmbeddingGateway) -> dict:
    built = build_knowledge_base_tools(ContextRetriever(kb_dir, gateway), max_chars=50)
    return {t.name: t for t in built}


def test_tool_names(tools: dict) -> None:
    assert set(tools) == {"search_documents", "summarize_document"}


class TestSearchDocuments:
    def test_blocks_joined_with_separator(self, tools: dict) -> None:
        result = tools["search_documents"].invoke({"query": "alpha"})
        assert result == (
            "Source File: a.txt\nContent: alpha\n"
            "---\n"
            "Source File: b.txt\nContent: alpha beta"
        )

    def test_empty_knowledge_base(self, tmp_path: Path, gateway: EmbeddingGateway) -> None:
        search, _ = build_knowledge_base_tools(ContextRetriever(tmp_path, gateway))
        assert search.invoke({"query": "alpha"}) == ""


class TestSummarizeDocument:
    def test_returns_full_content(self, tools: dict) -> None:
        result = tools["summarize_document"].invoke({"file_name": "b.txt"})
        assert result == "Full Content of b.txt:\nalpha beta"

    def test_long_document_truncated(self, kb_dir: Path, tools: dict) -> None:
        (kb_dir / "long.txt").write_text("x" * 80, encoding="utf-8")
        result = tools["summarize_document"].invoke({"file_name": "long.txt"})
        assert result == "Full Content of long.txt:\n" + "x" * 50 + TRUNCATION_MARKER

    @pytest.mark.parametrize("name", ["missing.txt", "../a.txt", "image.png"])
    def test_unreadable_names_reported(self, tools: dict, name: str) -> None:
        result = tools["summarize_document"].invoke({"file_name": name})
        assert result == f"Error: Could not find or read {name}. Ensure the name is correct."


class TestReadDocument:
    def test_lines_kept_on_separate_lines(self, tmp_path: Path) -> None:
        (tmp_path / "notes.txt").write_text("line one\nline two\n", encoding="utf-8")
        assert read_document(tmp_path, "notes.txt") == "line one\nline two"

    def test_rejects_nested_paths(self, tmp_path: Path) -> None:
        nested = tmp_path / "sub"
        nested.mkdir()
        (nested / "inner.txt").write_text("hidden", encoding="utf-8")
        with pytest.raises(ExtractionError):
            read_document(tmp_path, "sub/inner.txt")
