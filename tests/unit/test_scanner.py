"""Unit tests for directory scanning and format resolution."""

from __future__ import annotations

from pathlib import Path

import pytest

from docintel.ingestion.formats import SUPPORTED_EXTENSIONS, DocumentFormat
from docintel.ingestion.scanner import scan_directory


class TestDocumentFormat:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("notes.txt", DocumentFormat.TEXT),
            ("README.md", DocumentFormat.MARKDOWN),
            ("guide.markdown", DocumentFormat.MARKDOWN),
            ("paper.PDF", DocumentFormat.PDF),
            ("report.docx", DocumentFormat.DOCX),
            ("table.csv", DocumentFormat.CSV),
            ("data.json", DocumentFormat.JSON),
        ],
    )
    def test_supported(self, name: str, expected: DocumentFormat) -> None:
        assert DocumentFormat.from_path(name) is expected

    @pytest.mark.parametrize("name", ["image.png", "archive.zip", "Makefile", "legacy.doc"])
    def test_unsupported(self, name: str) -> None:
        assert DocumentFormat.from_path(name) is None

    def test_every_format_has_an_extension(self) -> None:
        resolved = {DocumentFormat.from_path(f"x{ext}") for ext in SUPPORTED_EXTENSIONS}
        assert resolved == set(DocumentFormat)


class TestScanDirectory:
    def test_filters_to_supported_files(self, tmp_path: Path) -> None:
        (tmp_path / "a.txt").write_text("a")
        (tmp_path / "b.md").write_text("b")
        (tmp_path / "c.png").write_bytes(b"\x89PNG")
        names = [f.path.name for f in scan_directory(tmp_path)]
        assert names == ["a.txt", "b.md"]

    def test_formats_resolved_at_scan_time(self, tmp_path: Path) -> None:
        (tmp_path / "data.json").write_text("{}")
        (tmp_path / "table.csv").write_text("a,b")
        formats = {f.path.name: f.format for f in scan_directory(tmp_path)}
        assert formats == {"data.json": DocumentFormat.JSON, "table.csv": DocumentFormat.CSV}

    def test_sorted_by_name(self, tmp_path: Path) -> None:
        for name in ["zeta.txt", "alpha.txt", "mid.txt"]:
            (tmp_path / name).write_text(name)
        assert [f.path.name for f in scan_directory(tmp_path)] == ["alpha.txt", "mid.txt", "zeta.txt"]

    def test_subdirectories_not_traversed(self, tmp_path: Path) -> None:
        nested = tmp_path / "nested"
        nested.mkdir()
        (nested / "deep.txt").write_text("deep")
        (tmp_path / "folder.txt").mkdir()  # directory with a supported suffix
        (tmp_path / "top.txt").write_text("top")
        assert [f.path.name for f in scan_directory(tmp_path)] == ["top.txt"]

    def test_missing_directory_returns_empty(self, tmp_path: Path) -> None:
        assert scan_directory(tmp_path / "does-not-exist") == []

    def test_file_instead_of_directory_returns_empty(self, tmp_path: Path) -> None:
        target = tmp_path / "file.txt"
        target.write_text("x")
        assert scan_directory(target) == []

    def test_empty_directory(self, tmp_path: Path) -> None:
        assert scan_directory(tmp_path) == []

    def test_accepts_string_path(self, tmp_path: Path) -> None:
        (tmp_path / "a.txt").write_text("a")
        assert len(scan_directory(str(tmp_path))) == 1
