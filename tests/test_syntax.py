"""Tests for godox.syntax."""

from __future__ import annotations

from pathlib import Path

import pytest

from godox.errors import ParseError, SourceIOError
from godox.syntax import GoParser, comment_text
from tests._fixtures.go_tree import parse_go


def test_parse_reads_package_name_and_file_doc() -> None:
    source_file = parse_go(
        """
        //go:build linux

        // Package demo shows things.
        //
        // It has two paragraphs.
        package demo
        """
    )
    assert source_file.package == "demo"
    assert source_file.doc == "Package demo shows things.\n\nIt has two paragraphs.\n"


def test_parse_without_file_doc() -> None:
    source_file = parse_go("package demo\n")
    assert source_file.doc is None


def test_syntax_error_reports_location(tmp_path: Path) -> None:
    with pytest.raises(ParseError) as excinfo:
        GoParser().parse_bytes(b"package demo\n\nfunc Broken( {\n", Path("broken.go"))
    assert excinfo.value.path == "broken.go"
    assert excinfo.value.line is not None
    assert "broken.go" in str(excinfo.value)


def test_missing_package_clause_is_a_parse_error() -> None:
    with pytest.raises(ParseError):
        GoParser().parse_bytes(b"var x = 1\n", Path("nopkg.go"))


def test_invalid_utf8_is_a_parse_error() -> None:
    with pytest.raises(ParseError):
        GoParser().parse_bytes(b"package p\n// \xff\xfe\n", Path("latin.go"))


def test_unreadable_file_is_an_io_error(tmp_path: Path) -> None:
    with pytest.raises(SourceIOError) as excinfo:
        GoParser().parse_file(tmp_path / "missing.go")
    assert "missing.go" in str(excinfo.value)


def test_comment_text_strips_markers_and_collapses_blank_lines() -> None:
    raw = ["// First line.", "//", "//", "//  indented", "/* block\n   body */"]
    assert comment_text(raw) == "First line.\n\n indented\n block\n   body\n"


def test_comment_text_drops_directives() -> None:
    assert comment_text(["//go:generate stringer -type=Kind"]) is None
    assert comment_text(["// Doc.", "//go:noinline"]) == "Doc.\n"
