"""Tests for godox.loader."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from godox.errors import ParseError, SourceIOError
from godox.loader import LoaderOptions, PackageLoader, SourcePackage
from tests._fixtures.go_tree import GoTreeBuilder


def test_load_merges_same_package_across_directories(go_tree: GoTreeBuilder) -> None:
    go_tree.write(
        {
            "a/one.go": "package p\n\nfunc One() {}\n",
            "b/nested/two.go": "package p\n\nfunc Two() {}\n",
            "main.go": "package main\n\nfunc main() {}\n",
        }
    )

    packages = PackageLoader().load(go_tree.path())

    assert sorted(packages) == ["main", "p"]
    assert packages["p"].name == "p"
    assert [path for path, _ in packages["p"].sorted_files()] == ["a/one.go", "b/nested/two.go"]


def test_merge_is_independent_of_insertion_order(go_tree: GoTreeBuilder) -> None:
    go_tree.write(
        {
            "z/last.go": "package p\n",
            "a/first.go": "package p\n",
        }
    )
    loaded = PackageLoader().load(go_tree.path())["p"]

    reversed_package = SourcePackage(name="p")
    for rel_path, source_file in reversed(loaded.sorted_files()):
        reversed_package.add(rel_path, source_file)

    assert [path for path, _ in reversed_package.sorted_files()] == ["a/first.go", "z/last.go"]
    assert reversed_package.sorted_files() == loaded.sorted_files()


def test_file_filter_predicate_is_applied(go_tree: GoTreeBuilder) -> None:
    go_tree.write({"keep.go": "package p\n", "drop.go": "package p\n"})

    loader = PackageLoader(options=LoaderOptions(file_filter=lambda path: path.name != "drop.go"))

    assert list(loader.load(go_tree.path())["p"].files) == ["keep.go"]


def test_merge_can_be_disabled(go_tree: GoTreeBuilder) -> None:
    go_tree.write(
        {
            "root.go": "package p\n",
            "a/one.go": "package p\n",
            "b/two.go": "package p\n",
        }
    )

    packages = PackageLoader(options=LoaderOptions(merge_packages=False)).load(go_tree.path())

    assert sorted(packages) == ["a/p", "b/p", "p"]
    assert {package.name for package in packages.values()} == {"p"}
    assert list(packages["a/p"].files) == ["a/one.go"]


def test_non_recursive_load_reads_only_root(go_tree: GoTreeBuilder) -> None:
    go_tree.write(
        {
            "root.go": "package p\n",
            "sub/child.go": "package q\n",
        }
    )

    packages = PackageLoader(options=LoaderOptions(recursive=False)).load(go_tree.path())

    assert list(packages) == ["p"]


def test_load_filters_files(go_tree: GoTreeBuilder) -> None:
    go_tree.write(
        {
            "lib.go": "package p\n",
            "lib_test.go": "package p\n",
            "README.md": "# not go\n",
            "vendor/dep/dep.go": "package dep\n",
            ".git/hooks/x.go": "package hooks\n",
        }
    )

    options = LoaderOptions(include_tests=False, exclude_paths=["vendor/"])
    packages = PackageLoader(options=options).load(go_tree.path())

    assert list(packages) == ["p"]
    assert list(packages["p"].files) == ["lib.go"]


def test_first_parse_error_aborts_load(go_tree: GoTreeBuilder) -> None:
    go_tree.write(
        {
            "good.go": "package p\n\nfunc Good() {}\n",
            "sub/bad.go": "package p\n\nfunc Bad( {\n",
        }
    )

    with pytest.raises(ParseError) as excinfo:
        PackageLoader().load(go_tree.path())
    assert excinfo.value.path.endswith("bad.go")


def test_missing_root_is_an_io_error(tmp_path: Path) -> None:
    with pytest.raises(SourceIOError):
        PackageLoader().load(tmp_path / "missing")


def test_file_root_is_an_io_error(tmp_path: Path) -> None:
    target = tmp_path / "single.go"
    target.write_text("package p\n", encoding="utf-8")
    with pytest.raises(SourceIOError):
        PackageLoader().load(target)


def test_unreadable_subdirectory_is_an_io_error(
    go_tree: GoTreeBuilder, monkeypatch: pytest.MonkeyPatch
) -> None:
    go_tree.write(
        {
            "root.go": "package demo\n",
            "sub/child.go": "package demo\n",
        }
    )
    real_scandir = os.scandir

    def scandir(path):  # type: ignore[no-untyped-def]
        if Path(path).name == "sub":
            raise PermissionError(13, "Permission denied", str(path))
        return real_scandir(path)

    monkeypatch.setattr(os, "scandir", scandir)

    with pytest.raises(SourceIOError) as excinfo:
        PackageLoader().load(go_tree.path())
    assert excinfo.value.path == str(go_tree.path() / "sub")
    assert "Permission denied" in str(excinfo.value)
