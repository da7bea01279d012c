"""Directory walking and package aggregation for Go source trees."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional, Sequence

from .errors import SourceIOError
from .logging import get_logger
from .syntax import GoParser, SourceFile

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "node_modules",
    "__pycache__",
    ".idea",
}

_SOURCE_SUFFIX = ".go"
_TEST_SUFFIX = "_test.go"


@dataclass
class LoaderOptions:
    """How a source tree is walked and grouped into packages.

    ``merge_packages`` folds files that declare the same package name into one
    package even when they live in different directories. Turning it off keeps
    the usual one-directory-one-package view, keyed by ``<dir>/<name>``.
    """

    recursive: bool = True
    merge_packages: bool = True
    include_tests: bool = True
    exclude_paths: List[str] = field(default_factory=list)
    file_filter: Optional[Callable[[Path], bool]] = None


@dataclass
class SourcePackage:
    """Parsed files grouped under one package name, keyed by relative path."""

    name: str
    files: Dict[str, SourceFile] = field(default_factory=dict)

    def add(self, rel_path: str, source_file: SourceFile) -> None:
        self.files[rel_path] = source_file

    def sorted_files(self) -> List[tuple[str, SourceFile]]:
        return sorted(self.files.items())


@dataclass
class IgnoreRule:
    """Represents an exclude pattern from .godox.yml."""

    pattern: str
    directory_only: bool
    anchored: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        if self.anchored or self.has_slash:
            if fnmatchcase(rel_path, self.pattern):
                return True
            if self.directory_only and rel_path.startswith(f"{self.pattern}/"):
                return True
            return False

        return any(fnmatchcase(part, self.pattern) for part in rel_path.split("/"))


def build_ignore_rule(pattern: str) -> IgnoreRule | None:
    pattern = pattern.strip()
    if not pattern:
        return None

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern[:-1]

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]

    return IgnoreRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        has_slash="/" in pattern,
    )


def _should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    return any(rule.matches(rel_path, is_dir) for rule in rules)


def _raise_walk_error(exc: OSError) -> None:
    raise SourceIOError(exc.filename or "<unknown>", exc.strerror or str(exc)) from exc


class PackageLoader:
    """Walks a directory tree and groups parsed Go files by package name."""

    def __init__(self, parser: GoParser | None = None, options: LoaderOptions | None = None) -> None:
        self.parser = parser or GoParser()
        self.options = options or LoaderOptions()
        self.logger = get_logger("loader")

    def load(self, root: Path | str) -> Dict[str, SourcePackage]:
        """Parse every eligible file below ``root``; the first failure aborts the load."""
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise SourceIOError(root, "no such directory")
        if not root_path.is_dir():
            raise SourceIOError(root, "not a directory")

        rules = [
            rule
            for rule in (build_ignore_rule(pattern) for pattern in self.options.exclude_paths)
            if rule is not None
        ]

        packages: Dict[str, SourcePackage] = {}
        for rel_dir, path in self._iter_sources(root_path, rules):
            source_file = self.parser.parse_file(path)
            rel_path = path.relative_to(root_path).as_posix()
            key = self._package_key(source_file.package, rel_dir)
            package = packages.get(key)
            if package is None:
                package = SourcePackage(name=source_file.package)
                packages[key] = package
            package.add(rel_path, source_file)
            self.logger.debug("Parsed %s (package %s)", rel_path, source_file.package)

        self.logger.info(
            "Loaded %d package(s) from %d file(s) under %s",
            len(packages),
            sum(len(package.files) for package in packages.values()),
            root_path,
        )
        return packages

    def _package_key(self, name: str, rel_dir: str) -> str:
        if self.options.merge_packages or not rel_dir:
            return name
        return f"{rel_dir}/{name}"

    def _iter_sources(self, root: Path, rules: Sequence[IgnoreRule]) -> Iterator[tuple[str, Path]]:
        for dirpath, dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
            current_dir = Path(dirpath)
            rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

            if not self.options.recursive:
                dirnames[:] = []
            else:
                kept = []
                for name in sorted(dirnames):
                    rel_path = f"{rel_dir}/{name}" if rel_dir else name
                    if name in _EXCLUDED_DIRS or _should_ignore(rel_path, True, rules):
                        continue
                    kept.append(name)
                dirnames[:] = kept

            for filename in sorted(filenames):
                rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
                path = current_dir / filename
                if self._eligible(path, rel_path, rules):
                    yield rel_dir, path

    def _eligible(self, path: Path, rel_path: str, rules: Sequence[IgnoreRule]) -> bool:
        if not path.name.endswith(_SOURCE_SUFFIX):
            return False
        if not self.options.include_tests and path.name.endswith(_TEST_SUFFIX):
            return False
        if _should_ignore(rel_path, False, rules):
            return False
        if self.options.file_filter is not None and not self.options.file_filter(path):
            return False
        return True


__all__ = ["IgnoreRule", "LoaderOptions", "PackageLoader", "SourcePackage", "build_ignore_rule"]
