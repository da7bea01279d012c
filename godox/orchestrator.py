"""Pipeline orchestration: load, classify/render, aggregate, serialize."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import List, Mapping, Tuple

from .classifier import ClassifyOptions, DeclarationClassifier
from .config import GodoxConfig, load_config
from .loader import LoaderOptions, PackageLoader, SourcePackage
from .logging import get_logger
from .models import Documentation, File, Package, TypeDecl
from .serializer import to_json, to_text
from .syntax import GoParser


def build_documentation(
    sources: Mapping[str, SourcePackage], classifier: DeclarationClassifier
) -> Documentation:
    """Aggregate classified packages, ordered by package key then file path.

    The type index is collected before the exported-only policy applies, so
    unexported types still resolve to their defining file.
    """
    packages = []
    type_index: List[Tuple[str, str]] = []
    for key in sorted(sources):
        source_package = sources[key]
        files = []
        for rel_path, source_file in source_package.sorted_files():
            decls = classifier.classify_all(source_file, rel_path)
            type_index.extend(
                (decl.name, rel_path) for decl in decls if isinstance(decl, TypeDecl)
            )
            files.append(
                File(
                    name=rel_path,
                    decls=tuple(classifier.apply_policy(decls)),
                    doc=source_file.doc,
                )
            )
        packages.append(
            Package(
                name=source_package.name,
                files=tuple(files),
                key=key if key != source_package.name else None,
            )
        )
    return Documentation(packages=tuple(packages), type_index=tuple(type_index))


class Orchestrator:
    """Runs the documentation pipeline for one source root."""

    def __init__(self, parser: GoParser | None = None) -> None:
        self.parser = parser or GoParser()
        self.logger = get_logger("orchestrator")

    def load_config(self, path: str | Path) -> GodoxConfig:
        return load_config(Path(path).expanduser())

    def build(self, path: str | Path, *, config: GodoxConfig | None = None) -> Documentation:
        """Build the documentation model; any load, parse or render error propagates."""
        root = Path(path).expanduser()
        config = config or self.load_config(root)
        self.logger.info("Building documentation for %s", root)

        loader = PackageLoader(
            self.parser,
            LoaderOptions(
                recursive=config.loader.recursive,
                merge_packages=config.loader.merge_packages,
                include_tests=config.loader.include_tests,
                exclude_paths=list(config.loader.exclude_paths),
            ),
        )
        classifier = DeclarationClassifier(
            ClassifyOptions(
                exported_only=config.render.exported_only,
                on_unsupported=config.render.on_unsupported,
            )
        )
        documentation = build_documentation(loader.load(root), classifier)
        self.logger.debug(
            "Documented %d package(s), %d declaration(s)",
            len(documentation.packages),
            sum(len(package.decls) for package in documentation.packages),
        )
        return documentation

    def render_json(self, path: str | Path, *, config: GodoxConfig | None = None) -> str:
        return to_json(self.build(path, config=config))

    def render_text(self, path: str | Path, *, config: GodoxConfig | None = None) -> str:
        return to_text(self.build(path, config=config))


def with_overrides(
    config: GodoxConfig,
    *,
    exported_only: bool | None = None,
    merge_packages: bool | None = None,
    recursive: bool | None = None,
    on_unsupported: str | None = None,
) -> GodoxConfig:
    """Return ``config`` with command-line overrides applied."""
    loader = config.loader
    if merge_packages is not None:
        loader = replace(loader, merge_packages=merge_packages)
    if recursive is not None:
        loader = replace(loader, recursive=recursive)
    render = config.render
    if exported_only is not None:
        render = replace(render, exported_only=exported_only)
    if on_unsupported is not None:
        render = replace(render, on_unsupported=on_unsupported)
    return replace(config, loader=loader, render=render)


__all__ = ["Orchestrator", "build_documentation", "with_overrides"]
