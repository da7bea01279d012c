"""Classify top-level Go declarations into documentation ``Decl`` values."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Iterator, List, Optional, Sequence

from tree_sitter import Node

from .errors import UnsupportedExprError
from .logging import get_logger
from .models import Decl, FuncDecl, TypeDecl, VarGroup, VarItem
from .render import render_parameters, render_results, render_type
from .syntax import SourceFile, doc_comment, node_text

ON_UNSUPPORTED_CHOICES = ("fail", "skip")

_FUNCTION_KINDS = ("function_declaration", "method_declaration")


@dataclass
class ClassifyOptions:
    """Caller-selected policy for building the documentation view.

    ``exported_only`` keeps only exported functions and types and filters
    variable names to exported ones. ``on_unsupported`` decides whether an
    unsupported type expression aborts the run (``"fail"``) or drops just the
    declaration containing it (``"skip"``).
    """

    exported_only: bool = True
    on_unsupported: str = "fail"

    def __post_init__(self) -> None:
        if self.on_unsupported not in ON_UNSUPPORTED_CHOICES:
            raise ValueError(
                f"on_unsupported must be one of {', '.join(ON_UNSUPPORTED_CHOICES)}, "
                f"got {self.on_unsupported!r}"
            )


def is_exported(name: str) -> bool:
    return name[:1].isupper()


class DeclarationClassifier:
    """Partitions a file's declarations into functions, var groups and types."""

    def __init__(self, options: ClassifyOptions | None = None) -> None:
        self.options = options or ClassifyOptions()
        self.logger = get_logger("classifier")

    def classify(self, source_file: SourceFile, name: str | None = None) -> List[Decl]:
        """Return the file's declarations in source order under the current policy."""
        return self.apply_policy(self.classify_all(source_file, name))

    def classify_all(self, source_file: SourceFile, name: str | None = None) -> List[Decl]:
        """Return every recognised declaration, exported or not."""
        label = name or str(source_file.path)
        decls: List[Decl] = []
        for node in source_file.root.named_children:
            try:
                decls.extend(self._classify_node(node, source_file.source))
            except UnsupportedExprError as exc:
                located = exc.at(label)
                if self.options.on_unsupported == "fail":
                    raise located from exc
                self.logger.warning("Skipping declaration: %s", located)
        return decls

    def apply_policy(self, decls: Iterable[Decl]) -> List[Decl]:
        if self.options.exported_only:
            return exported_view(decls)
        return list(decls)

    def _classify_node(self, node: Node, source: bytes) -> List[Decl]:
        if node.type in _FUNCTION_KINDS:
            return [self._function(node, source)]
        if node.type == "type_declaration":
            return self._types(node, source)
        if node.type == "var_declaration":
            return [self._var_group(node, source)]
        return []

    def _function(self, node: Node, source: bytes) -> FuncDecl:
        _reject_type_parameters(node, source)
        receiver = None
        receiver_list = node.child_by_field_name("receiver")
        if receiver_list is not None:
            rendered = render_parameters(receiver_list, source)
            if rendered:
                receiver = rendered[0]
        name = node.child_by_field_name("name")
        parameters = node.child_by_field_name("parameters")
        return FuncDecl(
            name=node_text(name, source) if name is not None else "",
            params=render_parameters(parameters, source) if parameters is not None else (),
            results=render_results(node.child_by_field_name("result"), source),
            doc=doc_comment(node, source),
            receiver=receiver,
        )

    def _types(self, node: Node, source: bytes) -> List[Decl]:
        specs = list(_specs(node, ("type_spec", "type_alias")))
        group_doc = doc_comment(node, source)
        decls: List[Decl] = []
        for spec in specs:
            _reject_type_parameters(spec, source)
            name = spec.child_by_field_name("name")
            typ = spec.child_by_field_name("type")
            if name is None or typ is None:
                continue
            doc = doc_comment(spec, source)
            if doc is None and len(specs) == 1:
                doc = group_doc
            decls.append(
                TypeDecl(name=node_text(name, source), type=render_type(typ, source), doc=doc)
            )
        return decls

    def _var_group(self, node: Node, source: bytes) -> VarGroup:
        items: List[VarItem] = []
        for spec in _specs(node, ("var_spec",)):
            typ = spec.child_by_field_name("type")
            items.append(
                VarItem(
                    names=tuple(
                        node_text(name, source) for name in spec.children_by_field_name("name")
                    ),
                    doc=doc_comment(spec, source),
                    type=render_type(typ, source) if typ is not None else None,
                )
            )
        return VarGroup(items=tuple(items), doc=doc_comment(node, source))


def exported_view(decls: Iterable[Decl]) -> List[Decl]:
    """Return the public view: exported functions/types, exported var names only.

    A var group is kept even when none of its names survive the filter.
    """
    view: List[Decl] = []
    for decl in decls:
        if isinstance(decl, (FuncDecl, TypeDecl)):
            if is_exported(decl.name):
                view.append(decl)
        elif isinstance(decl, VarGroup):
            items = tuple(
                replace(item, names=tuple(name for name in item.names if is_exported(name)))
                for item in decl.items
            )
            view.append(replace(decl, items=items))
    return view


def _specs(node: Node, kinds: Sequence[str]) -> Iterator[Node]:
    for child in node.named_children:
        if child.type in kinds:
            yield child
        elif child.type.endswith("_spec_list"):
            yield from _specs(child, kinds)


def _reject_type_parameters(node: Node, source: bytes) -> None:
    params: Optional[Node] = node.child_by_field_name("type_parameters")
    if params is not None:
        raise UnsupportedExprError(
            params.type, node_text(params, source), line=params.start_point[0] + 1
        )


__all__ = [
    "ClassifyOptions",
    "DeclarationClassifier",
    "ON_UNSUPPORTED_CHOICES",
    "exported_view",
    "is_exported",
]
