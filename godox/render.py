"""Recursive renderer from Go type syntax to documentation ``TypeNode`` trees."""

from __future__ import annotations

from typing import List, Optional, Tuple

from tree_sitter import Node

from .errors import UnsupportedExprError
from .models import (
    Array,
    FuncDecl,
    FuncType,
    Ident,
    MapType,
    Pointer,
    Selector,
    StructField,
    StructType,
    TypeNode,
)
from .syntax import node_text


def render_type(node: Node, source: bytes) -> TypeNode:
    """Render one type expression, failing on shapes outside the supported set."""
    kind = node.type
    if kind in ("type_identifier", "identifier"):
        return Ident(node_text(node, source))
    if kind == "parenthesized_type":
        return render_type(_only_named_child(node, source), source)
    if kind == "slice_type":
        return Array(render_type(_field(node, "element", source), source))
    if kind == "array_type":
        length = node_text(_field(node, "length", source), source)
        return Array(render_type(_field(node, "element", source), source), length=length)
    if kind == "pointer_type":
        return Pointer(render_type(_only_named_child(node, source), source))
    if kind == "qualified_type":
        package = _field(node, "package", source)
        name = _field(node, "name", source)
        return Selector(Ident(node_text(package, source)), node_text(name, source))
    if kind == "function_type":
        return FuncType(
            params=render_parameters(_field(node, "parameters", source), source),
            results=render_results(node.child_by_field_name("result"), source),
        )
    if kind == "map_type":
        return MapType(
            key=render_type(_field(node, "key", source), source),
            value=render_type(_field(node, "value", source), source),
        )
    if kind == "struct_type":
        return _render_struct(node, source)
    raise UnsupportedExprError(kind, node_text(node, source), line=node.start_point[0] + 1)


def render_parameters(parameters: Node, source: bytes) -> Tuple[TypeNode, ...]:
    """Render a parameter list, one entry per declared name.

    ``(a, b int)`` yields two ``int`` entries; an unnamed parameter yields one.
    """
    rendered: List[TypeNode] = []
    for child in parameters.named_children:
        if child.type == "comment":
            continue
        if child.type != "parameter_declaration":
            raise UnsupportedExprError(
                child.type, node_text(child, source), line=child.start_point[0] + 1
            )
        typ = render_type(_field(child, "type", source), source)
        names = child.children_by_field_name("name")
        rendered.extend([typ] * max(len(names), 1))
    return tuple(rendered)


def render_results(result: Optional[Node], source: bytes) -> Tuple[TypeNode, ...]:
    """Render a result clause; an absent clause is an empty sequence."""
    if result is None:
        return ()
    if result.type == "parameter_list":
        return render_parameters(result, source)
    return (render_type(result, source),)


def _render_struct(node: Node, source: bytes) -> StructType:
    field_list = next(
        (child for child in node.named_children if child.type == "field_declaration_list"),
        None,
    )
    if field_list is None:
        return StructType()

    fields: List[StructField] = []
    for declaration in field_list.named_children:
        if declaration.type != "field_declaration":
            continue
        names = tuple(
            node_text(name, source) for name in declaration.children_by_field_name("name")
        )
        typ = render_type(_field(declaration, "type", source), source)
        if not names and any(child.type == "*" for child in declaration.children):
            typ = Pointer(typ)
        tag = declaration.child_by_field_name("tag")
        fields.append(
            StructField(
                names=names,
                type=typ,
                raw_tag=node_text(tag, source) if tag is not None else None,
            )
        )
    return StructType(tuple(fields))


def _field(node: Node, name: str, source: bytes) -> Node:
    child = node.child_by_field_name(name)
    if child is None:
        raise UnsupportedExprError(node.type, node_text(node, source), line=node.start_point[0] + 1)
    return child


def _only_named_child(node: Node, source: bytes) -> Node:
    children = [child for child in node.named_children if child.type != "comment"]
    if len(children) != 1:
        raise UnsupportedExprError(node.type, node_text(node, source), line=node.start_point[0] + 1)
    return children[0]


def format_type(node: TypeNode) -> str:
    """Flatten a rendered type back to Go-like text, e.g. ``*pkg.T``."""
    if isinstance(node, Ident):
        return node.name
    if isinstance(node, Array):
        return f"[{node.length or ''}]{format_type(node.element)}"
    if isinstance(node, Pointer):
        return f"*{format_type(node.element)}"
    if isinstance(node, Selector):
        return f"{format_type(node.base)}.{node.member}"
    if isinstance(node, MapType):
        return f"map[{format_type(node.key)}]{format_type(node.value)}"
    if isinstance(node, FuncType):
        return "func" + _format_signature_tail(node.params, node.results)
    if isinstance(node, StructType):
        if not node.fields:
            return "struct{}"
        return "struct { " + "; ".join(_format_field(field) for field in node.fields) + " }"
    raise TypeError(f"not a TypeNode: {node!r}")


def format_signature(decl: FuncDecl) -> str:
    """Return ``func (recv) Name(params) results`` for a function declaration."""
    receiver = f"({format_type(decl.receiver)}) " if decl.receiver is not None else ""
    return f"func {receiver}{decl.name}" + _format_signature_tail(decl.params, decl.results)


def _format_signature_tail(params: Tuple[TypeNode, ...], results: Tuple[TypeNode, ...]) -> str:
    text = "(" + ", ".join(format_type(param) for param in params) + ")"
    if len(results) == 1:
        return f"{text} {format_type(results[0])}"
    if results:
        return f"{text} (" + ", ".join(format_type(result) for result in results) + ")"
    return text


def _format_field(field: StructField) -> str:
    parts = []
    if field.names:
        parts.append(", ".join(field.names))
    parts.append(format_type(field.type))
    if field.raw_tag is not None:
        parts.append(field.raw_tag)
    return " ".join(parts)


__all__ = [
    "format_signature",
    "format_type",
    "render_parameters",
    "render_results",
    "render_type",
]
