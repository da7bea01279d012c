"""JSON and plain-text projections of the documentation model."""

from __future__ import annotations

import json
from typing import Any, Dict, List

from .models import (
    Array,
    Decl,
    Documentation,
    File,
    FuncDecl,
    FuncType,
    Ident,
    MapType,
    Package,
    Pointer,
    Selector,
    StructField,
    StructType,
    TypeDecl,
    TypeNode,
    VarGroup,
    VarItem,
)
from .render import format_signature, format_type


def type_to_dict(node: TypeNode) -> Dict[str, Any]:
    """Encode a type as a one-key object naming its case."""
    if isinstance(node, Ident):
        body: Dict[str, Any] = {"name": node.name}
    elif isinstance(node, Array):
        body = {"element": type_to_dict(node.element)}
        if node.length is not None:
            body["length"] = node.length
    elif isinstance(node, Pointer):
        body = {"element": type_to_dict(node.element)}
    elif isinstance(node, Selector):
        body = {"base": type_to_dict(node.base), "member": node.member}
    elif isinstance(node, FuncType):
        body = {
            "params": [type_to_dict(param) for param in node.params],
            "results": [type_to_dict(result) for result in node.results],
        }
    elif isinstance(node, MapType):
        body = {"key": type_to_dict(node.key), "value": type_to_dict(node.value)}
    elif isinstance(node, StructType):
        body = {"fields": [_field_to_dict(field) for field in node.fields]}
    else:
        raise TypeError(f"not a TypeNode: {node!r}")
    return {node.kind: body}


def _field_to_dict(field: StructField) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"names": list(field.names), "type": type_to_dict(field.type)}
    if field.raw_tag is not None:
        payload["raw_tag"] = field.raw_tag
    return payload


def decl_to_dict(decl: Decl) -> Dict[str, Any]:
    """Encode a declaration as a one-key object naming its case."""
    if isinstance(decl, FuncDecl):
        body: Dict[str, Any] = {"name": decl.name}
        _put_doc(body, decl.doc)
        if decl.receiver is not None:
            body["receiver"] = type_to_dict(decl.receiver)
        body["params"] = [type_to_dict(param) for param in decl.params]
        body["results"] = [type_to_dict(result) for result in decl.results]
    elif isinstance(decl, VarGroup):
        body = {}
        _put_doc(body, decl.doc)
        body["items"] = [_item_to_dict(item) for item in decl.items]
    elif isinstance(decl, TypeDecl):
        body = {"name": decl.name}
        _put_doc(body, decl.doc)
        body["type"] = type_to_dict(decl.type)
    else:
        raise TypeError(f"not a Decl: {decl!r}")
    return {decl.kind: body}


def _item_to_dict(item: VarItem) -> Dict[str, Any]:
    payload: Dict[str, Any] = {}
    _put_doc(payload, item.doc)
    payload["names"] = list(item.names)
    if item.type is not None:
        payload["type"] = type_to_dict(item.type)
    return payload


def _put_doc(payload: Dict[str, Any], doc: str | None) -> None:
    if doc:
        payload["doc"] = doc


def package_to_dict(package: Package) -> Dict[str, Any]:
    files: List[Dict[str, Any]] = []
    for file in package.files:
        entry: Dict[str, Any] = {"name": file.name}
        _put_doc(entry, file.doc)
        files.append(entry)
    result: Dict[str, Any] = {"name": package.name}
    if package.key is not None:
        result["key"] = package.key
    result["decls"] = [decl_to_dict(decl) for decl in package.decls]
    result["files"] = files
    return result


def to_dict(documentation: Documentation) -> Dict[str, Any]:
    return {"packages": [package_to_dict(package) for package in documentation.packages]}


def to_json(documentation: Documentation, *, indent: int | None = 2) -> str:
    return json.dumps(to_dict(documentation), indent=indent, ensure_ascii=False)


def decl_summary(decl: Decl) -> str:
    """One-line signature used in index listings."""
    if isinstance(decl, FuncDecl):
        return format_signature(decl)
    if isinstance(decl, TypeDecl):
        return f"type {decl.name} {format_type(decl.type)}"
    if isinstance(decl, VarGroup):
        names = [name for item in decl.items for name in item.names]
        return "var " + (", ".join(names) if names else "(unexported)")
    raise TypeError(f"not a Decl: {decl!r}")


def _var_lines(group: VarGroup) -> List[str]:
    lines: List[str] = []
    for item in group.items:
        if not item.names:
            continue
        line = "var " + ", ".join(item.names)
        if item.type is not None:
            line += " " + format_type(item.type)
        lines.append(line)
        if item.doc:
            lines.extend("    " + text for text in item.doc.splitlines())
    return lines


def _file_to_text(package: Package, file: File) -> List[str]:
    lines = [f"package {package.name} // {file.name}", ""]
    if file.doc:
        lines.extend(file.doc.splitlines())
        lines.append("")

    lines.append("INDEX")
    lines.append("")
    for decl in file.decls:
        lines.append("    " + decl_summary(decl))
    lines.append("")

    lines.append("CONTENT")
    for decl in file.decls:
        lines.append("")
        if isinstance(decl, VarGroup):
            lines.extend(_var_lines(decl) or [decl_summary(decl)])
        else:
            lines.append(decl_summary(decl))
        doc = getattr(decl, "doc", None)
        if doc:
            lines.extend("    " + text for text in doc.splitlines())
    lines.append("")
    return lines


def to_text(documentation: Documentation) -> str:
    """Human-readable dump: per file an index section then a content section."""
    lines: List[str] = []
    for package, file in documentation.iter_files():
        lines.extend(_file_to_text(package, file))
    return "\n".join(lines)


__all__ = [
    "decl_summary",
    "decl_to_dict",
    "package_to_dict",
    "to_dict",
    "to_json",
    "to_text",
    "type_to_dict",
]
