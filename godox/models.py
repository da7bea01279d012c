"""Documentation model produced from parsed Go sources.

Every union in the model is a closed set of frozen dataclasses sharing a base
class, so an instance is always exactly one case. Sequences are tuples and the
whole tree is immutable once built; the service layer shares one instance
across requests.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple


class TypeNode:
    """A rendered type expression."""

    kind = "type"


@dataclass(frozen=True)
class Ident(TypeNode):
    name: str

    kind = "ident"


@dataclass(frozen=True)
class Array(TypeNode):
    """Slice (``[]T``) or fixed array (``[N]T``, with the raw length text)."""

    element: TypeNode
    length: Optional[str] = None

    kind = "array"


@dataclass(frozen=True)
class Pointer(TypeNode):
    element: TypeNode

    kind = "pointer"


@dataclass(frozen=True)
class Selector(TypeNode):
    """Qualified reference such as ``pkg.T``."""

    base: TypeNode
    member: str

    kind = "selector"


@dataclass(frozen=True)
class FuncType(TypeNode):
    params: Tuple[TypeNode, ...] = ()
    results: Tuple[TypeNode, ...] = ()

    kind = "func"


@dataclass(frozen=True)
class MapType(TypeNode):
    key: TypeNode
    value: TypeNode

    kind = "map"


@dataclass(frozen=True)
class StructField:
    """One struct field line; ``names`` is empty for embedded fields."""

    names: Tuple[str, ...]
    type: TypeNode
    raw_tag: Optional[str] = None


@dataclass(frozen=True)
class StructType(TypeNode):
    fields: Tuple[StructField, ...] = ()

    kind = "struct"


class Decl:
    """A classified top-level declaration."""

    kind = "decl"


@dataclass(frozen=True)
class FuncDecl(Decl):
    name: str
    params: Tuple[TypeNode, ...] = ()
    results: Tuple[TypeNode, ...] = ()
    doc: Optional[str] = None
    receiver: Optional[TypeNode] = None

    kind = "func"

    @property
    def is_method(self) -> bool:
        return self.receiver is not None


@dataclass(frozen=True)
class VarItem:
    names: Tuple[str, ...]
    doc: Optional[str] = None
    type: Optional[TypeNode] = None


@dataclass(frozen=True)
class VarGroup(Decl):
    items: Tuple[VarItem, ...] = ()
    doc: Optional[str] = None

    kind = "var_group"


@dataclass(frozen=True)
class TypeDecl(Decl):
    name: str
    type: TypeNode
    doc: Optional[str] = None

    kind = "type"


@dataclass(frozen=True)
class File:
    """A parsed source file; ``name`` is its path relative to the scanned root."""

    name: str
    decls: Tuple[Decl, ...] = ()
    doc: Optional[str] = None


@dataclass(frozen=True)
class Package:
    name: str
    files: Tuple[File, ...] = ()
    # "<dir>/<name>" when same-named packages are kept apart.
    key: Optional[str] = None

    @property
    def decls(self) -> Tuple[Decl, ...]:
        """All declarations, in file order then source order."""
        return tuple(decl for file in self.files for decl in file.decls)

    def functions(self) -> List[FuncDecl]:
        return [decl for decl in self.decls if isinstance(decl, FuncDecl)]

    def type_decls(self) -> List[TypeDecl]:
        return [decl for decl in self.decls if isinstance(decl, TypeDecl)]

    def var_groups(self) -> List[VarGroup]:
        return [decl for decl in self.decls if isinstance(decl, VarGroup)]

    def methods_of(self, type_name: str) -> List[FuncDecl]:
        """Return methods whose receiver is ``type_name`` or ``*type_name``."""
        return [
            decl
            for decl in self.functions()
            if decl.receiver is not None and receiver_name(decl.receiver) == type_name
        ]


@dataclass(frozen=True)
class Documentation:
    """Aggregate of every package found under one root."""

    packages: Tuple[Package, ...] = ()
    # (type name, file) pairs taken before the exported-only filter.
    type_index: Tuple[Tuple[str, str], ...] = ()

    def package(self, name: str) -> Optional[Package]:
        """Look up a package by its key, falling back to the first name match."""
        for pkg in self.packages:
            if pkg.key == name:
                return pkg
        for pkg in self.packages:
            if pkg.name == name:
                return pkg
        return None

    def iter_files(self) -> Iterator[Tuple[Package, File]]:
        for pkg in self.packages:
            for file in pkg.files:
                yield pkg, file

    def collect_types(self) -> Dict[str, str]:
        """Map every declared type name to the file that defines it.

        Includes unexported types when the model was built with a type index.
        """
        if self.type_index:
            return dict(self.type_index)
        types: Dict[str, str] = {}
        for _, file in self.iter_files():
            for decl in file.decls:
                if isinstance(decl, TypeDecl):
                    types[decl.name] = file.name
        return types


def receiver_name(node: TypeNode) -> Optional[str]:
    """Return the base type name of a method receiver."""
    if isinstance(node, Pointer):
        return receiver_name(node.element)
    if isinstance(node, Ident):
        return node.name
    return None


__all__ = [
    "Array",
    "Decl",
    "Documentation",
    "File",
    "FuncDecl",
    "FuncType",
    "Ident",
    "MapType",
    "Package",
    "Pointer",
    "Selector",
    "StructField",
    "StructType",
    "TypeDecl",
    "TypeNode",
    "VarGroup",
    "VarItem",
    "receiver_name",
]
