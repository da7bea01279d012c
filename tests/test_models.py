"""Tests for the documentation model accessors."""

from __future__ import annotations

import dataclasses

import pytest

from godox.models import (
    Documentation,
    File,
    FuncDecl,
    Ident,
    Package,
    Pointer,
    TypeDecl,
    VarGroup,
    VarItem,
    receiver_name,
)


def _package() -> Package:
    point = TypeDecl(name="Point", type=Ident("int"))
    return Package(
        name="geo",
        files=(
            File(
                name="point.go",
                decls=(
                    point,
                    FuncDecl(name="Move", receiver=Pointer(Ident("Point"))),
                    VarGroup(items=(VarItem(names=("Origin",)),)),
                ),
            ),
            File(
                name="util.go",
                decls=(
                    FuncDecl(name="Distance"),
                    TypeDecl(name="Line", type=Ident("int")),
                    FuncDecl(name="Len", receiver=Ident("Line")),
                ),
            ),
        ),
    )


def test_package_accessors_preserve_file_order() -> None:
    package = _package()
    assert [decl.name for decl in package.functions()] == ["Move", "Distance", "Len"]
    assert [decl.name for decl in package.type_decls()] == ["Point", "Line"]
    assert len(package.var_groups()) == 1
    assert [decl.name for decl in package.methods_of("Point")] == ["Move"]
    assert [decl.name for decl in package.methods_of("Line")] == ["Len"]


def test_collect_types_maps_names_to_defining_file() -> None:
    documentation = Documentation(packages=(_package(),))
    assert documentation.collect_types() == {"Point": "point.go", "Line": "util.go"}
    assert documentation.package("geo") is documentation.packages[0]
    assert documentation.package("missing") is None


def test_model_is_immutable() -> None:
    decl = FuncDecl(name="Run")
    with pytest.raises(dataclasses.FrozenInstanceError):
        decl.name = "Stop"  # type: ignore[misc]


def test_union_cases_are_distinct_classes() -> None:
    assert FuncDecl(name="X").kind == "func"
    assert TypeDecl(name="X", type=Ident("int")).kind == "type"
    assert VarGroup().kind == "var_group"
    assert Ident("int") != Pointer(Ident("int"))


def test_receiver_name() -> None:
    assert receiver_name(Pointer(Ident("T"))) == "T"
    assert receiver_name(Ident("T")) == "T"
