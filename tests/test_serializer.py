"""Tests for godox.serializer."""

from __future__ import annotations

import json

from godox.classifier import DeclarationClassifier
from godox.models import (
    Array,
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
    VarGroup,
    VarItem,
)
from godox.serializer import decl_to_dict, to_dict, to_json, to_text, type_to_dict
from tests._fixtures.go_tree import parse_go


def _demo() -> Documentation:
    source_file = parse_go(
        """
        // Package demo adds numbers.
        package demo

        // Add sums two ints.
        func Add(a, b int) int { return a+b }

        type Point struct { X, Y int }
        """
    )
    decls = tuple(DeclarationClassifier().classify(source_file, "demo.go"))
    return Documentation(
        packages=(Package(name="demo", files=(File(name="demo.go", decls=decls, doc=source_file.doc),)),)
    )


def test_end_to_end_json_layout() -> None:
    payload = json.loads(to_json(_demo()))
    assert payload == {
        "packages": [
            {
                "name": "demo",
                "decls": [
                    {
                        "func": {
                            "name": "Add",
                            "doc": "Add sums two ints.\n",
                            "params": [{"ident": {"name": "int"}}, {"ident": {"name": "int"}}],
                            "results": [{"ident": {"name": "int"}}],
                        }
                    },
                    {
                        "type": {
                            "name": "Point",
                            "type": {
                                "struct": {
                                    "fields": [
                                        {"names": ["X", "Y"], "type": {"ident": {"name": "int"}}}
                                    ]
                                }
                            },
                        }
                    },
                ],
                "files": [{"name": "demo.go", "doc": "Package demo adds numbers.\n"}],
            }
        ]
    }


def test_every_type_case_is_a_single_key_object() -> None:
    node = MapType(
        Selector(Ident("pkg"), "Key"),
        FuncType(
            params=(Array(Ident("byte"), length="4"),),
            results=(Pointer(StructType((StructField((), Ident("T"), raw_tag='`x:"y"`'),))),),
        ),
    )
    assert type_to_dict(node) == {
        "map": {
            "key": {"selector": {"base": {"ident": {"name": "pkg"}}, "member": "Key"}},
            "value": {
                "func": {
                    "params": [{"array": {"element": {"ident": {"name": "byte"}}, "length": "4"}}],
                    "results": [
                        {
                            "pointer": {
                                "element": {
                                    "struct": {
                                        "fields": [
                                            {
                                                "names": [],
                                                "type": {"ident": {"name": "T"}},
                                                "raw_tag": '`x:"y"`',
                                            }
                                        ]
                                    }
                                }
                            }
                        }
                    ],
                }
            },
        }
    }


def test_optional_fields_are_omitted_not_null() -> None:
    method = decl_to_dict(FuncDecl(name="Run", receiver=Ident("T")))
    assert method == {
        "func": {"name": "Run", "receiver": {"ident": {"name": "T"}}, "params": [], "results": []}
    }
    group = decl_to_dict(VarGroup(items=(VarItem(names=("X",)),)))
    assert group == {"var_group": {"items": [{"names": ["X"]}]}}
    assert "null" not in to_json(Documentation(packages=(Package(name="p", files=(File(name="a.go"),)),)))


def test_decl_objects_have_exactly_one_case() -> None:
    for decl in (
        FuncDecl(name="F"),
        VarGroup(),
        TypeDecl(name="T", type=Ident("int")),
    ):
        assert len(decl_to_dict(decl)) == 1


def test_json_is_stable_across_runs() -> None:
    assert to_json(_demo()) == to_json(_demo())
    assert to_dict(_demo()) == to_dict(_demo())


def test_text_dump_has_index_and_content_sections() -> None:
    text = to_text(_demo())
    assert text.startswith("package demo // demo.go\n")
    index, content = text.split("CONTENT", 1)
    assert "    func Add(int, int) int" in index
    assert "    type Point struct { X, Y int }" in index
    assert "func Add(int, int) int\n    Add sums two ints." in content
    assert "Package demo adds numbers." in index
