# Copyright (c) 2023-2024, Abilian SAS
#
# SPDX-License-Identifier: BSD-3-Clause

from pytest import raises

from patchlens import convert_patch, reverse
from patchlens.debug import d, describe_test
from patchlens.exceptions import NoMappingException
from patchlens.lens_ops import (
    AddProperty,
    ConvertValue,
    LensIn,
    RemoveProperty,
    RenameProperty,
)
from patchlens.patch import apply_lens_to_patch, compile_lens, expand_patch
from patchlens.schema import update_schema
from patchlens.settings import GlobalSettings

SCHEMA = {
    "type": "object",
    "properties": {
        "a": {"type": "string"},
        "secret": {"type": "string"},
        "public": {"type": "integer"},
        "user": {"type": "object", "properties": {"name": {"type": "string"}}},
    },
}


def test_expand():
    patch_op = {"op": "add", "path": "/user", "value": {"name": "Al", "tags": ["x", "y"]}}
    assert expand_patch(patch_op) == [
        {"op": "add", "path": "/user", "value": {}},
        {"op": "add", "path": "/user/name", "value": "Al"},
        {"op": "add", "path": "/user/tags", "value": []},
        {"op": "add", "path": "/user/tags/0", "value": "x"},
        {"op": "add", "path": "/user/tags/1", "value": "y"},
    ]

    d("Replaces stay replaces")
    assert expand_patch({"op": "replace", "path": "/a", "value": [{"b": 1}]}) == [
        {"op": "replace", "path": "/a", "value": []},
        {"op": "replace", "path": "/a/0", "value": {}},
        {"op": "replace", "path": "/a/0/b", "value": 1},
    ]

    d("Keys are escaped")
    assert expand_patch({"op": "add", "path": "/a", "value": {"b/c": 1}})[1] == {
        "op": "add",
        "path": "/a/b~1c",
        "value": 1,
    }

    d("Nothing to expand")
    for patch_op in [
        {"op": "add", "path": "/a", "value": "x"},
        {"op": "add", "path": "/a", "value": None},
        {"op": "remove", "path": "/a"},
        {"op": "move", "from": "/a", "path": "/b"},
    ]:
        assert expand_patch(patch_op) == [patch_op]


def test_identity_lens():
    patch = [
        {"op": "add", "path": "/a", "value": "x"},
        {"op": "replace", "path": "/public", "value": 3},
        {"op": "remove", "path": "/a"},
        {"op": "test", "path": "/public", "value": 3},
    ]
    assert apply_lens_to_patch([], patch, SCHEMA) == patch


def test_remove_drops_field():
    patch = [
        {"op": "add", "path": "/secret", "value": "x"},
        {"op": "add", "path": "/public", "value": 1},
        {"op": "replace", "path": "/secret", "value": "y"},
        {"op": "remove", "path": "/secret"},
    ]
    assert apply_lens_to_patch([RemoveProperty("secret", type="string")], patch, SCHEMA) == [
        {"op": "add", "path": "/public", "value": 1}
    ]


def test_default_values():
    lens = [LensIn("user", [AddProperty("age", type="integer", default=30)])]
    patch = [{"op": "add", "path": "/user", "value": {"name": "Al"}}]

    assert apply_lens_to_patch(lens, patch, SCHEMA) == [
        {"op": "add", "path": "/user", "value": {}},
        {"op": "add", "path": "/user/name", "value": ""},
        {"op": "add", "path": "/user/age", "value": 30},
        {"op": "add", "path": "/user/name", "value": "Al"},
    ]


def test_without_default_values(monkeypatch):
    monkeypatch.setattr(GlobalSettings, "add_default_values", False)
    lens = [LensIn("user", [AddProperty("age", type="integer", default=30)])]
    patch = [{"op": "add", "path": "/user", "value": {"name": "Al"}}]

    assert apply_lens_to_patch(lens, patch, SCHEMA) == [
        {"op": "add", "path": "/user", "value": {}},
        {"op": "add", "path": "/user/name", "value": "Al"},
    ]


def test_unmapped_value_aborts():
    lens = [ConvertValue("a", [{"x": 1}, {1: "x"}])]
    patch = [
        {"op": "add", "path": "/a", "value": "x"},
        {"op": "add", "path": "/a", "value": "y"},
    ]
    with raises(NoMappingException):
        apply_lens_to_patch(lens, patch, SCHEMA)


def test_partly_mapped_enum():
    d("Statuses the table leaves out only matter when written")
    schema = {
        "type": "object",
        "properties": {
            "title": {"type": "string"},
            "status": {"type": "string", "enum": ["open", "closed", "pending"]},
        },
    }
    lens = [ConvertValue("status", [{"open": 1, "closed": 0}, {1: "open", 0: "closed"}])]
    patch = [{"op": "replace", "path": "/title", "value": "T"}]
    assert convert_patch(lens, patch, schema) == patch

    with raises(NoMappingException):
        convert_patch(lens, [{"op": "replace", "path": "/status", "value": "pending"}], schema)


def test_compile_lens():
    compiled = compile_lens([RenameProperty("a", "b")])
    patch = [{"op": "add", "path": "/a", "value": "x"}]

    right = compiled.right(patch, SCHEMA)
    assert right == [{"op": "add", "path": "/b", "value": "x"}]

    describe_test("Back through the reversed lens")
    output_schema = update_schema(SCHEMA, [RenameProperty("a", "b")])
    assert compiled.left(right, output_schema) == patch


def test_lens_as_data():
    lens = [{"rename": {"source": "a", "destination": "b"}}]
    patch = [{"op": "replace", "path": "/a", "value": "x"}]
    assert convert_patch(lens, patch, SCHEMA) == [{"op": "replace", "path": "/b", "value": "x"}]

    assert reverse(lens) == [{"op": "rename", "source": "b", "destination": "a"}]
    assert reverse([RenameProperty("a", "b")]) == [RenameProperty("b", "a")]
