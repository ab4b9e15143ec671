# Copyright (c) 2023-2024, Abilian SAS
#
# SPDX-License-Identifier: BSD-3-Clause

from patchlens.debug import assert_equal, d
from patchlens.lens_ops import (
    AddProperty,
    ConvertValue,
    HeadProperty,
    HoistProperty,
    LensIn,
    LensMap,
    PlungeProperty,
    RemoveProperty,
    RenameProperty,
    WrapProperty,
    run_lens,
)
from patchlens.reverse import reverse_lens

STATUS_MAPPING = [{"open": 1, "closed": 0}, {1: "open", 0: "closed"}]


def test_duals():
    assert reverse_lens([RenameProperty("a", "b")]) == [RenameProperty("b", "a")]
    assert reverse_lens([HoistProperty("meta", "author")]) == [PlungeProperty("meta", "author")]
    assert reverse_lens([PlungeProperty("meta", "author")]) == [HoistProperty("meta", "author")]
    assert reverse_lens([WrapProperty("x")]) == [HeadProperty("x")]
    assert reverse_lens([HeadProperty("x")]) == [WrapProperty("x")]

    d("add and remove keep the description of the field")
    assert reverse_lens([AddProperty("done", type="boolean", default=True)]) == [
        RemoveProperty("done", type="boolean", default=True)
    ]
    assert reverse_lens([RemoveProperty("done", type="boolean")]) == [
        AddProperty("done", type="boolean")
    ]

    assert reverse_lens([ConvertValue("status", STATUS_MAPPING, "string", "integer")]) == [
        ConvertValue("status", [STATUS_MAPPING[1], STATUS_MAPPING[0]], "integer", "string")
    ]


def test_nested_and_ordered():
    lens = [
        RenameProperty("a", "b"),
        LensIn("items", [LensMap([WrapProperty("x"), RenameProperty("y", "z")])]),
    ]
    assert reverse_lens(lens) == [
        LensIn("items", [LensMap([RenameProperty("z", "y"), HeadProperty("x")])]),
        RenameProperty("b", "a"),
    ]
    assert reverse_lens(reverse_lens(lens)) == lens

    d("The lens reversed is left alone")
    assert lens[0] == RenameProperty("a", "b")
    assert lens[1].lens[0].lens == [WrapProperty("x"), RenameProperty("y", "z")]


def test_round_trip():
    lens = [
        RenameProperty("title", "name"),
        HoistProperty("meta", "author"),
        WrapProperty("tag"),
        LensIn("details", [RenameProperty("a", "b")]),
        LensIn("items", [LensMap([RenameProperty("x", "y")])]),
        ConvertValue("status", STATUS_MAPPING),
    ]
    patch = [
        {"op": "add", "path": "/title", "value": "T"},
        {"op": "add", "path": "/meta/author", "value": "Al"},
        {"op": "add", "path": "/tag", "value": "x"},
        {"op": "add", "path": "/details/a", "value": 1},
        {"op": "add", "path": "/items/0/x", "value": 2},
        {"op": "replace", "path": "/status", "value": "closed"},
    ]

    forward = [run_lens(lens, patch_op) for patch_op in patch]
    assert forward == [
        {"op": "add", "path": "/name", "value": "T"},
        {"op": "add", "path": "/author", "value": "Al"},
        {"op": "add", "path": "/tag/0", "value": "x"},
        {"op": "add", "path": "/details/b", "value": 1},
        {"op": "add", "path": "/items/0/y", "value": 2},
        {"op": "replace", "path": "/status", "value": 0},
    ]

    backward = [run_lens(reverse_lens(lens), patch_op) for patch_op in forward]
    assert_equal(backward, patch)


def test_wrap_head_duality():
    patch_op = {"op": "add", "path": "/x", "value": "v"}
    wrapped = run_lens([WrapProperty("x")], patch_op)
    assert wrapped == {"op": "add", "path": "/x/0", "value": "v"}
    assert run_lens(reverse_lens([WrapProperty("x")]), wrapped) == patch_op
