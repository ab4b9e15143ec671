# Copyright (c) 2010-2011, Nick Blundell
# Copyright (c) 2023-2024, Abilian SAS
#
# SPDX-License-Identifier: BSD-3-Clause

"""
The lens operations.  Each one is a small structural rewrite of a document
shape, and each knows three things about itself:

  - how to rewrite a single (primitive) patch operation written against the
    old shape into one written against the new shape, or to drop it;
  - its structural dual, used when reversing a lens;
  - how it changes a JSON schema describing the old shape.

A lens source is simply a list of these, applied left to right.
"""

import copy
import json

from . import schema
from .debug import d
from .exceptions import (
    LensSourceException,
    NoMappingException,
    UnknownLensOpException,
)
from .reverse import reverse_lens
from .util import has_value, is_array_index, split_path, stringify_value, truncate, with_path

WRITE_OPS = ("add", "replace")


class LensOp:
    """Base lens operation, which all other lens operations extend."""

    # The tag naming this operation in lens data.
    op = None

    def run(self, patch_op):
        """
        Rewrites a patch operation through this lens operation, returning the
        rewritten operation, the operation itself when it is not affected, or
        None when it has no meaning in the output shape.  A dropped operation
        stays dropped.
        """
        if patch_op is None:
            return None
        return self._run(patch_op, split_path(patch_op["path"]))

    def _run(self, patch_op, tokens):
        raise UnknownLensOpException(f"{self!r} does not define how to rewrite patches")

    def reverse(self):
        raise UnknownLensOpException(f"{self!r} does not define a reverse")

    def update_schema(self, json_schema):
        raise UnknownLensOpException(f"{self!r} does not define how to update a schema")

    def _fields(self):
        return dict(self.__dict__)

    def to_dict(self):
        """The flat data form, e.g. {"op": "rename", "source": ..., ...}."""
        data = {"op": self.op}
        for key, value in self._fields().items():
            if not has_value(value):
                continue
            if key == "lens":
                value = [lens_op.to_dict() for lens_op in value]
            data[_camel_case(key)] = copy.deepcopy(value)
        return data

    def __eq__(self, other):
        return self.__class__ == other.__class__ and self.__dict__ == other.__dict__

    def __repr__(self):
        args = ", ".join(f"{key}={value!r}" for key, value in self._fields().items())
        return f"{self.__class__.__name__}({args})"


class RenameProperty(LensOp):
    op = "rename"

    def __init__(self, source, destination):
        self.source = source
        self.destination = destination

    def _run(self, patch_op, tokens):
        # TODO: move/copy/test (and remove) are not renamed yet.
        if patch_op["op"] in WRITE_OPS and tokens and tokens[0] == self.source:
            return with_path(patch_op, [self.destination] + tokens[1:])
        return patch_op

    def reverse(self):
        return RenameProperty(self.destination, self.source)

    def update_schema(self, json_schema):
        return schema.rename_property(json_schema, self.source, self.destination)


class HoistProperty(LensOp):
    """Moves the field *name* out of the object field *host*."""

    op = "hoist"

    def __init__(self, host, name):
        self.host = host
        self.name = name

    def _run(self, patch_op, tokens):
        if tokens[:2] == [self.host, self.name]:
            return with_path(patch_op, tokens[1:])
        return patch_op

    def reverse(self):
        return PlungeProperty(self.host, self.name)

    def update_schema(self, json_schema):
        return schema.hoist_property(json_schema, self.host, self.name)


class PlungeProperty(LensOp):
    """Moves the field *name* into the object field *host*."""

    op = "plunge"

    def __init__(self, host, name):
        self.host = host
        self.name = name

    def _run(self, patch_op, tokens):
        if tokens and tokens[0] == self.name:
            return with_path(patch_op, [self.host] + tokens)
        return patch_op

    def reverse(self):
        return HoistProperty(self.host, self.name)

    def update_schema(self, json_schema):
        return schema.plunge_property(json_schema, self.host, self.name)


class WrapProperty(LensOp):
    """Turns a scalar field into a single element array."""

    op = "wrap"

    def __init__(self, name):
        self.name = name

    def _run(self, patch_op, tokens):
        if not tokens or tokens[0] != self.name:
            return patch_op

        path = [self.name, "0"] + tokens[1:]
        # Nulling the scalar empties the array rather than holding a null.
        if (
            patch_op["op"] in WRITE_OPS
            and patch_op.get("value") is None
            and len(tokens) == 1
        ):
            return with_path({"op": "remove"}, path)
        return with_path(patch_op, path)

    def reverse(self):
        return HeadProperty(self.name)

    def update_schema(self, json_schema):
        return schema.wrap_property(json_schema, self.name)


class HeadProperty(LensOp):
    """Turns an array field into a scalar holding its first element."""

    op = "head"

    def __init__(self, name):
        self.name = name

    def _run(self, patch_op, tokens):
        if not tokens or tokens[0] != self.name:
            return patch_op

        # Only writes to the head element are observable through this lens.
        if len(tokens) < 2 or tokens[1] != "0":
            return None

        path = [self.name] + tokens[2:]
        if patch_op["op"] in WRITE_OPS:
            return with_path({"op": patch_op["op"], "value": patch_op.get("value")}, path)

        if patch_op["op"] == "remove":
            if len(tokens) == 2:
                return with_path({"op": "replace", "value": None}, path)
            return with_path(patch_op, path)

        return patch_op

    def reverse(self):
        return WrapProperty(self.name)

    def update_schema(self, json_schema):
        return schema.head_property(json_schema, self.name)


class AddProperty(LensOp):
    """
    Introduces a field.  Patches are never rewritten by this: values for the
    new field are filled in from the destination schema once the whole lens has
    run (see defaults.add_default_values).
    """

    op = "add"

    def __init__(self, name, type=None, default=None, required=None, items=None):
        self.name = name
        self.type = type
        self.default = default
        self.required = required
        self.items = items

    def _run(self, patch_op, tokens):
        return patch_op

    def reverse(self):
        return RemoveProperty(**self._fields())

    def update_schema(self, json_schema):
        return schema.add_property(json_schema, **self._fields())


class RemoveProperty(LensOp):
    """
    Eliminates a field, dropping every write to it.  Carries the description of
    the removed field so that it can be reversed into an AddProperty.
    """

    op = "remove"

    def __init__(self, name, type=None, default=None, required=None, items=None):
        self.name = name
        self.type = type
        self.default = default
        self.required = required
        self.items = items

    def _run(self, patch_op, tokens):
        if patch_op["op"] in WRITE_OPS + ("remove",) and tokens and tokens[0] == self.name:
            return None
        return patch_op

    def reverse(self):
        return AddProperty(**self._fields())

    def update_schema(self, json_schema):
        return schema.remove_property(json_schema, self.name)


class LensIn(LensOp):
    """Runs a lens over the subtree rooted at the field *name*."""

    op = "in"

    def __init__(self, name, lens):
        self.name = name
        self.lens = list(lens)

    def _run(self, patch_op, tokens):
        if not tokens or tokens[0] != self.name:
            return patch_op

        child_op = run_lens(self.lens, with_path(patch_op, tokens[1:]))
        if child_op is None:
            return None
        return with_path(child_op, [self.name] + split_path(child_op["path"]))

    def reverse(self):
        return LensIn(self.name, reverse_lens(self.lens))

    def update_schema(self, json_schema):
        return schema.in_property(json_schema, self.name, self.lens)


class LensMap(LensOp):
    """Runs a lens over each element of an array."""

    op = "map"

    def __init__(self, lens):
        self.lens = list(lens)

    def _run(self, patch_op, tokens):
        # Find the first index with something beneath it; writes to the
        # elements themselves are not the element lens' business.
        for position, token in enumerate(tokens[:-1]):
            if is_array_index(token):
                break
        else:
            return patch_op

        # The element lens is given the path below the index only; the prefix
        # up to and including the index is put back on its result.
        prefix = tokens[: position + 1]
        item_op = run_lens(self.lens, with_path(patch_op, tokens[position + 1 :]))
        if item_op is None:
            return None
        return with_path(item_op, prefix + split_path(item_op["path"]))

    def reverse(self):
        return LensMap(reverse_lens(self.lens))

    def update_schema(self, json_schema):
        return schema.map_items(json_schema, self.lens)


class ConvertValue(LensOp):
    """
    Recodes an enumerated value.  The mapping is a pair of tables,
    [forward, backward]; only the forward one is used when running, the
    backward one being what the reversed lens runs with.
    """

    op = "convert"

    def __init__(self, name, mapping, source_type=None, destination_type=None):
        if not isinstance(mapping, (list, tuple)) or len(mapping) != 2:
            raise LensSourceException(
                f"A convert mapping must be a [forward, backward] pair, not {mapping!r}"
            )
        self.name = name
        self.mapping = [dict(mapping[0]), dict(mapping[1])]
        self.source_type = source_type
        self.destination_type = destination_type

    def forward_table(self):
        return {stringify_value(key): value for key, value in self.mapping[0].items()}

    def convert(self, value):
        key = stringify_value(value)
        table = self.forward_table()
        # XXX: Could support a fallback value here rather than failing.
        if key not in table:
            raise NoMappingException(f"No mapping for value: {truncate(key, 40)}")
        return table[key]

    def _run(self, patch_op, tokens):
        if patch_op["op"] not in WRITE_OPS or tokens != [self.name]:
            return patch_op
        return {**patch_op, "value": self.convert(patch_op.get("value"))}

    def reverse(self):
        return ConvertValue(
            self.name,
            [self.mapping[1], self.mapping[0]],
            source_type=self.destination_type,
            destination_type=self.source_type,
        )

    def update_schema(self, json_schema):
        return schema.convert_property(json_schema, self)


LENS_OPS = {
    lens_op_class.op: lens_op_class
    for lens_op_class in (
        RenameProperty,
        HoistProperty,
        PlungeProperty,
        WrapProperty,
        HeadProperty,
        AddProperty,
        RemoveProperty,
        LensIn,
        LensMap,
        ConvertValue,
    )
}


def run_lens_op(lens_op, patch_op):
    """Rewrites one patch operation (or None) through one lens operation."""
    if not isinstance(lens_op, LensOp):
        raise UnknownLensOpException(f"Unexpected lens operation: {lens_op!r}")

    result = lens_op.run(patch_op)
    if patch_op is not None and result is None:
        d(f"{lens_op!r} dropped {patch_op}")
    return result


def run_lens(lens_source, patch_op):
    """
    Folds every operation of the lens over a patch operation, in order.  Once
    dropped, later lens operations see None and pass it along.
    """
    for lens_op in lens_source:
        patch_op = run_lens_op(lens_op, patch_op)
    return patch_op


#
# Lens data.
#


def _camel_case(name):
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _snake_case(name):
    return "".join("_" + char.lower() if char.isupper() else char for char in name)


def lens_op_from_dict(data):
    """
    Builds a lens operation from its data form, either flat,

      {"op": "rename", "source": "a", "destination": "b"}

    or folded under the operation's name,

      {"rename": {"source": "a", "destination": "b"}}
    """
    if not isinstance(data, dict):
        raise LensSourceException(f"Expected a lens operation, not {data!r}")

    if "op" in data:
        tag = data["op"]
        fields = {key: value for key, value in data.items() if key != "op"}
    elif len(data) == 1:
        ((tag, fields),) = data.items()
        # A map may be given its lens directly.
        if isinstance(fields, list):
            fields = {"lens": fields}
        fields = dict(fields or {})
    else:
        raise LensSourceException(f"Cannot tell which lens operation {data!r} is")

    if tag not in LENS_OPS:
        raise UnknownLensOpException(f"Unknown lens operation: {tag!r}")

    kargs = {_snake_case(key): value for key, value in fields.items()}
    if "lens" in kargs:
        kargs["lens"] = load_lens(kargs["lens"])

    try:
        return LENS_OPS[tag](**kargs)
    except TypeError as e:
        raise LensSourceException(f"Bad fields for a {tag} lens: {fields!r} ({e})") from e


def load_lens(data):
    """
    Loads a lens source from a list of lens operation data, a mapping holding
    such a list under "lens", or a JSON string of either.  Null entries are
    skipped.
    """
    if isinstance(data, str):
        data = json.loads(data)
    if isinstance(data, dict):
        if "lens" not in data:
            raise LensSourceException("Expected a 'lens' entry in the lens data.")
        data = data["lens"]
    if not isinstance(data, list):
        raise LensSourceException(f"Expected a list of lens operations, not {data!r}")

    return [
        lens_op if isinstance(lens_op, LensOp) else lens_op_from_dict(lens_op)
        for lens_op in data
        if lens_op is not None
    ]


def dump_lens(lens_source):
    return [lens_op.to_dict() for lens_op in lens_source]
