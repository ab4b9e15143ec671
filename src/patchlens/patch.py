# Copyright (c) 2023-2024, Abilian SAS
#
# SPDX-License-Identifier: BSD-3-Clause

"""
Running lenses over whole patches and documents.

Patches are lists of JSON patch (RFC 6902) operations, as plain dicts.  Before
a patch goes through a lens each of its operations is expanded into primitive
ones (see expand_patch), so that lens operations only ever have to reason
about paths.
"""

import copy

import jsonpatch
import jsonpointer
from genson import SchemaBuilder

from .debug import d, describe_patch
from .defaults import add_default_values, default_object_for_schema
from .lens_ops import run_lens
from .reverse import reverse_lens
from .schema import update_schema
from .settings import GlobalSettings
from .util import join_path, split_path


def expand_patch(patch_op):
    """
    Expands an add or replace of an object or array into the creation of an
    empty container followed by one (expanded) operation per key or index, in
    order.  Any other operation comes back on its own.

    Example::

      {"op": "add", "path": "/user", "value": {"tags": ["x"]}} ->
        add /user {}, add /user/tags [], add /user/tags/0 "x"
    """
    if patch_op["op"] not in ("add", "replace"):
        return [patch_op]

    value = patch_op.get("value")
    if isinstance(value, dict):
        children = list(value.items())
    elif isinstance(value, list):
        children = list(enumerate(value))
    else:
        return [patch_op]

    tokens = split_path(patch_op["path"])
    result = [{"op": patch_op["op"], "path": patch_op["path"], "value": type(value)()}]
    for key, child in children:
        child_op = {"op": patch_op["op"], "path": join_path(tokens + [str(key)]), "value": child}
        result.extend(expand_patch(child_op))
    return result


def apply_lens_to_patch(lens_source, patch, patch_schema):
    """
    Given a patch written against documents described by *patch_schema*,
    returns the equivalent patch for documents on the other side of the lens.

    Operations with no meaning on the other side are dropped; fields the lens
    introduces are given default values wherever the patch creates an object.
    """
    expanded_patch = [expanded_op for patch_op in patch for expanded_op in expand_patch(patch_op)]

    lensed_patch = []
    for patch_op in expanded_patch:
        lensed_op = run_lens(lens_source, patch_op)
        if lensed_op is not None:
            lensed_patch.append(lensed_op)
    d(f"Lensed {len(expanded_patch)} operations into {len(lensed_patch)}")

    if not GlobalSettings.add_default_values:
        return lensed_patch

    reader_schema = update_schema(patch_schema, lens_source)
    return add_default_values(lensed_patch, reader_schema)


def infer_schema(doc):
    """A JSON schema inferred from a sample document."""
    builder = SchemaBuilder()
    builder.add_object(doc)
    return builder.to_schema()


def creation_patch(doc):
    """The patch creating *doc* from an empty document, fields in document order."""
    patch = jsonpatch.make_patch({}, doc).patch
    # make_patch does not keep key order.
    if isinstance(doc, dict):
        order = {join_path([key]): position for position, key in enumerate(doc)}
        patch.sort(key=lambda patch_op: order.get(patch_op["path"], len(order)))
    return patch


def apply_lens_to_doc(lens_source, input_doc, input_schema=None, target_doc=None):
    """
    Converts a whole document through a lens, by converting the patch that
    creates it.  The result starts from the defaults of the output schema,
    overlaid with *target_doc* if given.
    """
    patch_for_original_doc = creation_patch(input_doc)

    if input_schema is None:
        input_schema = infer_schema(input_doc)

    output_patch = apply_lens_to_patch(lens_source, patch_for_original_doc, input_schema)
    output_schema = update_schema(input_schema, lens_source)
    d(f"Converted patch:\n{describe_patch(output_patch)}")

    # XXX: This is a shallow merge; nested objects of the target replace the
    # defaults wholesale.
    base = default_object_for_schema(output_schema)
    base.update(copy.deepcopy(target_doc or {}))

    doc = base
    for patch_op in copy.deepcopy(output_patch):
        try:
            doc = jsonpatch.JsonPatch([patch_op]).apply(doc)
        except (jsonpatch.JsonPatchConflict, jsonpointer.JsonPointerException):
            # Removing what the defaults never created (e.g. the element of a
            # wrapped null) leaves the document as it is.
            if patch_op["op"] != "remove":
                raise
            d(f"Nothing to remove at '{patch_op['path']}'")
    return doc


class CompiledLens:
    """
    A lens ready to convert patches in both directions, so callers need not
    handle the lens (or its reverse) themselves.
    """

    def __init__(self, lens_source):
        self.lens_source = list(lens_source)
        self.reversed_lens_source = reverse_lens(self.lens_source)

    def right(self, patch, patch_schema):
        """Forward, for a patch on documents described by *patch_schema*."""
        return apply_lens_to_patch(self.lens_source, patch, patch_schema)

    def left(self, patch, patch_schema):
        """Backward, *patch_schema* describing the lens' output documents."""
        return apply_lens_to_patch(self.reversed_lens_source, patch, patch_schema)


def compile_lens(lens_source):
    return CompiledLens(lens_source)
