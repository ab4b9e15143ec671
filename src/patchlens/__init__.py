# Copyright (c) 2010-2011, Nick Blundell
# Copyright (c) 2023-2024, Abilian SAS
#
# SPDX-License-Identifier: BSD-3-Clause

"""
Main API functions for using patchlens.
"""

from patchlens.lens_ops import LensOp, dump_lens, load_lens, run_lens, run_lens_op
from patchlens.patch import (
    CompiledLens,
    apply_lens_to_doc,
    apply_lens_to_patch,
    compile_lens,
    expand_patch,
)
from patchlens.reverse import reverse_lens
from patchlens.schema import update_schema


def _coerce_to_lens(lens):
    """Accepts a lens source given as data (e.g. loaded from JSON) too."""
    if isinstance(lens, LensOp):
        return [lens]
    return load_lens(lens)


def convert_patch(lens, patch, schema):
    """
    Converts a patch through a lens, the lens being a list of lens operations
    or their data form.

    Example::

      convert_patch([{"rename": {"source": "a", "destination": "b"}}],
                    [{"op": "add", "path": "/a", "value": 1}], schema)
        -> [{"op": "add", "path": "/b", "value": 1}]
    """
    return apply_lens_to_patch(_coerce_to_lens(lens), patch, schema)


def convert_doc(lens, doc, schema=None, target_doc=None):
    """Converts a whole document through a lens."""
    return apply_lens_to_doc(_coerce_to_lens(lens), doc, schema, target_doc)


def reverse(lens):
    """The reverse of a lens, in the same form (objects or data) as given."""
    lens_source = _coerce_to_lens(lens)
    reversed_lens = reverse_lens(lens_source)
    if isinstance(lens, list) and lens and not isinstance(lens[0], LensOp):
        return dump_lens(reversed_lens)
    return reversed_lens


__all__ = [
    "CompiledLens",
    "LensOp",
    "apply_lens_to_doc",
    "apply_lens_to_patch",
    "compile_lens",
    "convert_doc",
    "convert_patch",
    "dump_lens",
    "expand_patch",
    "load_lens",
    "reverse",
    "reverse_lens",
    "run_lens",
    "run_lens_op",
    "update_schema",
]
