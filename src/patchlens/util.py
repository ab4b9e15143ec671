# Copyright (c) 2010, Nick Blundell
# Copyright (c) 2023-2024, Abilian SAS
#
# SPDX-License-Identifier: BSD-3-Clause

import re

from jsonpointer import JsonPointer

ARRAY_INDEX = re.compile(r"^[0-9]+$")


def has_value(var):
    """To avoid possible comparison bugs with empty values vs None."""
    return var is not None


def split_path(path):
    """
    Splits a JSON pointer into its (unescaped) tokens, e.g.
    "/a/0/b~1c" -> ["a", "0", "b/c"].  The root path "" gives [].
    """
    return list(JsonPointer(path).parts)


def join_path(tokens):
    """The inverse of split_path."""
    return JsonPointer.from_parts(tokens).path


def is_array_index(token):
    return bool(ARRAY_INDEX.match(str(token)))


def with_path(patch_op, tokens):
    """A copy of the patch operation pointing at another path."""
    return {**patch_op, "path": join_path(tokens)}


def stringify_value(value):
    """
    The lookup key for a value in a convert table.  Follows the JSON spelling
    of values, so that tables loaded from JSON and tables written in python
    agree (e.g. True -> "true", None -> "null", 1.0 -> "1").
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def truncate(s, max_len=10):
    """Truncates a long string so is suitable for display."""
    if len(s) > max_len:
        return s[0:max_len] + "..."
    return s
