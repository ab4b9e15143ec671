# Copyright (c) 2023-2024, Abilian SAS
#
# SPDX-License-Identifier: BSD-3-Clause

"""
Minimal valid values for a schema.  A lens can introduce fields it has no
source for (e.g. with an add lens), so once a patch has been through a lens we
fill in, wherever the patch creates an object, a value for each field the
destination schema describes.
"""

import copy

import jsonpatch

from .debug import d
from .exceptions import SchemaException
from .util import is_array_index, join_path, split_path

DEFAULT_VALUES_BY_TYPE = {
    "string": "",
    "number": 0,
    "integer": 0,
    "boolean": False,
    "array": [],
    "object": {},
    "null": None,
}


def default_value_for_type(type):
    if isinstance(type, list):
        if "null" in type or not type:
            return None
        type = type[0]
    if type not in DEFAULT_VALUES_BY_TYPE:
        raise SchemaException(f"No default value for the type {type!r}")
    return copy.deepcopy(DEFAULT_VALUES_BY_TYPE[type])


def _options(schema):
    return schema.get("anyOf") or schema.get("oneOf") or []


def _is_nullable(schema):
    type = schema.get("type")
    if type == "null" or (isinstance(type, list) and "null" in type):
        return True
    return any(option.get("type") == "null" for option in _options(schema))


def default_for_property(schema):
    """
    Returns (found, value): the default value for a property, either the one
    set on the schema, None for nullable properties, or the type's default.
    """
    if "default" in schema:
        return True, copy.deepcopy(schema["default"])
    if _is_nullable(schema):
        return True, None
    if "type" in schema:
        return True, default_value_for_type(schema["type"])
    return False, None


def _object_like(schema):
    """Out of a union, the member describing a container, if there is one."""
    for option in _options(schema):
        if "properties" in option or "items" in option:
            return option
    return schema


def schema_at_path(schema, path):
    """The sub-schema describing the value at *path*, or {} if unknown."""
    for token in split_path(path):
        schema = _object_like(schema)
        if is_array_index(token) and isinstance(schema.get("items"), dict):
            schema = schema["items"]
        else:
            schema = (schema.get("properties") or {}).get(token)
        if not isinstance(schema, dict):
            return {}
    return _object_like(schema)


def _creates_empty_object(patch_op):
    return patch_op["op"] in ("add", "replace") and patch_op.get("value") == {}


def _defaults_for_object(path, schema):
    tokens = split_path(path)
    properties = schema_at_path(schema, path).get("properties") or {}

    patch = []
    for name, property_schema in properties.items():
        if not isinstance(property_schema, dict):
            continue
        found, value = default_for_property(property_schema)
        if not found:
            continue
        default_op = {"op": "add", "path": join_path(tokens + [name]), "value": value}
        patch.extend(add_default_values([default_op], schema))
    return patch


def add_default_values(patch, schema):
    """
    Returns *patch* with, after each operation creating an empty object, the
    operations setting each of that object's fields (as described by *schema*)
    to its default value.  Objects nested in those defaults are filled in too.
    """
    result = []
    for patch_op in patch:
        result.append(patch_op)
        if _creates_empty_object(patch_op):
            defaults = _defaults_for_object(patch_op["path"], schema)
            if defaults:
                d(f"Filled in {len(defaults)} defaults under '{patch_op['path']}'")
            result.extend(defaults)
    return result


def default_object_for_schema(schema):
    """A minimal document satisfying *schema*, built from its defaults."""
    create_root = [{"op": "add", "path": "", "value": {}}]
    return jsonpatch.apply_patch({}, add_default_values(create_root, schema))
