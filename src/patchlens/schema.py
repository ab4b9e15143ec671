# Copyright (c) 2023-2024, Abilian SAS
#
# SPDX-License-Identifier: BSD-3-Clause

"""
Follows a lens through a JSON schema: given the schema of the documents a
lens reads, works out the schema of the documents it writes.  Schemas are
plain (draft-07 style) dicts and are never modified in place.
"""

import copy

from .debug import d
from .defaults import default_value_for_type
from .exceptions import SchemaException
from .util import has_value, stringify_value


def update_schema(schema, lens_source):
    """The schema of the output of *lens_source*, given its input *schema*."""
    schema = copy.deepcopy(schema)
    for lens_op in lens_source:
        schema = lens_op.update_schema(schema)
    return schema


def type_of_value(value):
    """The JSON schema type name of a python value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict):
        return "object"
    raise SchemaException(f"No JSON type for {value!r}")


def _properties(schema):
    return dict(schema.get("properties") or {})


def _required(schema):
    return list(schema.get("required") or [])


def _with(schema, properties, required=None):
    schema = {**schema, "properties": properties}
    if has_value(required):
        schema["required"] = required
    return schema


def _get_property(schema, name, action):
    properties = _properties(schema)
    if name not in properties:
        raise SchemaException(f"Cannot {action} '{name}': the schema has no such property")
    return properties[name]


def _describe(type, default, items=None):
    if not has_value(type):
        if not has_value(default):
            raise SchemaException("A property needs a type or a default value")
        type = type_of_value(default)

    description = {
        "type": type,
        "default": copy.deepcopy(default) if has_value(default) else default_value_for_type(type),
    }
    if type == "array" and items:
        description["items"] = _describe(items.get("type"), items.get("default"))
    return description


def add_property(schema, name, type=None, default=None, required=None, items=None):
    if not name:
        raise SchemaException("Missing property name when adding a property")

    properties = _properties(schema)
    properties[name] = _describe(type, default, items)

    required_names = _required(schema)
    if required is not False and name not in required_names:
        required_names.append(name)
    return _with(schema, properties, required_names)


def remove_property(schema, name):
    properties = _properties(schema)
    if name not in properties:
        d(f"Removing '{name}', which the schema does not describe")
    properties.pop(name, None)
    required_names = [required for required in _required(schema) if required != name]
    return _with(schema, properties, required_names)


def rename_property(schema, source, destination):
    properties = _properties(schema)
    if source not in properties:
        d(f"Renaming '{source}', which the schema does not describe")
        return schema

    # Rebuild so the renamed property keeps its place.
    properties = {
        (destination if key == source else key): value for key, value in properties.items()
    }
    required_names = [
        destination if required == source else required for required in _required(schema)
    ]
    return _with(schema, properties, required_names)


def hoist_property(schema, host, name):
    host_schema = _get_property(schema, host, f"hoist '{name}' out of")
    host_properties = _properties(host_schema)
    if name not in host_properties:
        raise SchemaException(f"Cannot hoist '{name}': '{host}' has no such property")

    hoisted = host_properties.pop(name)
    host_required = _required(host_schema)
    was_required = name in host_required
    host_schema = _with(
        host_schema, host_properties, [required for required in host_required if required != name]
    )

    properties = _properties(schema)
    properties[host] = host_schema
    properties[name] = hoisted
    required_names = _required(schema)
    if was_required and name not in required_names:
        required_names.append(name)
    return _with(schema, properties, required_names)


def plunge_property(schema, host, name):
    properties = _properties(schema)
    if host not in properties:
        raise SchemaException(f"Cannot plunge '{name}' into '{host}': no such property")
    if name not in properties:
        d(f"Plunging '{name}', which the schema does not describe")
        return schema

    plunged = properties.pop(name)
    required_names = _required(schema)
    was_required = name in required_names

    host_schema = properties[host]
    host_properties = _properties(host_schema)
    host_properties[name] = plunged
    host_required = _required(host_schema)
    if was_required and name not in host_required:
        host_required.append(name)
    properties[host] = _with(host_schema, host_properties, host_required)

    return _with(
        schema, properties, [required for required in required_names if required != name]
    )


def remove_null_support(schema):
    """The schema without null as an allowed value."""
    schema = copy.deepcopy(schema)
    if isinstance(schema.get("type"), list):
        types = [type for type in schema["type"] if type != "null"]
        schema["type"] = types[0] if len(types) == 1 else types
    for key in ("anyOf", "oneOf"):
        if key in schema:
            options = [option for option in schema[key] if option.get("type") != "null"]
            if len(options) == 1:
                del schema[key]
                schema.update(options[0])
            else:
                schema[key] = options
    if "default" in schema and schema["default"] is None:
        del schema["default"]
    return schema


def wrap_property(schema, name):
    original = _get_property(schema, name, "wrap")
    properties = _properties(schema)
    properties[name] = {"type": "array", "default": [], "items": remove_null_support(original)}
    return _with(schema, properties)


def head_property(schema, name):
    original = _get_property(schema, name, "head")
    if "items" not in original and original.get("type") != "array":
        raise SchemaException(f"Cannot head '{name}': it is not described as an array")

    properties = _properties(schema)
    items = copy.deepcopy(original.get("items", {}))
    properties[name] = {"anyOf": [{"type": "null"}, items]}
    return _with(schema, properties)


def in_property(schema, name, lens_source):
    original = _get_property(schema, name, "go into")
    properties = _properties(schema)
    properties[name] = update_schema(original, lens_source)
    return _with(schema, properties)


def map_items(schema, lens_source):
    if "items" not in schema:
        if schema.get("type") == "array":
            # Nothing is known about the elements, so there is nothing to change.
            return schema
        raise SchemaException("Cannot map over a schema which does not describe an array")
    return {**schema, "items": update_schema(schema["items"], lens_source)}


def convert_property(schema, convert_op):
    original = _get_property(schema, convert_op.name, "convert")
    properties = _properties(schema)

    if has_value(convert_op.destination_type):
        properties[convert_op.name] = {"type": convert_op.destination_type}
        return _with(schema, properties)

    converted = dict(original)
    table = convert_op.forward_table()

    def recode(value):
        # Values the table does not cover are only an error once written.
        return table.get(stringify_value(value), value)

    if "enum" in converted:
        converted["enum"] = [recode(value) for value in converted["enum"]]
    if "default" in converted:
        converted["default"] = recode(converted["default"])
    properties[convert_op.name] = converted
    return _with(schema, properties)
