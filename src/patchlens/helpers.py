# Copyright (c) 2023-2024, Abilian SAS
#
# SPDX-License-Identifier: BSD-3-Clause

"""
Shorthands for writing lenses in python, e.g.

  lens = [
      rename_property("title", "name"),
      inside("details", [hoist_property("meta", "author")]),
      convert_value("status", {"open": True, "closed": False}),
  ]
"""

from .lens_ops import (
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
)


def add_property(name, type=None, default=None, required=None, items=None):
    return AddProperty(name, type=type, default=default, required=required, items=items)


def remove_property(name, type=None, default=None, required=None, items=None):
    return RemoveProperty(name, type=type, default=default, required=required, items=items)


def rename_property(source, destination):
    return RenameProperty(source, destination)


def hoist_property(host, name):
    return HoistProperty(host, name)


def plunge_property(host, name):
    return PlungeProperty(host, name)


def wrap_property(name):
    return WrapProperty(name)


def head_property(name):
    return HeadProperty(name)


def inside(name, lens):
    return LensIn(name, lens)


def map_lens(lens):
    return LensMap(lens)


def convert_value(name, forward, backward=None, source_type=None, destination_type=None):
    """
    A convert lens.  When *backward* is not given, the forward table is
    inverted, which only makes sense for one to one tables.
    """
    if backward is None:
        backward = {value: key for key, value in forward.items()}
    return ConvertValue(
        name,
        [forward, backward],
        source_type=source_type,
        destination_type=destination_type,
    )
