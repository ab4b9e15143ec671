# Copyright (c) 2010, Nick Blundell
# Copyright (c) 2023-2024, Abilian SAS
#
# SPDX-License-Identifier: BSD-3-Clause

from .debug import d


class LensException(Exception):
    """
    Base of all errors raised while running a lens over a patch or a schema.
    These are never recovered from internally: the whole conversion is aborted
    and the caller decides what to do.
    """

    def __init__(self, msg=None):
        super().__init__(msg)
        self.msg = msg
        d(f"Throwing: {msg}")

    def __str__(self):
        return f"{self.__class__.__name__}: {self.msg}"


# Thrown when a convert lens meets a value its forward table does not cover.
class NoMappingException(LensException):
    pass


# Thrown when something that is not one of the known lens operations is run,
# or when lens data names an operation we do not know.
class UnknownLensOpException(LensException):
    pass


class LensSourceException(LensException):
    """Malformed lens data (e.g. a missing field on a rename)."""


# Thrown when a lens cannot be followed through a schema, for example when
# hoisting out of a host object the schema does not have.
class SchemaException(LensException):
    pass
