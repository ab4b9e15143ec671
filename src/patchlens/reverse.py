# Copyright (c) 2023-2024, Abilian SAS
#
# SPDX-License-Identifier: BSD-3-Clause


def reverse_lens(lens_source):
    """
    Returns the lens undoing *lens_source*: each operation is replaced by its
    structural dual (rename(a, b) by rename(b, a), hoist by plunge, wrap by
    head, add by remove, ...) and the order of operations is reversed, since
    the last rewrite applied is the first one to undo.

    The input lens is left untouched.
    """
    return [lens_op.reverse() for lens_op in reversed(lens_source)]
