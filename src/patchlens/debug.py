# Copyright (c) 2010-2011, Nick Blundell
# Copyright (c) 2023-2024, Abilian SAS
#
# SPDX-License-Identifier: BSD-3-Clause

import logging

logger = logging.getLogger("patchlens")


def d(msg):
    """Trace message, only emitted when the patchlens logger is at DEBUG."""
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(msg)


# More syntacticaly consistant assert function, for displaying explanations
def assert_msg(condition, msg=None):
    assert condition, msg or ""


def describe_test(msg):
    """A debug message that will stand out."""
    msg = "========= " + msg + " ========="
    return d(msg)


def assert_equal(got, expected):
    assert_msg(got == expected, f"Expected >>>{expected}<<< but got >>>{got}<<<")


def describe_patch(patch):
    """One line per operation, which reads better than a repr in traces."""
    lines = []
    for patch_op in patch:
        if "value" in patch_op:
            lines.append(f"{patch_op['op']} {patch_op['path']!r} {patch_op['value']!r}")
        else:
            lines.append(f"{patch_op['op']} {patch_op['path']!r}")
    return "\n".join(lines)
