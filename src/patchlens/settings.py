# Copyright (c) 2010-2011, Nick Blundell
# Copyright (c) 2023-2024, Abilian SAS
#
# SPDX-License-Identifier: BSD-3-Clause


class GlobalSettings:
    """
    These are some global settings that affect the functionality of the
    framework.
    """

    """
    After a patch has been run through a lens, fill in values for any fields of
    newly created objects that the destination schema describes but the patch
    does not set (e.g. a field introduced by an add lens).
    You might wish to set this to False when debugging a lens, so that the
    output holds only what the lens itself derived.
    """
    add_default_values = True
