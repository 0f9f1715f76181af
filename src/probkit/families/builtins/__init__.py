"""
Built-in distribution families of probkit.

This package contains the standard families registered by
:func:`probkit.families.configure_families_register`.
"""

__author__ = "probkit developers"
__copyright__ = "Copyright (c) 2025 probkit developers"
__license__ = "SPDX-License-Identifier: MIT"


from probkit.families.builtins.continuous import (
    configure_normal_family,
    configure_truncated_normal_family,
    configure_uniform_family,
)

__all__ = [
    "configure_normal_family",
    "configure_uniform_family",
    "configure_truncated_normal_family",
]
