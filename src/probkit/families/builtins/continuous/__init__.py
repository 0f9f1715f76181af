"""
Built-in continuous distribution families.

This module contains implementations of continuous parametric families.
"""

__author__ = "probkit developers"
__copyright__ = "Copyright (c) 2025 probkit developers"
__license__ = "SPDX-License-Identifier: MIT"


from probkit.families.builtins.continuous.normal import configure_normal_family
from probkit.families.builtins.continuous.truncated_normal import (
    configure_truncated_normal_family,
)
from probkit.families.builtins.continuous.uniform import configure_uniform_family

__all__ = [
    "configure_normal_family",
    "configure_uniform_family",
    "configure_truncated_normal_family",
]
