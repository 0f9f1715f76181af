"""
Distribution Families Configuration
===================================

Registers the built-in parametric families in the global register:

- ``Normal`` with ``meanStd``, ``meanPrec`` and ``exponential`` parametrizations;
- ``ContinuousUniform`` with ``standard``, ``meanWidth`` and ``minRange``;
- ``TruncatedNormal`` with ``meanStdBounds`` and ``standardBounds``.

Every family provides its full set of characteristics analytically; the
characteristic graph only serves families registered by users.
"""

from __future__ import annotations

__author__ = "probkit developers"
__copyright__ = "Copyright (c) 2025 probkit developers"
__license__ = "SPDX-License-Identifier: MIT"

import threading
from functools import lru_cache
from typing import TYPE_CHECKING, Any

from probkit.families.builtins import (
    configure_normal_family,
    configure_truncated_normal_family,
    configure_uniform_family,
)
from probkit.families.registry import ParametricFamilyRegister

if TYPE_CHECKING:
    from probkit.families.distribution import ParametricFamilyDistribution

_configure_lock = threading.Lock()


@lru_cache(maxsize=1)
def configure_families_register() -> ParametricFamilyRegister:
    """
    Register all built-in families (once per process).

    Returns
    -------
    ParametricFamilyRegister
        The global register of parametric families.
    """
    # concurrent first calls may both miss the cache; each configure step is idempotent
    with _configure_lock:
        configure_normal_family()
        configure_uniform_family()
        configure_truncated_normal_family()
        return ParametricFamilyRegister()


def reset_families_register() -> None:
    """Reset the cached families register."""
    with _configure_lock:
        configure_families_register.cache_clear()
        ParametricFamilyRegister._reset()


def make_distribution(
    family_name: str, parametrization_name: str | None = None, **parameters: Any
) -> ParametricFamilyDistribution:
    """
    Create a distribution of a registered family.

    Examples
    --------
    >>> make_distribution("TruncatedNormal", mu=0.5, sigma=3.0, a=-2.0, b=2.0)
    TruncatedNormal(mu=0.5, sigma=3.0, a=-2.0, b=2.0)
    """
    family = configure_families_register().get(family_name)
    return family.distribution(parametrization_name, **parameters)
