"""
Parametric families of distributions.

Families, their parametrizations with constraints, the global family
register and the concrete distributions created from them.
"""

__author__ = "probkit developers"
__copyright__ = "Copyright (c) 2025 probkit developers"
__license__ = "SPDX-License-Identifier: MIT"


from .configuration import (
    configure_families_register,
    make_distribution,
    reset_families_register,
)
from .distribution import ParameterCollection, ParametricFamilyDistribution
from .parametric_family import ParametricFamily
from .parametrizations import (
    Parametrization,
    ParametrizationConstraint,
    constraint,
    parametrization,
)
from .registry import ParametricFamilyRegister

__all__ = [
    "ParametricFamilyRegister",
    "ParametrizationConstraint",
    "Parametrization",
    "ParametricFamily",
    "ParametricFamilyDistribution",
    "ParameterCollection",
    "constraint",
    "parametrization",
    "configure_families_register",
    "reset_families_register",
    "make_distribution",
]
