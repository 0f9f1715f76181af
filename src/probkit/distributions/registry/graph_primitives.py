"""
Edge metadata of the characteristic graph.
"""

from __future__ import annotations

__author__ = "probkit developers"
__copyright__ = "Copyright (c) 2025 probkit developers"
__license__ = "SPDX-License-Identifier: MIT"

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from probkit.distributions.registry.constraint import GraphPrimitiveConstraint
from probkit.errors import GraphInvariantError

if TYPE_CHECKING:
    from typing import Any

    from probkit.distributions.computation import ComputationMethod

DEFAULT_COMPUTATION_KEY: str = "probkit_default_computation"
"""Default label for computation edges when no specific label is provided."""


@dataclass(frozen=True, slots=True)
class EdgeMeta:
    """
    Metadata for a computation edge in the characteristic graph.

    Parameters
    ----------
    method : ComputationMethod
        The conversion the edge stands for.
    constraint : GraphPrimitiveConstraint
        Applicability of the edge; allows everything by default.
    """

    method: ComputationMethod[Any, Any]
    constraint: GraphPrimitiveConstraint = field(default_factory=GraphPrimitiveConstraint)


__all__ = [
    "DEFAULT_COMPUTATION_KEY",
    "EdgeMeta",
    "GraphInvariantError",
]
