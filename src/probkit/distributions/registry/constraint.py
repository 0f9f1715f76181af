"""
Applicability constraints for the characteristic graph.

Nodes and edges of the characteristic graph are guarded by constraints on
the features of a distribution: type-level features (kind, dimension) read
from :attr:`DistributionType.registry_features` and instance-level features
(e.g. ``support``) read from the distribution itself.
"""

from __future__ import annotations

__author__ = "probkit developers"
__copyright__ = "Copyright (c) 2025 probkit developers"
__license__ = "SPDX-License-Identifier: MIT"

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Mapping
    from typing import Any

    from probkit.distributions.distribution import Distribution


class Constraint(Protocol):
    """Protocol for value-level constraints."""

    def allows(self, value: Any) -> bool: ...


@dataclass(frozen=True, slots=True)
class NonNullConstraint:
    """Rejects ``None``."""

    def allows(self, value: Any) -> bool:
        return value is not None


@dataclass(frozen=True, slots=True)
class SetConstraint:
    """
    Membership in a finite set.

    Parameters
    ----------
    allowed : frozenset[Any] | None
        Allowed values; ``None`` allows everything.
    """

    allowed: frozenset[Any] | None = None

    def allows(self, value: Any) -> bool:
        return self.allowed is None or value in self.allowed


@dataclass(frozen=True, slots=True)
class NumericConstraint:
    """
    Integer value restricted by a set of allowed values and/or bounds.

    Parameters
    ----------
    allowed : frozenset[int] | None
        Specific allowed values.
    ge : int | None
        Inclusive lower bound.
    le : int | None
        Inclusive upper bound.

    Notes
    -----
    Conditions are combined with AND; ``allowed=frozenset({1})`` restricts a
    dimension to exactly 1.
    """

    allowed: frozenset[int] | None = None
    ge: int | None = None
    le: int | None = None

    def allows(self, value: Any) -> bool:
        try:
            v = int(value)
        except (TypeError, ValueError):
            return False
        if self.allowed is not None and v not in self.allowed:
            return False
        if self.ge is not None and v < self.ge:
            return False
        return self.le is None or v <= self.le


@dataclass(frozen=True, slots=True)
class GraphPrimitiveConstraint:
    """
    Constraint on a distribution's type-level and instance-level features.

    Parameters
    ----------
    distribution_type_feature_constraints : Mapping[str, Constraint]
        Constraints keyed by a feature of ``distr.distribution_type``.
    distribution_instance_feature_constraints : Mapping[str, Constraint]
        Constraints keyed by an attribute of the distribution.

    Notes
    -----
    An empty constraint allows every distribution.
    """

    distribution_type_feature_constraints: Mapping[str, Constraint] = field(
        default_factory=lambda: MappingProxyType({})
    )
    distribution_instance_feature_constraints: Mapping[str, Constraint] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def __post_init__(self) -> None:
        for name in (
            "distribution_type_feature_constraints",
            "distribution_instance_feature_constraints",
        ):
            value = getattr(self, name)
            if not isinstance(value, MappingProxyType):
                object.__setattr__(self, name, MappingProxyType(dict(value)))

    def allows(self, distr: Distribution) -> bool:
        """Return ``True`` if every feature constraint holds for ``distr``."""
        features = distr.distribution_type.registry_features
        for name, cons in self.distribution_type_feature_constraints.items():
            if not cons.allows(features.get(name)):
                return False
        for name, cons in self.distribution_instance_feature_constraints.items():
            if not cons.allows(getattr(distr, name, None)):
                return False
        return True
