"""
Concrete distributions created from parametric families.
"""

from __future__ import annotations

__author__ = "probkit developers"
__copyright__ = "Copyright (c) 2025 probkit developers"
__license__ = "SPDX-License-Identifier: MIT"

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from probkit.distributions.distribution import Distribution
from probkit.families.registry import ParametricFamilyRegister

if TYPE_CHECKING:
    from collections.abc import Mapping
    from typing import Any

    from probkit.distributions.computation import AnalyticalComputation
    from probkit.distributions.strategies import ComputationStrategy, SamplingStrategy
    from probkit.distributions.support import Support
    from probkit.families.parametric_family import ParametricFamily
    from probkit.families.parametrizations import Parametrization
    from probkit.types import (
        DistributionType,
        GenericCharacteristicName,
    )


@dataclass(frozen=True, slots=True)
class ParameterCollection:
    """
    Named parameter values of a distribution.

    Attributes
    ----------
    names : tuple[str, ...]
        Parameter names in declaration order.
    values : tuple[float, ...]
        Parameter values.
    description : str
        Family and parametrization the values belong to.
    """

    names: tuple[str, ...]
    values: tuple[float, ...]
    description: str

    def as_dict(self) -> dict[str, float]:
        return dict(zip(self.names, self.values, strict=True))

    def __len__(self) -> int:
        return len(self.names)


@dataclass(slots=True)
class ParametricFamilyDistribution(Distribution):
    """
    A distribution of a parametric family with fixed, validated parameters.

    Instances are created by :meth:`ParametricFamily.distribution` and are not
    mutated afterwards: :meth:`with_parameters` builds a new instance, so the
    support never goes stale.

    Parameters
    ----------
    family_name : str
        Name of the family in :class:`ParametricFamilyRegister`.
    _distribution_type : DistributionType
        Type of this distribution.
    parameters : Parametrization
        Parameter values, in any registered parametrization.
    _support : Support or None
        Support computed from the base parameters.
    """

    family_name: str
    _distribution_type: DistributionType
    parameters: Parametrization
    _support: Support | None
    _analytical: dict[GenericCharacteristicName, AnalyticalComputation[Any, Any]] | None = field(
        default=None, init=False, repr=False, compare=False
    )

    @property
    def distribution_type(self) -> DistributionType:
        return self._distribution_type

    @property
    def family(self) -> ParametricFamily:
        return ParametricFamilyRegister.get(self.family_name)

    @property
    def parametrization_name(self) -> str:
        return self.parameters.name

    @property
    def base_parameters(self) -> Parametrization:
        """Parameters converted to the base parametrization of the family."""
        return self.family.to_base(self.parameters)

    @property
    def analytical_computations(
        self,
    ) -> Mapping[GenericCharacteristicName, AnalyticalComputation[Any, Any]]:
        """Analytical characteristics bound to the parameters, built once per instance."""
        if self._analytical is None:
            self._analytical = self.family._build_analytical_computations(self.parameters)
        return self._analytical

    @property
    def sampling_strategy(self) -> SamplingStrategy:
        return self.family.sampling_strategy

    @property
    def computation_strategy(self) -> ComputationStrategy[Any, Any]:
        return self.family.computation_strategy

    @property
    def support(self) -> Support | None:
        return self._support

    @property
    def parameters_collection(self) -> ParameterCollection:
        values = self.parameters.parameters
        return ParameterCollection(
            names=tuple(values),
            values=tuple(float(v) for v in values.values()),
            description=f"{self.family_name}({self.parametrization_name})",
        )

    def with_parameters(self, **changes: float) -> ParametricFamilyDistribution:
        """
        New distribution with some parameters of the current parametrization replaced.

        Raises
        ------
        InvalidArgumentError
            If a name is unknown or the new values violate a constraint.
        """
        values = {**self.parameters.parameters, **changes}
        return self.family.distribution(self.parametrization_name, **values)

    def to_base(self) -> ParametricFamilyDistribution:
        """The same distribution expressed in the base parametrization."""
        family = self.family
        if self.parametrization_name == family.base_parametrization_name:
            return self
        return replace(self, parameters=self.base_parameters)

    @property
    def is_elliptical(self) -> bool:
        return self.family.is_elliptical(self.base_parameters)

    def standard_representative(self) -> ParametricFamilyDistribution:
        """Standard member of the family this distribution is an affine image of."""
        family = self.family
        return family.distribution(None, **family.standard_parameters(self.base_parameters))

    def __repr__(self) -> str:
        args = ", ".join(f"{k}={v!r}" for k, v in self.parameters.parameters.items())
        return f"{self.family_name}({args})"
