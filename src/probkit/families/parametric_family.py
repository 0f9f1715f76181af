"""
Parametric family definitions.

A :class:`ParametricFamily` ties together the parametrizations of a family,
its table of analytical characteristics, its support, its sampling and
computation strategies and a few family-level facts (ellipticity, the
standard representative).
"""

from __future__ import annotations

__author__ = "probkit developers"
__copyright__ = "Copyright (c) 2025 probkit developers"
__license__ = "SPDX-License-Identifier: MIT"

import logging
from functools import partial
from typing import TYPE_CHECKING, dataclass_transform

from probkit.distributions.computation import AnalyticalComputation
from probkit.distributions.strategies import (
    DefaultComputationStrategy,
    DefaultSamplingUnivariateStrategy,
)
from probkit.errors import InvalidArgumentError, UnsupportedOperationError
from probkit.families.distribution import ParametricFamilyDistribution
from probkit.types import DistributionType

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from typing import Any, TypeAlias

    from probkit.distributions.strategies import ComputationStrategy, SamplingStrategy
    from probkit.distributions.support import Support
    from probkit.families.parametrizations import Parametrization
    from probkit.types import (
        GenericCharacteristicName,
        ParametrizationName,
    )

    ParametrizedFunction: TypeAlias = Callable[..., Any]
    SupportResolver: TypeAlias = Callable[[Parametrization], Support | None]
    EllipticityResolver: TypeAlias = Callable[[Parametrization], bool]
    StandardResolver: TypeAlias = Callable[[Parametrization], Mapping[str, float]]

logger = logging.getLogger(__name__)


class ParametricFamily:
    """
    A family of distributions with one or more parametrizations.

    Parameters
    ----------
    name : str
        Name of the family; distributions refer back to it through the
        family register.
    distr_type : DistributionType or Callable[[Parametrization], DistributionType]
        Distribution type, or a function inferring it from base parameters.
    distr_parametrizations : list[str]
        Parametrization names; the first one is the base parametrization.
    distr_characteristics : dict[str, dict[str, Callable] | Callable]
        Analytical characteristics keyed by characteristic name. A bare
        callable is taken as defined on the base parametrization. Each
        callable receives the parameters first and the evaluation argument
        second.
    sampling_strategy : SamplingStrategy, optional
        Defaults to inverse transform sampling.
    computation_strategy : ComputationStrategy, optional
        Defaults to :class:`DefaultComputationStrategy`.
    support_by_parametrization : Callable[[Parametrization], Support], optional
        Support as a function of the base parameters.
    is_elliptical : bool or Callable[[Parametrization], bool], default False
        Whether members of the family are elliptical.
    standard_representative : Callable[[Parametrization], Mapping[str, float]], optional
        Base parameter values of the standard member of the family that a
        distribution with the given base parameters is an affine image of.
    """

    def __init__(
        self,
        name: str,
        distr_type: DistributionType | Callable[[Parametrization], DistributionType],
        distr_parametrizations: list[ParametrizationName],
        distr_characteristics: dict[
            GenericCharacteristicName,
            dict[ParametrizationName, ParametrizedFunction] | ParametrizedFunction,
        ],
        sampling_strategy: SamplingStrategy | None = None,
        computation_strategy: ComputationStrategy[Any, Any] | None = None,
        support_by_parametrization: SupportResolver | None = None,
        is_elliptical: bool | EllipticityResolver = False,
        standard_representative: StandardResolver | None = None,
    ):
        self._name = name
        self._distr_type: Callable[[Parametrization], DistributionType] = (
            (lambda _params: distr_type) if isinstance(distr_type, DistributionType) else distr_type
        )
        self._support_resolver: SupportResolver = support_by_parametrization or (
            lambda _params: None
        )
        self._is_elliptical: EllipticityResolver = (
            (lambda _params: is_elliptical) if isinstance(is_elliptical, bool) else is_elliptical
        )
        self._standard_resolver = standard_representative

        self.computation_strategy = (
            DefaultComputationStrategy() if computation_strategy is None else computation_strategy
        )
        self.sampling_strategy = (
            DefaultSamplingUnivariateStrategy() if sampling_strategy is None else sampling_strategy
        )

        self.parametrization_names: list[ParametrizationName] = list(distr_parametrizations)
        self.base_parametrization_name: ParametrizationName = self.parametrization_names[0]
        self._parametrizations: dict[ParametrizationName, type[Parametrization]] = {}

        base_name = self.base_parametrization_name
        self.distr_characteristics: dict[
            GenericCharacteristicName, dict[ParametrizationName, ParametrizedFunction]
        ] = {
            key: val if isinstance(val, dict) else {base_name: val}
            for key, val in distr_characteristics.items()
        }

        # characteristic -> providing parametrization, per parametrization
        self._analytical_plan: dict[
            ParametrizationName, dict[GenericCharacteristicName, ParametrizationName]
        ] = {}
        for pname in self.parametrization_names:
            plan: dict[GenericCharacteristicName, ParametrizationName] = {}
            for characteristic, forms in self.distr_characteristics.items():
                if pname in forms:
                    plan[characteristic] = pname
                elif base_name in forms:
                    plan[characteristic] = base_name
            self._analytical_plan[pname] = plan

    @property
    def name(self) -> str:
        return self._name

    @property
    def parametrizations(self) -> dict[ParametrizationName, type[Parametrization]]:
        return self._parametrizations

    @property
    def base(self) -> type[Parametrization]:
        """
        The base parametrization class.

        Raises
        ------
        UnsupportedOperationError
            If the base parametrization has not been registered.
        """
        try:
            return self._parametrizations[self.base_parametrization_name]
        except KeyError as exc:
            raise UnsupportedOperationError(
                f"Base parametrization {self.base_parametrization_name!r} is not registered"
            ) from exc

    @property
    def support_resolver(self) -> SupportResolver:
        return self._support_resolver

    def register_parametrization(
        self,
        name: ParametrizationName,
        parametrization_class: type[Parametrization],
    ) -> None:
        """
        Register a parametrization class under ``name``.

        Raises
        ------
        InvalidArgumentError
            If ``name`` is not declared by the family or already registered.
        """
        if name not in self.parametrization_names:
            raise InvalidArgumentError(
                f"Parametrization {name!r} is not declared by family {self.name!r}"
            )
        if name in self._parametrizations:
            raise InvalidArgumentError(f"Parametrization {name!r} is already registered")
        self._parametrizations[name] = parametrization_class

    def get_parametrization(self, name: ParametrizationName) -> type[Parametrization]:
        """
        Parametrization class registered under ``name``.

        Raises
        ------
        InvalidArgumentError
            If ``name`` is unknown.
        """
        try:
            return self._parametrizations[name]
        except KeyError as exc:
            raise InvalidArgumentError(
                f"Unknown parametrization {name!r} of family {self.name!r}"
            ) from exc

    def to_base(self, parameters: Parametrization) -> Parametrization:
        """Convert (and validate) parameters into the base parametrization."""
        if parameters.name == self.base_parametrization_name:
            return parameters
        base = parameters.transform_to_base_parametrization()
        base.validate()
        return base

    def is_elliptical(self, base_parameters: Parametrization) -> bool:
        return bool(self._is_elliptical(base_parameters))

    def standard_parameters(self, base_parameters: Parametrization) -> Mapping[str, float]:
        """
        Base parameter values of the standard representative.

        Raises
        ------
        UnsupportedOperationError
            If the family defines no standard representative.
        """
        if self._standard_resolver is None:
            raise UnsupportedOperationError(
                f"Family {self.name!r} defines no standard representative"
            )
        return self._standard_resolver(base_parameters)

    def _build_analytical_computations(
        self, parameters: Parametrization
    ) -> dict[GenericCharacteristicName, AnalyticalComputation[Any, Any]]:
        """Bind the analytical characteristics to ``parameters``."""
        plan = self._analytical_plan.get(parameters.name, {})
        result: dict[GenericCharacteristicName, AnalyticalComputation[Any, Any]] = {}
        base_params: Parametrization | None = None

        for characteristic, provider_name in plan.items():
            if provider_name == parameters.name:
                params_obj = parameters
            else:
                if base_params is None:
                    base_params = self.to_base(parameters)
                params_obj = base_params
            func = self.distr_characteristics[characteristic][provider_name]
            result[characteristic] = AnalyticalComputation(
                target=characteristic, func=partial(func, params_obj)
            )
        return result

    def distribution(
        self,
        parametrization_name: str | None = None,
        **parameters_values: Any,
    ) -> ParametricFamilyDistribution:
        """
        Create a validated distribution.

        Parameters
        ----------
        parametrization_name : str, optional
            Parametrization of ``parameters_values`` (defaults to the base one).
        **parameters_values
            Parameter values.

        Returns
        -------
        ParametricFamilyDistribution

        Raises
        ------
        InvalidArgumentError
            If the parametrization is unknown, parameters are missing or
            unexpected, or a constraint does not hold.
        """
        if parametrization_name is None:
            parametrization_class = self.base
        else:
            parametrization_class = self.get_parametrization(parametrization_name)

        try:
            parameters = parametrization_class(**parameters_values)
        except TypeError as exc:
            raise InvalidArgumentError(
                f"Bad parameters for {self.name}({parametrization_class.__param_name__}): {exc}"
            ) from exc
        parameters.validate()
        base_parameters = self.to_base(parameters)
        logger.debug("Created %s with %r", self.name, parameters)
        return ParametricFamilyDistribution(
            family_name=self.name,
            _distribution_type=self._distr_type(base_parameters),
            parameters=parameters,
            _support=self._support_resolver(base_parameters),
        )

    @dataclass_transform()
    def parametrization(
        self, *, name: str
    ) -> Callable[[type[Parametrization]], type[Parametrization]]:
        """Class decorator registering a parametrization of this family."""
        from probkit.families.parametrizations import parametrization as _param_deco

        return _param_deco(family=self, name=name)

    __call__ = distribution
