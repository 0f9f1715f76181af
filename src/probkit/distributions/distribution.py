"""
Distribution Protocol
=====================

The public :class:`Distribution` protocol used throughout the package.

Implementations only provide the structural members (distribution type,
analytical computations, strategies, support). The evaluation contract
(densities, distribution functions, quantiles, gradients, characteristic
functions, moments, sampling and confidence regions) is implemented here on
top of :meth:`Distribution.query_method`, so that every characteristic is
either analytical or resolved through the characteristic graph.

Notes
-----
- Scalar characteristics accept a scalar or an array and evaluate
  element-wise; scalars in give Python scalars out.
- Gradients are taken with respect to the base parameters, in declaration
  order; for an array input the result has one row per point.
"""

from __future__ import annotations

__author__ = "probkit developers"
__copyright__ = "Copyright (c) 2025 probkit developers"
__license__ = "SPDX-License-Identifier: MIT"

from typing import TYPE_CHECKING, Protocol, runtime_checkable

import numpy as np

from probkit.distributions import regions as _regions
from probkit.errors import UnsupportedOperationError
from probkit.types import CharacteristicName, Kind

if TYPE_CHECKING:
    from collections.abc import Mapping
    from typing import Any

    from probkit.distributions.computation import AnalyticalComputation
    from probkit.distributions.sampling import Sample
    from probkit.distributions.strategies import (
        ComputationStrategy,
        Method,
        RandomState,
        SamplingStrategy,
    )
    from probkit.distributions.support import Support
    from probkit.types import (
        DistributionType,
        GenericCharacteristicName,
        NumericArray,
    )


@runtime_checkable
class Distribution(Protocol):
    """Public distribution interface used by strategies, fitters and solvers."""

    @property
    def distribution_type(self) -> DistributionType: ...

    @property
    def analytical_computations(
        self,
    ) -> Mapping[GenericCharacteristicName, AnalyticalComputation[Any, Any]]: ...

    @property
    def sampling_strategy(self) -> SamplingStrategy: ...
    @property
    def computation_strategy(self) -> ComputationStrategy[Any, Any]: ...

    @property
    def support(self) -> Support | None: ...

    def query_method(
        self, characteristic_name: GenericCharacteristicName, **options: Any
    ) -> Method[Any, Any]:
        return self.computation_strategy.query_method(characteristic_name, self, **options)

    def calculate_characteristic(
        self, characteristic_name: GenericCharacteristicName, value: Any, **options: Any
    ) -> Any:
        """
        Evaluate a characteristic at ``value`` (scalar or array).

        ``options`` are forwarded to the fitters when the characteristic has
        to be derived.
        """
        method = self.query_method(characteristic_name, **options)
        if np.ndim(value) == 0:
            result = method(float(value))
            return result.item() if isinstance(result, np.ndarray | np.generic) else result
        return np.asarray(method(np.asarray(value, dtype=np.float64)))

    # --- densities and distribution functions ---------------------------------

    def pdf(self, x: float | NumericArray, **options: Any) -> Any:
        return self.calculate_characteristic(CharacteristicName.PDF, x, **options)

    def log_pdf(self, x: float | NumericArray, **options: Any) -> Any:
        return self.calculate_characteristic(CharacteristicName.LOGPDF, x, **options)

    def ddf(self, x: float | NumericArray, **options: Any) -> Any:
        """Derivative of the density with respect to ``x``."""
        return self.calculate_characteristic(CharacteristicName.DDF, x, **options)

    def cdf(self, x: float | NumericArray, **options: Any) -> Any:
        return self.calculate_characteristic(CharacteristicName.CDF, x, **options)

    def complementary_cdf(self, x: float | NumericArray, **options: Any) -> Any:
        """``P(X > x)``, evaluated without cancellation in the upper tail."""
        return self.calculate_characteristic(CharacteristicName.SF, x, **options)

    def survival_function(self, x: float | NumericArray, **options: Any) -> Any:
        return self.calculate_characteristic(CharacteristicName.SF, x, **options)

    def quantile(self, p: float | NumericArray, **options: Any) -> Any:
        return self.calculate_characteristic(CharacteristicName.PPF, p, **options)

    def inverse_survival_function(self, p: float | NumericArray, **options: Any) -> Any:
        return self.calculate_characteristic(CharacteristicName.ISF, p, **options)

    # --- parameter gradients --------------------------------------------------

    def _gradient(self, name: GenericCharacteristicName, x: Any) -> np.ndarray:
        method = self.query_method(name)
        if np.ndim(x) == 0:
            return np.asarray(method(float(x)), dtype=np.float64)
        return np.asarray(method(np.asarray(x, dtype=np.float64)), dtype=np.float64)

    def pdf_gradient(self, x: float | NumericArray) -> np.ndarray:
        """Gradient of ``pdf(x)`` with respect to the base parameters."""
        return self._gradient(CharacteristicName.PDF_GRADIENT, x)

    def log_pdf_gradient(self, x: float | NumericArray) -> np.ndarray:
        """Gradient of ``log_pdf(x)`` with respect to the base parameters."""
        return self._gradient(CharacteristicName.LOGPDF_GRADIENT, x)

    def cdf_gradient(self, x: float | NumericArray) -> np.ndarray:
        """Gradient of ``cdf(x)`` with respect to the base parameters."""
        return self._gradient(CharacteristicName.CDF_GRADIENT, x)

    # --- characteristic functions ----------------------------------------------

    def characteristic_function(self, t: float | NumericArray, **options: Any) -> Any:
        """``E[exp(i t X)]``."""
        method = self.query_method(CharacteristicName.CF, **options)
        if np.ndim(t) == 0:
            return complex(method(float(t)))
        return np.asarray(method(np.asarray(t, dtype=np.float64)), dtype=np.complex128)

    def log_characteristic_function(self, t: float | NumericArray, **options: Any) -> Any:
        method = self.query_method(CharacteristicName.LOG_CF, **options)
        if np.ndim(t) == 0:
            return complex(method(float(t)))
        return np.asarray(method(np.asarray(t, dtype=np.float64)), dtype=np.complex128)

    # --- moments ----------------------------------------------------------------

    def _moment(self, name: GenericCharacteristicName, **options: Any) -> float:
        return float(self.query_method(name)(None, **options))

    def mean(self) -> float:
        return self._moment(CharacteristicName.MEAN)

    def variance(self) -> float:
        return self._moment(CharacteristicName.VAR)

    def standard_deviation(self) -> float:
        return float(np.sqrt(self.variance()))

    def skewness(self) -> float:
        return self._moment(CharacteristicName.SKEW)

    def kurtosis(self, excess: bool = False) -> float:
        """Raw kurtosis ``E[(X - m)^4] / var^2``, or the excess one."""
        return self._moment(CharacteristicName.KURT, excess=excess)

    def entropy(self) -> float:
        """Differential entropy in nats."""
        return self._moment(CharacteristicName.ENTROPY)

    def covariance(self) -> np.ndarray:
        return np.array([[self.variance()]], dtype=np.float64)

    def correlation(self) -> np.ndarray:
        return np.ones((1, 1), dtype=np.float64)

    def spearman_correlation(self) -> np.ndarray:
        return np.ones((1, 1), dtype=np.float64)

    def kendall_tau(self) -> np.ndarray:
        return np.ones((1, 1), dtype=np.float64)

    # --- sampling ---------------------------------------------------------------

    def sample(self, n: int, rng: RandomState = None, **options: Any) -> Sample:
        return self.sampling_strategy.sample(n, distr=self, rng=rng, **options)

    def realization(self, rng: RandomState = None, **options: Any) -> float:
        """A single draw."""
        return float(self.sample(1, rng=rng, **options).array[0, 0])

    # --- confidence regions -------------------------------------------------------

    def bilateral_confidence_interval(
        self, p: float, **options: Any
    ) -> _regions.ConfidenceInterval:
        return _regions.bilateral_confidence_interval(self, p, **options)

    def unilateral_confidence_interval(
        self, p: float, upper_tail: bool = False, **options: Any
    ) -> _regions.ConfidenceInterval:
        return _regions.unilateral_confidence_interval(self, p, upper_tail=upper_tail, **options)

    def minimum_volume_interval(self, p: float, **options: Any) -> _regions.MinimumVolumeInterval:
        return _regions.minimum_volume_interval(self, p, **options)

    def minimum_volume_level_set(self, p: float, **options: Any) -> _regions.LevelSet:
        return _regions.minimum_volume_level_set(self, p, **options)

    # --- classification -----------------------------------------------------------

    @property
    def is_continuous(self) -> bool:
        return self.distribution_type.registry_features.get("kind") == Kind.CONTINUOUS

    @property
    def is_elliptical(self) -> bool:
        return False

    def standard_representative(self) -> Distribution:
        raise UnsupportedOperationError(
            f"{type(self).__name__} does not define a standard representative"
        )
