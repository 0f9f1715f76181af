"""
Uniform distribution family implementation.

Contains the ContinuousUniform family with multiple parameterizations.
"""

from __future__ import annotations

__author__ = "probkit developers"
__copyright__ = "Copyright (c) 2025 probkit developers"
__license__ = "SPDX-License-Identifier: MIT"

import math
from typing import TYPE_CHECKING, cast

import numpy as np

from probkit.distributions.numerics import as_probabilities
from probkit.distributions.strategies import DefaultSamplingUnivariateStrategy
from probkit.distributions.support import ContinuousSupport
from probkit.families.parametric_family import ParametricFamily
from probkit.families.parametrizations import (
    Parametrization,
    constraint,
    finite,
    parametrization,
)
from probkit.families.registry import ParametricFamilyRegister
from probkit.types import (
    CharacteristicName,
    ComplexArray,
    FamilyName,
    NumericArray,
    UnivariateContinuous,
)

if TYPE_CHECKING:
    from typing import Any


def configure_uniform_family() -> None:
    """
    Configure and register the ContinuousUniform distribution family.
    """
    if ParametricFamilyRegister.contains(FamilyName.CONTINUOUS_UNIFORM):
        return

    UNIFORM_DOC = """
    Uniform (continuous) distribution on [lower_bound, upper_bound].

    Probability density function:
        f(x) = 1/(upper_bound - lower_bound) for x in [lower_bound, upper_bound], 0 otherwise

    Gradients are taken with respect to (lower_bound, upper_bound).
    """

    def _bounds(parameters: Parametrization) -> tuple[float, float, float]:
        params = cast(_Standard, parameters)
        return params.lower_bound, params.upper_bound, params.upper_bound - params.lower_bound

    def _inside(parameters: Parametrization, x: NumericArray) -> NumericArray:
        lower, upper, _ = _bounds(parameters)
        x_arr = np.asarray(x, dtype=np.float64)
        return cast(NumericArray, (x_arr >= lower) & (x_arr <= upper))

    def pdf(parameters: Parametrization, x: NumericArray) -> NumericArray:
        """
        Probability density function for uniform distribution.

        Parameters
        ----------
        parameters : Parametrization
            Base parameters (lower_bound, upper_bound).
        x : NumericArray
            Points at which to evaluate the density.

        Returns
        -------
        NumericArray
            ``1/width`` inside the bounds, 0 outside.
        """
        width = _bounds(parameters)[2]
        return cast(NumericArray, np.where(_inside(parameters, x), 1.0 / width, 0.0))

    def logpdf(parameters: Parametrization, x: NumericArray) -> NumericArray:
        width = _bounds(parameters)[2]
        return cast(NumericArray, np.where(_inside(parameters, x), -math.log(width), -np.inf))

    def ddf(parameters: Parametrization, x: NumericArray) -> NumericArray:
        return cast(NumericArray, np.zeros_like(np.asarray(x, dtype=np.float64)))

    def cdf(parameters: Parametrization, x: NumericArray) -> NumericArray:
        lower, _, width = _bounds(parameters)
        x_arr = np.asarray(x, dtype=np.float64)
        return cast(NumericArray, np.clip((x_arr - lower) / width, 0.0, 1.0))

    def sf(parameters: Parametrization, x: NumericArray) -> NumericArray:
        _, upper, width = _bounds(parameters)
        x_arr = np.asarray(x, dtype=np.float64)
        return cast(NumericArray, np.clip((upper - x_arr) / width, 0.0, 1.0))

    def ppf(parameters: Parametrization, p: NumericArray) -> NumericArray:
        """
        Percent point function, ``lower_bound + p × width``.

        Raises
        ------
        InvalidArgumentError
            If probability is outside [0, 1].
        """
        lower, _, width = _bounds(parameters)
        return cast(NumericArray, lower + as_probabilities(p) * width)

    def isf(parameters: Parametrization, p: NumericArray) -> NumericArray:
        _, upper, width = _bounds(parameters)
        return cast(NumericArray, upper - as_probabilities(p) * width)

    def _masked(parameters: Parametrization, x: NumericArray, columns: list[Any]) -> NumericArray:
        inside = _inside(parameters, x)
        stacked = np.stack(np.broadcast_arrays(*columns), axis=-1)
        return cast(NumericArray, np.where(inside[..., np.newaxis], stacked, 0.0))

    def pdf_gradient(parameters: Parametrization, x: NumericArray) -> NumericArray:
        """``(1/width², -1/width²)`` inside the bounds."""
        width = _bounds(parameters)[2]
        x_arr = np.asarray(x, dtype=np.float64)
        ones = np.ones_like(x_arr)
        return _masked(parameters, x_arr, [ones / width**2, -ones / width**2])

    def logpdf_gradient(parameters: Parametrization, x: NumericArray) -> NumericArray:
        width = _bounds(parameters)[2]
        x_arr = np.asarray(x, dtype=np.float64)
        ones = np.ones_like(x_arr)
        return _masked(parameters, x_arr, [ones / width, -ones / width])

    def cdf_gradient(parameters: Parametrization, x: NumericArray) -> NumericArray:
        """``((x - upper)/width², -(x - lower)/width²)`` inside the bounds."""
        lower, upper, width = _bounds(parameters)
        x_arr = np.asarray(x, dtype=np.float64)
        return _masked(
            parameters, x_arr, [(x_arr - upper) / width**2, -(x_arr - lower) / width**2]
        )

    def char_func(parameters: Parametrization, t: NumericArray) -> ComplexArray:
        """
        Characteristic function ``sinc(width·t/(2π)) · exp(i·center·t)``.

        ``np.sinc`` is the normalized sinc ``sin(πx)/(πx)``.
        """
        lower, upper, width = _bounds(parameters)
        t_arr = np.asarray(t, dtype=np.float64)
        center = 0.5 * (lower + upper)
        envelope = np.sinc(width * t_arr / (2 * np.pi))
        return cast(ComplexArray, envelope * np.exp(1j * center * t_arr))

    def log_char_func(parameters: Parametrization, t: NumericArray) -> ComplexArray:
        with np.errstate(divide="ignore"):
            return cast(ComplexArray, np.log(char_func(parameters, t)))

    def mean_func(parameters: Parametrization, _: Any = None) -> float:
        lower, upper, _w = _bounds(parameters)
        return 0.5 * (lower + upper)

    def var_func(parameters: Parametrization, _: Any = None) -> float:
        return _bounds(parameters)[2] ** 2 / 12.0

    def skew_func(_1: Parametrization, _2: Any = None) -> float:
        return 0.0

    def kurt_func(_1: Parametrization, _2: Any = None, excess: bool = False) -> float:
        """Raw kurtosis 9/5, or excess kurtosis -6/5."""
        return -1.2 if excess else 1.8

    def entropy_func(parameters: Parametrization, _: Any = None) -> float:
        return math.log(_bounds(parameters)[2])

    def _support(parameters: Parametrization) -> ContinuousSupport:
        lower, upper, _ = _bounds(parameters)
        return ContinuousSupport.closed(lower, upper)

    Uniform = ParametricFamily(
        name=FamilyName.CONTINUOUS_UNIFORM,
        distr_type=UnivariateContinuous,
        distr_parametrizations=["standard", "meanWidth", "minRange"],
        distr_characteristics={
            CharacteristicName.PDF: pdf,
            CharacteristicName.LOGPDF: logpdf,
            CharacteristicName.DDF: ddf,
            CharacteristicName.CDF: cdf,
            CharacteristicName.SF: sf,
            CharacteristicName.PPF: ppf,
            CharacteristicName.ISF: isf,
            CharacteristicName.PDF_GRADIENT: pdf_gradient,
            CharacteristicName.LOGPDF_GRADIENT: logpdf_gradient,
            CharacteristicName.CDF_GRADIENT: cdf_gradient,
            CharacteristicName.CF: char_func,
            CharacteristicName.LOG_CF: log_char_func,
            CharacteristicName.MEAN: mean_func,
            CharacteristicName.VAR: var_func,
            CharacteristicName.SKEW: skew_func,
            CharacteristicName.KURT: kurt_func,
            CharacteristicName.ENTROPY: entropy_func,
        },
        sampling_strategy=DefaultSamplingUnivariateStrategy(),
        support_by_parametrization=_support,
        is_elliptical=True,
        standard_representative=lambda _params: {"lower_bound": -1.0, "upper_bound": 1.0},
    )
    Uniform.__doc__ = UNIFORM_DOC

    @parametrization(family=Uniform, name="standard")
    class _Standard(Parametrization):
        """
        Base parametrization by the bounds of the support.

        Parameters
        ----------
        lower_bound : float
            Left end of the support.
        upper_bound : float
            Right end of the support.
        """

        lower_bound: float
        upper_bound: float

        @constraint(description="lower_bound < upper_bound")
        def check_lower_less_than_upper(self) -> bool:
            return self.lower_bound < self.upper_bound

        @constraint(description="bounds are finite")
        def check_finite(self) -> bool:
            return finite(self.lower_bound, self.upper_bound)

    @parametrization(family=Uniform, name="meanWidth")
    class _MeanWidth(Parametrization):
        """Center ``mean`` and support length ``width``."""

        mean: float
        width: float

        @constraint(description="width > 0")
        def check_width_positive(self) -> bool:
            return self.width > 0

        def transform_to_base_parametrization(self) -> Parametrization:
            half = 0.5 * self.width
            return _Standard(lower_bound=self.mean - half, upper_bound=self.mean + half)

    @parametrization(family=Uniform, name="minRange")
    class _MinRange(Parametrization):
        """Left end ``minimum`` and support length ``range_val``."""

        minimum: float
        range_val: float

        @constraint(description="range_val > 0")
        def check_range_positive(self) -> bool:
            return self.range_val > 0

        def transform_to_base_parametrization(self) -> Parametrization:
            return _Standard(lower_bound=self.minimum, upper_bound=self.minimum + self.range_val)

    ParametricFamilyRegister.register(Uniform)
