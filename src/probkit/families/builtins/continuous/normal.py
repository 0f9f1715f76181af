"""
Normal distribution family implementation.

Contains the Normal family with multiple parameterizations.
"""

from __future__ import annotations

__author__ = "probkit developers"
__copyright__ = "Copyright (c) 2025 probkit developers"
__license__ = "SPDX-License-Identifier: MIT"

import math
from typing import TYPE_CHECKING, cast

import numpy as np
from scipy.special import ndtr, ndtri

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

_LOG_SQRT_2PI = 0.5 * math.log(2.0 * math.pi)


def configure_normal_family() -> None:
    """
    Configure and register the Normal distribution family.
    """
    if ParametricFamilyRegister.contains(FamilyName.NORMAL):
        return

    NORMAL_DOC = """
    Normal (Gaussian) distribution.

    Symmetric bell-shaped distribution on the real line with mean μ and
    standard deviation σ:

        f(x) = 1/(σ√(2π)) * exp(-(x-μ)²/(2σ²))

    Gradients are taken with respect to (μ, σ).
    """

    def _mu_sigma(parameters: Parametrization) -> tuple[float, float]:
        params = cast(_MeanStd, parameters)
        return params.mu, params.sigma

    def logpdf(parameters: Parametrization, x: NumericArray) -> NumericArray:
        """Log-density ``-z²/2 - log σ - log √(2π)`` with ``z = (x - μ)/σ``."""
        mu, sigma = _mu_sigma(parameters)
        z = (np.asarray(x, dtype=np.float64) - mu) / sigma
        return cast(NumericArray, -0.5 * z * z - math.log(sigma) - _LOG_SQRT_2PI)

    def pdf(parameters: Parametrization, x: NumericArray) -> NumericArray:
        """
        Probability density function for normal distribution.

        Parameters
        ----------
        parameters : Parametrization
            Base parameters (mu, sigma).
        x : NumericArray
            Points at which to evaluate the density.

        Returns
        -------
        NumericArray
            Density values at points x.
        """
        return cast(NumericArray, np.exp(logpdf(parameters, x)))

    def ddf(parameters: Parametrization, x: NumericArray) -> NumericArray:
        """Derivative of the density, ``-z/σ · pdf``."""
        mu, sigma = _mu_sigma(parameters)
        z = (np.asarray(x, dtype=np.float64) - mu) / sigma
        return cast(NumericArray, -z / sigma * pdf(parameters, x))

    def cdf(parameters: Parametrization, x: NumericArray) -> NumericArray:
        """Φ((x - μ)/σ)."""
        mu, sigma = _mu_sigma(parameters)
        return cast(NumericArray, ndtr((np.asarray(x, dtype=np.float64) - mu) / sigma))

    def sf(parameters: Parametrization, x: NumericArray) -> NumericArray:
        """Φ((μ - x)/σ), accurate in the upper tail."""
        mu, sigma = _mu_sigma(parameters)
        return cast(NumericArray, ndtr((mu - np.asarray(x, dtype=np.float64)) / sigma))

    def ppf(parameters: Parametrization, p: NumericArray) -> NumericArray:
        """
        Percent point function (inverse CDF) for normal distribution.

        Raises
        ------
        InvalidArgumentError
            If probability is outside [0, 1].
        """
        mu, sigma = _mu_sigma(parameters)
        return cast(NumericArray, mu + sigma * ndtri(as_probabilities(p)))

    def isf(parameters: Parametrization, p: NumericArray) -> NumericArray:
        mu, sigma = _mu_sigma(parameters)
        return cast(NumericArray, mu - sigma * ndtri(as_probabilities(p)))

    def logpdf_gradient(parameters: Parametrization, x: NumericArray) -> NumericArray:
        """∂/∂(μ, σ) of the log-density: ``(z/σ, (z² - 1)/σ)``."""
        mu, sigma = _mu_sigma(parameters)
        z = (np.asarray(x, dtype=np.float64) - mu) / sigma
        return np.stack([z / sigma, (z * z - 1.0) / sigma], axis=-1)

    def pdf_gradient(parameters: Parametrization, x: NumericArray) -> NumericArray:
        density = np.asarray(pdf(parameters, x))[..., np.newaxis]
        return cast(NumericArray, density * logpdf_gradient(parameters, x))

    def cdf_gradient(parameters: Parametrization, x: NumericArray) -> NumericArray:
        """∂/∂(μ, σ) of Φ(z): ``(-φ(z)/σ, -z φ(z)/σ)``."""
        mu, sigma = _mu_sigma(parameters)
        z = (np.asarray(x, dtype=np.float64) - mu) / sigma
        density = pdf(parameters, x)
        return np.stack([-density, -z * density], axis=-1)

    def char_func(parameters: Parametrization, t: NumericArray) -> ComplexArray:
        """Characteristic function ``exp(iμt - σ²t²/2)``."""
        return cast(ComplexArray, np.exp(log_char_func(parameters, t)))

    def log_char_func(parameters: Parametrization, t: NumericArray) -> ComplexArray:
        mu, sigma = _mu_sigma(parameters)
        t_arr = np.asarray(t, dtype=np.float64)
        return cast(ComplexArray, 1j * mu * t_arr - 0.5 * (sigma * t_arr) ** 2)

    def mean_func(parameters: Parametrization, _: Any = None) -> float:
        return _mu_sigma(parameters)[0]

    def var_func(parameters: Parametrization, _: Any = None) -> float:
        return _mu_sigma(parameters)[1] ** 2

    def skew_func(_1: Parametrization, _2: Any = None) -> float:
        return 0.0

    def kurt_func(_1: Parametrization, _2: Any = None, excess: bool = False) -> float:
        """Raw kurtosis 3, or excess kurtosis 0."""
        return 0.0 if excess else 3.0

    def entropy_func(parameters: Parametrization, _: Any = None) -> float:
        """``log(σ √(2πe))``."""
        return 0.5 + _LOG_SQRT_2PI + math.log(_mu_sigma(parameters)[1])

    def _support(_: Parametrization) -> ContinuousSupport:
        return ContinuousSupport()

    Normal = ParametricFamily(
        name=FamilyName.NORMAL,
        distr_type=UnivariateContinuous,
        distr_parametrizations=["meanStd", "meanPrec", "exponential"],
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
        standard_representative=lambda _params: {"mu": 0.0, "sigma": 1.0},
    )
    Normal.__doc__ = NORMAL_DOC

    @parametrization(family=Normal, name="meanStd")
    class _MeanStd(Parametrization):
        """
        Base parametrization: mean ``mu`` and standard deviation ``sigma``.
        """

        mu: float
        sigma: float

        @constraint(description="sigma > 0")
        def check_sigma_positive(self) -> bool:
            return self.sigma > 0

        @constraint(description="mu and sigma are finite")
        def check_finite(self) -> bool:
            return finite(self.mu, self.sigma)

    @parametrization(family=Normal, name="meanPrec")
    class _MeanPrec(Parametrization):
        """
        Mean ``mu`` and precision ``tau = 1/sigma²``.
        """

        mu: float
        tau: float

        @constraint(description="tau > 0")
        def check_tau_positive(self) -> bool:
            return self.tau > 0

        def transform_to_base_parametrization(self) -> Parametrization:
            return _MeanStd(mu=self.mu, sigma=1.0 / math.sqrt(self.tau))

    @parametrization(family=Normal, name="exponential")
    class _Exp(Parametrization):
        """
        Exponential-family form ``exp(a x² + b x + c)``.

        Parameters
        ----------
        a : float
            Quadratic coefficient, ``-1/(2σ²)``.
        b : float
            Linear coefficient, ``μ/σ²``.
        """

        a: float
        b: float

        @property
        def c(self) -> float:
            """Normalization constant."""
            return (self.b**2) / (4 * self.a) - 0.5 * math.log(math.pi / (-self.a))

        @constraint(description="a < 0")
        def check_a_negative(self) -> bool:
            return self.a < 0

        def transform_to_base_parametrization(self) -> Parametrization:
            return _MeanStd(mu=-self.b / (2 * self.a), sigma=math.sqrt(-1 / (2 * self.a)))

    ParametricFamilyRegister.register(Normal)
