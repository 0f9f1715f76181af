"""
Truncated normal distribution family implementation.

A normal distribution N(μ, σ²) conditioned on [a, b]. With the standardized
bounds α = (a - μ)/σ, β = (b - μ)/σ and the normalizing mass
Z = Φ(β) - Φ(α), every characteristic below is evaluated in log space through
``log Z`` so that truncations far in a tail (where Φ underflows) stay finite.
"""

from __future__ import annotations

__author__ = "probkit developers"
__copyright__ = "Copyright (c) 2025 probkit developers"
__license__ = "SPDX-License-Identifier: MIT"

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, cast

import numpy as np
from scipy.special import log_ndtr, ndtri_exp, wofz

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
_LN2 = math.log(2.0)
_SQRT2 = math.sqrt(2.0)


def _log1mexp(d: NumericArray) -> NumericArray:
    """``log(1 - exp(d))`` for ``d <= 0``."""
    d = np.asarray(d, dtype=np.float64)
    with np.errstate(divide="ignore", invalid="ignore"):
        return cast(
            NumericArray,
            np.where(d > -_LN2, np.log(-np.expm1(d)), np.log1p(-np.exp(d))),
        )


def log_diff_ndtr(lo: Any, hi: Any) -> NumericArray:
    """
    ``log(Φ(hi) - Φ(lo))`` for ``lo <= hi`` without cancellation.

    Pairs lying right of zero are mirrored to ``(-hi, -lo)`` so that the
    difference is always taken between lower-tail probabilities.
    """
    lo, hi = np.broadcast_arrays(
        np.asarray(lo, dtype=np.float64), np.asarray(hi, dtype=np.float64)
    )
    mirror = lo > 0.0
    left = np.where(mirror, -hi, lo)
    right = np.where(mirror, -lo, hi)
    log_right = log_ndtr(right)
    with np.errstate(invalid="ignore"):
        return cast(NumericArray, log_right + _log1mexp(log_ndtr(left) - log_right))


@dataclass(frozen=True, slots=True)
class _Standardized:
    """Quantities shared by all characteristics of one parameter set."""

    mu: float
    sigma: float
    a: float
    b: float
    alpha: float
    beta: float
    log_z: float
    r_a: float
    r_b: float

    @classmethod
    def of(cls, mu: float, sigma: float, a: float, b: float) -> _Standardized:
        alpha, beta = (a - mu) / sigma, (b - mu) / sigma
        log_z = float(log_diff_ndtr(alpha, beta))
        r_a = math.exp(-0.5 * alpha * alpha - _LOG_SQRT_2PI - log_z)
        r_b = math.exp(-0.5 * beta * beta - _LOG_SQRT_2PI - log_z)
        return cls(mu, sigma, a, b, alpha, beta, log_z, r_a, r_b)

    def z(self, x: NumericArray) -> NumericArray:
        return cast(NumericArray, (np.asarray(x, dtype=np.float64) - self.mu) / self.sigma)

    def inside(self, x: NumericArray) -> NumericArray:
        x_arr = np.asarray(x, dtype=np.float64)
        return cast(NumericArray, (x_arr >= self.a) & (x_arr <= self.b))

    def central_moments(self, order: int) -> list[float]:
        """
        Central moments ``M_0..M_order`` of the standardized truncated variable.

        Uses ``M_k = (k-1) M_{k-2} - c M_{k-1} + (α-c)^{k-1} r_a - (β-c)^{k-1} r_b``
        with ``c = r_a - r_b`` the standardized mean.
        """
        c = self.r_a - self.r_b
        moments = [1.0, 0.0]
        for k in range(2, order + 1):
            moments.append(
                (k - 1) * moments[k - 2]
                - c * moments[k - 1]
                + (self.alpha - c) ** (k - 1) * self.r_a
                - (self.beta - c) ** (k - 1) * self.r_b
            )
        return moments


def configure_truncated_normal_family() -> None:
    """
    Configure and register the TruncatedNormal distribution family.
    """
    if ParametricFamilyRegister.contains(FamilyName.TRUNCATED_NORMAL):
        return

    TRUNCATED_NORMAL_DOC = """
    Truncated normal distribution.

    Normal distribution with mean μ and standard deviation σ restricted to
    the finite interval [a, b]:

        f(x) = φ((x-μ)/σ) / (σ (Φ(β) - Φ(α)))   for x in [a, b], 0 otherwise

    Gradients are taken with respect to (μ, σ, a, b).
    """

    def _std(parameters: Parametrization) -> _Standardized:
        params = cast(_MeanStdBounds, parameters)
        return _Standardized.of(params.mu, params.sigma, params.a, params.b)

    def logpdf(parameters: Parametrization, x: NumericArray) -> NumericArray:
        """Log-density; ``-inf`` outside [a, b]."""
        s = _std(parameters)
        z = s.z(x)
        value = -0.5 * z * z - _LOG_SQRT_2PI - math.log(s.sigma) - s.log_z
        return cast(NumericArray, np.where(s.inside(x), value, -np.inf))

    def pdf(parameters: Parametrization, x: NumericArray) -> NumericArray:
        """
        Probability density function for truncated normal distribution.

        Parameters
        ----------
        parameters : Parametrization
            Base parameters (mu, sigma, a, b).
        x : NumericArray
            Points at which to evaluate the density.

        Returns
        -------
        NumericArray
            Density values, 0 outside [a, b].
        """
        return cast(NumericArray, np.exp(logpdf(parameters, x)))

    def ddf(parameters: Parametrization, x: NumericArray) -> NumericArray:
        s = _std(parameters)
        value = -s.z(x) / s.sigma * pdf(parameters, x)
        return cast(NumericArray, np.where(s.inside(x), value, 0.0))

    def cdf(parameters: Parametrization, x: NumericArray) -> NumericArray:
        """``(Φ(z) - Φ(α)) / Z``; 0 left of the support, 1 right of it."""
        s = _std(parameters)
        z = np.clip(s.z(x), s.alpha, s.beta)
        value = np.clip(np.exp(log_diff_ndtr(s.alpha, z) - s.log_z), 0.0, 1.0)
        x_arr = np.asarray(x, dtype=np.float64)
        return cast(NumericArray, np.where(x_arr < s.a, 0.0, np.where(x_arr > s.b, 1.0, value)))

    def sf(parameters: Parametrization, x: NumericArray) -> NumericArray:
        """``(Φ(β) - Φ(z)) / Z``, computed directly for upper-tail accuracy."""
        s = _std(parameters)
        z = np.clip(s.z(x), s.alpha, s.beta)
        value = np.clip(np.exp(log_diff_ndtr(z, s.beta) - s.log_z), 0.0, 1.0)
        x_arr = np.asarray(x, dtype=np.float64)
        return cast(NumericArray, np.where(x_arr < s.a, 1.0, np.where(x_arr > s.b, 0.0, value)))

    def _invert(s: _Standardized, p: NumericArray, lower_tail: bool) -> NumericArray:
        """
        Solve ``cdf(x) = p`` (``lower_tail``) or ``sf(x) = p``.

        The tail on the side where the truncation interval lies is used, so
        ``log Φ`` of the answer is a log-sum of two representable terms.
        """
        with np.errstate(divide="ignore"):
            log_p, log_1mp = np.log(p), np.log1p(-p)
        log_cdf, log_sf = (log_p, log_1mp) if lower_tail else (log_1mp, log_p)
        if s.alpha + s.beta <= 0.0:
            log_phi = np.logaddexp(log_ndtr(s.alpha), log_cdf + s.log_z)
            z = ndtri_exp(np.minimum(log_phi, 0.0))
        else:
            log_phi = np.logaddexp(log_ndtr(-s.beta), log_sf + s.log_z)
            z = -ndtri_exp(np.minimum(log_phi, 0.0))
        x = np.clip(s.mu + s.sigma * z, s.a, s.b)
        at_a, at_b = (p <= 0.0, p >= 1.0) if lower_tail else (p >= 1.0, p <= 0.0)
        return cast(NumericArray, np.where(at_a, s.a, np.where(at_b, s.b, x)))

    def ppf(parameters: Parametrization, p: NumericArray) -> NumericArray:
        """
        Quantile function; ``ppf(0) = a`` and ``ppf(1) = b``.

        Raises
        ------
        InvalidArgumentError
            If probability is outside [0, 1].
        """
        return _invert(_std(parameters), as_probabilities(p), lower_tail=True)

    def isf(parameters: Parametrization, p: NumericArray) -> NumericArray:
        return _invert(_std(parameters), as_probabilities(p), lower_tail=False)

    def _stack(inside: NumericArray, columns: list[Any]) -> NumericArray:
        stacked = np.stack(np.broadcast_arrays(*columns), axis=-1)
        return cast(NumericArray, np.where(np.asarray(inside)[..., np.newaxis], stacked, 0.0))

    def logpdf_gradient(parameters: Parametrization, x: NumericArray) -> NumericArray:
        """
        Gradient of the log-density with respect to (μ, σ, a, b).

        ``((z + r_b - r_a)/σ, (z² - 1 + β r_b - α r_a)/σ, r_a/σ, -r_b/σ)``
        with ``r_a = φ(α)/Z`` and ``r_b = φ(β)/Z``; zero outside [a, b].
        """
        s = _std(parameters)
        z = s.z(x)
        ones = np.ones_like(z)
        columns = [
            (z + s.r_b - s.r_a) / s.sigma,
            (z * z - 1.0 + s.beta * s.r_b - s.alpha * s.r_a) / s.sigma,
            ones * s.r_a / s.sigma,
            -ones * s.r_b / s.sigma,
        ]
        return _stack(s.inside(x), columns)

    def pdf_gradient(parameters: Parametrization, x: NumericArray) -> NumericArray:
        density = np.asarray(pdf(parameters, x))[..., np.newaxis]
        return cast(NumericArray, density * logpdf_gradient(parameters, x))

    def cdf_gradient(parameters: Parametrization, x: NumericArray) -> NumericArray:
        """
        Gradient of the cdf with respect to (μ, σ, a, b); zero outside [a, b].

        With ``F = cdf(x)`` and ``q = φ(z)/Z``:
        ``((r_a - q - F(r_a - r_b))/σ, (α r_a - z q - F(α r_a - β r_b))/σ,
        -(1 - F) r_a/σ, -F r_b/σ)``.
        """
        s = _std(parameters)
        z = np.clip(s.z(x), s.alpha, s.beta)
        q = np.exp(-0.5 * z * z - _LOG_SQRT_2PI - s.log_z)
        f = np.asarray(cdf(parameters, x))
        columns = [
            (s.r_a - q - f * (s.r_a - s.r_b)) / s.sigma,
            (s.alpha * s.r_a - z * q - f * (s.alpha * s.r_a - s.beta * s.r_b)) / s.sigma,
            -(1.0 - f) * s.r_a / s.sigma,
            -f * s.r_b / s.sigma,
        ]
        return _stack(s.inside(x), columns)

    def char_func(parameters: Parametrization, t: NumericArray) -> ComplexArray:
        """
        Characteristic function through the Faddeeva function ``w = wofz``.

        ``Φ(s - iσt)`` is written as ``½ exp(-(s - iσt)²/2) w(-i(s - iσt)/√2)``
        (or its complement) on whichever side keeps the argument of ``w`` in
        the upper half-plane; the Gaussian factors are merged into
        ``e_s = exp(i t (μ + σ s) - s²/2 - log Z)``.
        """
        s = _std(parameters)
        t_arr = np.asarray(t, dtype=np.float64)
        st = s.sigma * t_arr

        def e(bound: float, std_bound: float) -> ComplexArray:
            return cast(
                ComplexArray, np.exp(1j * t_arr * bound - 0.5 * std_bound * std_bound - s.log_z)
            )

        e_a, e_b = e(s.a, s.alpha), e(s.b, s.beta)
        if s.beta <= 0.0:
            value = 0.5 * (
                e_b * wofz((-1j * s.beta - st) / _SQRT2)
                - e_a * wofz((-1j * s.alpha - st) / _SQRT2)
            )
        elif s.alpha >= 0.0:
            value = 0.5 * (
                e_a * wofz((1j * s.alpha + st) / _SQRT2)
                - e_b * wofz((1j * s.beta + st) / _SQRT2)
            )
        else:
            value = (
                np.exp(1j * s.mu * t_arr - 0.5 * st * st - s.log_z)
                - 0.5 * e_b * wofz((1j * s.beta + st) / _SQRT2)
                - 0.5 * e_a * wofz((-1j * s.alpha - st) / _SQRT2)
            )
        return cast(ComplexArray, value)

    def log_char_func(parameters: Parametrization, t: NumericArray) -> ComplexArray:
        with np.errstate(divide="ignore"):
            return cast(ComplexArray, np.log(char_func(parameters, t)))

    def mean_func(parameters: Parametrization, _: Any = None) -> float:
        """``μ + σ (r_a - r_b)``."""
        s = _std(parameters)
        return s.mu + s.sigma * (s.r_a - s.r_b)

    def var_func(parameters: Parametrization, _: Any = None) -> float:
        s = _std(parameters)
        return s.sigma**2 * s.central_moments(2)[2]

    def skew_func(parameters: Parametrization, _: Any = None) -> float:
        m = _std(parameters).central_moments(3)
        return m[3] / m[2] ** 1.5

    def kurt_func(parameters: Parametrization, _: Any = None, excess: bool = False) -> float:
        """Raw kurtosis ``M_4 / M_2²``, or the excess one."""
        m = _std(parameters).central_moments(4)
        kurtosis = m[4] / m[2] ** 2
        return kurtosis - 3.0 if excess else kurtosis

    def entropy_func(parameters: Parametrization, _: Any = None) -> float:
        """``log(√(2πe) σ Z) + (α r_a - β r_b)/2``."""
        s = _std(parameters)
        return (
            0.5
            + _LOG_SQRT_2PI
            + math.log(s.sigma)
            + s.log_z
            + 0.5 * (s.alpha * s.r_a - s.beta * s.r_b)
        )

    def _support(parameters: Parametrization) -> ContinuousSupport:
        params = cast(_MeanStdBounds, parameters)
        return ContinuousSupport.closed(params.a, params.b)

    def _is_elliptical(parameters: Parametrization) -> bool:
        """Symmetric truncation about the mean of the parent normal."""
        params = cast(_MeanStdBounds, parameters)
        scale = max(1.0, abs(params.a), abs(params.b))
        return abs((params.a + params.b) - 2.0 * params.mu) <= 1e-12 * scale

    def _standard(parameters: Parametrization) -> dict[str, float]:
        params = cast(_MeanStdBounds, parameters)
        return {
            "mu": 0.0,
            "sigma": 1.0,
            "a": (params.a - params.mu) / params.sigma,
            "b": (params.b - params.mu) / params.sigma,
        }

    TruncatedNormal = ParametricFamily(
        name=FamilyName.TRUNCATED_NORMAL,
        distr_type=UnivariateContinuous,
        distr_parametrizations=["meanStdBounds", "standardBounds"],
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
        is_elliptical=_is_elliptical,
        standard_representative=_standard,
    )
    TruncatedNormal.__doc__ = TRUNCATED_NORMAL_DOC

    @parametrization(family=TruncatedNormal, name="meanStdBounds")
    class _MeanStdBounds(Parametrization):
        """
        Base parametrization of the truncated normal distribution.

        Parameters
        ----------
        mu : float
            Mean of the parent normal distribution.
        sigma : float
            Standard deviation of the parent normal distribution.
        a : float
            Lower truncation bound.
        b : float
            Upper truncation bound.
        """

        mu: float
        sigma: float
        a: float
        b: float

        @constraint(description="sigma > 0")
        def check_sigma_positive(self) -> bool:
            return self.sigma > 0

        @constraint(description="a < b")
        def check_bounds_ordered(self) -> bool:
            return self.a < self.b

        @constraint(description="mu, sigma, a and b are finite")
        def check_finite(self) -> bool:
            return finite(self.mu, self.sigma, self.a, self.b)

    @parametrization(family=TruncatedNormal, name="standardBounds")
    class _StandardBounds(Parametrization):
        """
        Parent ``mu``/``sigma`` with bounds in standard units.

        ``alpha = (a - mu)/sigma`` and ``beta = (b - mu)/sigma``.
        """

        mu: float
        sigma: float
        alpha: float
        beta: float

        @constraint(description="sigma > 0")
        def check_sigma_positive(self) -> bool:
            return self.sigma > 0

        @constraint(description="alpha < beta")
        def check_bounds_ordered(self) -> bool:
            return self.alpha < self.beta

        @constraint(description="mu, sigma, alpha and beta are finite")
        def check_finite(self) -> bool:
            return finite(self.mu, self.sigma, self.alpha, self.beta)

        def transform_to_base_parametrization(self) -> Parametrization:
            return _MeanStdBounds(
                mu=self.mu,
                sigma=self.sigma,
                a=self.mu + self.sigma * self.alpha,
                b=self.mu + self.sigma * self.beta,
            )

    ParametricFamilyRegister.register(TruncatedNormal)
