"""
Generic Conversions Between Characteristics
===========================================

Fitters turn a resolvable characteristic of a univariate continuous
distribution into another one. They back the edges of the characteristic
graph and are used whenever a family does not provide the target
characteristic analytically.

Definitive conversions (between ``pdf``, ``cdf`` and ``ppf``):

- ``fit_pdf_to_cdf_1C``: numerical integration;
- ``fit_cdf_to_pdf_1C``: 5-point differentiation;
- ``fit_cdf_to_ppf_1C``: bracketing inversion;
- ``fit_ppf_to_cdf_1C``: root finding on the probability.

Derived conversions:

- ``fit_pdf_to_logpdf_1C``, ``fit_pdf_to_ddf_1C``;
- ``fit_cdf_to_sf_1C``, ``fit_ppf_to_isf_1C``;
- ``fit_pdf_to_mean_1C``, ``fit_pdf_to_var_1C``, ``fit_pdf_to_skewness_1C``,
  ``fit_pdf_to_kurtosis_1C``, ``fit_pdf_to_entropy_1C``: quadrature.
- ``fit_pdf_to_cf_1C`` (quadrature) and ``fit_cf_to_log_cf_1C``.
"""

from __future__ import annotations

__author__ = "probkit developers"
__copyright__ = "Copyright (c) 2025 probkit developers"
__license__ = "SPDX-License-Identifier: MIT"

import math
from collections.abc import Callable
from math import isfinite
from typing import TYPE_CHECKING, Any, cast

import numpy as np
from mypy_extensions import KwArg
from scipy import integrate as _sp_integrate

from probkit.distributions.computation import FittedComputationMethod
from probkit.distributions.numerics import (
    find_root,
    five_point_derivative,
    invert_monotone,
    solver_settings,
)
from probkit.errors import InvalidArgumentError, NumericalConvergenceError
from probkit.types import CharacteristicName, Interval1D

if TYPE_CHECKING:
    from probkit.distributions.distribution import Distribution
    from probkit.distributions.numerics import SolverSettings
    from probkit.types import GenericCharacteristicName, ScalarFunc


def _resolve(distribution: Distribution, name: GenericCharacteristicName) -> ScalarFunc:
    """
    Resolve a scalar characteristic from the distribution.

    Parameters
    ----------
    distribution : Distribution
        Source distribution that provides the computation strategy.
    name : str
        Characteristic name to resolve (e.g., ``"cdf"``).

    Returns
    -------
    Callable[[float], float]
        Scalar callable for the requested characteristic.
    """
    fn = distribution.query_method(name)

    def _wrap(x: float, **kwargs: Any) -> float:
        return float(fn(x, **kwargs))

    return _wrap


def _support_of(distribution: Distribution) -> Interval1D:
    support = distribution.support
    return support if isinstance(support, Interval1D) else Interval1D()


def _as_fitted(
    target: GenericCharacteristicName,
    source: GenericCharacteristicName,
    func: Callable[..., Any],
) -> FittedComputationMethod[Any, Any]:
    return FittedComputationMethod[Any, Any](
        target=target,
        sources=[source],
        func=cast(Callable[[Any, KwArg(Any)], Any], func),
    )


def _integrate(
    integrand: ScalarFunc, support: Interval1D, settings: SolverSettings, upper: float | None = None
) -> float:
    """Integrate over the support (optionally up to ``upper``), splitting at 0 if unbounded."""
    left = support.left
    right = support.right if upper is None else min(upper, support.right)
    if right <= left:
        return 0.0
    if isfinite(left) or isfinite(right):
        val, _ = _sp_integrate.quad(integrand, left, right, limit=settings.quad_limit)
        return float(val)
    neg, _ = _sp_integrate.quad(integrand, left, 0.0, limit=settings.quad_limit)
    pos, _ = _sp_integrate.quad(integrand, 0.0, right, limit=settings.quad_limit)
    return float(neg + pos)


def _check_probability(q: float) -> None:
    if not 0.0 <= q <= 1.0:
        raise InvalidArgumentError(f"Probability must be in [0, 1], got {q!r}")


# --- Definitive conversions ---------------------------------------------------


def fit_pdf_to_cdf_1C(
    distribution: Distribution, /, **options: Any
) -> FittedComputationMethod[float, float]:
    """
    Fit ``cdf`` from a resolvable ``pdf`` via numerical integration.

    Parameters
    ----------
    distribution : Distribution

    Returns
    -------
    FittedComputationMethod[float, float]
        Fitted ``pdf -> cdf`` conversion.
    """
    pdf_func = _resolve(distribution, CharacteristicName.PDF)
    support = _support_of(distribution)
    settings = solver_settings().updated(**options)

    def _cdf(x: float, **kwargs: Any) -> float:
        if x <= support.left:
            return 0.0
        if x >= support.right:
            return 1.0
        val = _integrate(lambda t: pdf_func(t, **kwargs), support, settings, upper=x)
        return float(np.clip(val, 0.0, 1.0))

    return _as_fitted(CharacteristicName.CDF, CharacteristicName.PDF, _cdf)


def fit_cdf_to_pdf_1C(
    distribution: Distribution, /, **options: Any
) -> FittedComputationMethod[float, float]:
    """
    Fit ``pdf`` as a clipped numerical derivative of ``cdf``.

    Parameters
    ----------
    distribution : Distribution

    Returns
    -------
    FittedComputationMethod[float, float]
        Fitted ``cdf -> pdf`` conversion, zero outside the support.
    """
    cdf_func = _resolve(distribution, CharacteristicName.CDF)
    support = _support_of(distribution)
    settings = solver_settings().updated(**options)

    def _pdf(x: float, **kwargs: Any) -> float:
        if not support.contains(x):
            return 0.0
        d = five_point_derivative(lambda t: cdf_func(t, **kwargs), x, h=settings.fd_step)
        return float(max(d, 0.0))

    return _as_fitted(CharacteristicName.PDF, CharacteristicName.CDF, _pdf)


def fit_cdf_to_ppf_1C(
    distribution: Distribution, /, **options: Any
) -> FittedComputationMethod[float, float]:
    """
    Fit ``ppf`` from a resolvable ``cdf`` using a bracketing inversion.

    Options
    -------
    most_left : bool, default False
        Return the leftmost quantile on flat CDF plateaus.
    x_tol, max_iter, max_expand, init_step, expand_factor
        Overrides of :class:`~probkit.distributions.numerics.SolverSettings`.

    Returns
    -------
    FittedComputationMethod[float, float]
        Fitted ``cdf -> ppf`` conversion; ``ppf(0)`` and ``ppf(1)`` are the
        support endpoints.
    """
    cdf_func = _resolve(distribution, CharacteristicName.CDF)
    support = _support_of(distribution)
    settings = solver_settings().updated(**options)
    most_left = bool(options.get("most_left", False))

    def _ppf(q: float, **kwargs: Any) -> float:
        _check_probability(q)
        return invert_monotone(
            lambda x: cdf_func(x, **kwargs),
            q,
            lower=support.left,
            upper=support.right,
            most_left=most_left,
            settings=settings,
        )

    return _as_fitted(CharacteristicName.PPF, CharacteristicName.CDF, _ppf)


def fit_ppf_to_cdf_1C(
    distribution: Distribution, /, **options: Any
) -> FittedComputationMethod[float, float]:
    """
    Fit ``cdf`` by numerically inverting a resolvable ``ppf`` with a root solver.

    Returns
    -------
    FittedComputationMethod[float, float]
        Fitted ``ppf -> cdf`` conversion.
    """
    ppf_func = _resolve(distribution, CharacteristicName.PPF)
    settings = solver_settings().updated(**options)

    def _cdf(x: float, **kwargs: Any) -> float:
        if not isfinite(x):
            return 0.0 if x < 0 else 1.0

        def f(q: float) -> float:
            return ppf_func(q, **kwargs) - x

        lo, hi = 1e-12, 1.0 - 1e-12
        if f(lo) > 0.0:
            return 0.0
        if f(hi) < 0.0:
            return 1.0
        q = find_root(f, lo, hi, settings=settings)
        return float(np.clip(q, 0.0, 1.0))

    return _as_fitted(CharacteristicName.CDF, CharacteristicName.PPF, _cdf)


# --- Derived conversions ------------------------------------------------------


def fit_pdf_to_logpdf_1C(
    distribution: Distribution, /, **_: Any
) -> FittedComputationMethod[float, float]:
    """Fit ``logpdf`` as the logarithm of ``pdf`` (``-inf`` where the density vanishes)."""
    pdf_func = _resolve(distribution, CharacteristicName.PDF)

    def _logpdf(x: float, **kwargs: Any) -> float:
        value = pdf_func(x, **kwargs)
        return math.log(value) if value > 0.0 else float("-inf")

    return _as_fitted(CharacteristicName.LOGPDF, CharacteristicName.PDF, _logpdf)


def fit_pdf_to_ddf_1C(
    distribution: Distribution, /, **options: Any
) -> FittedComputationMethod[float, float]:
    """Fit ``ddf`` as a 5-point derivative of ``pdf`` (zero outside the support)."""
    pdf_func = _resolve(distribution, CharacteristicName.PDF)
    support = _support_of(distribution)
    settings = solver_settings().updated(**options)

    def _ddf(x: float, **kwargs: Any) -> float:
        if not support.contains(x):
            return 0.0
        return five_point_derivative(lambda t: pdf_func(t, **kwargs), x, h=settings.fd_step)

    return _as_fitted(CharacteristicName.DDF, CharacteristicName.PDF, _ddf)


def fit_cdf_to_sf_1C(
    distribution: Distribution, /, **_: Any
) -> FittedComputationMethod[float, float]:
    """Fit the survival function ``1 - cdf``."""
    cdf_func = _resolve(distribution, CharacteristicName.CDF)

    def _sf(x: float, **kwargs: Any) -> float:
        return float(np.clip(1.0 - cdf_func(x, **kwargs), 0.0, 1.0))

    return _as_fitted(CharacteristicName.SF, CharacteristicName.CDF, _sf)


def fit_ppf_to_isf_1C(
    distribution: Distribution, /, **_: Any
) -> FittedComputationMethod[float, float]:
    """Fit the inverse survival function ``ppf(1 - q)``."""
    ppf_func = _resolve(distribution, CharacteristicName.PPF)

    def _isf(q: float, **kwargs: Any) -> float:
        _check_probability(q)
        return ppf_func(1.0 - q, **kwargs)

    return _as_fitted(CharacteristicName.ISF, CharacteristicName.PPF, _isf)


def _pdf_and_support(distribution: Distribution) -> tuple[ScalarFunc, Interval1D]:
    return _resolve(distribution, CharacteristicName.PDF), _support_of(distribution)


def _moment(
    pdf_func: ScalarFunc, support: Interval1D, settings: SolverSettings, k: int, c: float
) -> float:
    value = _integrate(lambda t: (t - c) ** k * pdf_func(t), support, settings)
    if not isfinite(value):
        raise NumericalConvergenceError(f"Moment of order {k} is not finite")
    return value


def fit_pdf_to_mean_1C(
    distribution: Distribution, /, **options: Any
) -> FittedComputationMethod[Any, float]:
    """Fit the mean by quadrature of ``x * pdf(x)``."""
    settings = solver_settings().updated(**options)
    pdf_func, support = _pdf_and_support(distribution)

    def _mean(_: Any = None, **__: Any) -> float:
        return _moment(pdf_func, support, settings, 1, 0.0)

    return _as_fitted(CharacteristicName.MEAN, CharacteristicName.PDF, _mean)


def fit_pdf_to_var_1C(
    distribution: Distribution, /, **options: Any
) -> FittedComputationMethod[Any, float]:
    """Fit the variance by quadrature of the second central moment."""
    settings = solver_settings().updated(**options)
    pdf_func, support = _pdf_and_support(distribution)

    def _var(_: Any = None, **__: Any) -> float:
        mean = _moment(pdf_func, support, settings, 1, 0.0)
        return _moment(pdf_func, support, settings, 2, mean)

    return _as_fitted(CharacteristicName.VAR, CharacteristicName.PDF, _var)


def fit_pdf_to_skewness_1C(
    distribution: Distribution, /, **options: Any
) -> FittedComputationMethod[Any, float]:
    """Fit the skewness from quadratures of central moments."""
    settings = solver_settings().updated(**options)
    pdf_func, support = _pdf_and_support(distribution)

    def _skew(_: Any = None, **__: Any) -> float:
        mean = _moment(pdf_func, support, settings, 1, 0.0)
        m2 = _moment(pdf_func, support, settings, 2, mean)
        m3 = _moment(pdf_func, support, settings, 3, mean)
        return m3 / m2**1.5

    return _as_fitted(CharacteristicName.SKEW, CharacteristicName.PDF, _skew)


def fit_pdf_to_kurtosis_1C(
    distribution: Distribution, /, **options: Any
) -> FittedComputationMethod[Any, float]:
    """Fit the raw kurtosis (or the excess one with ``excess=True``) by quadrature."""
    settings = solver_settings().updated(**options)
    pdf_func, support = _pdf_and_support(distribution)

    def _kurt(_: Any = None, excess: bool = False, **__: Any) -> float:
        mean = _moment(pdf_func, support, settings, 1, 0.0)
        m2 = _moment(pdf_func, support, settings, 2, mean)
        m4 = _moment(pdf_func, support, settings, 4, mean)
        kurtosis = m4 / m2**2
        return kurtosis - 3.0 if excess else kurtosis

    return _as_fitted(CharacteristicName.KURT, CharacteristicName.PDF, _kurt)


def fit_pdf_to_entropy_1C(
    distribution: Distribution, /, **options: Any
) -> FittedComputationMethod[Any, float]:
    """Fit the differential entropy ``-∫ f log f``."""
    settings = solver_settings().updated(**options)
    pdf_func, support = _pdf_and_support(distribution)

    def _integrand(t: float) -> float:
        value = pdf_func(t)
        return -value * math.log(value) if value > 0.0 else 0.0

    def _entropy(_: Any = None, **__: Any) -> float:
        return _integrate(_integrand, support, settings)

    return _as_fitted(CharacteristicName.ENTROPY, CharacteristicName.PDF, _entropy)


def fit_pdf_to_cf_1C(
    distribution: Distribution, /, **options: Any
) -> FittedComputationMethod[float, complex]:
    """
    Fit the characteristic function ``E[exp(itX)]`` by quadrature.

    The real and imaginary parts are integrated separately against ``pdf``;
    ``cf(0) == 1`` is returned exactly.
    """
    settings = solver_settings().updated(**options)
    pdf_func, support = _pdf_and_support(distribution)

    def _cf(t: float, **_: Any) -> complex:
        if t == 0.0:
            return complex(1.0, 0.0)
        re = _integrate(lambda x: math.cos(t * x) * pdf_func(x), support, settings)
        im = _integrate(lambda x: math.sin(t * x) * pdf_func(x), support, settings)
        return complex(re, im)

    return _as_fitted(CharacteristicName.CF, CharacteristicName.PDF, _cf)


def fit_cf_to_log_cf_1C(
    distribution: Distribution, /, **_: Any
) -> FittedComputationMethod[float, complex]:
    """Fit the principal logarithm of the characteristic function."""
    cf_func = distribution.query_method(CharacteristicName.CF)

    def _log_cf(t: float, **kwargs: Any) -> complex:
        return complex(np.log(complex(cf_func(t, **kwargs))))

    return _as_fitted(CharacteristicName.LOG_CF, CharacteristicName.CF, _log_cf)
