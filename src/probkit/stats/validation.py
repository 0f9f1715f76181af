"""
Validation protocol
===================

Reusable checks of the consistency relationships every distribution must
satisfy:

- analytical parameter gradients against central finite differences;
- the quantile round trip ``cdf(quantile(p)) == p``;
- sample moments against the analytical mean and variance;
- a Monte Carlo estimate of the entropy against the closed form.

Each check returns a small frozen result object with a ``passed`` flag, so
callers decide whether a failure is an error.
"""

from __future__ import annotations

__author__ = "probkit developers"
__copyright__ = "Copyright (c) 2025 probkit developers"
__license__ = "SPDX-License-Identifier: MIT"

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from probkit.distributions.numerics import central_difference
from probkit.errors import InvalidArgumentError
from probkit.types import CharacteristicName

if TYPE_CHECKING:
    from probkit.distributions.strategies import RandomState
    from probkit.families.distribution import ParametricFamilyDistribution
    from probkit.types import NumericArray

logger = logging.getLogger(__name__)

_GRADIENTS = {
    CharacteristicName.PDF: CharacteristicName.PDF_GRADIENT,
    CharacteristicName.LOGPDF: CharacteristicName.LOGPDF_GRADIENT,
    CharacteristicName.CDF: CharacteristicName.CDF_GRADIENT,
}


def _gradient_name(characteristic: str) -> CharacteristicName:
    try:
        return _GRADIENTS[CharacteristicName(characteristic)]
    except (KeyError, ValueError) as exc:
        raise InvalidArgumentError(
            f"No parameter gradient for characteristic {characteristic!r}; "
            f"expected one of {[str(c) for c in _GRADIENTS]}"
        ) from exc


@dataclass(frozen=True, slots=True)
class GradientCheck:
    """
    Analytical gradient compared with its finite-difference estimate.

    Attributes
    ----------
    analytical, numerical : numpy.ndarray
        Gradients of the same shape, one entry per base parameter.
    max_error : float
        Largest absolute difference, scaled by ``max(1, |numerical|)``.
    passed : bool
        Whether ``max_error`` is within the tolerance.
    """

    analytical: np.ndarray
    numerical: np.ndarray
    max_error: float
    passed: bool


@dataclass(frozen=True, slots=True)
class RoundtripCheck:
    probabilities: np.ndarray
    recovered: np.ndarray
    max_error: float
    passed: bool


@dataclass(frozen=True, slots=True)
class MomentCheck:
    """Sample mean and variance against the analytical values."""

    sample_mean: float
    mean: float
    mean_tolerance: float
    sample_variance: float
    variance: float
    variance_tolerance: float
    passed: bool


@dataclass(frozen=True, slots=True)
class EntropyCheck:
    estimate: float
    entropy: float
    tolerance: float
    passed: bool


def finite_difference_gradient(
    distribution: ParametricFamilyDistribution,
    characteristic: str,
    x: float | NumericArray,
    eps: float = 1e-5,
) -> np.ndarray:
    """
    Central finite-difference gradient of a characteristic.

    Each base parameter is shifted by ``±eps`` in turn and the distribution
    is rebuilt through :meth:`ParametricFamilyDistribution.with_parameters`,
    so the perturbed parameters are validated as usual.

    Parameters
    ----------
    distribution : ParametricFamilyDistribution
        Distribution to differentiate.
    characteristic : str
        ``"pdf"``, ``"logpdf"`` or ``"cdf"``.
    x : float or array_like
        Evaluation point(s).
    eps : float, default 1e-5
        Parameter shift.

    Returns
    -------
    numpy.ndarray
        Shape ``(k,)`` for a scalar ``x`` and ``(n, k)`` for ``n`` points,
        with ``k`` the number of base parameters.

    Raises
    ------
    InvalidArgumentError
        If the characteristic has no gradient or ``eps`` is not positive.
    """
    _gradient_name(characteristic)
    if eps <= 0.0:
        raise InvalidArgumentError(f"eps must be positive, got {eps}")
    base = distribution.to_base()
    values = base.parameters.parameters
    columns = []
    for name, value in values.items():
        upper = base.with_parameters(**{name: value + eps})
        lower = base.with_parameters(**{name: value - eps})
        f_plus = np.asarray(upper.calculate_characteristic(characteristic, x), dtype=np.float64)
        f_minus = np.asarray(lower.calculate_characteristic(characteristic, x), dtype=np.float64)
        columns.append(central_difference(f_plus, f_minus, eps))
    return np.stack(columns, axis=-1)


def check_gradient(
    distribution: ParametricFamilyDistribution,
    characteristic: str,
    x: float | NumericArray,
    eps: float = 1e-5,
    tolerance: float = 1e-6,
) -> GradientCheck:
    """
    Compare the analytical gradient of ``characteristic`` with finite differences.

    Entries where the finite difference is not finite (``logpdf`` outside
    the support) are ignored.
    """
    analytical = distribution._gradient(_gradient_name(characteristic), x)
    numerical = finite_difference_gradient(distribution, characteristic, x, eps=eps)
    mask = np.isfinite(numerical)
    if mask.any():
        scale = np.maximum(1.0, np.abs(numerical[mask]))
        max_error = float(np.max(np.abs(analytical[mask] - numerical[mask]) / scale))
    else:
        max_error = 0.0
    logger.debug("Gradient of %s at %s: max error %.3g", characteristic, x, max_error)
    return GradientCheck(analytical, numerical, max_error, max_error <= tolerance)


def check_quantile_roundtrip(
    distribution: ParametricFamilyDistribution,
    probabilities: NumericArray | None = None,
    tolerance: float = 1e-6,
) -> RoundtripCheck:
    """Check ``cdf(quantile(p)) == p``, by default on a grid of 99 interior levels."""
    if probabilities is None:
        probabilities = np.linspace(0.01, 0.99, 99)
    p = np.atleast_1d(np.asarray(probabilities, dtype=np.float64))
    recovered = np.asarray(distribution.cdf(distribution.quantile(p)), dtype=np.float64)
    max_error = float(np.max(np.abs(recovered - p))) if p.size else 0.0
    return RoundtripCheck(p, recovered, max_error, max_error <= tolerance)


def check_monte_carlo_moments(
    distribution: ParametricFamilyDistribution,
    n: int = 10_000,
    rng: RandomState = None,
    z: float = 4.0,
) -> MomentCheck:
    """
    Compare the sample mean and variance of ``n`` draws with the analytical ones.

    Tolerances are ``z`` standard errors: ``sqrt(var / n)`` for the mean and
    ``sqrt((m4 - var²) / n)`` for the variance, where ``m4`` is the fourth
    central moment.
    """
    if n < 2:
        raise InvalidArgumentError(f"Monte Carlo check needs at least 2 draws, got {n}")
    sample = distribution.sample(n, rng=rng)
    mean, variance = distribution.mean(), distribution.variance()
    m4 = distribution.kurtosis() * variance**2
    sample_mean = float(sample.mean()[0])
    sample_variance = float(sample.covariance()[0, 0])
    mean_tol = z * float(np.sqrt(variance / n))
    var_tol = z * float(np.sqrt(max(m4 - variance**2, 0.0) / n))
    passed = abs(sample_mean - mean) <= mean_tol and abs(sample_variance - variance) <= var_tol
    logger.debug(
        "Monte Carlo moments (n=%d): mean %.6g vs %.6g, variance %.6g vs %.6g",
        n,
        sample_mean,
        mean,
        sample_variance,
        variance,
    )
    return MomentCheck(
        sample_mean, mean, mean_tol, sample_variance, variance, var_tol, passed
    )


def check_entropy_monte_carlo(
    distribution: ParametricFamilyDistribution,
    n: int = 10_000,
    rng: RandomState = None,
    z: float = 4.0,
) -> EntropyCheck:
    """Compare ``-mean(log_pdf(X))`` over ``n`` draws with the analytical entropy."""
    if n < 2:
        raise InvalidArgumentError(f"Monte Carlo check needs at least 2 draws, got {n}")
    values = distribution.sample(n, rng=rng).array[:, 0]
    log_density = np.asarray(distribution.log_pdf(values), dtype=np.float64)
    estimate = -float(np.mean(log_density))
    entropy = distribution.entropy()
    # constant log-density (uniform) leaves only rounding error
    tolerance = max(
        z * float(np.std(log_density, ddof=1)) / np.sqrt(n), 1e-12 * max(1.0, abs(entropy))
    )
    return EntropyCheck(estimate, entropy, float(tolerance), abs(estimate - entropy) <= tolerance)


__all__ = [
    "GradientCheck",
    "RoundtripCheck",
    "MomentCheck",
    "EntropyCheck",
    "finite_difference_gradient",
    "check_gradient",
    "check_quantile_roundtrip",
    "check_monte_carlo_moments",
    "check_entropy_monte_carlo",
]
