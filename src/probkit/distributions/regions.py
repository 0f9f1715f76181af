"""
Confidence Regions of Univariate Distributions
==============================================

Solvers returning structured regions of a prescribed probability mass:

- :func:`bilateral_confidence_interval`: equal-tailed interval;
- :func:`unilateral_confidence_interval`: one tail left open;
- :func:`minimum_volume_interval`: shortest interval of mass ``p``;
- :func:`minimum_volume_level_set`: ``{x : pdf(x) >= threshold}`` of mass ``p``.

The minimum-volume solvers assume a unimodal density: the shortest interval
is then the level set, found by minimising the width ``ppf(u + p) - ppf(u)``
over the lower tail mass ``u``.
"""

from __future__ import annotations

__author__ = "probkit developers"
__copyright__ = "Copyright (c) 2025 probkit developers"
__license__ = "SPDX-License-Identifier: MIT"

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import numpy as np
from scipy import optimize as _sp_optimize

from probkit.distributions.numerics import solver_settings
from probkit.errors import InvalidArgumentError, NumericalConvergenceError
from probkit.types import CharacteristicName, Interval1D

if TYPE_CHECKING:
    from probkit.distributions.distribution import Distribution
    from probkit.types import ScalarFunc

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ConfidenceInterval:
    """
    Interval carrying a given probability mass.

    Attributes
    ----------
    interval : Interval1D
        The region.
    probability : float
        Probability mass of ``interval``.
    """

    interval: Interval1D
    probability: float

    @property
    def lower(self) -> float:
        return self.interval.left

    @property
    def upper(self) -> float:
        return self.interval.right

    def contains(self, x: float) -> bool:
        return self.interval.contains(x)


@dataclass(frozen=True, slots=True)
class MinimumVolumeInterval(ConfidenceInterval):
    """Shortest interval of mass ``probability``; ``threshold`` is the density at its ends."""

    threshold: float


@dataclass(frozen=True, slots=True)
class LevelSet:
    """
    Density level set ``{x : pdf(x) >= threshold}``.

    Attributes
    ----------
    threshold : float
        Density threshold.
    probability : float
        Probability mass of the set.
    interval : Interval1D
        The set itself, an interval for unimodal densities.
    """

    threshold: float
    probability: float
    interval: Interval1D

    @property
    def level(self) -> float:
        """Level in log-density terms, ``-log(threshold)``."""
        return -math.log(self.threshold) if self.threshold > 0.0 else math.inf

    def contains(self, x: float) -> bool:
        return self.interval.contains(x)


def _check_mass(p: float) -> float:
    p = float(p)
    if not 0.0 <= p <= 1.0:
        raise InvalidArgumentError(f"Probability must be in [0, 1], got {p!r}")
    return p


def _scalar(distribution: Distribution, name: str, **options: Any) -> ScalarFunc:
    fn = distribution.query_method(name, **options)
    return lambda x: float(fn(x))


def bilateral_confidence_interval(
    distribution: Distribution, p: float, **options: Any
) -> ConfidenceInterval:
    """
    Equal-tailed interval ``[ppf((1 - p) / 2), ppf((1 + p) / 2)]``.

    Parameters
    ----------
    distribution : Distribution
        Univariate distribution.
    p : float
        Required probability mass in ``[0, 1]``.

    Returns
    -------
    ConfidenceInterval
    """
    p = _check_mass(p)
    ppf = _scalar(distribution, CharacteristicName.PPF, **options)
    cdf = _scalar(distribution, CharacteristicName.CDF, **options)
    lower, upper = ppf(0.5 * (1.0 - p)), ppf(0.5 * (1.0 + p))
    return ConfidenceInterval(Interval1D(lower, upper), cdf(upper) - cdf(lower))


def unilateral_confidence_interval(
    distribution: Distribution, p: float, upper_tail: bool = False, **options: Any
) -> ConfidenceInterval:
    """
    One-sided interval of mass ``p``.

    ``upper_tail=False`` gives ``[left, ppf(p)]``; ``upper_tail=True`` gives
    ``[isf(p), right]`` where ``left``/``right`` are the support bounds.
    """
    p = _check_mass(p)
    support = distribution.support
    left = support.left if isinstance(support, Interval1D) else -math.inf
    right = support.right if isinstance(support, Interval1D) else math.inf
    if upper_tail:
        isf = _scalar(distribution, CharacteristicName.ISF, **options)
        sf = _scalar(distribution, CharacteristicName.SF, **options)
        lower = isf(p)
        return ConfidenceInterval(Interval1D(lower, right), sf(lower))
    ppf = _scalar(distribution, CharacteristicName.PPF, **options)
    cdf = _scalar(distribution, CharacteristicName.CDF, **options)
    upper = ppf(p)
    return ConfidenceInterval(Interval1D(left, upper), cdf(upper))


def minimum_volume_interval(
    distribution: Distribution, p: float, **options: Any
) -> MinimumVolumeInterval:
    """
    Shortest interval of mass ``p`` for a unimodal density.

    Parameters
    ----------
    distribution : Distribution
        Univariate distribution with a unimodal density.
    p : float
        Required probability mass in ``[0, 1]``.
    **options
        Solver overrides (``x_tol``, ``max_iter``).

    Returns
    -------
    MinimumVolumeInterval
        The interval, the density at its endpoints and its mass.

    Raises
    ------
    NumericalConvergenceError
        If the bounded minimisation fails.
    """
    p = _check_mass(p)
    settings = solver_settings().updated(**options)
    ppf = _scalar(distribution, CharacteristicName.PPF)
    cdf = _scalar(distribution, CharacteristicName.CDF)
    pdf = _scalar(distribution, CharacteristicName.PDF)

    def width(u: float) -> float:
        return ppf(min(u + p, 1.0)) - ppf(u)

    slack = 1.0 - p
    candidates = [0.0, slack]
    if slack > 0.0:
        res = _sp_optimize.minimize_scalar(
            width,
            bounds=(0.0, slack),
            method="bounded",
            options={"xatol": max(settings.x_tol, 1e-10), "maxiter": settings.max_iter},
        )
        if not res.success:
            raise NumericalConvergenceError(
                f"Minimum-volume search did not converge: {res.message}",
                iterations=int(res.nfev),
                tolerance=settings.x_tol,
            )
        logger.debug("Minimum-volume search for p=%g took %d evaluations", p, res.nfev)
        candidates.append(float(res.x))

    widths = np.array([width(u) for u in candidates])
    # inf - inf at an unbounded end for p = 0
    widths[np.isnan(widths)] = np.inf
    u = candidates[int(np.argmin(widths))]
    lower, upper = ppf(u), ppf(min(u + p, 1.0))
    threshold = min(pdf(lower), pdf(upper))
    return MinimumVolumeInterval(
        interval=Interval1D(lower, upper),
        probability=cdf(upper) - cdf(lower),
        threshold=threshold,
    )


def minimum_volume_level_set(distribution: Distribution, p: float, **options: Any) -> LevelSet:
    """
    Level set ``{x : pdf(x) >= threshold}`` of mass ``p`` for a unimodal density.

    The set coincides with :func:`minimum_volume_interval`; ``threshold`` is
    the density on its boundary.
    """
    region = minimum_volume_interval(distribution, p, **options)
    return LevelSet(region.threshold, region.probability, region.interval)


__all__ = [
    "ConfidenceInterval",
    "MinimumVolumeInterval",
    "LevelSet",
    "bilateral_confidence_interval",
    "unilateral_confidence_interval",
    "minimum_volume_interval",
    "minimum_volume_level_set",
]
