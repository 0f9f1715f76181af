"""
Goodness-of-fit tests
=====================

Kolmogorov-Smirnov test of a sample against a fully specified distribution.
The distribution parameters are known (not estimated from the sample), so
the p-value of :func:`scipy.stats.kstest` is exact.
"""

from __future__ import annotations

__author__ = "probkit developers"
__copyright__ = "Copyright (c) 2025 probkit developers"
__license__ = "SPDX-License-Identifier: MIT"

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
from scipy import stats

from probkit.distributions.sampling import ArraySample
from probkit.errors import InvalidArgumentError, InvalidDimensionError

if TYPE_CHECKING:
    import numpy.typing as npt

    from probkit.distributions.distribution import Distribution

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TestResult:
    """
    Outcome of a goodness-of-fit test.

    Attributes
    ----------
    statistic : float
        Value of the test statistic.
    p_value : float
        Probability of a statistic at least as extreme under the null hypothesis.
    threshold : float
        Significance level the p-value is compared with.
    binary_quality_measure : bool
        ``True`` when the null hypothesis is accepted (``p_value >= threshold``).
    """

    __test__ = False

    statistic: float
    p_value: float
    threshold: float
    binary_quality_measure: bool


def _univariate_values(sample: ArraySample | npt.ArrayLike) -> np.ndarray:
    data = sample.array if isinstance(sample, ArraySample) else np.asarray(sample, dtype=np.float64)
    if data.ndim == 2:
        if data.shape[1] != 1:
            raise InvalidDimensionError(
                "Kolmogorov test expects a univariate sample", expected=1, actual=data.shape[1]
            )
        data = data[:, 0]
    elif data.ndim != 1:
        raise InvalidDimensionError(
            "Sample must be of shape (n,) or (n, 1)", expected=1, actual=data.ndim
        )
    if data.size == 0:
        raise InvalidArgumentError("Kolmogorov test needs a non-empty sample")
    return data


def kolmogorov(
    sample: ArraySample | npt.ArrayLike, distribution: Distribution, level: float = 0.05
) -> TestResult:
    """
    Kolmogorov-Smirnov test of ``sample`` against ``distribution``.

    Parameters
    ----------
    sample : ArraySample or array_like
        Univariate sample, shape ``(n,)`` or ``(n, 1)``.
    distribution : Distribution
        Distribution whose ``cdf`` defines the null hypothesis.
    level : float, default 0.05
        Significance level, in ``(0, 1)``.

    Returns
    -------
    TestResult

    Raises
    ------
    InvalidArgumentError
        If ``level`` is outside ``(0, 1)`` or the sample is empty.
    InvalidDimensionError
        If the sample is not univariate.

    Examples
    --------
    >>> from probkit import make_distribution
    >>> d = make_distribution("Normal", mu=0.0, sigma=1.0)
    >>> result = kolmogorov(d.sample(1000, rng=0), d)
    >>> 0.0 <= result.p_value <= 1.0
    True
    """
    if not 0.0 < level < 1.0:
        raise InvalidArgumentError(f"Significance level must lie in (0, 1), got {level}")
    data = _univariate_values(sample)
    result = stats.kstest(data, lambda x: np.asarray(distribution.cdf(x), dtype=np.float64))
    statistic, p_value = float(result.statistic), float(result.pvalue)
    logger.debug(
        "Kolmogorov test: n=%d statistic=%.6g p_value=%.6g", data.size, statistic, p_value
    )
    return TestResult(
        statistic=statistic,
        p_value=p_value,
        threshold=level,
        binary_quality_measure=p_value >= level,
    )


__all__ = ["TestResult", "kolmogorov"]
