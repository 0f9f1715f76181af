"""
Shared Numerical Utilities
==========================

Standalone numerical helpers reused by the generic fitters, the confidence
region solvers and the validation protocol:

- :class:`SolverSettings`: default tolerances and iteration budgets;
- :func:`five_point_derivative`: 5-point central stencil;
- :func:`central_difference`: 2-point central difference;
- :func:`invert_monotone`: bracket expansion followed by bisection for the
  generalised inverse of a non-decreasing scalar function;
- :func:`find_root`: Brent's method with a convergence check.

Every iterative routine here has a fixed budget and raises
:class:`~probkit.errors.NumericalConvergenceError` instead of looping or
silently returning an unconverged value.
"""

from __future__ import annotations

__author__ = "probkit developers"
__copyright__ = "Copyright (c) 2025 probkit developers"
__license__ = "SPDX-License-Identifier: MIT"

import logging
from dataclasses import dataclass, fields, replace
from functools import lru_cache
from math import inf, isfinite
from typing import TYPE_CHECKING

import numpy as np
from scipy import optimize as _sp_optimize

from probkit.errors import InvalidArgumentError, NumericalConvergenceError

if TYPE_CHECKING:
    from typing import Any

    from probkit.types import NumericArray, ScalarFunc

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SolverSettings:
    """
    Numerical defaults shared by solvers.

    Parameters
    ----------
    x_tol : float
        Relative tolerance on the abscissa for inversions and root finding.
    max_iter : int
        Iteration budget of bisection / Brent refinements.
    max_expand : int
        Number of bracket expansions before giving up.
    init_step : float
        Initial half-width of an expanding bracket.
    expand_factor : float
        Multiplicative growth of the bracket step.
    fd_step : float
        Step of finite-difference stencils.
    quad_limit : int
        Subinterval limit passed to :func:`scipy.integrate.quad`.
    """

    x_tol: float = 1e-12
    max_iter: int = 200
    max_expand: int = 60
    init_step: float = 1.0
    expand_factor: float = 2.0
    fd_step: float = 1e-5
    quad_limit: int = 200

    def updated(self, **options: Any) -> SolverSettings:
        """
        Return a copy overriding the fields present in ``options``.

        Keys that are not settings fields are ignored so that the full
        ``**options`` of a fitter can be passed through.
        """
        known = {f.name for f in fields(self)}
        overrides = {k: v for k, v in options.items() if k in known}
        return replace(self, **overrides) if overrides else self


@lru_cache(maxsize=1)
def solver_settings() -> SolverSettings:
    """Process-wide default :class:`SolverSettings`."""
    return SolverSettings()


def as_probabilities(p: float | NumericArray) -> NumericArray:
    """
    Convert probabilities to a float array, rejecting values outside ``[0, 1]``.

    Raises
    ------
    InvalidArgumentError
        If any value is outside ``[0, 1]`` or NaN.
    """
    arr = np.asarray(p, dtype=np.float64)
    if not np.all((arr >= 0.0) & (arr <= 1.0)):
        raise InvalidArgumentError("Probability must be in [0, 1]")
    return arr


def five_point_derivative(f: ScalarFunc, x: float, h: float | None = None) -> float:
    """
    5-point central numerical derivative.

    Parameters
    ----------
    f : Callable[[float], float]
        Scalar function.
    x : float
        Evaluation point.
    h : float, optional
        Step for the stencil (defaults to ``SolverSettings.fd_step``).

    Returns
    -------
    float
        Approximated derivative ``f'(x)``; ``nan`` for non-finite ``x``.
    """
    if not isfinite(x):
        return float("nan")
    h = solver_settings().fd_step if h is None else h
    f1 = float(f(x + h))
    f_1 = float(f(x - h))
    f2 = float(f(x + 2 * h))
    f_2 = float(f(x - 2 * h))
    return float((-f2 + 8 * f1 - 8 * f_1 + f_2) / (12.0 * h))


def central_difference(
    f_plus: float | NumericArray, f_minus: float | NumericArray, eps: float
) -> Any:
    """
    Central difference quotient ``(f(x + eps) - f(x - eps)) / (2 eps)``.

    Works element-wise on arrays; ``inf - inf`` gives ``nan`` without a warning.
    """
    with np.errstate(invalid="ignore"):
        return np.subtract(f_plus, f_minus) / (2.0 * eps)


def invert_monotone(
    func: ScalarFunc,
    q: float,
    *,
    lower: float = -inf,
    upper: float = inf,
    most_left: bool = False,
    x0: float | None = None,
    settings: SolverSettings | None = None,
) -> float:
    """
    Generalised inverse of a non-decreasing function with values in ``[0, 1]``.

    A bracket ``[L, R]`` with ``func(L) <= q <= func(R)`` is grown
    geometrically from ``x0`` (clamped to ``[lower, upper]``), then refined by
    bisection until its relative width falls under ``settings.x_tol``.

    Parameters
    ----------
    func : Callable[[float], float]
        Non-decreasing function, typically a CDF.
    q : float
        Target level.
    lower, upper : float
        Known bounds of the answer (the support of the distribution).
    most_left : bool, default False
        Return the leftmost solution on flat plateaus.
    x0 : float, optional
        Initial bracket center (defaults to the middle of a bounded support
        or to 0 clamped into the support).
    settings : SolverSettings, optional
        Tolerances and budgets.

    Returns
    -------
    float
        ``x`` with ``func(x) ≈ q``. Levels ``q <= 0`` and ``q >= 1`` map to
        ``lower`` and ``upper``.

    Raises
    ------
    NumericalConvergenceError
        If no bracket is found within ``settings.max_expand`` expansions.
    """
    settings = solver_settings() if settings is None else settings
    if q <= 0.0:
        return lower
    if q >= 1.0:
        return upper

    def below(value: float) -> bool:
        return value < q if most_left else value <= q

    if isfinite(lower) and isfinite(upper):
        L, R = lower, upper
    else:
        if x0 is None:
            x0 = 0.0
        x0 = min(max(x0, lower), upper)
        step = settings.init_step
        L = max(x0 - step, lower)
        R = min(x0 + step, upper)
        expansions = 0
        while not below(float(func(L))) or below(float(func(R))):
            if expansions >= settings.max_expand:
                raise NumericalConvergenceError(
                    f"Could not bracket level {q!r}", iterations=expansions
                )
            step *= settings.expand_factor
            if not below(float(func(L))):
                L = max(L - step, lower)
            if below(float(func(R))):
                R = min(R + step, upper)
            expansions += 1
        logger.debug("Bracketed level %g in [%g, %g] after %d expansions", q, L, R, expansions)

    iterations = 0
    while settings.x_tol * (1.0 + max(abs(L), abs(R))) < (R - L):
        if iterations >= settings.max_iter:
            raise NumericalConvergenceError(
                f"Bisection for level {q!r} did not converge",
                iterations=iterations,
                tolerance=settings.x_tol,
            )
        M = 0.5 * (L + R)
        if below(float(func(M))):
            L = M
        else:
            R = M
        iterations += 1

    return R if most_left else 0.5 * (L + R)


def find_root(
    f: ScalarFunc,
    lo: float,
    hi: float,
    *,
    settings: SolverSettings | None = None,
) -> float:
    """
    Root of ``f`` on ``[lo, hi]`` by Brent's method.

    Raises
    ------
    NumericalConvergenceError
        If the endpoints do not bracket a root or Brent's method does not
        converge within the iteration budget.
    """
    settings = solver_settings() if settings is None else settings
    try:
        root, result = _sp_optimize.brentq(
            f, lo, hi, xtol=settings.x_tol, maxiter=settings.max_iter, full_output=True, disp=False
        )
    except ValueError as exc:
        raise NumericalConvergenceError(f"No sign change of f on [{lo}, {hi}]") from exc
    if not result.converged:
        raise NumericalConvergenceError(
            "Brent's method did not converge",
            iterations=result.iterations,
            tolerance=settings.x_tol,
        )
    return float(root)


__all__ = [
    "SolverSettings",
    "solver_settings",
    "as_probabilities",
    "five_point_derivative",
    "central_difference",
    "invert_monotone",
    "find_root",
]
