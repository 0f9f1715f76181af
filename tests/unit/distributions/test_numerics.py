from __future__ import annotations

__author__ = "probkit developers"
__copyright__ = "Copyright (c) 2025 probkit developers"
__license__ = "SPDX-License-Identifier: MIT"

import math

import numpy as np
import pytest
from scipy.special import ndtr

from probkit.distributions.numerics import (
    SolverSettings,
    as_probabilities,
    central_difference,
    find_root,
    five_point_derivative,
    invert_monotone,
    solver_settings,
)
from probkit.errors import InvalidArgumentError, NumericalConvergenceError


class TestSolverSettings:
    def test_defaults(self) -> None:
        settings = solver_settings()
        assert settings is solver_settings()
        assert settings.x_tol == 1e-12
        assert settings.max_iter == 200
        assert settings.fd_step == 1e-5

    def test_updated_ignores_unknown_options(self) -> None:
        settings = SolverSettings()
        assert settings.updated(most_left=True) is settings
        tuned = settings.updated(x_tol=1e-6, most_left=True)
        assert tuned.x_tol == 1e-6
        assert tuned.max_iter == settings.max_iter


class TestProbabilities:
    def test_accepts_closed_unit_interval(self) -> None:
        np.testing.assert_array_equal(as_probabilities([0.0, 0.5, 1.0]), [0.0, 0.5, 1.0])

    @pytest.mark.parametrize("p", [-1e-9, 1.0 + 1e-9, math.nan, [0.5, 2.0]])
    def test_rejects_values_outside(self, p) -> None:
        with pytest.raises(InvalidArgumentError):
            as_probabilities(p)


class TestDerivatives:
    def test_five_point_derivative(self) -> None:
        assert five_point_derivative(math.sin, 0.3) == pytest.approx(math.cos(0.3), abs=1e-9)

    def test_five_point_derivative_of_non_finite_point(self) -> None:
        assert math.isnan(five_point_derivative(math.sin, math.inf))

    def test_central_difference(self) -> None:
        assert central_difference(3.0, 1.0, 0.5) == 2.0

    def test_central_difference_of_arrays(self) -> None:
        f_plus = np.array([3.0, -np.inf, 1.0])
        f_minus = np.array([1.0, -np.inf, 1.0])
        result = central_difference(f_plus, f_minus, 0.5)
        assert result[0] == 2.0
        assert np.isnan(result[1])
        assert result[2] == 0.0


class TestInvertMonotone:
    def test_inverts_standard_normal_cdf(self) -> None:
        x = invert_monotone(lambda t: float(ndtr(t)), 0.975)
        assert x == pytest.approx(1.959963984540054, abs=1e-9)

    def test_extreme_levels_map_to_bounds(self) -> None:
        assert invert_monotone(lambda t: float(ndtr(t)), 0.0) == -math.inf
        assert invert_monotone(lambda t: float(ndtr(t)), 1.0, lower=0.0, upper=5.0) == 5.0

    def test_bounded_support_skips_bracketing(self) -> None:
        x = invert_monotone(lambda t: t / 4.0, 0.25, lower=0.0, upper=4.0)
        assert x == pytest.approx(1.0, abs=1e-10)

    def test_plateau_leftmost_solution(self) -> None:
        def plateau(t: float) -> float:
            return min(max(t, 0.0), 1.0) * 0.5 + min(max(t - 2.0, 0.0), 1.0) * 0.5

        x = invert_monotone(plateau, 0.5, lower=0.0, upper=3.0, most_left=True)
        assert x == pytest.approx(1.0, abs=1e-9)

    def test_bracketing_budget(self) -> None:
        with pytest.raises(NumericalConvergenceError) as exc_info:
            invert_monotone(lambda t: 0.0, 0.5, settings=SolverSettings(max_expand=5))
        assert exc_info.value.iterations == 5


class TestFindRoot:
    def test_finds_root(self) -> None:
        assert find_root(lambda t: t * t - 2.0, 0.0, 2.0) == pytest.approx(math.sqrt(2.0))

    def test_no_sign_change(self) -> None:
        with pytest.raises(NumericalConvergenceError):
            find_root(lambda t: t * t + 1.0, -1.0, 1.0)

    def test_iteration_budget(self) -> None:
        with pytest.raises(NumericalConvergenceError):
            find_root(lambda t: t**3 - 0.1, -10.0, 10.0, settings=SolverSettings(max_iter=2))
