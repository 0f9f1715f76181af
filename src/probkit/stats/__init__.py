"""
Statistical tools built on top of the distribution contract: the
Kolmogorov goodness-of-fit test and the validation protocol.
"""

__author__ = "probkit developers"
__copyright__ = "Copyright (c) 2025 probkit developers"
__license__ = "SPDX-License-Identifier: MIT"

from probkit.stats.fitting_test import TestResult, kolmogorov
from probkit.stats.validation import (
    EntropyCheck,
    GradientCheck,
    MomentCheck,
    RoundtripCheck,
    check_entropy_monte_carlo,
    check_gradient,
    check_monte_carlo_moments,
    check_quantile_roundtrip,
    finite_difference_gradient,
)

__all__ = [
    "TestResult",
    "kolmogorov",
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
