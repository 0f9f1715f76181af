"""
Distributions subpackage

Interfaces and default implementations for probability distributions used by
probkit:

- distribution protocol with the full evaluation contract (:mod:`.distribution`);
- numerical fitters (:mod:`.fitters`) and solvers (:mod:`.numerics`);
- characteristic graph registry (:mod:`.registry`);
- confidence regions (:mod:`.regions`);
- sampling protocol and array-backed samples (:mod:`.sampling`);
- pluggable strategies (:mod:`.strategies`);
- supports (:mod:`.support`).
"""

from __future__ import annotations

__author__ = "probkit developers"
__copyright__ = "Copyright (c) 2025 probkit developers"
__license__ = "SPDX-License-Identifier: MIT"
from .computation import (
    AnalyticalComputation,
    ComputationMethod,
    FittedComputationMethod,
)
from .distribution import Distribution
from .numerics import SolverSettings, solver_settings
from .regions import (
    ConfidenceInterval,
    LevelSet,
    MinimumVolumeInterval,
    bilateral_confidence_interval,
    minimum_volume_interval,
    minimum_volume_level_set,
    unilateral_confidence_interval,
)
from .registry import DEFAULT_COMPUTATION_KEY
from .sampling import ArraySample, Sample
from .strategies import (
    ComputationStrategy,
    DefaultComputationStrategy,
    DefaultSamplingUnivariateStrategy,
    SamplingStrategy,
)
from .support import ContinuousSupport, Support

__all__ = [
    # computation primitives
    "AnalyticalComputation",
    "ComputationMethod",
    "FittedComputationMethod",
    # distribution
    "Distribution",
    # numerics
    "SolverSettings",
    "solver_settings",
    # regions
    "ConfidenceInterval",
    "MinimumVolumeInterval",
    "LevelSet",
    "bilateral_confidence_interval",
    "unilateral_confidence_interval",
    "minimum_volume_interval",
    "minimum_volume_level_set",
    # sampling
    "Sample",
    "ArraySample",
    # strategies
    "ComputationStrategy",
    "DefaultComputationStrategy",
    "SamplingStrategy",
    "DefaultSamplingUnivariateStrategy",
    # support
    "Support",
    "ContinuousSupport",
    # registry
    "DEFAULT_COMPUTATION_KEY",
]
