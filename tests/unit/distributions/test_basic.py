from __future__ import annotations

__author__ = "probkit developers"
__copyright__ = "Copyright (c) 2025 probkit developers"
__license__ = "SPDX-License-Identifier: MIT"

import math
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, cast

from mypy_extensions import KwArg

from probkit.distributions.computation import (
    AnalyticalComputation,
    ComputationMethod,
    FittedComputationMethod,
)
from probkit.distributions.support import ContinuousSupport
from probkit.types import CharacteristicName, Kind
from tests.utils.mocks import StandaloneEuclideanUnivariateDistribution

if TYPE_CHECKING:
    from collections.abc import Sequence


class DistributionTestBase:
    PDF = CharacteristicName.PDF
    CDF = CharacteristicName.CDF
    PPF = CharacteristicName.PPF

    def make_uniform_ppf_distribution(
        self,
    ) -> StandaloneEuclideanUnivariateDistribution:
        ppf_func = cast(Callable[[float, KwArg(Any)], float], lambda q, **kwargs: q)
        return StandaloneEuclideanUnivariateDistribution(
            kind=Kind.CONTINUOUS,
            analytical_computations=[
                AnalyticalComputation[float, float](target=self.PPF, func=ppf_func),
            ],
            support=ContinuousSupport(0, 1),
        )

    def make_logistic_cdf_distribution(
        self,
    ) -> StandaloneEuclideanUnivariateDistribution:
        def logistic_cdf(x: float, **_: Any) -> float:
            return 1.0 / (1.0 + math.exp(-x))

        logistic_cdf_func = cast(Callable[[float, KwArg(Any)], float], logistic_cdf)
        return StandaloneEuclideanUnivariateDistribution(
            kind=Kind.CONTINUOUS,
            analytical_computations=[
                AnalyticalComputation[float, float](target=self.CDF, func=logistic_cdf_func),
            ],
            support=ContinuousSupport(),
        )

    def make_uniform_pdf_distribution(
        self,
    ) -> StandaloneEuclideanUnivariateDistribution:
        def uniform_pdf(x: float, **_: Any) -> float:
            return 1.0 if 0.0 <= x <= 1.0 else 0.0

        uniform_pdf_func = cast(Callable[[float, KwArg(Any)], float], uniform_pdf)

        return StandaloneEuclideanUnivariateDistribution(
            kind=Kind.CONTINUOUS,
            analytical_computations=[
                AnalyticalComputation[float, float](target=self.PDF, func=uniform_pdf_func),
            ],
            support=ContinuousSupport(0, 1),
        )

    def make_plateau_cdf_distribution(
        self,
    ) -> StandaloneEuclideanUnivariateDistribution:
        """CDF rising on [-1, 0] and [1, 2] with a plateau at 0.5 in between."""

        def plateau_cdf(x: float, **_: Any) -> float:
            if x < -1.0:
                return 0.0
            if x < 0.0:
                return 0.5 * (x + 1.0)
            if x < 1.0:
                return 0.5
            if x < 2.0:
                return 0.5 + 0.5 * (x - 1.0)
            return 1.0

        return StandaloneEuclideanUnivariateDistribution(
            kind=Kind.CONTINUOUS,
            analytical_computations=[
                AnalyticalComputation[float, float](
                    target=self.CDF,
                    func=cast(Callable[[float, KwArg(Any)], float], plateau_cdf),
                ),
            ],
            support=ContinuousSupport(-1.0, 2.0),
        )

    @staticmethod
    def make_normal_pdf_function(mu: float, sigma: float) -> Callable[[float, KwArg(Any)], float]:
        def normal_pdf(x: float, **_: Any) -> float:
            z = (x - mu) / sigma
            return math.exp(-0.5 * z * z) / (sigma * math.sqrt(2.0 * math.pi))

        return cast(Callable[[float, KwArg(Any)], float], normal_pdf)

    @staticmethod
    def make_fictitious_computation_method(
        target: str, sources: Sequence[str]
    ) -> ComputationMethod[Any, Any]:
        def _fitted_const(val: Any) -> FittedComputationMethod[Any, Any]:
            return FittedComputationMethod[Any, Any](
                target=target, sources=sources, func=lambda *_a, **_k: val
            )

        return ComputationMethod(
            target=target, sources=sources, fitter=lambda *_a, **_k: _fitted_const(None)
        )
