"""
Computation and Sampling Strategies
===================================

Pluggable strategy interfaces and their default implementations:

- :class:`ComputationStrategy`: resolves characteristic methods.
- :class:`DefaultComputationStrategy`: returns analytical computations and
  otherwise walks the characteristic graph, optionally caching fitted
  conversions.
- :class:`SamplingStrategy`: draws samples from a distribution.
- :class:`DefaultSamplingUnivariateStrategy`: draws ``(n, 1)`` samples by
  inverse transform of i.i.d. uniform variates.
"""

from __future__ import annotations

__author__ = "probkit developers"
__copyright__ = "Copyright (c) 2025 probkit developers"
__license__ = "SPDX-License-Identifier: MIT"

import logging
import threading
from typing import TYPE_CHECKING, Any, Generic, Protocol, TypeAlias, TypeVar

import numpy as np

from probkit.distributions.computation import (
    AnalyticalComputation,
    FittedComputationMethod,
)
from probkit.distributions.registry import registry_view
from probkit.distributions.sampling import ArraySample, Sample
from probkit.errors import InvalidArgumentError, UnsupportedOperationError
from probkit.types import CharacteristicName

if TYPE_CHECKING:
    from probkit.distributions.computation import ComputationMethod
    from probkit.distributions.distribution import Distribution
    from probkit.types import GenericCharacteristicName

logger = logging.getLogger(__name__)

In = TypeVar("In")
Out = TypeVar("Out")

Method: TypeAlias = AnalyticalComputation[In, Out] | FittedComputationMethod[In, Out]
RandomState: TypeAlias = np.random.Generator | int | None


class ComputationStrategy(Protocol[In, Out]):
    """Protocol for characteristic resolution strategies."""

    enable_caching: bool

    def query_method(
        self, state: GenericCharacteristicName, distr: Distribution, **options: Any
    ) -> Method[In, Out]: ...


class DefaultComputationStrategy(Generic[In, Out]):
    """
    Default characteristic resolver.

    Resolution order
    ----------------
    1. If the distribution provides an analytical implementation, return it.
    2. Else, if caching is enabled and the method is cached, return it.
    3. Else take the shortest conversion path in the distribution's view of
       the characteristic graph from one of its analytical characteristics,
       and fit the edges along it (fitters resolve their sources through the
       same strategy).

    Parameters
    ----------
    enable_caching : bool, default False
        If ``True``, cache fitted conversions per distribution instance and
        target characteristic. The cache keeps the served distributions alive.

    Raises
    ------
    UnsupportedOperationError
        If the distribution has no analytical base, if no conversion path
        exists, or if resolution runs into a cycle.
    """

    def __init__(self, enable_caching: bool = False) -> None:
        self.enable_caching = enable_caching
        self._cache: dict[
            tuple[int, GenericCharacteristicName],
            tuple[Distribution, FittedComputationMethod[In, Out]],
        ] = {}
        self._local = threading.local()

    @property
    def _resolving(self) -> dict[int, set[GenericCharacteristicName]]:
        # per thread: concurrent resolutions of one instance are not cycles
        resolving: dict[int, set[GenericCharacteristicName]] | None = getattr(
            self._local, "resolving", None
        )
        if resolving is None:
            resolving = self._local.resolving = {}
        return resolving

    def _cached(
        self, distr: Distribution, state: GenericCharacteristicName
    ) -> FittedComputationMethod[In, Out] | None:
        entry = self._cache.get((id(distr), state))
        if entry is None or entry[0] is not distr:
            return None
        return entry[1]

    def _push_guard(self, distr: Distribution, state: GenericCharacteristicName) -> None:
        seen = self._resolving.setdefault(id(distr), set())
        if state in seen:
            raise UnsupportedOperationError(
                f"Cycle detected while resolving {state!r}; "
                "the distribution needs an analytical base characteristic"
            )
        seen.add(state)

    def _pop_guard(self, distr: Distribution, state: GenericCharacteristicName) -> None:
        seen = self._resolving.get(id(distr))
        if seen is not None:
            seen.discard(state)
            if not seen:
                self._resolving.pop(id(distr), None)

    def query_method(
        self, state: GenericCharacteristicName, distr: Distribution, **options: Any
    ) -> Method[In, Out]:
        """
        Resolve an analytical or fitted method for ``state``.

        Parameters
        ----------
        state : str
            Target characteristic name.
        distr : Distribution
            The distribution providing the analytical base and type.
        **options
            Passed to the fitter(s) when conversions are required.

        Returns
        -------
        Method
            Analytical or fitted callable implementing ``state``.
        """
        analytical = distr.analytical_computations
        if state in analytical:
            return analytical[state]

        if self.enable_caching:
            cached = self._cached(distr, state)
            if cached is not None:
                return cached

        if not analytical:
            raise UnsupportedOperationError(
                "Distribution provides no analytical computations to ground conversions"
            )

        view = registry_view(distr)
        if state not in view.all_characteristics:
            raise UnsupportedOperationError(
                f"Characteristic {state!r} is neither analytical nor derivable "
                f"for {distr.distribution_type!r}"
            )

        self._push_guard(distr, state)
        try:
            best: tuple[GenericCharacteristicName, list[ComputationMethod[Any, Any]]] | None = None
            for src in analytical:
                if src not in view.all_characteristics:
                    continue
                path = view.find_path(src, state)
                if path and (best is None or len(path) < len(best[1])):
                    best = (src, path)
            if best is None:
                raise UnsupportedOperationError(
                    f"No conversion path from any analytical characteristic to {state!r}"
                )

            src, path = best
            logger.debug(
                "Resolving %r from %r via %s",
                state,
                src,
                " -> ".join([src, *(edge.target for edge in path)]),
            )
            fitted: FittedComputationMethod[In, Out] | None = None
            for edge in path:
                fitted = edge.fit(distr, **options)
                if self.enable_caching:
                    self._cache[(id(distr), edge.target)] = (distr, fitted)
            if fitted is None:
                raise UnsupportedOperationError(f"Empty conversion path when resolving {state!r}")
            return fitted
        finally:
            self._pop_guard(distr, state)


def as_generator(rng: RandomState = None) -> np.random.Generator:
    """Normalize a seed, a generator or ``None`` into a :class:`numpy.random.Generator`."""
    if isinstance(rng, np.random.Generator):
        return rng
    return np.random.default_rng(rng)


class SamplingStrategy(Protocol):
    """Protocol for sampling strategies (return a :class:`Sample`)."""

    def sample(self, n: int, distr: Distribution, **options: Any) -> Sample: ...


class DefaultSamplingUnivariateStrategy(SamplingStrategy):
    """
    Default univariate sampler using inverse transform sampling.

    The strategy resolves the distribution's ``ppf`` and applies it to i.i.d.
    uniforms ``U ~ U(0, 1)`` drawn from ``rng`` (a generator, a seed or
    ``None`` for fresh entropy).

    Returns
    -------
    ArraySample
        A 2D sample of shape ``(n, 1)``.
    """

    def sample(
        self, n: int, distr: Distribution, rng: RandomState = None, **options: Any
    ) -> ArraySample:
        if n < 0:
            raise InvalidArgumentError(f"Sample size must be non-negative, got {n}")
        ppf = distr.query_method(CharacteristicName.PPF, **options)
        u = as_generator(rng).random(n)
        values = np.asarray(ppf(u), dtype=np.float64) if n else np.empty(0)
        return ArraySample(values.reshape(n, 1))
