"""
Computation Primitives and Conversions
======================================

This module defines the core building blocks used to compute distribution
characteristics:

- :class:`Computation`: callable (analytical or fitted) for a single
  characteristic.
- :class:`FittedComputationMethod`: a fitted conversion method
  (e.g., from CDF to SF) ready to be called.
- :class:`ComputationMethod`: a factory that *fits* a conversion given a
  distribution and returns :class:`FittedComputationMethod`.
- :class:`AnalyticalComputation`: an analytical callable provided by a
  distribution family directly.

Notes
-----
- Analytical callables provided by the built-in families are vectorised:
  they accept scalars or numpy arrays. Fitted conversions are **scalar**
  (``float -> float``); :meth:`FittedComputationMethod.__call__` maps them
  over arrays.
- ``**options`` in fitters are free-form and may contain numeric tolerances,
  disambiguation flags (e.g., ``most_left``), etc.
"""

__author__ = "probkit developers"
__copyright__ = "Copyright (c) 2025 probkit developers"
__license__ = "SPDX-License-Identifier: MIT"


from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, Protocol, TypeVar, runtime_checkable

import numpy as np
from mypy_extensions import KwArg

from probkit.types import (
    GenericCharacteristicName,
)

if TYPE_CHECKING:
    from probkit.distributions.distribution import Distribution

In = TypeVar("In")
Out = TypeVar("Out")


@runtime_checkable
class Computation(Protocol[In, Out]):
    """Callable for a single characteristic.

    Attributes
    ----------
    target : str
        The characteristic name this computation represents.
    """

    @property
    def target(self) -> GenericCharacteristicName: ...
    def __call__(self, data: In, **options: Any) -> Out: ...


@dataclass(frozen=True, slots=True)
class AnalyticalComputation(Generic[In, Out]):
    """Analytical computation provided directly by the distribution.

    Parameters
    ----------
    target : str
        Characteristic name (e.g., ``"pdf"``).
    func : Callable[[In, KwArg(Any)], Out]
        Analytical callable.
    """

    target: GenericCharacteristicName
    func: Callable[[In, KwArg(Any)], Out]

    @property
    def vectorized(self) -> bool:
        """Analytical callables accept array input."""
        return True

    def __call__(self, data: In, **options: Any) -> Out:
        """Evaluate the analytical function."""
        return self.func(data, **options)


@dataclass(frozen=True, slots=True)
class FittedComputationMethod(Generic[In, Out]):
    """Fitted conversion method (ready-to-use).

    Parameters
    ----------
    target : str
        Destination characteristic name.
    sources : Sequence[str]
        Source characteristic names (unary conversions use length 1).
    func : Callable[[In, KwArg(Any)], Out]
        Scalar callable implementing the fitted conversion.
    """

    target: GenericCharacteristicName
    sources: Sequence[GenericCharacteristicName]
    func: Callable[[In, KwArg(Any)], Out]

    @property
    def vectorized(self) -> bool:
        """Fitted callables are scalar; arrays are mapped element-wise."""
        return False

    def __call__(self, data: In, **options: Any) -> Out:
        """Evaluate the fitted conversion, element-wise for array input."""
        if isinstance(data, np.ndarray) and data.ndim > 0:
            flat = [self.func(float(v), **options) for v in data.ravel()]
            return np.asarray(flat).reshape(data.shape)  # type: ignore[return-value]
        return self.func(data, **options)


@dataclass(frozen=True, slots=True)
class ComputationMethod(Generic[In, Out]):
    """Conversion method factory (to be fitted).

    Parameters
    ----------
    target : str
        Destination characteristic name.
    sources : Sequence[str]
        Source characteristic names (unary for current graph edges).
    fitter : Callable[[Distribution, KwArg(Any)], FittedComputationMethod]
        Fitter that prepares a callable conversion for the given distribution.
    """

    target: GenericCharacteristicName
    sources: Sequence[GenericCharacteristicName]
    fitter: Callable[["Distribution", KwArg(Any)], FittedComputationMethod[In, Out]]

    def fit(self, distribution: "Distribution", **options: Any) -> FittedComputationMethod[In, Out]:
        """Fit and return a :class:`FittedComputationMethod`."""
        return self.fitter(distribution, **options)
