"""
Core Type Definitions
=====================

Fundamental types and data structures used throughout probkit: distribution
kinds and types, one-dimensional intervals (supports and confidence
intervals) and the canonical names of characteristics and families.
"""

__author__ = "probkit developers"
__copyright__ = "Copyright (c) 2025 probkit developers"
__license__ = "SPDX-License-Identifier: MIT"

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum, StrEnum, auto
from math import inf, isfinite
from typing import Any, TypeAlias, cast, overload

import numpy as np
from numpy.typing import NDArray


class Kind(StrEnum):
    """
    Enumeration of distribution kinds.

    Attributes
    ----------
    DISCRETE : str
        Discrete probability distribution.
    CONTINUOUS : str
        Continuous probability distribution.
    """

    DISCRETE = "discrete"
    CONTINUOUS = "continuous"


class DistributionType:
    """
    Base class for distribution type descriptors.

    Provides the feature interface consulted by the characteristic graph
    constraints.
    """

    __slots__ = ()

    @property
    def registry_features(self) -> Mapping[str, Any]:
        """
        Features used by the characteristic registry.

        Returns
        -------
        Mapping[str, Any]
            Dataclass fields of the descriptor keyed by name.
        """
        fields = getattr(self, "__dataclass_fields__", None)
        if fields is None:
            return {}
        return {name: getattr(self, name) for name in fields}


@dataclass(frozen=True, slots=True)
class EuclideanDistributionType(DistributionType):
    """
    Distribution type for distributions on a Euclidean space.

    Parameters
    ----------
    kind : Kind
        Distribution kind (discrete or continuous).
    dimension : int
        Dimension of the space (1 for univariate distributions).
    """

    kind: Kind
    dimension: int


UnivariateContinuous = EuclideanDistributionType(kind=Kind.CONTINUOUS, dimension=1)
"""Type for univariate continuous distributions."""

NumPyNumber = np.floating[Any] | np.integer[Any]
"""Type alias for NumPy numeric types."""

Number = NumPyNumber | int | float
"""Type alias for all numeric types."""

NumericArray = NDArray[NumPyNumber]
"""Type alias for numeric arrays."""

ComplexArray = NDArray[np.complexfloating[Any]]
"""Type alias for complex arrays."""

BoolArray = NDArray[np.bool_]
"""Type alias for boolean arrays."""


class ContinuousSupportShape1D(Enum):
    """
    Topological shape of a one-dimensional interval.

    Attributes
    ----------
    REAL_LINE
        Entire real line (-inf, inf).
    RAY_LEFT
        Interval unbounded on the left, (-inf, b].
    RAY_RIGHT
        Interval unbounded on the right, [a, inf).
    BOUNDED_INTERVAL
        Bounded interval [a, b] with any closure.
    EMPTY
        Empty set.
    SINGLE_POINT
        Degenerate interval {a}.
    """

    REAL_LINE = auto()
    RAY_LEFT = auto()
    RAY_RIGHT = auto()
    BOUNDED_INTERVAL = auto()
    EMPTY = auto()
    SINGLE_POINT = auto()


@dataclass(frozen=True, slots=True)
class Interval1D:
    """
    One-dimensional interval with configurable closure.

    Used both as the support of univariate distributions and as the
    geometric part of confidence regions.

    Parameters
    ----------
    left : float, default=-inf
        Left endpoint.
    right : float, default=inf
        Right endpoint.
    left_closed : bool, default=True
        Whether the left endpoint belongs to the interval (forced to
        ``False`` for an infinite endpoint).
    right_closed : bool, default=True
        Whether the right endpoint belongs to the interval (forced to
        ``False`` for an infinite endpoint).
    """

    left: float = -inf
    right: float = inf
    left_closed: bool = True
    right_closed: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "left", float(self.left))
        object.__setattr__(self, "right", float(self.right))
        if self.left == -inf and self.left_closed:
            object.__setattr__(self, "left_closed", False)
        if self.right == inf and self.right_closed:
            object.__setattr__(self, "right_closed", False)

    @overload
    def contains(self, x: Number) -> bool: ...
    @overload
    def contains(self, x: NumericArray) -> BoolArray: ...

    def contains(self, x: Number | NumericArray) -> bool | BoolArray:
        """
        Check whether point(s) lie in the interval.

        Parameters
        ----------
        x : Number or NumericArray
            Point(s) to check.

        Returns
        -------
        bool or BoolArray
            Element-wise membership.
        """
        arr = np.asarray(x)

        left_ok = (arr > self.left) | (self.left_closed & (arr >= self.left))
        right_ok = (arr < self.right) | (self.right_closed & (arr <= self.right))
        result = left_ok & right_ok

        if np.ndim(arr) == 0:
            return bool(result)
        return cast(BoolArray, result)

    def __contains__(self, x: object) -> bool:
        return bool(self.contains(cast(Number, x)))

    @property
    def is_empty(self) -> bool:
        """Check whether the interval contains no point."""
        if self.left > self.right:
            return True
        return bool(self.left == self.right and not (self.left_closed and self.right_closed))

    @property
    def is_bounded(self) -> bool:
        """Check whether both endpoints are finite."""
        return isfinite(self.left) and isfinite(self.right)

    @property
    def width(self) -> float:
        """Lebesgue measure of the interval."""
        if self.is_empty:
            return 0.0
        return self.right - self.left

    @property
    def shape(self) -> ContinuousSupportShape1D:
        """
        Topological shape of the interval.

        Returns
        -------
        ContinuousSupportShape1D
            Classification of the interval.
        """
        if self.is_empty:
            return ContinuousSupportShape1D.EMPTY
        if self.left == self.right:
            return ContinuousSupportShape1D.SINGLE_POINT
        if self.left == -inf and self.right == inf:
            return ContinuousSupportShape1D.REAL_LINE
        if self.left == -inf:
            return ContinuousSupportShape1D.RAY_LEFT
        if self.right == inf:
            return ContinuousSupportShape1D.RAY_RIGHT
        return ContinuousSupportShape1D.BOUNDED_INTERVAL

    def clip(self, x: Number | NumericArray) -> NumericArray:
        """Project point(s) onto the closure of the interval."""
        return cast(NumericArray, np.clip(np.asarray(x, dtype=np.float64), self.left, self.right))


GenericCharacteristicName: TypeAlias = str
"""Type alias for characteristic names (e.g. ``'pdf'``, ``'cdf'``)."""

ParametrizationName: TypeAlias = str
"""Type alias for parametrization names."""

ScalarFunc = Callable[[float], float]
"""Type alias for scalar functions (float -> float)."""


class CharacteristicName(StrEnum):
    """
    Canonical names of distribution characteristics.

    Families register analytical implementations under these names and the
    computation strategy resolves them, possibly through the characteristic
    graph when a family omits one.
    """

    PDF = "pdf"
    LOGPDF = "logpdf"
    DDF = "ddf"
    CDF = "cdf"
    SF = "sf"
    PPF = "ppf"
    ISF = "isf"
    PDF_GRADIENT = "pdf_gradient"
    LOGPDF_GRADIENT = "logpdf_gradient"
    CDF_GRADIENT = "cdf_gradient"
    CF = "cf"
    LOG_CF = "log_cf"
    MEAN = "mean"
    VAR = "var"
    SKEW = "skewness"
    KURT = "kurtosis"
    ENTROPY = "entropy"


class FamilyName(StrEnum):
    NORMAL = "Normal"
    CONTINUOUS_UNIFORM = "ContinuousUniform"
    TRUNCATED_NORMAL = "TruncatedNormal"


__all__ = [
    "Kind",
    "EuclideanDistributionType",
    "UnivariateContinuous",
    "GenericCharacteristicName",
    "ParametrizationName",
    "DistributionType",
    "ScalarFunc",
    "Interval1D",
    "ContinuousSupportShape1D",
    "BoolArray",
    "ComplexArray",
    "NumPyNumber",
    "Number",
    "NumericArray",
    "CharacteristicName",
    "FamilyName",
]
