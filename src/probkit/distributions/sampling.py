"""
Sampling Interfaces
===================

This module defines protocols and implementations for sample containers
used in distribution sampling, together with the reductions (mean,
covariance) consumed by Monte Carlo consistency checks.
"""

from __future__ import annotations

__author__ = "probkit developers"
__copyright__ = "Copyright (c) 2025 probkit developers"
__license__ = "SPDX-License-Identifier: MIT"

from typing import TYPE_CHECKING, Protocol

import numpy as np

from probkit.errors import InvalidDimensionError

if TYPE_CHECKING:
    from collections.abc import Iterator
    from typing import Any

    import numpy.typing as npt


class Sample(Protocol):
    """
    Protocol for sample containers.

    Attributes
    ----------
    array : numpy.ndarray
        Array representation of the samples.
    shape : tuple[int, ...]
        Shape of the sample array.
    """

    def __len__(self) -> int: ...
    @property
    def array(self) -> npt.NDArray[np.floating[Any]]: ...
    @property
    def shape(self) -> tuple[int, ...]: ...


class ArraySample:
    """
    Array-backed sample container.

    Stores the points of a sample as a 2D floating-point array of shape
    ``(n_samples, n_dimensions)``.

    Parameters
    ----------
    data : numpy.ndarray
        2D floating-point array of shape (n, d).

    Raises
    ------
    InvalidDimensionError
        If data is not 2D.
    """

    dimension: int
    data: npt.NDArray[np.floating[Any]]

    def __init__(self, data: npt.NDArray[np.floating[Any]]) -> None:
        data = np.asarray(data, dtype=np.float64)
        if data.ndim != 2:
            raise InvalidDimensionError(
                "ArraySample expects 2D array of shape (n, d)", expected=2, actual=data.ndim
            )
        self.data = data
        self.dimension = int(data.shape[1])

    @classmethod
    def from_values(cls, values: npt.ArrayLike) -> ArraySample:
        """Build a univariate sample from a flat sequence of values."""
        return cls(np.asarray(values, dtype=np.float64).reshape(-1, 1))

    def __len__(self) -> int:
        return int(self.data.shape[0])

    def __getitem__(self, index: int) -> npt.NDArray[np.floating[Any]]:
        return self.data[index]

    @property
    def dim(self) -> int:
        """Alias for dimension attribute."""
        return self.dimension

    def __iter__(self) -> Iterator[npt.NDArray[np.floating[Any]]]:
        yield from self.data

    @property
    def array(self) -> npt.NDArray[np.floating[Any]]:
        """Return the backing array."""
        return self.data

    @property
    def shape(self) -> tuple[int, ...]:
        """Return the shape of the sample array (n, d)."""
        n, d = self.data.shape
        return int(n), int(d)

    def mean(self) -> npt.NDArray[np.floating[Any]]:
        """Component-wise empirical mean, shape ``(d,)``."""
        return np.mean(self.data, axis=0)

    def covariance(self) -> npt.NDArray[np.floating[Any]]:
        """Unbiased empirical covariance matrix, shape ``(d, d)``."""
        if len(self) < 2:
            raise InvalidDimensionError(
                "At least two points are needed to estimate a covariance",
                expected=2,
                actual=len(self),
            )
        return np.atleast_2d(np.cov(self.data, rowvar=False, ddof=1))
