"""
Error Taxonomy
==============

Exception hierarchy raised by probkit. Every error derives from
:class:`ProbkitError` and from the built-in exception closest in meaning, so
callers may catch either the library-specific class or the standard one
(``ValueError`` for invalid arguments, ``NotImplementedError`` for
unsupported characteristics, and so on).
"""

from __future__ import annotations

__author__ = "probkit developers"
__copyright__ = "Copyright (c) 2025 probkit developers"
__license__ = "SPDX-License-Identifier: MIT"


class ProbkitError(Exception):
    """Base class for all probkit errors."""


class InvalidArgumentError(ProbkitError, ValueError):
    """
    Raised for malformed parameters or query arguments.

    Constraint violations at construction time and probabilities outside
    ``[0, 1]`` fall into this category. Nothing is constructed when it is
    raised.
    """


class InvalidDimensionError(InvalidArgumentError):
    """
    Raised when the dimension of data or of an argument does not match.

    Parameters
    ----------
    expected : int
        Expected dimension.
    actual : int
        Dimension that was supplied.
    """

    def __init__(self, message: str, *, expected: int | None = None, actual: int | None = None):
        self.expected = expected
        self.actual = actual
        if expected is not None and actual is not None:
            message = f"{message} (expected {expected}, got {actual})"
        super().__init__(message)


class NumericalConvergenceError(ProbkitError, ArithmeticError):
    """
    Raised when a solver exhausts its iteration budget.

    Parameters
    ----------
    message : str
        Description of the failing computation.
    iterations : int, optional
        Number of iterations spent.
    tolerance : float, optional
        Tolerance that was not reached.
    """

    def __init__(
        self,
        message: str,
        *,
        iterations: int | None = None,
        tolerance: float | None = None,
    ):
        self.iterations = iterations
        self.tolerance = tolerance
        details = []
        if iterations is not None:
            details.append(f"iterations={iterations}")
        if tolerance is not None:
            details.append(f"tolerance={tolerance:g}")
        if details:
            message = f"{message} [{', '.join(details)}]"
        super().__init__(message)


class UnsupportedOperationError(ProbkitError, NotImplementedError):
    """Raised when a distribution cannot provide the requested characteristic."""


class GraphInvariantError(ProbkitError, RuntimeError):
    """
    Raised when characteristic graph invariants are violated.

    This happens when a per-distribution view of the characteristic graph is
    built and the filtered graph is inconsistent (e.g. the definitive
    subgraph is not strongly connected).
    """


__all__ = [
    "ProbkitError",
    "InvalidArgumentError",
    "InvalidDimensionError",
    "NumericalConvergenceError",
    "UnsupportedOperationError",
    "GraphInvariantError",
]
