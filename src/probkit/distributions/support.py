from __future__ import annotations

__author__ = "probkit developers"
__copyright__ = "Copyright (c) 2025 probkit developers"
__license__ = "SPDX-License-Identifier: MIT"

from typing import Protocol, overload, runtime_checkable

from probkit.types import BoolArray, Interval1D, Number, NumericArray


@runtime_checkable
class Support(Protocol):
    @overload
    def contains(self, x: Number) -> bool: ...
    @overload
    def contains(self, x: NumericArray) -> BoolArray: ...


class ContinuousSupport(Interval1D, Support):
    """Support of a univariate continuous distribution (an interval)."""

    @classmethod
    def closed(cls, left: float, right: float) -> ContinuousSupport:
        """Build the closed interval ``[left, right]``."""
        return cls(left=left, right=right, left_closed=True, right_closed=True)


__all__ = [
    "Support",
    "ContinuousSupport",
]
