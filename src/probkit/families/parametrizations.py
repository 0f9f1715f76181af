"""
Parametrizations of distribution families.

A parametrization is a frozen dataclass of named float parameters whose
validity is described by ``@constraint`` predicates. Each family has one
base parametrization; every other parametrization knows how to convert
itself to the base one.
"""

from __future__ import annotations

__author__ = "probkit developers"
__copyright__ = "Copyright (c) 2025 probkit developers"
__license__ = "SPDX-License-Identifier: MIT"

from abc import ABC
from dataclasses import dataclass, fields, is_dataclass
from functools import wraps
from inspect import isfunction
from math import isfinite
from typing import TYPE_CHECKING, ParamSpec

from probkit.errors import InvalidArgumentError

if TYPE_CHECKING:
    from collections.abc import Callable
    from typing import Any, ClassVar

    from probkit.families.parametric_family import ParametricFamily
    from probkit.types import ParametrizationName


@dataclass(slots=True, frozen=True)
class ParametrizationConstraint:
    """
    Named predicate on parameter values.

    Parameters
    ----------
    description : str
        Human-readable statement of the constraint, e.g. ``"sigma > 0"``.
    check : Callable[[Any], bool]
        Predicate returning ``True`` when the constraint holds.
    """

    description: str
    check: Callable[[Any], bool]


class Parametrization(ABC):
    """
    Base class of family parametrizations.

    Subclasses are registered with :func:`parametrization`, which turns them
    into frozen slotted dataclasses and collects their constraints.
    """

    # set by the @parametrization decorator
    __family__: ClassVar[ParametricFamily]
    __param_name__: ClassVar[ParametrizationName]

    _constraints: ClassVar[list[ParametrizationConstraint]] = []

    @property
    def name(self) -> ParametrizationName:
        """Registered name of this parametrization."""
        return self.__class__.__param_name__

    @property
    def parameters(self) -> dict[str, float]:
        """Parameter values in declaration order."""
        return {f.name: getattr(self, f.name) for f in fields(self)}  # type: ignore[arg-type]

    @property
    def constraints(self) -> list[ParametrizationConstraint]:
        return self._constraints

    def validate(self) -> None:
        """
        Check every parameter and every constraint.

        Raises
        ------
        InvalidArgumentError
            If a parameter is NaN or a constraint does not hold.
        """
        for pname, value in self.parameters.items():
            if value != value:
                raise InvalidArgumentError(f"Parameter {pname!r} is NaN")
        for cons in self._constraints:
            if not cons.check(self):
                raise InvalidArgumentError(
                    f'Constraint "{cons.description}" does not hold for {self!r}'
                )

    def transform_to_base_parametrization(self) -> Parametrization:
        """
        Equivalent parameters in the base parametrization.

        The base parametrization returns itself; others override this.
        """
        return self


P = ParamSpec("P")


def constraint(description: str) -> Callable[[Callable[P, bool]], Callable[P, bool]]:
    """
    Mark an instance method as a parameter constraint.

    Parameters
    ----------
    description : str
        Human-readable statement reported when the constraint fails.
    """

    def decorator(func: Callable[P, bool]) -> Callable[P, bool]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> bool:
            return bool(func(*args, **kwargs))

        setattr(wrapper, "__is_constraint", True)
        setattr(wrapper, "__constraint_description", description)
        return wrapper

    return decorator


def finite(*values: float) -> bool:
    """Helper for constraints requiring finite parameters."""
    return all(isfinite(v) for v in values)


def _collect_constraints(cls: type[Parametrization]) -> list[ParametrizationConstraint]:
    collected: list[ParametrizationConstraint] = []
    for attr_name, attr in cls.__dict__.items():
        if isinstance(attr, (staticmethod, classmethod)):
            if getattr(attr.__func__, "__is_constraint", False):
                raise TypeError(f"@constraint {attr_name!r} must be an instance method")
            continue
        if isfunction(attr) and getattr(attr, "__is_constraint", False):
            description = getattr(attr, "__constraint_description", attr_name)
            collected.append(ParametrizationConstraint(description=description, check=attr))
    return collected


def parametrization(
    *,
    family: ParametricFamily,
    name: str,
) -> Callable[[type[Parametrization]], type[Parametrization]]:
    """
    Register a class as a parametrization of ``family`` under ``name``.

    The class is converted into a frozen slotted dataclass when it is not a
    dataclass already; methods marked with :func:`constraint` become its
    constraints.
    """

    def decorator(cls: type[Parametrization]) -> type[Parametrization]:
        if not is_dataclass(cls):
            cls = dataclass(slots=True, frozen=True)(cls)
        cls.__family__ = family
        cls.__param_name__ = name
        cls._constraints = _collect_constraints(cls)
        family.register_parametrization(name, cls)
        return cls

    return decorator
