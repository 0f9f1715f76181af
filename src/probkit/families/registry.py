"""
Global register of parametric families (singleton).
"""

from __future__ import annotations

__author__ = "probkit developers"
__copyright__ = "Copyright (c) 2025 probkit developers"
__license__ = "SPDX-License-Identifier: MIT"

from typing import TYPE_CHECKING

from probkit.errors import InvalidArgumentError

if TYPE_CHECKING:
    from typing import ClassVar

    from probkit.families.parametric_family import ParametricFamily


class ParametricFamilyRegister:
    """
    Singleton register of parametric families, keyed by family name.
    """

    _instance: ClassVar[ParametricFamilyRegister | None] = None
    _registered_families: dict[str, ParametricFamily]

    def __new__(cls) -> ParametricFamilyRegister:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._registered_families = {}
        return cls._instance

    @classmethod
    def get(cls, name: str) -> ParametricFamily:
        """
        Family registered under ``name``.

        Raises
        ------
        InvalidArgumentError
            If no family with that name is registered.
        """
        self = cls()
        try:
            return self._registered_families[name]
        except KeyError as exc:
            raise InvalidArgumentError(f"No family {name!r} found in register") from exc

    @classmethod
    def contains(cls, name: str) -> bool:
        return name in cls()._registered_families

    @classmethod
    def names(cls) -> list[str]:
        return sorted(cls()._registered_families)

    @classmethod
    def register(cls, family: ParametricFamily) -> None:
        """
        Register ``family`` under its name.

        Raises
        ------
        InvalidArgumentError
            If a family with the same name is already registered.
        """
        self = cls()
        if family.name in self._registered_families:
            raise InvalidArgumentError(f"Family {family.name!r} is already registered")
        self._registered_families[family.name] = family

    @classmethod
    def _reset(cls) -> None:
        """Drop the singleton (test helper)."""
        cls._instance = None
