from __future__ import annotations

__author__ = "probkit developers"
__copyright__ = "Copyright (c) 2025 probkit developers"
__license__ = "SPDX-License-Identifier: MIT"

import dataclasses
from typing import Any

import pytest

from probkit.errors import InvalidArgumentError
from probkit.families import (
    ParametricFamily,
    Parametrization,
    ParametrizationConstraint,
    constraint,
    parametrization,
)
from probkit.types import UnivariateContinuous
from tests.unit.families.test_basic import TestBaseFamily
from tests.utils.mocks import MockSamplingStrategy


class TestParametrizationAPI(TestBaseFamily):
    def test_constraint_is_a_simple_holder(self) -> None:
        def is_positive(obj: object) -> bool:
            return getattr(obj, "value", 0) > 0

        c = ParametrizationConstraint(description="Value must be positive", check=is_positive)
        assert c.description == "Value must be positive"
        assert c.check is is_positive

    def test_constraint_decorator_marks_function(self) -> None:
        @constraint("Value must be positive")
        def check_positive(self: Any) -> bool:
            return getattr(self, "value", 0) > 0

        assert getattr(check_positive, "__is_constraint", False) is True
        assert getattr(check_positive, "__constraint_description", None) == "Value must be positive"
        assert check_positive.__name__ == "check_positive"

    def test_free_function_parametrization_decorator(self) -> None:
        family = ParametricFamily(
            name="FreeDecoratorFamily",
            distr_type=UnivariateContinuous,
            distr_parametrizations=["kind"],
            distr_characteristics={},
            sampling_strategy=MockSamplingStrategy(),
        )

        @parametrization(family=family, name="kind")
        class Kind(Parametrization):
            value: float

        obj = Kind(value=1.25)  # type: ignore[call-arg]
        assert obj.name == "kind"
        assert obj.parameters == {"value": 1.25}
        assert getattr(Kind, "__family__", None) is family
        assert getattr(Kind, "__param_name__", None) == "kind"
        assert dataclasses.is_dataclass(Kind)
        assert family.base is Kind

    def test_parametrizations_are_frozen(self) -> None:
        family = self.make_default_family()
        params = family.parametrizations["base"](value=1.0)  # type: ignore[call-arg]
        with pytest.raises(dataclasses.FrozenInstanceError):
            params.value = 2.0  # type: ignore[misc]

    def test_undeclared_parametrization_is_rejected(self) -> None:
        family = self.make_default_family()
        with pytest.raises(InvalidArgumentError):

            @family.parametrization(name="unknown")
            class Unknown(Parametrization):
                value: float

    def test_duplicate_parametrization_is_rejected(self) -> None:
        family = self.make_default_family()
        with pytest.raises(InvalidArgumentError):

            @family.parametrization(name="base")
            class Again(Parametrization):
                value: float

    def test_static_constraint_is_rejected(self) -> None:
        family = ParametricFamily(
            name="StaticConstraintFamily",
            distr_type=UnivariateContinuous,
            distr_parametrizations=["base"],
            distr_characteristics={},
        )
        with pytest.raises(TypeError):

            @family.parametrization(name="base")
            class Base(Parametrization):
                value: float

                @staticmethod
                @constraint(description="never")
                def check() -> bool:
                    return False

    def test_collected_constraints_and_validation(self) -> None:
        family = self.make_default_family()
        base_cls = family.parametrizations["base"]

        params = base_cls(value=1.0)  # type: ignore[call-arg]
        assert [c.description for c in params.constraints] == ["value >= 0"]
        params.validate()

        with pytest.raises(InvalidArgumentError, match='Constraint "value >= 0" does not hold'):
            base_cls(value=-1.0).validate()  # type: ignore[call-arg]

    def test_nan_parameter_is_rejected(self) -> None:
        family = self.make_default_family()
        with pytest.raises(InvalidArgumentError, match="NaN"):
            family.parametrizations["alt"](value=float("nan")).validate()  # type: ignore[call-arg]

    # ---------- Family-level conversion to base ----------

    def test_get_base_parameters_uses_family_logic(self) -> None:
        family = self.make_default_family()

        BaseCls = family.parametrizations["base"]
        AltCls = family.parametrizations["alt"]

        base_params = BaseCls(value=5.0)  # type: ignore[call-arg]
        assert family.to_base(base_params) is base_params

        alt_params = AltCls(value=3.0)  # type: ignore[call-arg]
        base_from_alt = family.to_base(alt_params)
        assert isinstance(base_from_alt, BaseCls)
        assert base_from_alt.value == 3.0  # type: ignore[attr-defined]

    def test_conversion_to_base_is_validated(self) -> None:
        family = self.make_default_family()
        with pytest.raises(InvalidArgumentError):
            family.to_base(family.parametrizations["alt"](value=-3.0))  # type: ignore[call-arg]

    def test_unknown_parametrization_lookup(self) -> None:
        family = self.make_default_family()
        with pytest.raises(InvalidArgumentError):
            family.get_parametrization("missing")
