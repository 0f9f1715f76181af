from __future__ import annotations

__author__ = "probkit developers"
__copyright__ = "Copyright (c) 2025 probkit developers"
__license__ = "SPDX-License-Identifier: MIT"

from probkit.types import CharacteristicName
from tests.unit.families.test_basic import TestBaseFamily


class TestAnalyticalPlan(TestBaseFamily):
    def test_family_analytical_plan_picks_provider_correctly(self) -> None:
        fam = self.make_default_family()

        plan = fam._analytical_plan
        assert set(plan.keys()) == {"base", "alt"}

        # 'alt' provides its own CDF and falls back to base for the rest
        assert plan["alt"][CharacteristicName.CDF] == "alt"
        assert plan["alt"][CharacteristicName.PDF] == "base"
        assert plan["alt"][CharacteristicName.PPF] == "base"

        assert plan["base"][CharacteristicName.PDF] == "base"
        assert plan["base"][CharacteristicName.CDF] == "base"
        assert plan["base"][CharacteristicName.PPF] == "base"

    def test_bare_callable_is_a_base_form(self) -> None:
        fam = self.make_default_family(distr_characteristics={self.PDF: lambda p, x: x})

        assert fam.distr_characteristics[self.PDF].keys() == {"base"}
        assert fam._analytical_plan["alt"] == {self.PDF: "base"}

    def test_characteristic_without_base_form_is_skipped_elsewhere(self) -> None:
        fam = self.make_default_family(distr_characteristics={self.CDF: {"alt": lambda p, x: x}})

        assert fam._analytical_plan["base"] == {}
        assert fam._analytical_plan["alt"] == {self.CDF: "alt"}
