from __future__ import annotations

__author__ = "probkit developers"
__copyright__ = "Copyright (c) 2025 probkit developers"
__license__ = "SPDX-License-Identifier: MIT"

import pytest

from probkit.families import ParametricFamilyRegister
from probkit.types import CharacteristicName, GenericCharacteristicName
from tests.unit.families.test_basic import TestBaseFamily


class TestAnalyticalComputationCache(TestBaseFamily):
    def _fallback_characteristics(self) -> dict[GenericCharacteristicName, dict[str, object]]:
        return {
            CharacteristicName.PDF: {"base": lambda params, x: params.value},
            CharacteristicName.CDF: {"base": lambda params, x: params.value},
        }

    def test_computations_are_built_once_per_instance(self) -> None:
        family = self.make_default_family(distr_characteristics=self._fallback_characteristics())
        ParametricFamilyRegister.register(family)

        distribution = family.distribution("alt", value=2.0)

        computations1 = distribution.analytical_computations
        assert distribution.analytical_computations is computations1

        # a new distribution gets its own bound computations
        changed = distribution.with_parameters(value=5.0)
        computations2 = changed.analytical_computations
        assert computations2 is not computations1
        assert distribution.analytical_computations is computations1

        rebased = family.distribution("base", value=7.0)
        computations3 = rebased.analytical_computations

        for mapping in (computations2, computations3):
            assert CharacteristicName.PDF in mapping and CharacteristicName.CDF in mapping
            assert callable(mapping[CharacteristicName.PDF])
            assert callable(mapping[CharacteristicName.CDF])

        assert computations1[CharacteristicName.PDF](1.23) == pytest.approx(2.0)
        # alt(value=5.0) falls back to base(value=5.0)
        assert computations2[CharacteristicName.PDF](1.23) == pytest.approx(5.0)
        assert computations2[CharacteristicName.CDF](0.5) == pytest.approx(5.0)
        assert computations3[CharacteristicName.PDF](42.0) == pytest.approx(7.0)
        assert computations3[CharacteristicName.CDF](0.0) == pytest.approx(7.0)

    def test_fallback_to_base_for_missing_form(self) -> None:
        family = self.make_default_family(distr_characteristics=self._fallback_characteristics())
        ParametricFamilyRegister.register(family)

        computations = family.distribution("alt", value=2.0).analytical_computations

        assert CharacteristicName.PDF in computations and CharacteristicName.CDF in computations
        assert computations[CharacteristicName.PDF](1.23) == pytest.approx(2.0)
        assert computations[CharacteristicName.CDF](0.5) == pytest.approx(2.0)

    def test_builtin_family_computations_are_cached(self) -> None:
        from probkit.families import make_distribution

        distribution = make_distribution("Normal", mu=1.0, sigma=2.0)
        assert distribution.analytical_computations is distribution.analytical_computations
