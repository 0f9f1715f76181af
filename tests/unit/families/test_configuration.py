"""
Tests for Distribution Families Configuration

This module tests the configuration and registration of distribution families
in the global ParametricFamilyRegister.
"""

__author__ = "probkit developers"
__copyright__ = "Copyright (c) 2025 probkit developers"
__license__ = "SPDX-License-Identifier: MIT"

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from probkit.errors import InvalidArgumentError
from probkit.families.configuration import (
    configure_families_register,
    make_distribution,
    reset_families_register,
)
from probkit.families.distribution import ParametricFamilyDistribution
from probkit.families.registry import ParametricFamilyRegister
from probkit.types import FamilyName


class TestConfiguration:
    """Test suite for configuration functionality."""

    def setup_method(self):
        """Setup before each test method."""
        self.registry = configure_families_register()

    def test_configure_families_register_returns_registry(self):
        assert isinstance(self.registry, ParametricFamilyRegister)

    def test_configure_families_register_is_singleton(self):
        registry2 = configure_families_register()
        assert self.registry is registry2

    def test_families_registered(self):
        """Test that all built-in families are registered."""
        assert ParametricFamilyRegister.names() == sorted(
            [FamilyName.NORMAL, FamilyName.CONTINUOUS_UNIFORM, FamilyName.TRUNCATED_NORMAL]
        )
        for name in FamilyName:
            assert ParametricFamilyRegister.contains(name)

    def test_reset_families_register(self):
        """Test that reset_families_register clears the cache."""
        registry1 = configure_families_register()
        reset_families_register()
        registry2 = configure_families_register()

        assert registry1 is not registry2
        assert ParametricFamilyRegister.contains(FamilyName.NORMAL)

    def test_concurrent_first_configuration(self):
        """Concurrent first calls after a reset register every family once."""
        reset_families_register()
        barrier = threading.Barrier(8)

        def configure():
            barrier.wait()
            return configure_families_register()

        with ThreadPoolExecutor(max_workers=8) as pool:
            futures = [pool.submit(configure) for _ in range(8)]
            registries = [future.result() for future in futures]

        assert all(registry is registries[0] for registry in registries)
        assert len(ParametricFamilyRegister.names()) == len(FamilyName)

    def test_repeated_configuration_does_not_reregister(self):
        from probkit.families.builtins import configure_normal_family

        family = self.registry.get(FamilyName.NORMAL)
        configure_normal_family()
        assert self.registry.get(FamilyName.NORMAL) is family

    def test_registry_singleton_pattern(self):
        registry1 = ParametricFamilyRegister()
        registry2 = ParametricFamilyRegister()
        assert registry1 is registry2

    def test_registry_get_family_method(self):
        normal_family = self.registry.get(FamilyName.NORMAL)
        assert normal_family.name == FamilyName.NORMAL

        with pytest.raises(InvalidArgumentError):
            self.registry.get("NonExistentFamily")

    def test_duplicate_registration_is_rejected(self):
        with pytest.raises(InvalidArgumentError):
            ParametricFamilyRegister.register(self.registry.get(FamilyName.NORMAL))

    @pytest.mark.parametrize(
        "family_name, parametrization_name, expected",
        [
            (FamilyName.NORMAL, ["meanStd", "meanPrec", "exponential"], "meanStd"),
            (FamilyName.CONTINUOUS_UNIFORM, ["standard", "meanWidth", "minRange"], "standard"),
            (FamilyName.TRUNCATED_NORMAL, ["meanStdBounds", "standardBounds"], "meanStdBounds"),
        ],
    )
    def test_parametrizations_of_builtin_families(
        self, family_name, parametrization_name, expected
    ):
        family = self.registry.get(family_name)
        assert family.parametrization_names == parametrization_name
        assert family.base_parametrization_name == expected
        assert set(family.parametrizations) == set(parametrization_name)


class TestMakeDistribution:
    def test_make_distribution_in_base_parametrization(self):
        distr = make_distribution(FamilyName.TRUNCATED_NORMAL, mu=0.5, sigma=3.0, a=-2.0, b=2.0)
        assert isinstance(distr, ParametricFamilyDistribution)
        assert repr(distr) == "TruncatedNormal(mu=0.5, sigma=3.0, a=-2.0, b=2.0)"

    def test_make_distribution_in_other_parametrization(self):
        distr = make_distribution(FamilyName.NORMAL, "meanPrec", mu=1.0, tau=4.0)
        assert distr.parametrization_name == "meanPrec"
        assert distr.base_parameters.parameters == {"mu": 1.0, "sigma": 0.5}

    def test_make_distribution_unknown_family(self):
        with pytest.raises(InvalidArgumentError):
            make_distribution("Cauchy", x0=0.0, gamma=1.0)
