from __future__ import annotations

__author__ = "probkit developers"
__copyright__ = "Copyright (c) 2025 probkit developers"
__license__ = "SPDX-License-Identifier: MIT"

import threading
import warnings
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from probkit.distributions.registry import (
    DEFAULT_COMPUTATION_KEY,
    CharacteristicRegistry,
    GraphInvariantError,
    GraphPrimitiveConstraint,
    NonNullConstraint,
    NumericConstraint,
    SetConstraint,
    characteristic_registry,
    reset_characteristic_registry,
)
from probkit.distributions.strategies import DefaultComputationStrategy
from probkit.errors import InvalidArgumentError
from probkit.types import CharacteristicName, Kind
from tests.unit.distributions.test_basic import DistributionTestBase
from tests.utils.mocks import StandaloneEuclideanUnivariateDistribution


class TestConstraints:
    def test_set_constraint(self) -> None:
        cons = SetConstraint(allowed=frozenset({Kind.CONTINUOUS}))
        assert cons.allows(Kind.CONTINUOUS)
        assert not cons.allows(Kind.DISCRETE)
        assert SetConstraint().allows("anything")

    @pytest.mark.parametrize(
        "cons, value, expected",
        [
            (NumericConstraint(allowed=frozenset({1})), 1, True),
            (NumericConstraint(allowed=frozenset({1})), 2, False),
            (NumericConstraint(ge=2), 1, False),
            (NumericConstraint(ge=2, le=4), 3, True),
            (NumericConstraint(le=4), 5, False),
            (NumericConstraint(), "not a number", False),
        ],
    )
    def test_numeric_constraint(self, cons: NumericConstraint, value, expected: bool) -> None:
        assert cons.allows(value) is expected

    def test_non_null_constraint(self) -> None:
        assert NonNullConstraint().allows(0)
        assert not NonNullConstraint().allows(None)

    def test_graph_primitive_constraint_checks_type_and_instance(self) -> None:
        distr = DistributionTestBase().make_uniform_pdf_distribution()

        assert GraphPrimitiveConstraint().allows(distr)
        on_type = GraphPrimitiveConstraint(
            distribution_type_feature_constraints={
                "kind": SetConstraint(allowed=frozenset({Kind.DISCRETE}))
            }
        )
        assert not on_type.allows(distr)
        on_instance = GraphPrimitiveConstraint(
            distribution_instance_feature_constraints={"support": NonNullConstraint()}
        )
        assert on_instance.allows(distr)
        no_support = StandaloneEuclideanUnivariateDistribution(kind=Kind.CONTINUOUS)
        assert not on_instance.allows(no_support)


class TestCharacteristicRegistry(DistributionTestBase):
    def setup_method(self) -> None:
        self.distr_example = self.make_logistic_cdf_distribution()

    def test_configuration_continuous_presence_and_connectivity(self) -> None:
        reg = characteristic_registry()
        distr = self.make_logistic_cdf_distribution()

        view = reg.view(distr)

        assert {CharacteristicName.CDF, CharacteristicName.PPF}.issubset(view.all_characteristics)
        assert {CharacteristicName.CDF, CharacteristicName.PPF}.issubset(
            view.definitive_characteristics
        )

        assert view.find_path(CharacteristicName.CDF, CharacteristicName.PPF) is not None
        assert view.find_path(CharacteristicName.PPF, CharacteristicName.CDF) is not None

        # CDF(PPF(q)) ~ q
        strategy = DefaultComputationStrategy[float, float](enable_caching=False)
        ppf = strategy.query_method(CharacteristicName.PPF, distr)
        cdf = strategy.query_method(CharacteristicName.CDF, distr)
        qs = np.linspace(1e-6, 1.0 - 1e-6, 7)
        errs = [abs(float(cdf(float(ppf(float(q))))) - q) for q in qs]
        assert max(errs) < 5e-3

    def test_configuration_excludes_multivariate_distributions(self) -> None:
        distr = StandaloneEuclideanUnivariateDistribution(kind=Kind.CONTINUOUS, dimension=2)
        view = characteristic_registry().view(distr)
        assert view.all_characteristics == frozenset()

    def test_edge_dims_constraint_filters_edges(self) -> None:
        reg = CharacteristicRegistry()
        reg.add_characteristic("A", is_definitive=True)
        reg.add_characteristic("B", is_definitive=True)

        cons_dim2 = GraphPrimitiveConstraint(
            distribution_type_feature_constraints={
                "dimension": NumericConstraint(allowed=frozenset({2}))
            }
        )
        reg.add_computation(
            self.make_fictitious_computation_method(target="B", sources=["A"]),
            constraint=cons_dim2,
        )
        reg.add_computation(
            self.make_fictitious_computation_method(target="A", sources=["B"]),
            constraint=cons_dim2,
        )

        with pytest.raises(GraphInvariantError):
            reg.view(self.distr_example)

    def test_add_computation_validation_and_duplicate_rules(self) -> None:
        reg = CharacteristicRegistry()
        reg.add_characteristic("a", is_definitive=True)
        reg.add_characteristic("b", is_definitive=True)

        # non-unary validation
        with pytest.raises(InvalidArgumentError):
            reg.add_computation(
                self.make_fictitious_computation_method(target="b", sources=["a", "b"])
            )

        # undeclared nodes
        with pytest.raises(ValueError):
            reg.add_computation(self.make_fictitious_computation_method(target="y", sources=["x"]))

        # duplicate declarations warn and keep the first rules
        with pytest.warns(UserWarning):
            reg.add_characteristic("a", is_definitive=True)
        with pytest.warns(UserWarning):
            reg.add_characteristic("b", is_definitive=False)
        assert reg.characteristics == frozenset({"a", "b"})

    def test_definitive_constraint_on_non_definitive_node_warns(self) -> None:
        reg = CharacteristicRegistry()
        with pytest.warns(UserWarning):
            reg.add_characteristic(
                "x", is_definitive=False, definitive_constraint=GraphPrimitiveConstraint()
            )

    def test_reset_cached_singleton(self) -> None:
        r1 = characteristic_registry()
        r2 = characteristic_registry()
        assert r1 is r2
        reset_characteristic_registry()
        r3 = characteristic_registry()
        assert r3 is not r1

    def test_concurrent_first_access_configures_once(self) -> None:
        reset_characteristic_registry()
        barrier = threading.Barrier(8)

        def access() -> CharacteristicRegistry:
            barrier.wait()
            return characteristic_registry()

        with warnings.catch_warnings():
            # a second configuration would redeclare nodes and warn
            warnings.simplefilter("error", UserWarning)
            with ThreadPoolExecutor(max_workers=8) as pool:
                futures = [pool.submit(access) for _ in range(8)]
                registries = [future.result() for future in futures]

        assert all(reg is registries[0] for reg in registries)
        assert len(registries[0].characteristics) == 14

    def test_registry_is_a_singleton(self) -> None:
        import copy

        reg = CharacteristicRegistry()
        assert CharacteristicRegistry() is reg
        assert copy.copy(reg) is reg
        assert copy.deepcopy(reg) is reg

    def test_invariant_violations(self) -> None:
        reg = CharacteristicRegistry()

        reg.add_characteristic("A", is_definitive=True)
        reg.add_characteristic("B", is_definitive=True)

        reg.add_computation(self.make_fictitious_computation_method(target="B", sources=["A"]))
        # Definitive are not strongly connected
        with pytest.raises(GraphInvariantError):
            reg.view(self.distr_example)

        # Everything is good
        reg.add_computation(self.make_fictitious_computation_method(target="A", sources=["B"]))
        reg.view(self.distr_example)

        # Indefinitive X is not reachable
        reg.add_characteristic("X", is_definitive=False)
        with pytest.raises(GraphInvariantError):
            reg.view(self.distr_example)

        # Everything is good
        reg.add_computation(self.make_fictitious_computation_method(target="X", sources=["A"]))
        reg.view(self.distr_example)

        # Indefinitive reaches definitive
        reg.add_computation(self.make_fictitious_computation_method(target="A", sources=["X"]))
        with pytest.raises(GraphInvariantError):
            reg.view(self.distr_example)

    def test_label_variants_and_picking(self) -> None:
        reg = CharacteristicRegistry()
        reg.add_characteristic("src", is_definitive=True)
        reg.add_characteristic("dst", is_definitive=True)

        default_method = self.make_fictitious_computation_method(target="dst", sources=["src"])
        alternative_method = self.make_fictitious_computation_method(target="dst", sources=["src"])
        # reverse edge to keep the definitive subgraph strongly connected
        reverse_method = self.make_fictitious_computation_method(target="src", sources=["dst"])

        reg.add_computation(default_method)
        reg.add_computation(alternative_method, label="fast")
        reg.add_computation(reverse_method)

        view = reg.view(self.make_logistic_cdf_distribution())

        variants = view.variants("src", "dst")
        assert set(variants.keys()) == {DEFAULT_COMPUTATION_KEY, "fast"}
        assert set(view.successors("src")) == {"dst"}

        path = view.find_path("src", "dst", prefer_label="fast")
        assert path == [alternative_method]

        path = view.find_path("src", "dst")
        assert path == [default_method]

        assert view.find_path("src", "src") == []

    def test_first_applicable_edge_wins_per_label(self) -> None:
        reg = CharacteristicRegistry()
        reg.add_characteristic("src", is_definitive=True)
        reg.add_characteristic("dst", is_definitive=True)

        discrete_only = GraphPrimitiveConstraint(
            distribution_type_feature_constraints={
                "kind": SetConstraint(allowed=frozenset({Kind.DISCRETE}))
            }
        )
        skipped = self.make_fictitious_computation_method(target="dst", sources=["src"])
        taken = self.make_fictitious_computation_method(target="dst", sources=["src"])
        reg.add_computation(skipped, constraint=discrete_only)
        reg.add_computation(taken)
        reg.add_computation(self.make_fictitious_computation_method(target="src", sources=["dst"]))

        view = reg.view(self.distr_example)
        assert view.find_path("src", "dst") == [taken]
