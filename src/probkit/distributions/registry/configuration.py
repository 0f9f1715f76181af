"""
Default configuration and cached accessor for the global characteristic registry.

- The registry constructor does not configure anything.
- ``characteristic_registry()`` (``@lru_cache``) builds the singleton and
  seeds it with the univariate continuous nodes and edges, once, under a lock.
"""

from __future__ import annotations

__author__ = "probkit developers"
__copyright__ = "Copyright (c) 2025 probkit developers"
__license__ = "SPDX-License-Identifier: MIT"

import threading
from functools import lru_cache
from typing import TYPE_CHECKING, Any

from probkit.distributions.computation import ComputationMethod
from probkit.distributions.fitters import (
    fit_cdf_to_pdf_1C,
    fit_cdf_to_ppf_1C,
    fit_cdf_to_sf_1C,
    fit_cf_to_log_cf_1C,
    fit_pdf_to_cdf_1C,
    fit_pdf_to_cf_1C,
    fit_pdf_to_ddf_1C,
    fit_pdf_to_entropy_1C,
    fit_pdf_to_kurtosis_1C,
    fit_pdf_to_logpdf_1C,
    fit_pdf_to_mean_1C,
    fit_pdf_to_skewness_1C,
    fit_pdf_to_var_1C,
    fit_ppf_to_cdf_1C,
    fit_ppf_to_isf_1C,
)
from probkit.distributions.registry.constraint import (
    GraphPrimitiveConstraint,
    NumericConstraint,
    SetConstraint,
)
from probkit.distributions.registry.graph import CharacteristicRegistry, RegistryView
from probkit.types import CharacteristicName as CN
from probkit.types import Kind

if TYPE_CHECKING:
    from collections.abc import Callable

    from probkit.distributions.computation import FittedComputationMethod
    from probkit.distributions.distribution import Distribution

_DEFINITIVE_EDGES: tuple[tuple[CN, CN, Callable[..., FittedComputationMethod[Any, Any]]], ...] = (
    (CN.PDF, CN.CDF, fit_pdf_to_cdf_1C),
    (CN.CDF, CN.PDF, fit_cdf_to_pdf_1C),
    (CN.CDF, CN.PPF, fit_cdf_to_ppf_1C),
    (CN.PPF, CN.CDF, fit_ppf_to_cdf_1C),
)

_DERIVED_EDGES: tuple[tuple[CN, CN, Callable[..., FittedComputationMethod[Any, Any]]], ...] = (
    (CN.PDF, CN.LOGPDF, fit_pdf_to_logpdf_1C),
    (CN.PDF, CN.DDF, fit_pdf_to_ddf_1C),
    (CN.CDF, CN.SF, fit_cdf_to_sf_1C),
    (CN.PPF, CN.ISF, fit_ppf_to_isf_1C),
    (CN.PDF, CN.MEAN, fit_pdf_to_mean_1C),
    (CN.PDF, CN.VAR, fit_pdf_to_var_1C),
    (CN.PDF, CN.SKEW, fit_pdf_to_skewness_1C),
    (CN.PDF, CN.KURT, fit_pdf_to_kurtosis_1C),
    (CN.PDF, CN.ENTROPY, fit_pdf_to_entropy_1C),
    (CN.PDF, CN.CF, fit_pdf_to_cf_1C),
    (CN.CF, CN.LOG_CF, fit_cf_to_log_cf_1C),
)

_configure_lock = threading.Lock()


def _configure(reg: CharacteristicRegistry) -> None:
    """Default probkit configuration of the characteristic registry."""
    continuous_dim1 = GraphPrimitiveConstraint(
        distribution_type_feature_constraints={
            "kind": SetConstraint(allowed=frozenset({Kind.CONTINUOUS})),
            "dimension": NumericConstraint(allowed=frozenset({1})),
        }
    )

    for name in (CN.PDF, CN.CDF, CN.PPF):
        reg.add_characteristic(
            name,
            is_definitive=True,
            presence_constraint=continuous_dim1,
            definitive_constraint=continuous_dim1,
        )
    for _, target, _ in _DERIVED_EDGES:
        reg.add_characteristic(target, is_definitive=False, presence_constraint=continuous_dim1)

    for source, target, fitter in _DEFINITIVE_EDGES + _DERIVED_EDGES:
        reg.add_computation(
            ComputationMethod[Any, Any](target=target, sources=[source], fitter=fitter),
            constraint=continuous_dim1,
        )


@lru_cache(maxsize=1)
def characteristic_registry() -> CharacteristicRegistry:
    """
    Return the cached, configured characteristic registry.

    Notes
    -----
    Configuration runs once per process. An unconfigured registry can be
    obtained after :func:`reset_characteristic_registry` by instantiating
    :class:`CharacteristicRegistry` directly.
    """
    # concurrent first calls may both miss the cache
    with _configure_lock:
        reg = CharacteristicRegistry()
        if not reg._defaults_configured:
            _configure(reg)
            reg._defaults_configured = True
    return reg


def reset_characteristic_registry() -> None:
    """Reset the cached characteristic registry."""
    with _configure_lock:
        characteristic_registry.cache_clear()
        CharacteristicRegistry._reset()


def registry_view(distr: Distribution) -> RegistryView:
    """Shortcut for ``characteristic_registry().view(distr)``."""
    return characteristic_registry().view(distr)
