"""
probkit
=======

Univariate probability distributions with a uniform evaluation contract:
densities, distribution functions, quantiles, parameter gradients,
characteristic functions, moments, sampling and confidence regions, backed
by a characteristic computation graph and a register of parametric families
(Normal, ContinuousUniform, TruncatedNormal).
"""

__author__ = "probkit developers"
__copyright__ = "Copyright (c) 2025 probkit developers"
__license__ = "SPDX-License-Identifier: MIT"

from importlib.metadata import version

from .distributions import *
from .distributions import __all__ as _distr_all
from .errors import *
from .errors import __all__ as _errors_all
from .families import *
from .families import __all__ as _family_all
from .types import *
from .types import __all__ as _types_all

__version__ = version("probkit")
__all__ = [
    "__version__",
    *_distr_all,
    *_errors_all,
    *_family_all,
    *_types_all,
]

del _distr_all
del _errors_all
del _family_all
del _types_all
