"""phenoci package.

Nonparametric bootstrap confidence intervals around a sample quantile or
mean, e.g. the day of year by which a given share of a species' sightings
have occurred.
"""

from .config import AppConfig, BootstrapConfig, default_app_config
from .statistical import (
    UNRECOGNIZED_METHOD,
    BootstrapResult,
    ComputationError,
    IntervalMethod,
    IntervalResult,
    ResamplingCancelled,
    bootstrap_ci,
    bootstrap_intervals,
    mean_ci,
    quantile_ci,
)
from .utils import InvalidInputError, make_rng, setup_logging

__all__ = [
    "__version__",
    "quantile_ci",
    "mean_ci",
    "bootstrap_ci",
    "bootstrap_intervals",
    "IntervalResult",
    "BootstrapResult",
    "IntervalMethod",
    "UNRECOGNIZED_METHOD",
    "InvalidInputError",
    "ComputationError",
    "ResamplingCancelled",
    "AppConfig",
    "BootstrapConfig",
    "default_app_config",
    "make_rng",
    "setup_logging",
]

__version__ = "0.1.0"
