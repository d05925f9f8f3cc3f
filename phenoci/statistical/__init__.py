"""Bootstrap confidence intervals for phenoci."""

from .bootstrap import (
    BootstrapResult,
    IntervalResult,
    bootstrap_ci,
    bootstrap_intervals,
    mean_ci,
    quantile_ci,
)
from .intervals import (
    UNRECOGNIZED_METHOD,
    BcaConstants,
    ComputationError,
    IntervalMethod,
    basic_interval,
    bca_constants,
    bca_interval,
    bca_percentiles,
    build_interval,
    normal_interval,
    percentile_interval,
)
from .resampling import (
    BootstrapDistribution,
    ResamplingCancelled,
    bootstrap_distribution,
    jackknife_values,
)
from .statistics import MeanStatistic, QuantileStatistic, StatisticFunction, make_statistic

__all__ = [
    # Facade
    "quantile_ci",
    "mean_ci",
    "bootstrap_ci",
    "bootstrap_intervals",
    "IntervalResult",
    "BootstrapResult",
    # Intervals
    "IntervalMethod",
    "UNRECOGNIZED_METHOD",
    "ComputationError",
    "BcaConstants",
    "percentile_interval",
    "basic_interval",
    "normal_interval",
    "bca_interval",
    "bca_constants",
    "bca_percentiles",
    "build_interval",
    # Resampling
    "BootstrapDistribution",
    "ResamplingCancelled",
    "bootstrap_distribution",
    "jackknife_values",
    # Statistics
    "StatisticFunction",
    "QuantileStatistic",
    "MeanStatistic",
    "make_statistic",
]
