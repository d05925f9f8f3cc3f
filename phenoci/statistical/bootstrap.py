# Bootstrap confidence intervals for a sample quantile or mean.

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Dict, Iterable, NamedTuple, Optional, Tuple, Union

import numpy as np

from ..config import BootstrapConfig
from ..utils.determinism import RandomSource
from ..utils.validation import (
    validate_bootstraps,
    validate_chunk_size,
    validate_n_jobs,
    validate_probability,
    validate_sample,
)
from .intervals import (
    UNRECOGNIZED_METHOD,
    BcaConstants,
    IntervalMethod,
    bca_constants,
    build_interval,
)
from .resampling import bootstrap_distribution, jackknife_values
from .statistics import MeanStatistic, QuantileStatistic, StatisticFunction

logger = logging.getLogger(__name__)

Bound = Union[float, str]


class IntervalResult(NamedTuple):
    """Estimate and interval bounds; unpacks as (estimate, low, high).

    `low` and `high` are floats, or both equal UNRECOGNIZED_METHOD when the
    requested interval method is not one of the supported kinds.
    """
    estimate: float
    low: Bound
    high: Bound

    @property
    def recognized(self) -> bool:
        return self.low != UNRECOGNIZED_METHOD

    @property
    def width(self) -> float:
        if not self.recognized:
            return float("nan")
        return float(self.high) - float(self.low)

    def to_dict(self) -> Dict[str, Bound]:
        return {"estimate": self.estimate, "low_ci": self.low, "high_ci": self.high}


@dataclass
class BootstrapResult:
    """Results from bootstrap confidence interval calculation."""
    statistic: str
    estimate: float
    confidence_interval: Tuple[Bound, Bound]
    bootstrap_estimates: np.ndarray
    confidence_level: float
    n_iterations: int
    method: str
    runtime_seconds: float
    bias: float = float("nan")
    std_error: float = float("nan")
    bca: Optional[BcaConstants] = None

    def to_interval(self) -> IntervalResult:
        low, high = self.confidence_interval
        return IntervalResult(self.estimate, low, high)


def _validated(observations, config: BootstrapConfig) -> Tuple[np.ndarray, float]:
    sample = validate_sample(observations)
    level = validate_probability(config.conf, "conf")
    validate_bootstraps(config.bootstraps)
    validate_n_jobs(config.n_jobs)
    validate_chunk_size(config.chunk_size)
    return sample, level


def bootstrap_ci(
    observations,
    statistic: StatisticFunction,
    config: Optional[BootstrapConfig] = None,
    *,
    rng: RandomSource = None,
    cancel_event: Optional[threading.Event] = None,
) -> BootstrapResult:
    """
    Calculate a bootstrap confidence interval for `statistic`.

    All inputs are validated before any resampling. An unrecognised
    `config.method` is not an error: the result carries the observed
    estimate and UNRECOGNIZED_METHOD for both bounds, and no resampling is
    performed.

    Args:
        observations: Sample of real values (at least 2, all finite)
        statistic: QuantileStatistic, MeanStatistic or another StatisticFunction
        config: Replicate count, confidence level, method and execution settings
        rng: Random source; defaults to `config.seed`
        cancel_event: Stops resampling between chunks when set

    Returns:
        BootstrapResult with the interval and bootstrap metadata

    Raises:
        InvalidInputError: Invalid sample or parameters
        ComputationError: The interval is numerically undefined
        ResamplingCancelled: `cancel_event` was set during resampling
    """
    config = config or BootstrapConfig()
    sample, level = _validated(observations, config)
    method = IntervalMethod.parse(config.method)
    start_time = time.time()

    if method is None:
        logger.debug("Unrecognised interval method %r", config.method)
        return BootstrapResult(
            statistic=statistic.name,
            estimate=statistic(sample),
            confidence_interval=(UNRECOGNIZED_METHOD, UNRECOGNIZED_METHOD),
            bootstrap_estimates=np.empty(0),
            confidence_level=level,
            n_iterations=0,
            method=str(config.method),
            runtime_seconds=time.time() - start_time,
        )

    distribution = bootstrap_distribution(
        sample,
        statistic,
        config.bootstraps,
        rng if rng is not None else config.seed,
        n_jobs=config.n_jobs,
        chunk_size=config.chunk_size,
        show_progress=config.show_progress,
        cancel_event=cancel_event,
    )

    jackknife = None
    constants = None
    if method is IntervalMethod.BCA:
        jackknife = jackknife_values(sample, statistic)
        constants = bca_constants(distribution.values, distribution.estimate, jackknife)

    low, high = build_interval(method, distribution.values, distribution.estimate, level, jackknife, constants)

    return BootstrapResult(
        statistic=statistic.name,
        estimate=distribution.estimate,
        confidence_interval=(low, high),
        bootstrap_estimates=distribution.values,
        confidence_level=level,
        n_iterations=distribution.size,
        method=method.value,
        runtime_seconds=time.time() - start_time,
        bias=distribution.bias,
        std_error=distribution.std_error,
        bca=constants,
    )


def bootstrap_intervals(
    observations,
    statistic: StatisticFunction,
    methods: Iterable[Union[str, IntervalMethod]] = tuple(IntervalMethod),
    config: Optional[BootstrapConfig] = None,
    *,
    rng: RandomSource = None,
    cancel_event: Optional[threading.Event] = None,
) -> Dict[str, IntervalResult]:
    """Several interval kinds from a single bootstrap distribution.

    `config.method` is ignored. Keys of the returned dict are the requested
    method names as given; unrecognised names map to sentinel intervals.
    The jackknife pass runs only when BCa is requested.
    """
    config = config or BootstrapConfig()
    sample, level = _validated(observations, config)
    requested = [(m.value if isinstance(m, IntervalMethod) else m, IntervalMethod.parse(m)) for m in methods]
    estimate = statistic(sample)

    distribution = None
    if any(parsed is not None for _, parsed in requested):
        distribution = bootstrap_distribution(
            sample,
            statistic,
            config.bootstraps,
            rng if rng is not None else config.seed,
            n_jobs=config.n_jobs,
            chunk_size=config.chunk_size,
            show_progress=config.show_progress,
            cancel_event=cancel_event,
        )
    jackknife = None
    constants = None
    if any(parsed is IntervalMethod.BCA for _, parsed in requested):
        jackknife = jackknife_values(sample, statistic)
        constants = bca_constants(distribution.values, estimate, jackknife)

    results: Dict[str, IntervalResult] = {}
    for name, parsed in requested:
        if parsed is None:
            results[name] = IntervalResult(estimate, UNRECOGNIZED_METHOD, UNRECOGNIZED_METHOD)
            continue
        low, high = build_interval(parsed, distribution.values, estimate, level, jackknife, constants)
        results[name] = IntervalResult(estimate, low, high)
    return results


def quantile_ci(
    observations,
    percentile: float,
    bootstraps: int = 100_000,
    conf: float = 0.95,
    method: Union[str, IntervalMethod] = "bca",
    *,
    rng: RandomSource = None,
    n_jobs: int = 1,
    show_progress: bool = False,
    cancel_event: Optional[threading.Event] = None,
) -> IntervalResult:
    """Bootstrap CI around the `percentile` quantile of the observations.

    For example, the day of year by which the first 10% of a species'
    sightings occur is ``quantile_ci(doy, percentile=0.1)``.
    """
    statistic = QuantileStatistic(percentile)
    config = BootstrapConfig(
        bootstraps=bootstraps, conf=conf, method=method, n_jobs=n_jobs, show_progress=show_progress
    )
    return bootstrap_ci(observations, statistic, config, rng=rng, cancel_event=cancel_event).to_interval()


def mean_ci(
    observations,
    bootstraps: int = 100_000,
    conf: float = 0.95,
    method: Union[str, IntervalMethod] = "bca",
    *,
    rng: RandomSource = None,
    n_jobs: int = 1,
    show_progress: bool = False,
    cancel_event: Optional[threading.Event] = None,
) -> IntervalResult:
    """Bootstrap CI around the mean of the observations."""
    config = BootstrapConfig(
        bootstraps=bootstraps, conf=conf, method=method, n_jobs=n_jobs, show_progress=show_progress
    )
    return bootstrap_ci(observations, MeanStatistic(), config, rng=rng, cancel_event=cancel_event).to_interval()
