# Nonparametric bootstrap resampling and jackknife (leave-one-out) evaluation.

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import List, Optional

import numpy as np
from tqdm import tqdm

from ..utils.determinism import RandomSource, describe_source, make_rng, spawn_streams
from ..utils.validation import (
    validate_bootstraps,
    validate_chunk_size,
    validate_n_jobs,
    validate_sample,
)
from .statistics import StatisticFunction

logger = logging.getLogger(__name__)

# Target number of drawn indices held in memory per chunk
CHUNK_ELEMENTS = 1_000_000


class ResamplingCancelled(RuntimeError):
    """Raised when resampling is stopped through its cancel event."""


@dataclass(frozen=True)
class BootstrapDistribution:
    """Bootstrap replicates of a statistic plus its value on the original sample."""
    estimate: float
    values: np.ndarray
    n_observations: int

    @property
    def size(self) -> int:
        return int(self.values.size)

    @property
    def bias(self) -> float:
        """Bootstrap estimate of bias: mean of replicates minus the estimate."""
        return float(np.mean(self.values) - self.estimate)

    @property
    def std_error(self) -> float:
        """Bootstrap standard error (sample standard deviation of replicates)."""
        if self.values.size < 2:
            return float("nan")
        return float(np.std(self.values, ddof=1))


def default_chunk_size(n_observations: int, bootstraps: int) -> int:
    """Replicates per chunk so one chunk draws about CHUNK_ELEMENTS indices."""
    return max(1, min(bootstraps, CHUNK_ELEMENTS // max(n_observations, 1)))


def _chunk_sizes(bootstraps: int, chunk_size: int) -> List[int]:
    full, rest = divmod(bootstraps, chunk_size)
    return [chunk_size] * full + ([rest] if rest else [])


def bootstrap_distribution(
    observations,
    statistic: StatisticFunction,
    bootstraps: int = 100_000,
    rng: RandomSource = None,
    *,
    n_jobs: int = 1,
    chunk_size: Optional[int] = None,
    show_progress: bool = False,
    cancel_event: Optional[threading.Event] = None,
) -> BootstrapDistribution:
    """
    Draw `bootstraps` resamples with replacement and evaluate `statistic` on each.

    Replicates are produced in fixed-size chunks. Every chunk gets its own
    child generator spawned from `rng` before any work starts, so a seeded
    call returns the same replicates for any `n_jobs`.

    Args:
        observations: 1-D sample of real values
        statistic: Statistic evaluated on each resample
        bootstraps: Number of bootstrap replicates (B)
        rng: numpy Generator, integer seed, or None for fresh entropy
        n_jobs: Worker threads evaluating chunks
        chunk_size: Replicates per chunk (default: derived from sample size)
        show_progress: Show a tqdm progress bar over chunks
        cancel_event: Checked between chunks; when set, raise ResamplingCancelled

    Returns:
        BootstrapDistribution with exactly `bootstraps` values
    """
    sample = validate_sample(observations, min_size=1)
    bootstraps = validate_bootstraps(bootstraps)
    n_jobs = validate_n_jobs(n_jobs)
    chunk_size = validate_chunk_size(chunk_size)

    n = sample.size
    estimate = statistic(sample)
    sizes = _chunk_sizes(bootstraps, chunk_size or default_chunk_size(n, bootstraps))
    offsets = np.concatenate([[0], np.cumsum(sizes)])
    streams = spawn_streams(make_rng(rng), len(sizes))
    values = np.empty(bootstraps, dtype=float)

    logger.debug(
        "Resampling %s: n=%d, B=%d, chunks=%d, n_jobs=%d, rng=%s",
        statistic.name, n, bootstraps, len(sizes), n_jobs, describe_source(rng),
    )
    start_time = time.time()

    def run_chunk(i: int) -> np.ndarray:
        if cancel_event is not None and cancel_event.is_set():
            raise ResamplingCancelled(f"Resampling cancelled before chunk {i + 1}/{len(sizes)}")
        indices = streams[i].integers(0, n, size=(sizes[i], n))
        return statistic.batch(sample[indices])

    if n_jobs == 1 or len(sizes) == 1:
        for i in tqdm(range(len(sizes)), disable=not show_progress, desc="Bootstrapping"):
            values[offsets[i]:offsets[i + 1]] = run_chunk(i)
    else:
        with ThreadPoolExecutor(max_workers=n_jobs) as executor:
            future_to_chunk = {executor.submit(run_chunk, i): i for i in range(len(sizes))}
            try:
                for future in tqdm(
                    as_completed(future_to_chunk),
                    total=len(sizes),
                    disable=not show_progress,
                    desc="Bootstrapping",
                ):
                    i = future_to_chunk[future]
                    values[offsets[i]:offsets[i + 1]] = future.result()
            except BaseException:
                for future in future_to_chunk:
                    future.cancel()
                raise

    logger.debug("Resampling finished in %.3fs", time.time() - start_time)
    values.setflags(write=False)
    return BootstrapDistribution(estimate=estimate, values=values, n_observations=n)


def jackknife_values(observations, statistic: StatisticFunction) -> np.ndarray:
    """Statistic of the sample with each observation left out in turn.

    Element i of the result is the statistic computed on the sample without
    observation i, so the result has exactly one value per observation.
    """
    sample = validate_sample(observations, min_size=2)
    values = np.asarray(statistic.leave_one_out(sample), dtype=float)
    if values.shape != sample.shape:
        raise ValueError(
            f"{statistic.name} leave-one-out returned shape {values.shape}, expected {sample.shape}"
        )
    return values
