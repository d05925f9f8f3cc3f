"""Statistic functions evaluated on a sample and on its bootstrap resamples."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional

import numpy as np

from ..utils.validation import InvalidInputError, validate_probability

# Upper bound on elements materialised at once by the generic leave-one-out path
_LOO_BLOCK_ELEMENTS = 1_000_000


@dataclass(frozen=True)
class StatisticFunction:
    """A scalar statistic of a 1-D numeric sample.

    Subclasses implement `__call__` for a single sequence and `batch` for a
    2-D array whose rows are resamples. `leave_one_out` has a generic
    block-wise implementation built on `batch`; subclasses may override it
    with an exact closed form.
    """

    name: ClassVar[str] = "statistic"

    def __call__(self, values: np.ndarray) -> float:
        raise NotImplementedError

    def batch(self, resamples: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def leave_one_out(self, sample: np.ndarray) -> np.ndarray:
        n = len(sample)
        if n < 2:
            raise InvalidInputError(
                f"Leave-one-out needs at least 2 observations, got {n}",
                parameter="observations",
            )
        out = np.empty(n, dtype=float)
        block = max(1, _LOO_BLOCK_ELEMENTS // n)
        for start in range(0, n, block):
            rows = np.arange(start, min(start + block, n))
            keep = np.ones((len(rows), n), dtype=bool)
            keep[np.arange(len(rows)), rows] = False
            subsamples = np.broadcast_to(sample, keep.shape)[keep].reshape(len(rows), n - 1)
            out[rows] = self.batch(subsamples)
        return out


@dataclass(frozen=True)
class QuantileStatistic(StatisticFunction):
    """Linear-interpolation (type 7) sample quantile at `percentile`."""

    percentile: float = 0.5
    name: ClassVar[str] = "quantile"

    def __post_init__(self) -> None:
        object.__setattr__(self, "percentile", validate_probability(self.percentile, "percentile"))

    def __call__(self, values: np.ndarray) -> float:
        return float(np.quantile(values, self.percentile))

    def batch(self, resamples: np.ndarray) -> np.ndarray:
        return np.quantile(resamples, self.percentile, axis=1)

    def leave_one_out(self, sample: np.ndarray) -> np.ndarray:
        """Quantile of the sample with each observation removed in turn.

        Removing the observation of rank k shifts every order statistic at or
        above k down by one place, so each leave-one-out quantile is an
        interpolation between two entries of the full sorted sample. This
        replaces n sorts of n-1 values with a single sort.
        """
        n = len(sample)
        if n < 2:
            raise InvalidInputError(
                f"Leave-one-out needs at least 2 observations, got {n}",
                parameter="observations",
            )
        order = np.argsort(sample, kind="stable")
        ordered = sample[order]
        ranks = np.empty(n, dtype=np.intp)
        ranks[order] = np.arange(n)

        position = self.percentile * (n - 2)
        lo = int(np.floor(position))
        hi = min(lo + 1, n - 2)
        frac = position - lo

        # j-th order statistic of the sample without the observation of rank r
        lo_values = np.where(lo < ranks, ordered[lo], ordered[lo + 1])
        hi_values = np.where(hi < ranks, ordered[hi], ordered[hi + 1])
        return lo_values + frac * (hi_values - lo_values)


@dataclass(frozen=True)
class MeanStatistic(StatisticFunction):
    """Arithmetic mean."""

    name: ClassVar[str] = "mean"

    def __call__(self, values: np.ndarray) -> float:
        return float(np.mean(values))

    def batch(self, resamples: np.ndarray) -> np.ndarray:
        return resamples.mean(axis=1)

    def leave_one_out(self, sample: np.ndarray) -> np.ndarray:
        n = len(sample)
        if n < 2:
            raise InvalidInputError(
                f"Leave-one-out needs at least 2 observations, got {n}",
                parameter="observations",
            )
        return (sample.sum() - sample) / (n - 1)


def make_statistic(kind: str, percentile: Optional[float] = None) -> StatisticFunction:
    """Build a statistic from its selector name ("quantile" or "mean")."""
    kind = kind.strip().lower()
    if kind == "quantile":
        if percentile is None:
            raise InvalidInputError("percentile is required for a quantile statistic", parameter="percentile")
        return QuantileStatistic(percentile)
    if kind == "mean":
        if percentile is not None:
            raise InvalidInputError("percentile is not used by the mean statistic", parameter="percentile")
        return MeanStatistic()
    raise InvalidInputError(f"Unknown statistic: {kind!r}", parameter="statistic")
