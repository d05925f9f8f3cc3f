"""Confidence interval construction from a bootstrap distribution.

Four interval kinds are supported:

- percentile: empirical quantiles of the replicates at alpha and 1 - alpha
- basic: percentile bounds reflected around the observed estimate
- normal: estimate +/- z * bootstrap standard error
- bca: bias-corrected and accelerated percentiles (Efron 1987), with the
  acceleration taken from jackknife values

where alpha = (1 - level) / 2. Empirical quantiles use linear interpolation
(type 7), the same definition as the quantile statistic.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

import numpy as np
from scipy.stats import norm  # type: ignore

from ..utils.validation import InvalidInputError, validate_probability

# Returned in place of both bounds when the interval method is not recognised
UNRECOGNIZED_METHOD = "Bootstrap type NA"


class ComputationError(ArithmeticError):
    """Raised when an interval cannot be computed from a degenerate distribution."""

    def __init__(self, message: str, method: Optional[str] = None):
        super().__init__(message)
        self.method = method


class IntervalMethod(str, Enum):
    PERCENTILE = "percentile"
    BASIC = "basic"
    NORMAL = "normal"
    BCA = "bca"

    @classmethod
    def parse(cls, value) -> Optional["IntervalMethod"]:
        """Map an exact method name (or alias) to an IntervalMethod, None if unknown.

        Matching is case-sensitive: "BCA" or " bca" are not recognised.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        return _ALIASES.get(value)


_ALIASES = {
    "percentile": IntervalMethod.PERCENTILE,
    "perc": IntervalMethod.PERCENTILE,
    "basic": IntervalMethod.BASIC,
    "normal": IntervalMethod.NORMAL,
    "norm": IntervalMethod.NORMAL,
    "bca": IntervalMethod.BCA,
}


@dataclass(frozen=True)
class BcaConstants:
    """Bias-correction (z0) and acceleration (a) of a BCa interval."""
    z0: float
    acceleration: float


def _alpha(level: float) -> float:
    return (1.0 - validate_probability(level, "conf")) / 2.0


def _replicates(distribution) -> np.ndarray:
    values = np.asarray(distribution, dtype=float)
    if values.ndim != 1 or values.size == 0:
        raise InvalidInputError("Bootstrap distribution must be a non-empty 1-D array", parameter="distribution")
    return values


def _checked(low: float, high: float, method: IntervalMethod) -> Tuple[float, float]:
    if not (np.isfinite(low) and np.isfinite(high)):
        raise ComputationError(f"{method.value} interval is not finite: ({low}, {high})", method=method.value)
    return float(low), float(high)


def percentile_interval(distribution, level: float) -> Tuple[float, float]:
    alpha = _alpha(level)
    low, high = np.quantile(_replicates(distribution), [alpha, 1.0 - alpha])
    return _checked(low, high, IntervalMethod.PERCENTILE)


def basic_interval(distribution, estimate: float, level: float) -> Tuple[float, float]:
    perc_low, perc_high = percentile_interval(distribution, level)
    return _checked(2.0 * estimate - perc_high, 2.0 * estimate - perc_low, IntervalMethod.BASIC)


def normal_interval(distribution, estimate: float, level: float) -> Tuple[float, float]:
    alpha = _alpha(level)
    values = _replicates(distribution)
    if values.size < 2:
        raise ComputationError("normal interval needs at least 2 bootstrap replicates", method="normal")
    sd = float(np.std(values, ddof=1))
    if not np.isfinite(sd) or sd <= 0.0:
        raise ComputationError(
            f"normal interval undefined: bootstrap standard deviation is {sd}", method="normal"
        )
    margin = float(norm.ppf(1.0 - alpha)) * sd
    return _checked(estimate - margin, estimate + margin, IntervalMethod.NORMAL)


def bca_constants(distribution, estimate: float, jackknife) -> BcaConstants:
    """Compute the BCa bias-correction and acceleration constants.

    z0 = Phi^-1(#{replicates < estimate} / B)
    a  = sum((J_bar - J_i)^3) / (6 * sum((J_bar - J_i)^2)^1.5)

    Raises:
        ComputationError: If z0 is infinite (no or all replicates below the
            estimate) or the jackknife values are all equal
    """
    values = _replicates(distribution)
    below = int(np.count_nonzero(values < estimate))
    if below == 0 or below == values.size:
        raise ComputationError(
            f"BCa bias correction is infinite: {below} of {values.size} replicates below the estimate",
            method="bca",
        )
    z0 = float(norm.ppf(below / values.size))

    jack = np.asarray(jackknife, dtype=float)
    if jack.ndim != 1 or jack.size < 2:
        raise InvalidInputError("BCa needs at least 2 jackknife values", parameter="jackknife")
    deviations = jack.mean() - jack
    denominator = 6.0 * np.sum(deviations ** 2) ** 1.5
    if not np.isfinite(denominator) or denominator == 0.0:
        raise ComputationError("BCa acceleration undefined: jackknife values have zero spread", method="bca")
    acceleration = float(np.sum(deviations ** 3) / denominator)
    return BcaConstants(z0=z0, acceleration=acceleration)


def bca_percentiles(constants: BcaConstants, level: float) -> Tuple[float, float]:
    """Adjusted percentile levels (alpha1, alpha2) of a BCa interval."""
    alpha = _alpha(level)
    z0, a = constants.z0, constants.acceleration
    adjusted = []
    for z in (norm.ppf(alpha), norm.ppf(1.0 - alpha)):
        shifted = z0 + z
        denominator = 1.0 - a * shifted
        if denominator == 0.0:
            raise ComputationError("BCa adjustment has a zero denominator", method="bca")
        adjusted.append(float(norm.cdf(z0 + shifted / denominator)))
    alpha1, alpha2 = adjusted
    if not (np.isfinite(alpha1) and np.isfinite(alpha2)):
        raise ComputationError(f"BCa percentiles are not finite: ({alpha1}, {alpha2})", method="bca")
    return alpha1, alpha2


def bca_interval(
    distribution,
    estimate: float,
    jackknife,
    level: float,
    constants: Optional[BcaConstants] = None,
) -> Tuple[float, float]:
    """BCa bounds; pass `constants` to reuse an earlier bca_constants result."""
    if constants is None:
        constants = bca_constants(distribution, estimate, jackknife)
    alpha1, alpha2 = bca_percentiles(constants, level)
    low, high = np.quantile(_replicates(distribution), [alpha1, alpha2])
    return _checked(low, high, IntervalMethod.BCA)


def build_interval(
    method: IntervalMethod,
    distribution,
    estimate: float,
    level: float,
    jackknife=None,
    constants: Optional[BcaConstants] = None,
) -> Tuple[float, float]:
    """Dispatch to the interval construction for `method`.

    `jackknife` is required for BCa and ignored otherwise. `constants`, when
    given, are the precomputed BCa constants for this distribution.
    """
    if method is IntervalMethod.PERCENTILE:
        return percentile_interval(distribution, level)
    elif method is IntervalMethod.BASIC:
        return basic_interval(distribution, estimate, level)
    elif method is IntervalMethod.NORMAL:
        return normal_interval(distribution, estimate, level)
    elif method is IntervalMethod.BCA:
        if jackknife is None:
            raise InvalidInputError("BCa interval requires jackknife values", parameter="jackknife")
        return bca_interval(distribution, estimate, jackknife, level, constants)
    raise TypeError(f"Expected an IntervalMethod, got {method!r}")
