"""Input validation for bootstrap confidence interval calls."""

from __future__ import annotations

import logging
import numbers
from typing import Any

import numpy as np

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """Base exception for validation errors."""


class InvalidInputError(ValidationError, ValueError):
    """Raised when a sample or a call parameter is outside its valid domain."""

    def __init__(self, message: str, parameter: str | None = None):
        super().__init__(message)
        self.parameter = parameter


def validate_sample(observations: Any, min_size: int = 2) -> np.ndarray:
    """Convert observations to a read-only 1-D float array.

    Args:
        observations: Sequence (list, tuple, ndarray, Series...) of real values
        min_size: Minimum number of observations required

    Returns:
        A float64 copy of the observations with the write flag cleared

    Raises:
        InvalidInputError: If the sample is empty, too short, not 1-D,
            not numeric, or contains NaN/inf values
    """
    try:
        raw = np.asarray(observations)
    except (TypeError, ValueError) as e:
        raise InvalidInputError(
            f"Observations must be real numbers: {e}", parameter="observations"
        ) from e
    # Integers and floats only: no strings, bools, complex or object arrays
    if raw.dtype.kind not in "iuf":
        raise InvalidInputError(
            f"Observations must be real numbers, got dtype {raw.dtype}",
            parameter="observations",
        )
    sample = np.array(raw, dtype=float)

    if sample.ndim != 1:
        raise InvalidInputError(
            f"Observations must be one-dimensional, got shape {sample.shape}",
            parameter="observations",
        )
    if sample.size == 0:
        raise InvalidInputError("Observations are empty", parameter="observations")
    if sample.size < min_size:
        raise InvalidInputError(
            f"At least {min_size} observations required, got {sample.size}",
            parameter="observations",
        )

    bad = ~np.isfinite(sample)
    if bad.any():
        positions = np.flatnonzero(bad)[:5].tolist()
        raise InvalidInputError(
            f"Observations contain {int(bad.sum())} non-finite value(s) at positions {positions}",
            parameter="observations",
        )

    sample.setflags(write=False)
    return sample


def validate_probability(value: Any, name: str) -> float:
    """Check that value is a real number strictly inside (0, 1)."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidInputError(f"{name} must be a real number, got {value!r}", parameter=name)
    value = float(value)
    if not 0.0 < value < 1.0:
        raise InvalidInputError(f"{name} must be in (0, 1), got {value}", parameter=name)
    return value


def _validate_count(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidInputError(f"{name} must be an integer, got {value!r}", parameter=name)
    value = int(value)
    if value < 1:
        raise InvalidInputError(f"{name} must be >= 1, got {value}", parameter=name)
    return value


def validate_bootstraps(value: Any) -> int:
    """Check the number of bootstrap replicates."""
    return _validate_count(value, "bootstraps")


def validate_n_jobs(value: Any) -> int:
    return _validate_count(value, "n_jobs")


def validate_chunk_size(value: Any) -> int | None:
    if value is None:
        return None
    return _validate_count(value, "chunk_size")
