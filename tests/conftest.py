from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


# ====================
# Sample Fixtures
# ====================

@pytest.fixture
def symmetric_sample() -> np.ndarray:
    """Evenly spaced integers 1..20: symmetric around 10.5."""
    return np.arange(1, 21, dtype=float)


@pytest.fixture
def doy_sample() -> np.ndarray:
    """Day-of-year sightings of a single species over one season."""
    rng = np.random.default_rng(2019)
    return np.round(rng.normal(175.0, 18.0, size=150))


@pytest.fixture
def constant_sample() -> list[float]:
    return [5.0, 5.0, 5.0, 5.0, 5.0]


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(12345)


@pytest.fixture(autouse=True)
def _reset_phenoci_logging():
    yield
    from phenoci.utils.logging import reset_logging

    reset_logging()
