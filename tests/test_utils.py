from __future__ import annotations

import logging

import numpy as np
import pytest

from phenoci.statistical.bootstrap import mean_ci
from phenoci.utils.determinism import describe_source, make_rng, spawn_streams
from phenoci.utils.logging import setup_logging
from phenoci.utils.validation import (
    InvalidInputError,
    ValidationError,
    validate_bootstraps,
    validate_probability,
    validate_sample,
)


# ====================
# Validation
# ====================

def test_validate_sample_returns_read_only_copy():
    original = np.array([3.0, 1.0, 2.0])
    sample = validate_sample(original)
    assert sample.dtype == np.float64
    assert not sample.flags.writeable
    original[0] = 100.0
    assert sample[0] == 3.0


def test_validate_sample_accepts_sequences():
    np.testing.assert_array_equal(validate_sample((1, 2, 3)), [1.0, 2.0, 3.0])


@pytest.mark.parametrize(
    "observations",
    [["1", "2", "3"], [True, False, True], np.array(["1.5", "2.5"]), [1 + 2j, 3 + 0j], [1.0, None]],
)
def test_validate_sample_rejects_non_real_values(observations):
    with pytest.raises(InvalidInputError) as info:
        validate_sample(observations)
    assert info.value.parameter == "observations"


def test_invalid_input_error_hierarchy():
    with pytest.raises(InvalidInputError) as info:
        validate_sample([1.0, np.inf])
    assert isinstance(info.value, ValidationError)
    assert isinstance(info.value, ValueError)
    assert info.value.parameter == "observations"


@pytest.mark.parametrize("value", [0.5, 1e-9, 0.999999, np.float32(0.25)])
def test_validate_probability_accepts(value):
    assert validate_probability(value, "conf") == pytest.approx(float(value))


@pytest.mark.parametrize("value", [10, np.int64(5), 100_000])
def test_validate_bootstraps_accepts_integers(value):
    assert validate_bootstraps(value) == int(value)


# ====================
# Random sources
# ====================

def test_make_rng_passes_generator_through(rng):
    assert make_rng(rng) is rng


def test_make_rng_seed_is_reproducible():
    assert make_rng(5).integers(0, 1000, 10).tolist() == make_rng(5).integers(0, 1000, 10).tolist()


def test_make_rng_rejects_bool():
    with pytest.raises(TypeError):
        make_rng(True)


def test_spawn_streams_reproducible_and_distinct():
    first = [g.random() for g in spawn_streams(make_rng(1), 3)]
    second = [g.random() for g in spawn_streams(make_rng(1), 3)]
    assert first == second
    assert len(set(first)) == 3


def test_spawn_streams_advances_parent():
    parent = make_rng(1)
    a = spawn_streams(parent, 1)[0].random()
    b = spawn_streams(parent, 1)[0].random()
    assert a != b


def test_describe_source():
    assert describe_source(None) is None
    assert describe_source(3) == "3"
    assert describe_source(np.random.default_rng(0)) == "PCG64"


# ====================
# Logging
# ====================

def test_setup_logging_writes_file(tmp_path):
    logger = setup_logging(str(tmp_path / "logs"), "run.log", "DEBUG")
    assert logger.name == "phenoci"
    assert logger.level == logging.DEBUG

    mean_ci([1.0, 2.0, 4.0, 8.0], bootstraps=50, method="percentile", rng=0)
    for handler in logger.handlers:
        handler.flush()

    text = (tmp_path / "logs" / "run.log").read_text(encoding="utf-8")
    assert "Resampling mean" in text


def test_setup_logging_is_idempotent(tmp_path):
    first = setup_logging(str(tmp_path), "a.log")
    n_handlers = len(first.handlers)
    second = setup_logging(str(tmp_path), "b.log")
    assert second is first
    assert len(second.handlers) == n_handlers
    assert not (tmp_path / "b.log").exists()


def test_setup_logging_console_only(tmp_path):
    logger = setup_logging(None)
    assert len(logger.handlers) == 1
