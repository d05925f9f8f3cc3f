from __future__ import annotations

import dataclasses
import json
import unittest
from dataclasses import asdict

import pytest
import yaml

from phenoci.config import (
    AppConfig,
    BootstrapConfig,
    LoggingConfig,
    default_app_config,
    get_bootstrap_config,
    get_logging_config,
)


class TestConfig(unittest.TestCase):
    def test_default_factory(self) -> None:
        cfg = default_app_config()
        self.assertEqual(cfg.logging.level, "INFO")
        self.assertEqual(cfg.logging.log_dir, "logs")
        self.assertEqual(cfg.logging.filename, "phenoci.log")
        self.assertEqual(cfg.bootstrap.bootstraps, 100_000)
        self.assertEqual(cfg.bootstrap.conf, 0.95)
        self.assertEqual(cfg.bootstrap.method, "bca")
        self.assertIsNone(cfg.bootstrap.seed)
        self.assertEqual(cfg.bootstrap.n_jobs, 1)
        self.assertIsNone(cfg.bootstrap.chunk_size)
        self.assertFalse(cfg.bootstrap.show_progress)

    def test_bootstrap_config_is_frozen(self) -> None:
        with self.assertRaises(dataclasses.FrozenInstanceError):
            BootstrapConfig().bootstraps = 10  # type: ignore[misc]

    def test_with_overrides_ignores_none(self) -> None:
        cfg = BootstrapConfig(seed=3).with_overrides(bootstraps=500, seed=None, method="perc")
        self.assertEqual(cfg, BootstrapConfig(bootstraps=500, method="perc", seed=3))


def test_json_round_trip(tmp_path):
    cfg = AppConfig(
        logging=LoggingConfig(level="DEBUG", log_dir=str(tmp_path / "logs"), filename="roundtrip.log"),
        bootstrap=BootstrapConfig(bootstraps=2000, conf=0.9, method="percentile", seed=7, n_jobs=2, chunk_size=500),
    )
    out = tmp_path / "nested" / "config.json"
    cfg.to_json(out)
    loaded = AppConfig.from_json(out)
    assert asdict(loaded.logging) == asdict(cfg.logging)
    assert loaded.bootstrap == cfg.bootstrap
    assert json.loads(out.read_text(encoding="utf-8"))["bootstrap"]["seed"] == 7


def test_yaml_partial_config(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({"bootstrap": {"bootstraps": 5000, "method": "basic"}}), encoding="utf-8")
    cfg = AppConfig.from_file(path)
    assert cfg.bootstrap.bootstraps == 5000
    assert cfg.bootstrap.method == "basic"
    assert cfg.bootstrap.conf == 0.95
    assert cfg.logging == LoggingConfig()


def test_empty_yaml_gives_defaults(tmp_path):
    path = tmp_path / "empty.yml"
    path.write_text("", encoding="utf-8")
    cfg = AppConfig.from_file(path)
    assert cfg.bootstrap == BootstrapConfig()


def test_unsupported_suffix(tmp_path):
    with pytest.raises(ValueError):
        AppConfig.from_file(tmp_path / "config.toml")


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        AppConfig.from_json(tmp_path / "missing.json")


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("PHENOCI_BOOTSTRAPS", "2500")
    monkeypatch.setenv("PHENOCI_CONF", "0.9")
    monkeypatch.setenv("PHENOCI_METHOD", "normal")
    monkeypatch.setenv("PHENOCI_SEED", "11")
    monkeypatch.delenv("PHENOCI_N_JOBS", raising=False)
    monkeypatch.setenv("PHENOCI_LOG_LEVEL", "DEBUG")

    assert get_bootstrap_config() == BootstrapConfig(bootstraps=2500, conf=0.9, method="normal", seed=11)
    assert get_logging_config().level == "DEBUG"


def test_environment_defaults(monkeypatch):
    for name in ("PHENOCI_BOOTSTRAPS", "PHENOCI_CONF", "PHENOCI_METHOD", "PHENOCI_SEED", "PHENOCI_N_JOBS"):
        monkeypatch.delenv(name, raising=False)
    assert get_bootstrap_config() == BootstrapConfig()
