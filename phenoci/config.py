from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


def _env_int(name: str) -> Optional[int]:
    val = os.getenv(name)
    return int(val) if val not in (None, "") else None


def _env_float(name: str) -> Optional[float]:
    val = os.getenv(name)
    return float(val) if val not in (None, "") else None


@dataclass
class LoggingConfig:
    level: str = "INFO"
    log_dir: str = "logs"
    filename: str = "phenoci.log"

    def file_path(self) -> Path:
        return Path(self.log_dir) / self.filename


@dataclass(frozen=True)
class BootstrapConfig:
    """Settings of one bootstrap confidence interval computation.

    Frozen so a single record can be shared across calls and threads.
    `method` stays a plain string: unrecognised names are a soft failure
    handled at interval construction, not a configuration error.
    """

    bootstraps: int = 100_000
    conf: float = 0.95
    method: str = "bca"
    seed: Optional[int] = None
    n_jobs: int = 1
    chunk_size: Optional[int] = None  # None: derived from the sample size
    show_progress: bool = False

    def with_overrides(self, **changes: Any) -> "BootstrapConfig":
        """Copy with the given non-None fields replaced."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


@dataclass
class AppConfig:
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    bootstrap: BootstrapConfig = field(default_factory=BootstrapConfig)

    @staticmethod
    def from_dict(payload: Dict[str, Any]) -> "AppConfig":
        return AppConfig(
            logging=LoggingConfig(**(payload.get("logging") or {})),
            bootstrap=BootstrapConfig(**(payload.get("bootstrap") or {})),
        )

    @staticmethod
    def from_json(path: str | Path) -> "AppConfig":
        with open(path, "r", encoding="utf-8") as f:
            payload = json.load(f)
        return AppConfig.from_dict(payload)

    @staticmethod
    def from_yaml(path: str | Path) -> "AppConfig":
        with open(path, "r", encoding="utf-8") as f:
            payload = yaml.safe_load(f) or {}
        return AppConfig.from_dict(payload)

    @staticmethod
    def from_file(path: str | Path) -> "AppConfig":
        """Load a JSON or YAML config, chosen by file suffix."""
        suffix = Path(path).suffix.lower()
        if suffix in (".yaml", ".yml"):
            return AppConfig.from_yaml(path)
        if suffix == ".json":
            return AppConfig.from_json(path)
        raise ValueError(f"Unsupported config format: {suffix or path}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "logging": asdict(self.logging),
            "bootstrap": asdict(self.bootstrap),
        }

    def to_json(self, path: str | Path) -> None:
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        with open(p, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)


def get_logging_config() -> LoggingConfig:
    """Logging settings with PHENOCI_LOG_* environment overrides."""
    base = LoggingConfig()
    return LoggingConfig(
        level=os.getenv("PHENOCI_LOG_LEVEL", base.level),
        log_dir=os.getenv("PHENOCI_LOG_DIR", base.log_dir),
        filename=os.getenv("PHENOCI_LOG_FILE", base.filename),
    )


def get_bootstrap_config() -> BootstrapConfig:
    """Bootstrap settings with PHENOCI_* environment overrides."""
    return BootstrapConfig().with_overrides(
        bootstraps=_env_int("PHENOCI_BOOTSTRAPS"),
        conf=_env_float("PHENOCI_CONF"),
        method=os.getenv("PHENOCI_METHOD") or None,
        seed=_env_int("PHENOCI_SEED"),
        n_jobs=_env_int("PHENOCI_N_JOBS"),
    )


# Provide safe defaults via a factory function for top-level config
def default_app_config() -> AppConfig:
    return AppConfig(
        logging=LoggingConfig(),
        bootstrap=BootstrapConfig(),
    )
