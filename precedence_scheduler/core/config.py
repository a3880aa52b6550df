from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Optional

import yaml


@dataclass(frozen=True)
class SchedulerConfig:
    workers: int
    base_duration: int


# 5 workers, 60s base: the full-size puzzle parameters.
DEFAULT_CONFIG = SchedulerConfig(workers=5, base_duration=60)

ENV_WORKERS = "PRECEDENCE_WORKERS"
ENV_BASE_DURATION = "PRECEDENCE_BASE_DURATION"


class ConfigError(ValueError):
    pass


def load_config_file(path: str | Path) -> dict[str, int]:
    """Load scheduler settings from a YAML file.

    Format:
      workers: 5
      base_duration: 60

    Both keys are optional. Returns only the keys present.
    """
    p = Path(path)
    raw = yaml.safe_load(p.read_text(encoding="utf-8"))
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError("config file must be a mapping with workers/base_duration")

    unknown = sorted(str(k) for k in raw if k not in ("workers", "base_duration"))
    if unknown:
        raise ConfigError(f"unknown config keys: {', '.join(unknown)}")

    out: dict[str, int] = {}
    if "workers" in raw:
        out["workers"] = _check_int("workers", raw["workers"], minimum=1)
    if "base_duration" in raw:
        out["base_duration"] = _check_int("base_duration", raw["base_duration"], minimum=0)
    return out


def env_overrides() -> dict[str, int]:
    out: dict[str, int] = {}
    for key, env_key, minimum in (
        ("workers", ENV_WORKERS, 1),
        ("base_duration", ENV_BASE_DURATION, 0),
    ):
        value = (os.getenv(env_key, "") or "").strip()
        if not value:
            continue
        try:
            parsed = int(value)
        except ValueError as e:
            raise ConfigError(f"{env_key} must be an integer, got {value!r}") from e
        out[key] = _check_int(env_key, parsed, minimum=minimum)
    return out


def resolve_config(
    config_file: Optional[str] = None,
    *,
    workers: Optional[int] = None,
    base_duration: Optional[int] = None,
) -> SchedulerConfig:
    """Resolve settings.

    Resolution order (later wins):
      1) DEFAULT_CONFIG
      2) config_file
      3) PRECEDENCE_WORKERS / PRECEDENCE_BASE_DURATION
      4) explicit arguments
    """
    cfg = DEFAULT_CONFIG
    if config_file:
        cfg = replace(cfg, **load_config_file(config_file))
    cfg = replace(cfg, **env_overrides())

    explicit: dict[str, int] = {}
    if workers is not None:
        explicit["workers"] = _check_int("workers", workers, minimum=1)
    if base_duration is not None:
        explicit["base_duration"] = _check_int("base_duration", base_duration, minimum=0)
    return replace(cfg, **explicit)


def _check_int(name: str, value: Any, *, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise ConfigError(f"{name} must be >= {minimum}, got {value}")
    return value
