"""Defaults and runtime settings.

Module constants are the library defaults used by the task wrappers.
``RuntimeSettings`` is what a hosting process (see ``main.py``) loads from an
optional YAML file, with environment variables taking precedence.
"""

from __future__ import annotations

import os
import threading
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import yaml

from taskhelper.core.errors import ValidationError

# Threads
THREAD_NAME_PREFIX = "task"
DAEMON_THREADS = True  # forgotten wrappers must not keep the interpreter alive

# Longest single wait the platform timer accepts; intervals above it are rejected.
MAX_WAIT_MS = int(threading.TIMEOUT_MAX * 1000)

# Periodic tasks
DEFAULT_INTERVAL_MS = 1000

# Waitable tasks
DEFAULT_WAIT_TIMEOUT_MS = 3000


@dataclass(frozen=True, slots=True)
class RuntimeSettings:
    interval_ms: int = DEFAULT_INTERVAL_MS
    wait_timeout_ms: int = DEFAULT_WAIT_TIMEOUT_MS
    log_level: str = "INFO"
    json_logs: bool = False
    log_dir: Path | None = None


_ENV_OVERRIDES = {
    "TASKHELPER_INTERVAL_MS": "interval_ms",
    "TASKHELPER_WAIT_TIMEOUT_MS": "wait_timeout_ms",
    "LOG_LEVEL": "log_level",
    "LOG_JSON": "json_logs",
    "TASKHELPER_LOG_DIR": "log_dir",
}


def _positive_int(key: str, value: Any) -> int:
    try:
        n = int(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{key} must be an integer, got {value!r}", cause=e) from e
    if n <= 0:
        raise ValidationError(f"{key} must be > 0, got {n}")
    return n


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def _coerce(raw: dict[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, value in raw.items():
        if key in ("interval_ms", "wait_timeout_ms"):
            out[key] = _positive_int(key, value)
            if key == "interval_ms" and out[key] > MAX_WAIT_MS:
                raise ValidationError(f"interval_ms must be <= {MAX_WAIT_MS}, got {out[key]}")
        elif key == "log_level":
            out[key] = str(value).upper()
        elif key == "json_logs":
            out[key] = _as_bool(value)
        elif key == "log_dir":
            out[key] = Path(value) if value else None
        else:
            raise ValidationError(f"Unknown setting: {key}")
    return out


def load_settings(path: Path | None = None) -> RuntimeSettings:
    """Load settings from an optional YAML mapping, then apply env overrides."""
    settings = RuntimeSettings()
    if path is not None:
        try:
            data = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as e:
            raise ValidationError(f"Cannot read settings file {path}", cause=e) from e
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValidationError(f"Settings file {path} must contain a mapping")
        settings = replace(settings, **_coerce(data))

    env = {field: os.environ[var] for var, field in _ENV_OVERRIDES.items() if var in os.environ}
    if env:
        settings = replace(settings, **_coerce(env))
    return settings
