"""Inspection configuration helpers.

Configuration is sourced from (in order of precedence):

1. Explicit configuration dictionaries provided to :func:`get_config`.
2. Environment variables prefixed with ``FILEINFO_``.
3. ``fileinfo.yaml`` located in ``$FILEINFO_CONFIG_DIR`` or ``config/``.
4. Built-in defaults.

Missing configuration files simply result in the default configuration
being used.
"""

from __future__ import annotations

import os
import shlex
from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

ENV_PREFIX = "FILEINFO_"
CONFIG_FILENAME = "fileinfo.yaml"

_TRUE_WORDS = frozenset({"true", "yes", "on"})
_FALSE_WORDS = frozenset({"false", "no", "off"})

DEFAULT_CONFIG: dict[str, Any] = {
    "log_level": "WARNING",
    "timezone": "UTC",
    "command_timeout": 300,
    "escalate_privileges": False,
    "escalation_command": ["sudo", "-n"],
    "hardlink_search": True,
    "audit_since": "today",
    "log_dir": None,
    "audit_log": None,
}


def load_yaml(path: Optional[Path]) -> dict[str, Any]:
    """Safely load YAML configuration from ``path``.

    The function returns an empty dictionary when the file does not exist
    or is empty. Parsing errors are surfaced to aid debugging.
    """

    if not path or not path.exists():
        return {}

    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    if not isinstance(data, Mapping):
        raise TypeError(f"Config file must contain a mapping: {path}")

    return dict(data)


def merge_dicts(*dicts: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively merge mappings with later dictionaries taking precedence."""

    merged: dict[str, Any] = {}

    for current in dicts:
        for key, value in current.items():
            if (
                key in merged
                and isinstance(merged[key], MutableMapping)
                and isinstance(value, Mapping)
            ):
                merged[key] = merge_dicts(merged[key], value)  # type: ignore[arg-type]
            else:
                merged[key] = value

    return merged


def _load_env_config(prefix: str = ENV_PREFIX) -> dict[str, Any]:
    """Load configuration overrides from environment variables."""

    env_config: dict[str, Any] = {}
    prefix_len = len(prefix)

    for key, value in os.environ.items():
        if not key.startswith(prefix) or key == f"{prefix}CONFIG_DIR":
            continue
        config_key = key[prefix_len:].lower()
        env_config[config_key] = _coerce_env_value(value)

    return env_config


def _coerce_env_value(value: str) -> Any:
    """Attempt to cast environment variable values to richer types."""

    lowered = value.strip().lower()
    if lowered in _TRUE_WORDS or lowered in _FALSE_WORDS:
        return lowered in _TRUE_WORDS

    if lowered.isdigit():
        return int(lowered)

    return value


def _as_bool(value: Any, key: str) -> bool:
    """Interpret a switch from YAML, the environment or overrides strictly."""

    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_WORDS or lowered == "1":
            return True
        if lowered in _FALSE_WORDS or lowered == "0":
            return False
    raise ValueError(f"{key} must be a boolean, got {value!r}")


def _as_command(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        return tuple(shlex.split(value))
    return tuple(str(part) for part in value or ())


def _optional_path(value: Any) -> Optional[Path]:
    if value in (None, ""):
        return None
    return Path(str(value)).expanduser()


@dataclass(frozen=True)
class InspectorConfig:
    """Strongly typed configuration representation."""

    log_level: str = DEFAULT_CONFIG["log_level"]
    timezone: str = DEFAULT_CONFIG["timezone"]
    command_timeout: int = DEFAULT_CONFIG["command_timeout"]
    escalate_privileges: bool = DEFAULT_CONFIG["escalate_privileges"]
    escalation_command: tuple[str, ...] = field(
        default_factory=lambda: tuple(DEFAULT_CONFIG["escalation_command"])
    )
    hardlink_search: bool = DEFAULT_CONFIG["hardlink_search"]
    audit_since: str = DEFAULT_CONFIG["audit_since"]
    log_dir: Optional[Path] = None
    audit_log: Optional[Path] = None
    extra: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        data = {
            "log_level": self.log_level,
            "timezone": self.timezone,
            "command_timeout": self.command_timeout,
            "escalate_privileges": self.escalate_privileges,
            "escalation_command": list(self.escalation_command),
            "hardlink_search": self.hardlink_search,
            "audit_since": self.audit_since,
            "log_dir": str(self.log_dir) if self.log_dir else None,
            "audit_log": str(self.audit_log) if self.audit_log else None,
        }
        data.update(self.extra)
        return data


def get_config(
    config_root: Optional[Path] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> InspectorConfig:
    """Load inspection configuration.

    Args:
        config_root: Optional directory containing ``fileinfo.yaml``.
        overrides: Explicit overrides that take highest precedence.

    Returns:
        An :class:`InspectorConfig` instance.
    """

    config_root = _resolve_config_root(config_root)

    yaml_config: dict[str, Any] = {}
    if config_root:
        yaml_config = load_yaml(config_root / CONFIG_FILENAME)

    env_config = _load_env_config()
    explicit_overrides = dict(overrides or {})

    merged = merge_dicts(DEFAULT_CONFIG, yaml_config, env_config, explicit_overrides)

    extra = {k: v for k, v in merged.items() if k not in DEFAULT_CONFIG}

    timeout = int(merged["command_timeout"])
    if timeout <= 0:
        raise ValueError("command_timeout must be greater than zero")

    return InspectorConfig(
        log_level=str(merged["log_level"]).upper(),
        timezone=str(merged["timezone"] or "UTC"),
        command_timeout=timeout,
        escalate_privileges=_as_bool(merged["escalate_privileges"], "escalate_privileges"),
        escalation_command=_as_command(merged["escalation_command"]),
        hardlink_search=_as_bool(merged["hardlink_search"], "hardlink_search"),
        audit_since=str(merged["audit_since"] or "today"),
        log_dir=_optional_path(merged["log_dir"]),
        audit_log=_optional_path(merged["audit_log"]),
        extra=extra,
    )


def _resolve_config_root(config_root: Optional[Path]) -> Optional[Path]:
    """Determine the configuration directory to use."""

    if config_root and config_root.exists():
        return config_root

    env_root = os.environ.get(f"{ENV_PREFIX}CONFIG_DIR")
    if env_root:
        candidate = Path(env_root).expanduser()
        if candidate.exists():
            return candidate

    repo_root = Path(__file__).resolve().parents[2]
    default_root = repo_root / "config"
    if default_root.exists():
        return default_root

    return None


__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_CONFIG",
    "ENV_PREFIX",
    "InspectorConfig",
    "get_config",
    "load_yaml",
    "merge_dicts",
]
