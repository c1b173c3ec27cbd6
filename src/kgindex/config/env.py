"""Environment variable loaders for configuration."""

from __future__ import annotations

import os

from .errors import ConfigurationError

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def optional_env_var(name: str) -> str | None:
    """Return an environment variable, treating blank values as absent."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def env_int(name: str) -> int | None:
    value = optional_env_var(name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from exc


def env_bool(name: str) -> bool | None:
    value = optional_env_var(name)
    if value is None:
        return None
    lowered = value.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean flag, got {value!r}")
