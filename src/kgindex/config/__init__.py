"""Application configuration helpers."""

from __future__ import annotations

from kgindex.common.logging import configure_logging

from .env import env_bool, env_int, optional_env_var
from .errors import ConfigurationError
from .index import DEFAULT_CHUNK_SIZE, DEFAULT_WORKERS, IndexConfig, get_index_config

__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "DEFAULT_WORKERS",
    "ConfigurationError",
    "IndexConfig",
    "configure_logging",
    "env_bool",
    "env_int",
    "get_index_config",
    "optional_env_var",
]
