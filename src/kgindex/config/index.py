"""Index build configuration."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from enum import StrEnum
from pathlib import Path
from typing import Any, Final

from kgindex.domain.model import AmbiguityMode, IdFormat, KnowledgeGraph

from .env import env_bool, env_int, optional_env_var
from .errors import ConfigurationError

DEFAULT_CHUNK_SIZE: Final[int] = 10_000
DEFAULT_WORKERS: Final[int] = 1


@dataclass(frozen=True, slots=True)
class IndexConfig:
    """Options recognised by an entity or property index build."""

    knowledge_graph: KnowledgeGraph
    id_format: IdFormat = IdFormat.BARE
    ambiguity: AmbiguityMode = AmbiguityMode.DROP
    check_popular_aliases: bool = False
    redirects: Path | None = None
    include_types: bool = False
    disambiguate_with_info: bool = False
    include_descriptions: bool = True
    include_aliases: bool = True
    include_qualifiers: bool = False
    include_inverses: bool = True
    workers: int = DEFAULT_WORKERS
    chunk_size: int = DEFAULT_CHUNK_SIZE
    progress: bool = False

    def __post_init__(self) -> None:
        if self.workers < 1:
            raise ConfigurationError(f"workers must be at least 1, got {self.workers}")
        if self.chunk_size < 1:
            raise ConfigurationError(f"chunk_size must be at least 1, got {self.chunk_size}")


def get_index_config(knowledge_graph: KnowledgeGraph | str, **overrides: Any) -> IndexConfig:
    """Build an ``IndexConfig`` from defaults, environment and explicit overrides.

    Environment variables (``KGINDEX_WORKERS``, ``KGINDEX_CHUNK_SIZE``,
    ``KGINDEX_ID_FORMAT``, ``KGINDEX_PROGRESS``) replace defaults; keyword
    overrides replace both. Overrides set to ``None`` are ignored so CLI
    namespaces can be passed through unchanged.
    """

    known = {field.name for field in fields(IndexConfig)}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise ConfigurationError(f"Unknown configuration options: {', '.join(unknown)}")

    graph = _coerce(KnowledgeGraph, knowledge_graph, "knowledge graph")
    config = IndexConfig(knowledge_graph=graph)

    from_env: dict[str, Any] = {
        "workers": env_int("KGINDEX_WORKERS"),
        "chunk_size": env_int("KGINDEX_CHUNK_SIZE"),
        "id_format": optional_env_var("KGINDEX_ID_FORMAT"),
        "progress": env_bool("KGINDEX_PROGRESS"),
    }
    values = {key: value for key, value in from_env.items() if value is not None}
    values.update({key: value for key, value in overrides.items() if value is not None})

    if "id_format" in values:
        values["id_format"] = _coerce(IdFormat, values["id_format"], "id format")
    if "ambiguity" in values:
        values["ambiguity"] = _coerce(AmbiguityMode, values["ambiguity"], "ambiguity policy")
    if "redirects" in values:
        values["redirects"] = Path(values["redirects"])
    return replace(config, **values)


def _coerce[TEnum: StrEnum](enum_type: type[TEnum], value: object, label: str) -> TEnum:
    if isinstance(value, enum_type):
        return value
    try:
        return enum_type(str(value).strip().lower())
    except ValueError as exc:
        choices = ", ".join(member.value for member in enum_type)
        raise ConfigurationError(f"Invalid {label} {value!r} (expected one of: {choices})") from exc
