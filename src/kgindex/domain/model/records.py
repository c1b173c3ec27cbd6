"""Parsed knowledge-graph resources and the redirect relation."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True, kw_only=True)
class ResourceRecord:
    """One entity or property row after parsing.

    ``id`` is always the bare identifier of the resource inside its graph
    (``Q42``, ``m.0d3k14``, ``ontology/birthPlace``); rendering to URIs or
    prefixed names happens only when an index is written.
    """

    id: str
    primary_name: str
    description: str | None = None
    popularity: int = 0
    types: frozenset[str] = field(default_factory=frozenset)
    notable_types: frozenset[str] = field(default_factory=frozenset)
    aliases: frozenset[str] = field(default_factory=frozenset)
    extra_keys: frozenset[str] = field(default_factory=frozenset)
    inverses: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Resource records require an id")
        if not self.primary_name:
            raise ValueError(f"Resource record {self.id} requires a primary name")
        if self.popularity < 0:
            raise ValueError(f"Resource record {self.id} has negative popularity")


@dataclass(frozen=True, slots=True)
class RedirectEdge:
    """Alternate identifiers that redirect to ``canonical_id``."""

    canonical_id: str
    source_ids: frozenset[str]
