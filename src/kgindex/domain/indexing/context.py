"""Shared context structures for the index pipeline (build state + counters)."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from kgindex.domain.model import (
        Candidate,
        InversePropertyPair,
        RedirectEdge,
        ResolvedEntry,
        ResourceKind,
        ResourceRecord,
    )
    from kgindex.domain.vocabulary import GraphVocabulary


@dataclass(slots=True)
class RunCounters:
    """Run-scoped counters; every discard made by the pipeline lands here."""

    records_read: int = 0
    rows_skipped: int = 0
    redirect_rows_skipped: int = 0
    duplicate_records: int = 0
    records_folded: int = 0
    redirects_applied: int = 0
    redirect_conflicts: int = 0
    redirects_unlabeled: int = 0
    redirects_dangling: int = 0
    candidates: int = 0
    aliases_shadowed: int = 0
    ambiguous_dropped: int = 0
    ambiguous_resolved: int = 0
    info_entries: int = 0
    info_missing: int = 0
    info_collisions: int = 0
    entries: int = 0
    inverse_pairs_declared: int = 0
    inverse_pairs_synthetic: int = 0
    inverse_conflicts: int = 0
    inverses_unknown: int = 0

    def as_dict(self) -> dict[str, int]:
        return {item.name: getattr(self, item.name) for item in fields(self)}


@dataclass(slots=True)
class PipelineContext:
    """Mutable context shared across pipeline phases."""

    vocabulary: GraphVocabulary
    counters: RunCounters = field(default_factory=RunCounters)


@dataclass(slots=True)
class IndexBuild:
    """Everything one index run accumulates between parsing and emission.

    Records are keyed by bare id. Each phase fills the next collection in
    line: redirect folding fills ``redirect_aliases``, candidate generation
    fills ``candidates``, resolution fills ``entries`` and ``unresolved`` (the
    candidates that lost their surface form to ambiguity), and inverse
    resolution fills ``inverse_pairs``.
    """

    kind: ResourceKind
    records: dict[str, ResourceRecord] = field(default_factory=dict["str", "ResourceRecord"])
    redirect_edges: list[RedirectEdge] = field(default_factory=list["RedirectEdge"])
    redirect_aliases: dict[str, frozenset[str]] = field(default_factory=dict[str, frozenset[str]])
    applied_redirects: dict[str, frozenset[str]] = field(
        default_factory=dict[str, frozenset[str]]
    )
    candidates: list[Candidate] = field(default_factory=list["Candidate"])
    unresolved: list[Candidate] = field(default_factory=list["Candidate"])
    entries: list[ResolvedEntry] = field(default_factory=list["ResolvedEntry"])
    inverse_pairs: list[InversePropertyPair] = field(
        default_factory=list["InversePropertyPair"]
    )

    def add_record(self, record: ResourceRecord) -> bool:
        """Register ``record``; return False if its id was already present."""

        if record.id in self.records:
            return False
        self.records[record.id] = record
        return True
