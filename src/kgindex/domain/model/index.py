"""Candidates and resolved index entries."""

from __future__ import annotations

from dataclasses import dataclass

from .enums import Provenance


@dataclass(frozen=True, slots=True)
class Candidate:
    """One (surface form, target) pair proposed by the candidate generator."""

    surface_form: str
    id: str
    popularity: int
    provenance: Provenance
    namespace: str | None = None

    @property
    def target(self) -> tuple[str, str | None]:
        """Identity used to decide whether two candidates point at the same resource."""
        return (self.id, self.namespace)


@dataclass(frozen=True, slots=True, kw_only=True)
class ResolvedEntry:
    surface_form: str
    resolved_id: str
    popularity: int
    provenance: Provenance
    namespace: str | None = None
    description: str | None = None
    type_summary: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class InversePropertyPair:
    property_id: str
    inverse_id: str
    popularity: int = 0
    synthetic: bool = False
