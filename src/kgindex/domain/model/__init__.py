"""Domain model for knowledge-graph lookup indices."""

from __future__ import annotations

from .enums import AmbiguityMode, IdFormat, KnowledgeGraph, Provenance, ResourceKind
from .index import Candidate, InversePropertyPair, ResolvedEntry
from .records import RedirectEdge, ResourceRecord

__all__ = [
    "AmbiguityMode",
    "Candidate",
    "IdFormat",
    "InversePropertyPair",
    "KnowledgeGraph",
    "Provenance",
    "RedirectEdge",
    "ResolvedEntry",
    "ResourceKind",
    "ResourceRecord",
]
