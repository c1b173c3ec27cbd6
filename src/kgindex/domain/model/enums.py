"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class KnowledgeGraph(StrEnum):
    WIKIDATA = "wikidata"
    FREEBASE = "freebase"
    DBPEDIA = "dbpedia"


class ResourceKind(StrEnum):
    ENTITY = "entity"
    PROPERTY = "property"


class IdFormat(StrEnum):
    """How resolved identifiers are rendered in index files."""

    BARE = "bare"
    URI = "uri"
    PREFIXED = "prefixed"


class AmbiguityMode(StrEnum):
    """What to do with a surface form that points at more than one resource."""

    DROP = "drop"
    KEEP_MOST_COMMON = "keep-most-common"


class Provenance(StrEnum):
    """Origin of a candidate surface form."""

    PRIMARY_NAME = "primary_name"
    QUALIFIER_VARIANT = "qualifier_variant"
    ALIAS = "alias"
    REDIRECT_ALIAS = "redirect_alias"

    @property
    def rank(self) -> int:
        """Tie-break rank, lower wins."""
        return _PROVENANCE_RANK[self]

    @property
    def is_alias(self) -> bool:
        return self in (Provenance.ALIAS, Provenance.REDIRECT_ALIAS)


_PROVENANCE_RANK: dict[Provenance, int] = {
    Provenance.PRIMARY_NAME: 0,
    Provenance.QUALIFIER_VARIANT: 1,
    Provenance.ALIAS: 2,
    Provenance.REDIRECT_ALIAS: 2,
}
