"""Translate TSV rows into domain records."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from kgindex.domain.model import RedirectEdge, ResourceKind, ResourceRecord
from kgindex.domain.vocabulary import strip_iri

from .schema import ResourceRow, split_values, unwrap_term

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from kgindex.domain.vocabulary import GraphVocabulary


log = getLogger(__name__)


def _ensure_row(row: ResourceRow | Mapping[str, str]) -> ResourceRow:
    if isinstance(row, ResourceRow):
        return row
    return ResourceRow.model_validate(row)


def parse_record(
    row: ResourceRow | Mapping[str, str],
    *,
    kind: ResourceKind,
    vocabulary: GraphVocabulary,
) -> ResourceRecord | None:
    """Build a ``ResourceRecord`` from a row, or ``None`` if the row is unusable.

    Raises ``pydantic.ValidationError`` for rows that do not satisfy the row
    schema (empty id or name).
    """

    payload = _ensure_row(row)
    resource_id = vocabulary.parse_id(payload.id, kind)
    if resource_id is None:
        log.debug("Rejecting %s id %r outside of %s", kind, payload.id, vocabulary.graph)
        return None

    name = payload.name
    if kind is ResourceKind.PROPERTY:
        label = vocabulary.property_label(name, resource_id)
        if label is None:
            log.debug("Rejecting property %s without a usable label", resource_id)
            return None
        name = label

    return ResourceRecord(
        id=resource_id,
        primary_name=name,
        description=payload.description,
        popularity=payload.popularity,
        types=_type_names(payload.types, vocabulary),
        notable_types=_type_names(payload.notable_types, vocabulary),
        aliases=payload.aliases,
        extra_keys=payload.extra_keys,
        inverses=_property_ids(payload.inverses, vocabulary),
    )


def _type_names(values: Iterable[str], vocabulary: GraphVocabulary) -> frozenset[str]:
    """Bare entity ids where the type is a resource of the graph, readable names otherwise."""

    names: set[str] = set()
    for value in values:
        entity_id = vocabulary.parse_id(value, ResourceKind.ENTITY)
        names.add(entity_id if entity_id is not None else local_name(value))
    names.discard("")
    return frozenset(names)


def _property_ids(values: Iterable[str], vocabulary: GraphVocabulary) -> frozenset[str]:
    parsed = (vocabulary.parse_id(value, ResourceKind.PROPERTY) for value in values)
    return frozenset(value for value in parsed if value is not None)


def local_name(value: str) -> str:
    """Last path segment (or fragment) of an IRI; plain text is returned as is."""

    value = strip_iri(value)
    if "://" not in value:
        return value
    return value.rstrip("/#").rsplit("#", 1)[-1].rsplit("/", 1)[-1]


def parse_redirect(cells: Sequence[str], *, vocabulary: GraphVocabulary) -> RedirectEdge | None:
    """Build a ``RedirectEdge`` from ``canonical, source[;source...][, source...]`` cells.

    Returns ``None`` when the canonical id is unusable or no source id survives.
    """

    if not cells:
        return None
    canonical_id = vocabulary.parse_id(unwrap_term(cells[0]), ResourceKind.ENTITY)
    if canonical_id is None:
        return None

    sources: set[str] = set()
    for cell in cells[1:]:
        for value in split_values(cell):
            source_id = vocabulary.parse_id(value, ResourceKind.ENTITY)
            if source_id is None:
                log.debug("Dropping unusable redirect source %r for %s", value, canonical_id)
                continue
            sources.add(source_id)
    sources.discard(canonical_id)
    if not sources:
        return None
    return RedirectEdge(canonical_id=canonical_id, source_ids=frozenset(sources))
