"""Candidate generation: fan each record out into (surface form, target) pairs.

Generation is a pure per-record projection. Aliases are emitted in sorted
order so the candidate stream is reproducible across runs.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from kgindex.domain.model import Candidate, Provenance

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from kgindex.domain.model import ResourceRecord
    from kgindex.domain.vocabulary import GraphVocabulary

log = logging.getLogger(__name__)


def entity_candidates(
    record: ResourceRecord,
    *,
    redirect_aliases: Iterable[str] = (),
    include_aliases: bool = True,
) -> Iterator[Candidate]:
    """Yield the primary name, declared aliases and redirect aliases of an entity."""

    yield _candidate(record, record.primary_name, Provenance.PRIMARY_NAME)
    aliases = _aliases(record) if include_aliases else []
    yield from (_candidate(record, alias, Provenance.ALIAS) for alias in aliases)

    seen = {record.primary_name, *aliases}
    for alias in sorted(set(redirect_aliases) - seen):
        yield _candidate(record, alias, Provenance.REDIRECT_ALIAS)


def property_candidates(
    record: ResourceRecord,
    *,
    vocabulary: GraphVocabulary,
    include_aliases: bool = True,
    include_qualifiers: bool = False,
) -> Iterator[Candidate]:
    """Yield the label and aliases of a property, plus qualifier variants if requested."""

    aliases = _aliases(record) if include_aliases else []
    yield _candidate(record, record.primary_name, Provenance.PRIMARY_NAME)
    yield from (_candidate(record, alias, Provenance.ALIAS) for alias in aliases)

    if not include_qualifiers:
        return
    for name in (record.primary_name, *aliases):
        for variant in vocabulary.qualifiers:
            yield Candidate(
                surface_form=variant.surface_form(name),
                id=record.id,
                popularity=record.popularity,
                provenance=Provenance.QUALIFIER_VARIANT,
                namespace=variant.namespace,
            )


def warn_if_qualifiers_unsupported(vocabulary: GraphVocabulary) -> bool:
    """Return True if ``vocabulary`` declares a qualifier schema, warning otherwise."""

    if vocabulary.qualifiers:
        return True
    log.warning("Qualifier expansion requested but %s has no qualifier schema", vocabulary.graph)
    return False


def _aliases(record: ResourceRecord) -> list[str]:
    return sorted(alias for alias in record.aliases if alias and alias != record.primary_name)


def _candidate(record: ResourceRecord, surface_form: str, provenance: Provenance) -> Candidate:
    return Candidate(
        surface_form=surface_form,
        id=record.id,
        popularity=record.popularity,
        provenance=provenance,
    )
