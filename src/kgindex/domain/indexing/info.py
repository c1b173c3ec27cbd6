"""Second-chance surface forms for resources that lost a name to ambiguity.

A candidate that lost its surface form is offered again as
``"{surface form} ({info})"``. The info is the label of the record's most
popular type, or its description when no type has a label. The new forms go
through the same ambiguity policy as plain ones, so two resources sharing
both name and info are still ambiguous. A form that is already taken by a
resolved entry stays with that entry.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING

from .resolve import TypeSummarizer, resolve_candidates

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from kgindex.domain.model import Candidate, ResolvedEntry, ResourceRecord
    from kgindex.domain.vocabulary import GraphVocabulary

    from .context import RunCounters
    from .policy import AmbiguityPolicy

log = logging.getLogger(__name__)


def record_info(record: ResourceRecord, summarize: TypeSummarizer) -> str | None:
    info = summarize(record) or record.description
    if info is None:
        return None
    return " ".join(info.split()) or None


def info_candidates(
    unresolved: Iterable[Candidate],
    *,
    records: Mapping[str, ResourceRecord],
    vocabulary: GraphVocabulary,
    taken: set[str],
    counters: RunCounters,
) -> list[Candidate]:
    summarize = TypeSummarizer(records=records, vocabulary=vocabulary)
    candidates: list[Candidate] = []
    for candidate in unresolved:
        info = record_info(records[candidate.id], summarize)
        if info is None:
            counters.info_missing += 1
            continue
        surface_form = f"{candidate.surface_form} ({info})"
        if surface_form in taken:
            counters.info_collisions += 1
            log.debug("%r is already indexed; not adding it for %s", surface_form, candidate.id)
            continue
        candidates.append(replace(candidate, surface_form=surface_form))
    return candidates


def disambiguate_with_info(
    unresolved: Iterable[Candidate],
    *,
    entries: Sequence[ResolvedEntry],
    records: Mapping[str, ResourceRecord],
    vocabulary: GraphVocabulary,
    counters: RunCounters,
    ambiguity: AmbiguityPolicy,
    include_types: bool = False,
) -> list[ResolvedEntry]:
    """Resolve ``label (info)`` forms for ``unresolved`` candidates; return the new entries."""

    candidates = info_candidates(
        unresolved,
        records=records,
        vocabulary=vocabulary,
        taken={entry.surface_form for entry in entries},
        counters=counters,
    )
    added = resolve_candidates(
        candidates,
        records=records,
        vocabulary=vocabulary,
        counters=counters,
        ambiguity=ambiguity,
        include_types=include_types,
    )
    counters.info_entries += len(added)
    return added
