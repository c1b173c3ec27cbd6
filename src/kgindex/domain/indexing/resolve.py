"""Surface-form resolution.

Responsibilities of this stage:
- group candidates by exact surface form (no case folding, no normalization)
- collapse duplicate proposals of one target to its best provenance
- apply the alias filter, then the ambiguity policy, to every group
- attach description and type summary of the winning record

The output maps every retained surface form to exactly one target. Ambiguity
is an ordinary, counted outcome and never raises.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from kgindex.domain.model import ResolvedEntry

from .policy import KeepAllAliases, pick_most_popular

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from kgindex.domain.model import Candidate, ResourceRecord
    from kgindex.domain.vocabulary import GraphVocabulary

    from .context import RunCounters
    from .policy import AliasFilter, AmbiguityPolicy

log = logging.getLogger(__name__)

type CandidateGroups = dict[str, list[Candidate]]


def group_candidates(candidates: Iterable[Candidate]) -> CandidateGroups:
    groups: defaultdict[str, list[Candidate]] = defaultdict(list)
    for candidate in candidates:
        groups[candidate.surface_form].append(candidate)
    return dict(groups)


def collapse_targets(candidates: Sequence[Candidate]) -> list[Candidate]:
    """Keep one candidate per target, preferring the best-ranked provenance."""

    best: dict[tuple[str, str | None], Candidate] = {}
    for candidate in candidates:
        current = best.get(candidate.target)
        if current is None or candidate.provenance.rank < current.provenance.rank:
            best[candidate.target] = candidate
    return list(best.values())


def resolve_group(
    candidates: Sequence[Candidate],
    *,
    ambiguity: AmbiguityPolicy,
    alias_filter: AliasFilter,
    counters: RunCounters,
) -> tuple[Candidate | None, list[Candidate]]:
    """Resolve the candidates of one surface form to a single winner (or none).

    Also returns the candidates that lost the surface form to ambiguity: the
    whole group when it is dropped, every other target when one is kept.
    """

    group, shadowed = alias_filter(collapse_targets(candidates))
    counters.aliases_shadowed += shadowed
    if len(group) == 1:
        return group[0], []

    winner = ambiguity.choose(group)
    if winner is None:
        counters.ambiguous_dropped += 1
        log.debug(
            "Dropping ambiguous surface form %r (%d targets)", group[0].surface_form, len(group)
        )
    else:
        counters.ambiguous_resolved += 1
    return winner, [candidate for candidate in group if candidate is not winner]


@dataclass(slots=True)
class TypeSummarizer:
    """Summarise a record's types as the label of its most popular type.

    Notable types take precedence over plain types. Type ids known in the run
    are replaced by their record's label; opaque ids of unknown types are
    ignored; textual types keep their text with popularity 0.
    """

    records: Mapping[str, ResourceRecord]
    vocabulary: GraphVocabulary
    _cache: dict[str, str | None] = field(default_factory=dict, repr=False)

    def __call__(self, record: ResourceRecord) -> str | None:
        if record.id not in self._cache:
            self._cache[record.id] = self._summarize(record)
        return self._cache[record.id]

    def _summarize(self, record: ResourceRecord) -> str | None:
        labelled = self._labelled(record.notable_types) or self._labelled(record.types)
        if not labelled:
            return None
        label, _popularity = pick_most_popular(
            labelled,
            popularity=lambda item: item[1],
            tiebreak=lambda item: (item[0],),
        )
        return label

    def _labelled(self, types: Iterable[str]) -> list[tuple[str, int]]:
        labelled: list[tuple[str, int]] = []
        for type_name in types:
            type_record = self.records.get(type_name)
            if type_record is not None:
                labelled.append((type_record.primary_name, type_record.popularity))
            elif not self.vocabulary.is_opaque_entity_id(type_name):
                labelled.append((type_name, 0))
        return labelled


def resolve_candidates(
    candidates: Iterable[Candidate],
    *,
    records: Mapping[str, ResourceRecord],
    vocabulary: GraphVocabulary,
    counters: RunCounters,
    ambiguity: AmbiguityPolicy,
    alias_filter: AliasFilter | None = None,
    include_types: bool = False,
    unresolved: list[Candidate] | None = None,
) -> list[ResolvedEntry]:
    """Resolve all candidates into at most one ``ResolvedEntry`` per surface form.

    When ``unresolved`` is given, candidates that lost their surface form to
    ambiguity are appended to it.
    """

    active_filter = alias_filter or KeepAllAliases()
    summarize = TypeSummarizer(records=records, vocabulary=vocabulary) if include_types else None

    entries: list[ResolvedEntry] = []
    for surface_form, group in group_candidates(candidates).items():
        winner, losers = resolve_group(
            group,
            ambiguity=ambiguity,
            alias_filter=active_filter,
            counters=counters,
        )
        if unresolved is not None:
            unresolved.extend(losers)
        if winner is None:
            continue
        record = records[winner.id]
        entries.append(
            ResolvedEntry(
                surface_form=surface_form,
                resolved_id=winner.id,
                popularity=winner.popularity,
                provenance=winner.provenance,
                namespace=winner.namespace,
                description=record.description,
                type_summary=summarize(record) if summarize is not None else None,
            )
        )
    counters.entries = len(entries)
    return entries
