"""Redirect folding: turn redirect edges into extra surface forms of their targets.

Folding is a single hop. An edge whose canonical id has no record, or whose
canonical id is itself redirected elsewhere, is dangling and skipped; chains
``A -> B -> C`` therefore only fold ``B`` into ``C``.

A redirect source with its own record is absorbed: its primary name becomes a
redirect alias of the canonical record and the source record leaves the run.
Sources without a record contribute the text encoded in their id, which only
graphs with textual ids (DBpedia) provide.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from kgindex.domain.model import RedirectEdge, ResourceRecord
    from kgindex.domain.vocabulary import GraphVocabulary

    from .context import RunCounters

log = logging.getLogger(__name__)


@dataclass(slots=True)
class RedirectFolding:
    """Outcome of folding a redirect relation into a record set."""

    aliases: dict[str, frozenset[str]] = field(default_factory=dict[str, frozenset[str]])
    applied: dict[str, frozenset[str]] = field(default_factory=dict[str, frozenset[str]])


def redirect_targets(edges: Iterable[RedirectEdge], counters: RunCounters) -> dict[str, str]:
    """Map each redirect source to its canonical id; later edges win conflicts."""

    targets: dict[str, str] = {}
    for edge in edges:
        for source_id in sorted(edge.source_ids):
            if source_id == edge.canonical_id:
                continue
            previous = targets.get(source_id)
            if previous is not None and previous != edge.canonical_id:
                counters.redirect_conflicts += 1
                log.warning(
                    "Redirect conflict for %s: %s replaced by %s",
                    source_id,
                    previous,
                    edge.canonical_id,
                )
            targets[source_id] = edge.canonical_id
    return targets


def fold_redirects(
    records: dict[str, ResourceRecord],
    edges: Iterable[RedirectEdge],
    *,
    vocabulary: GraphVocabulary,
    counters: RunCounters,
) -> RedirectFolding:
    """Fold ``edges`` into ``records`` in place and return the redirect aliases."""

    targets = redirect_targets(edges, counters)
    aliases: defaultdict[str, set[str]] = defaultdict(set)
    applied: defaultdict[str, set[str]] = defaultdict(set)
    folded: set[str] = set()

    for source_id, canonical_id in sorted(targets.items()):
        if canonical_id not in records or canonical_id in targets:
            counters.redirects_dangling += 1
            log.debug("Skipping dangling redirect %s -> %s", source_id, canonical_id)
            continue

        applied[canonical_id].add(source_id)
        source = records.get(source_id)
        if source is not None:
            surface_form: str | None = source.primary_name
            folded.add(source_id)
        else:
            surface_form = vocabulary.label_from_id(source_id)
        if surface_form is None:
            counters.redirects_unlabeled += 1
            continue
        aliases[canonical_id].add(surface_form)
        counters.redirects_applied += 1

    for source_id in folded:
        del records[source_id]
    counters.records_folded += len(folded)

    return RedirectFolding(
        aliases={key: frozenset(value) for key, value in aliases.items()},
        applied={key: frozenset(value) for key, value in applied.items()},
    )
