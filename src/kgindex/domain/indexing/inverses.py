"""Inverse-property resolution.

Declared inverses are directed edges ``property -> inverse``. Resolution keeps
at most one inverse per property, choosing the most popular inverse (then
the smaller id) when a property declares several. Properties that declare no
inverse but are named as the inverse of others receive a synthetic
reciprocal, chosen by the same rule. Declared edges are never rewritten, so
asymmetric source data stays asymmetric.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import TYPE_CHECKING

from kgindex.domain.model import InversePropertyPair

from .policy import pick_most_popular

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from kgindex.domain.model import ResourceRecord

    from .context import RunCounters

log = logging.getLogger(__name__)


def resolve_inverses(
    records: Mapping[str, ResourceRecord],
    *,
    counters: RunCounters,
) -> list[InversePropertyPair]:
    declared = _declared_inverses(records, counters)

    incoming: defaultdict[str, list[str]] = defaultdict(list)
    for property_id, inverse_id in declared.items():
        if inverse_id not in declared:
            incoming[inverse_id].append(property_id)

    pairs = [
        InversePropertyPair(
            property_id=property_id,
            inverse_id=inverse_id,
            popularity=records[property_id].popularity,
        )
        for property_id, inverse_id in declared.items()
    ]
    for property_id in sorted(incoming):
        inverse_id = _most_popular(records, incoming[property_id])
        if len(incoming[property_id]) > 1:
            counters.inverse_conflicts += 1
            log.warning(
                "Several properties declare %s as their inverse (%s); reciprocal uses %s",
                property_id,
                ", ".join(sorted(incoming[property_id])),
                inverse_id,
            )
        pairs.append(
            InversePropertyPair(
                property_id=property_id,
                inverse_id=inverse_id,
                popularity=records[property_id].popularity,
                synthetic=True,
            )
        )

    counters.inverse_pairs_declared = len(declared)
    counters.inverse_pairs_synthetic = len(pairs) - len(declared)
    return pairs


def _declared_inverses(
    records: Mapping[str, ResourceRecord],
    counters: RunCounters,
) -> dict[str, str]:
    declared: dict[str, str] = {}
    for property_id in sorted(records):
        inverses = records[property_id].inverses
        if not inverses:
            continue
        known = sorted(inverse for inverse in inverses if inverse in records)
        counters.inverses_unknown += len(inverses) - len(known)
        if not known:
            continue
        chosen = _most_popular(records, known)
        if len(known) > 1:
            counters.inverse_conflicts += 1
            log.warning(
                "Property %s declares %d inverses (%s); keeping %s",
                property_id,
                len(known),
                ", ".join(known),
                chosen,
            )
        declared[property_id] = chosen
    return declared


def _most_popular(records: Mapping[str, ResourceRecord], property_ids: Iterable[str]) -> str:
    return pick_most_popular(
        property_ids,
        popularity=lambda property_id: records[property_id].popularity,
        tiebreak=lambda property_id: (property_id,),
    )
