from __future__ import annotations

from typing import TYPE_CHECKING

from kgindex.domain.model import Candidate, Provenance, ResourceRecord

if TYPE_CHECKING:
    from collections.abc import Iterable


def make_record(
    resource_id: str,
    name: str,
    popularity: int = 0,
    *,
    description: str | None = None,
    aliases: Iterable[str] = (),
    types: Iterable[str] = (),
    notable_types: Iterable[str] = (),
    inverses: Iterable[str] = (),
) -> ResourceRecord:
    return ResourceRecord(
        id=resource_id,
        primary_name=name,
        description=description,
        popularity=popularity,
        aliases=frozenset(aliases),
        types=frozenset(types),
        notable_types=frozenset(notable_types),
        inverses=frozenset(inverses),
    )


def records_by_id(*records: ResourceRecord) -> dict[str, ResourceRecord]:
    return {record.id: record for record in records}


def make_candidate(
    surface_form: str,
    resource_id: str,
    popularity: int,
    provenance: Provenance = Provenance.PRIMARY_NAME,
    namespace: str | None = None,
) -> Candidate:
    return Candidate(
        surface_form=surface_form,
        id=resource_id,
        popularity=popularity,
        provenance=provenance,
        namespace=namespace,
    )
