from __future__ import annotations

import pytest
from pydantic import ValidationError

from kgindex.adapters.tsv import (
    ResourceRow,
    parse_record,
    parse_redirect,
    split_values,
    unwrap_term,
)
from kgindex.adapters.tsv.translator import local_name
from kgindex.domain.model import ResourceKind
from kgindex.domain.vocabulary import DBPEDIA, FREEBASE, WIKIDATA


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ('"Paris"@en', "Paris"),
        ('"12"^^<http://www.w3.org/2001/XMLSchema#integer>', "12"),
        ("<http://www.wikidata.org/entity/Q90>", "http://www.wikidata.org/entity/Q90"),
        ('"say \\"hi\\""@en-gb', 'say "hi"'),
        ('"back\\\\slash"', "back\\slash"),
        ("  plain  ", "plain"),
    ],
)
def test_unwrap_term(value: str, expected: str) -> None:
    assert unwrap_term(value) == expected


def test_split_values_drops_blanks() -> None:
    assert split_values('"Big Apple; ;NYC;"@en') == ["Big Apple", "NYC"]
    assert split_values("") == []


def test_row_defaults_and_coercion() -> None:
    row = ResourceRow.model_validate(
        {
            "id": "<http://www.wikidata.org/entity/Q90>",
            "name": '"Paris"@en',
            "description": "   ",
            "popularity": "not-a-number",
            "aliases": "City of Light;Paname",
        }
    )

    assert row.id == "http://www.wikidata.org/entity/Q90"
    assert row.name == "Paris"
    assert row.description is None
    assert row.popularity == 0
    assert row.aliases == frozenset({"City of Light", "Paname"})
    assert row.types == frozenset()


def test_row_negative_popularity_defaults_to_zero() -> None:
    assert ResourceRow.model_validate({"id": "Q1", "name": "x", "popularity": "-4"}).popularity == 0


def test_row_requires_name() -> None:
    with pytest.raises(ValidationError):
        ResourceRow.model_validate({"id": "Q1", "name": '""@en'})


def test_parse_entity_record() -> None:
    record = parse_record(
        {
            "id": "<http://www.wikidata.org/entity/Q90>",
            "name": '"Paris"@en',
            "popularity": '"1000"^^<http://www.w3.org/2001/XMLSchema#integer>',
            "types": "http://www.wikidata.org/entity/Q515;http://www.wikidata.org/entity/Q5119",
        },
        kind=ResourceKind.ENTITY,
        vocabulary=WIKIDATA,
    )

    assert record is not None
    assert record.id == "Q90"
    assert record.popularity == 1000
    assert record.types == frozenset({"Q515", "Q5119"})


def test_parse_record_rejects_foreign_ids() -> None:
    record = parse_record(
        {"id": "http://dbpedia.org/resource/Paris", "name": "Paris"},
        kind=ResourceKind.ENTITY,
        vocabulary=WIKIDATA,
    )

    assert record is None


def test_parse_property_record_applies_label_rule_and_inverses() -> None:
    record = parse_record(
        {
            "id": "http://rdf.freebase.com/ns/people.person.place_of_birth",
            "name": "place of birth",
            "inverses": "http://rdf.freebase.com/ns/location.location.people_born_here",
        },
        kind=ResourceKind.PROPERTY,
        vocabulary=FREEBASE,
    )

    assert record is not None
    assert record.primary_name == "place of birth (person)"
    assert record.inverses == frozenset({"location.location.people_born_here"})


def test_parse_property_record_rejects_short_freebase_ids() -> None:
    record = parse_record(
        {"id": "http://rdf.freebase.com/ns/type", "name": "type"},
        kind=ResourceKind.PROPERTY,
        vocabulary=FREEBASE,
    )

    assert record is None


def test_type_iris_outside_the_entity_namespace_keep_their_local_name() -> None:
    record = parse_record(
        {
            "id": "http://dbpedia.org/resource/Alan_Turing",
            "name": "Alan Turing",
            "types": "http://dbpedia.org/ontology/Scientist",
        },
        kind=ResourceKind.ENTITY,
        vocabulary=DBPEDIA,
    )

    assert record is not None
    assert record.types == frozenset({"Scientist"})


def test_local_name() -> None:
    assert local_name("http://dbpedia.org/ontology/Person") == "Person"
    assert local_name("http://xmlns.com/foaf/0.1/#Agent") == "Agent"
    assert local_name("human") == "human"


def test_parse_redirect_accepts_joined_and_tabbed_sources() -> None:
    edge = parse_redirect(
        [
            "<http://www.wikidata.org/entity/Q1>",
            "http://www.wikidata.org/entity/Q2;http://www.wikidata.org/entity/Q3",
            "<http://www.wikidata.org/entity/Q4>",
            "not an id",
        ],
        vocabulary=WIKIDATA,
    )

    assert edge is not None
    assert edge.canonical_id == "Q1"
    assert edge.source_ids == frozenset({"Q2", "Q3", "Q4"})


def test_parse_redirect_rejects_unusable_canonical() -> None:
    assert parse_redirect(["garbage", "Q2"], vocabulary=WIKIDATA) is None
