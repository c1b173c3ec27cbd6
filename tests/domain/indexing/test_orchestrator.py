from __future__ import annotations

from dataclasses import dataclass

from kgindex.domain.indexing import (
    IndexBuild,
    IndexPipeline,
    PipelineContext,
    PipelinePhase,
    entity_pipeline,
    property_pipeline,
    run_index_pipeline,
)
from kgindex.domain.model import AmbiguityMode, RedirectEdge, ResourceKind
from kgindex.domain.vocabulary import FREEBASE, WIKIDATA

from tests.helpers.records import make_record


@dataclass(slots=True)
class _RecordingPhase(PipelinePhase):
    name: str
    calls: list[str]

    def run(self, build: IndexBuild, *, context: PipelineContext) -> None:
        _ = (build, context)
        self.calls.append(self.name)


def test_pipeline_runs_phases_in_order() -> None:
    calls: list[str] = []
    first = _RecordingPhase(name="first", calls=calls)
    second = _RecordingPhase(name="second", calls=calls)
    pipeline = IndexPipeline(phases=(first,)).with_phase(second)

    pipeline.run(IndexBuild(kind=ResourceKind.ENTITY), context=PipelineContext(WIKIDATA))

    assert calls == ["first", "second"]


def test_duplicate_record_ids_keep_first_and_are_counted() -> None:
    context = PipelineContext(vocabulary=WIKIDATA)
    records = [make_record("Q1", "Bob", 1), make_record("Q1", "Robert", 2)]

    build = run_index_pipeline(entity_pipeline(), ResourceKind.ENTITY, records, context=context)

    assert build.records["Q1"].primary_name == "Bob"
    assert context.counters.duplicate_records == 1


def test_entity_pipeline_folds_redirect_with_canonical_popularity() -> None:
    context = PipelineContext(vocabulary=WIKIDATA)
    records = [make_record("Q1", "Bob", 50), make_record("Q9", "Robert", 7)]
    edges = [RedirectEdge(canonical_id="Q1", source_ids=frozenset({"Q9"}))]

    build = run_index_pipeline(
        entity_pipeline(), ResourceKind.ENTITY, records, context=context, redirect_edges=edges
    )

    mapping = {entry.surface_form: (entry.resolved_id, entry.popularity) for entry in build.entries}
    assert mapping == {"Bob": ("Q1", 50), "Robert": ("Q1", 50)}
    assert build.applied_redirects == {"Q1": frozenset({"Q9"})}
    assert build.redirect_edges == []
    assert context.counters.candidates == 2


def test_keep_most_common_is_order_independent() -> None:
    forward = [make_record("Q7", "Bob", 10), make_record("Q3", "Bob", 10)]
    backward = list(reversed(forward))

    results = []
    for records in (forward, backward):
        context = PipelineContext(vocabulary=WIKIDATA)
        build = run_index_pipeline(
            entity_pipeline(ambiguity=AmbiguityMode.KEEP_MOST_COMMON),
            ResourceKind.ENTITY,
            records,
            context=context,
        )
        results.append([(entry.surface_form, entry.resolved_id) for entry in build.entries])

    assert results[0] == results[1] == [("Bob", "Q3")]


def test_property_pipeline_resolves_inverses() -> None:
    context = PipelineContext(vocabulary=WIKIDATA)
    records = [
        make_record("P1", "parent", 10, inverses=["P2"]),
        make_record("P2", "child", 5),
    ]

    build = run_index_pipeline(property_pipeline(), ResourceKind.PROPERTY, records, context=context)

    assert {(pair.property_id, pair.inverse_id) for pair in build.inverse_pairs} == {
        ("P1", "P2"),
        ("P2", "P1"),
    }


def test_property_pipeline_without_inverses() -> None:
    context = PipelineContext(vocabulary=WIKIDATA)
    records = [make_record("P1", "parent", 10, inverses=["P2"]), make_record("P2", "child", 5)]

    build = run_index_pipeline(
        property_pipeline(include_inverses=False), ResourceKind.PROPERTY, records, context=context
    )

    assert build.inverse_pairs == []


def test_qualifier_expansion_is_skipped_for_graphs_without_schema() -> None:
    context = PipelineContext(vocabulary=FREEBASE)
    records = [make_record("people.person.place_of_birth", "place of birth (person)", 3)]

    build = run_index_pipeline(
        property_pipeline(include_qualifiers=True),
        ResourceKind.PROPERTY,
        records,
        context=context,
    )

    assert [entry.surface_form for entry in build.entries] == ["place of birth (person)"]
