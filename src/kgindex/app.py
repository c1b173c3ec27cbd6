"""Application orchestration entry points."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from kgindex.adapters.tsv import (
    INDEX_FILE,
    INVERSES_FILE,
    PREFIXES_FILE,
    REDIRECTS_FILE,
    IdFormatter,
    OutputBundle,
    index_lines,
    inverse_lines,
    prefix_lines,
    read_records,
    read_redirects,
    redirect_lines,
)
from kgindex.domain.indexing import (
    PipelineContext,
    entity_pipeline,
    property_pipeline,
    run_index_pipeline,
)
from kgindex.domain.model import IdFormat, ResourceKind
from kgindex.domain.vocabulary import vocabulary_for

if TYPE_CHECKING:
    from pathlib import Path

    from kgindex.config import IndexConfig
    from kgindex.domain.indexing import RunCounters
    from kgindex.domain.model import KnowledgeGraph, RedirectEdge, ResourceRecord


log = getLogger(__name__)

_ENTITY_ONLY_COUNTERS = frozenset(
    {
        "redirect_rows_skipped",
        "records_folded",
        "redirects_applied",
        "redirect_conflicts",
        "redirects_unlabeled",
        "redirects_dangling",
        "info_entries",
        "info_missing",
        "info_collisions",
    }
)
_PROPERTY_ONLY_COUNTERS = frozenset(
    {
        "inverse_pairs_declared",
        "inverse_pairs_synthetic",
        "inverse_conflicts",
        "inverses_unknown",
    }
)


@dataclass(frozen=True, slots=True)
class RunSummary:
    """Counters and output files of one finished index build."""

    kind: ResourceKind
    knowledge_graph: KnowledgeGraph
    input_path: Path
    output_files: tuple[Path, ...]
    counters: RunCounters

    @property
    def records_read(self) -> int:
        return self.counters.records_read

    @property
    def rows_skipped(self) -> int:
        return self.counters.rows_skipped

    def render(self) -> str:
        hidden = (
            _PROPERTY_ONLY_COUNTERS if self.kind is ResourceKind.ENTITY else _ENTITY_ONLY_COUNTERS
        )
        lines = [f"{self.kind} index ({self.knowledge_graph}) from {self.input_path}"]
        lines.extend(
            f"  {name.replace('_', ' ')}: {value}"
            for name, value in self.counters.as_dict().items()
            if name not in hidden
        )
        lines.extend(f"  wrote {path}" for path in self.output_files)
        return "\n".join(lines)


def build_entity_index(input_path: Path, output_dir: Path, config: IndexConfig) -> RunSummary:
    """Build ``index.tsv`` (plus redirects/prefixes where configured) for an entity export."""

    kind = ResourceKind.ENTITY
    vocabulary = vocabulary_for(config.knowledge_graph)
    context = PipelineContext(vocabulary=vocabulary)
    log.info(
        "Starting entity index: input=%s, graph=%s, ambiguity=%s, popular_aliases=%s, "
        "redirects=%s, info=%s, workers=%s",
        input_path,
        config.knowledge_graph,
        config.ambiguity,
        config.check_popular_aliases,
        config.redirects,
        config.disambiguate_with_info,
        config.workers,
    )

    records = _read_records(input_path, kind, config, context)
    edges: tuple[RedirectEdge, ...] = ()
    if config.redirects is not None:
        redirects = read_redirects(config.redirects, vocabulary=vocabulary)
        context.counters.redirect_rows_skipped = redirects.rows_skipped
        edges = redirects.edges

    pipeline = entity_pipeline(
        ambiguity=config.ambiguity,
        check_popular_aliases=config.check_popular_aliases,
        include_aliases=config.include_aliases,
        include_types=config.include_types,
        disambiguate_with_info=config.disambiguate_with_info,
    )
    build = run_index_pipeline(pipeline, kind, records, context=context, redirect_edges=edges)

    format_id = IdFormatter(vocabulary=vocabulary, kind=kind, id_format=config.id_format)
    bundle = OutputBundle(output_dir)
    bundle.add(
        INDEX_FILE,
        index_lines(
            build.entries,
            format_id=format_id,
            include_descriptions=config.include_descriptions,
            include_types=config.include_types,
        ),
    )
    if config.redirects is not None:
        bundle.add(REDIRECTS_FILE, redirect_lines(build.applied_redirects, format_id=format_id))
    if config.id_format is IdFormat.PREFIXED:
        bundle.add(PREFIXES_FILE, prefix_lines(vocabulary.prefixes(kind)))

    return _finish(kind, input_path, bundle, config, context)


def build_property_index(input_path: Path, output_dir: Path, config: IndexConfig) -> RunSummary:
    """Build ``index.tsv`` and ``inverses.tsv`` for a property export."""

    kind = ResourceKind.PROPERTY
    vocabulary = vocabulary_for(config.knowledge_graph)
    context = PipelineContext(vocabulary=vocabulary)
    log.info(
        "Starting property index: input=%s, graph=%s, ambiguity=%s, popular_aliases=%s, "
        "qualifiers=%s, inverses=%s, workers=%s",
        input_path,
        config.knowledge_graph,
        config.ambiguity,
        config.check_popular_aliases,
        config.include_qualifiers,
        config.include_inverses,
        config.workers,
    )

    records = _read_records(input_path, kind, config, context)
    pipeline = property_pipeline(
        ambiguity=config.ambiguity,
        check_popular_aliases=config.check_popular_aliases,
        include_aliases=config.include_aliases,
        include_qualifiers=config.include_qualifiers,
        include_inverses=config.include_inverses,
    )
    build = run_index_pipeline(pipeline, kind, records, context=context)

    format_id = IdFormatter(vocabulary=vocabulary, kind=kind, id_format=config.id_format)
    bundle = OutputBundle(output_dir)
    bundle.add(
        INDEX_FILE,
        index_lines(
            build.entries,
            format_id=format_id,
            include_descriptions=config.include_descriptions,
        ),
    )
    if config.include_inverses:
        bundle.add(INVERSES_FILE, inverse_lines(build.inverse_pairs, format_id=format_id))
    if config.id_format is IdFormat.PREFIXED:
        namespaces = vocabulary.prefixes(kind, include_qualifiers=config.include_qualifiers)
        bundle.add(PREFIXES_FILE, prefix_lines(namespaces))

    return _finish(kind, input_path, bundle, config, context)


def _read_records(
    input_path: Path,
    kind: ResourceKind,
    config: IndexConfig,
    context: PipelineContext,
) -> tuple[ResourceRecord, ...]:
    parsed = read_records(
        input_path,
        kind=kind,
        vocabulary=context.vocabulary,
        workers=config.workers,
        chunk_size=config.chunk_size,
        progress=config.progress,
    )
    context.counters.records_read = len(parsed.records)
    context.counters.rows_skipped = parsed.rows_skipped
    return parsed.records


def _finish(
    kind: ResourceKind,
    input_path: Path,
    bundle: OutputBundle,
    config: IndexConfig,
    context: PipelineContext,
) -> RunSummary:
    written = bundle.write()
    counters = context.counters
    log.info(
        f"Finished {kind} index: records={counters.records_read}, "
        f"skipped={counters.rows_skipped}, entries={counters.entries}, "
        f"ambiguous_dropped={counters.ambiguous_dropped}"
    )
    return RunSummary(
        kind=kind,
        knowledge_graph=config.knowledge_graph,
        input_path=input_path,
        output_files=written,
        counters=counters,
    )
