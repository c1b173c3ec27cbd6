"""Entry points for assembling and running the default index pipelines."""

from __future__ import annotations

from typing import TYPE_CHECKING

from kgindex.domain.model import AmbiguityMode, ResourceKind

from .context import IndexBuild, PipelineContext
from .orchestrator import (
    CandidateGenerationPhase,
    IndexPipeline,
    InfoDisambiguationPhase,
    InverseResolutionPhase,
    RedirectFoldingPhase,
    ResolutionPhase,
)
from .policy import alias_filter_for, ambiguity_policy_for

if TYPE_CHECKING:
    from collections.abc import Iterable

    from kgindex.domain.model import RedirectEdge, ResourceRecord


def entity_pipeline(
    *,
    ambiguity: AmbiguityMode = AmbiguityMode.DROP,
    check_popular_aliases: bool = False,
    include_aliases: bool = True,
    include_types: bool = False,
    disambiguate_with_info: bool = False,
) -> IndexPipeline:
    """Redirect folding, candidate generation and resolution for entities.

    With ``disambiguate_with_info`` the resources that lost a surface form to
    ambiguity are offered again as ``label (info)``.
    """

    policy = ambiguity_policy_for(ambiguity)
    pipeline = IndexPipeline(
        phases=(
            RedirectFoldingPhase(),
            CandidateGenerationPhase(include_aliases=include_aliases),
            ResolutionPhase(
                ambiguity=policy,
                alias_filter=alias_filter_for(check_popular_aliases=check_popular_aliases),
                include_types=include_types,
                collect_unresolved=disambiguate_with_info,
            ),
        )
    )
    if disambiguate_with_info:
        pipeline = pipeline.with_phase(
            InfoDisambiguationPhase(ambiguity=policy, include_types=include_types)
        )
    return pipeline


def property_pipeline(
    *,
    ambiguity: AmbiguityMode = AmbiguityMode.DROP,
    check_popular_aliases: bool = False,
    include_aliases: bool = True,
    include_qualifiers: bool = False,
    include_inverses: bool = True,
) -> IndexPipeline:
    """Candidate generation, resolution and (optionally) inverse resolution for properties."""

    pipeline = IndexPipeline(
        phases=(
            CandidateGenerationPhase(
                include_aliases=include_aliases,
                include_qualifiers=include_qualifiers,
            ),
            ResolutionPhase(
                ambiguity=ambiguity_policy_for(ambiguity),
                alias_filter=alias_filter_for(check_popular_aliases=check_popular_aliases),
            ),
        )
    )
    if include_inverses:
        pipeline = pipeline.with_phase(InverseResolutionPhase())
    return pipeline


def build_from_records(
    kind: ResourceKind,
    records: Iterable[ResourceRecord],
    *,
    context: PipelineContext,
    redirect_edges: Iterable[RedirectEdge] = (),
) -> IndexBuild:
    """Collect parsed records (first occurrence of an id wins) into a fresh build."""

    build = IndexBuild(kind=kind, redirect_edges=list(redirect_edges))
    for record in records:
        if not build.add_record(record):
            context.counters.duplicate_records += 1
    return build


def run_index_pipeline(
    pipeline: IndexPipeline,
    kind: ResourceKind,
    records: Iterable[ResourceRecord],
    *,
    context: PipelineContext,
    redirect_edges: Iterable[RedirectEdge] = (),
) -> IndexBuild:
    build = build_from_records(kind, records, context=context, redirect_edges=redirect_edges)
    return pipeline.run(build, context=context)
