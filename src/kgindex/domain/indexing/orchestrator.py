"""Phase-based orchestrator for the index pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from kgindex.domain.model import ResourceKind

from .candidates import entity_candidates, property_candidates, warn_if_qualifiers_unsupported
from .info import disambiguate_with_info
from .inverses import resolve_inverses
from .policy import DropAmbiguous, KeepAllAliases
from .redirects import fold_redirects
from .resolve import resolve_candidates

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .context import IndexBuild, PipelineContext
    from .policy import AliasFilter, AmbiguityPolicy


class PipelinePhase(Protocol):
    """Contract implemented by each index phase."""

    name: str

    def run(self, build: IndexBuild, *, context: PipelineContext) -> None: ...


@dataclass(slots=True)
class IndexPipeline:
    """Compose and execute the ordered pipeline phases.

    Parsing happens before the pipeline and emission after it; every phase
    here needs the complete record set and therefore runs after all parser
    workers have finished.
    """

    phases: Sequence[PipelinePhase] = field(default_factory=tuple)

    def with_phase(self, phase: PipelinePhase) -> IndexPipeline:
        """Return a new pipeline appending ``phase`` at the end."""

        return IndexPipeline(phases=(*self.phases, phase))

    def run(self, build: IndexBuild, *, context: PipelineContext) -> IndexBuild:
        """Execute the configured phases in-order against ``build``."""

        for phase in self.phases:
            phase.run(build, context=context)
        return build


@dataclass(slots=True)
class RedirectFoldingPhase:
    """Consumes ``build.redirect_edges``; a no-op when no redirects were loaded."""

    name: str = "redirect_folding"

    def run(self, build: IndexBuild, *, context: PipelineContext) -> None:
        if not build.redirect_edges:
            return
        folding = fold_redirects(
            build.records,
            build.redirect_edges,
            vocabulary=context.vocabulary,
            counters=context.counters,
        )
        build.redirect_aliases = folding.aliases
        build.applied_redirects = folding.applied
        build.redirect_edges.clear()


@dataclass(slots=True)
class CandidateGenerationPhase:
    include_aliases: bool = True
    include_qualifiers: bool = False
    name: str = "candidate_generation"

    def run(self, build: IndexBuild, *, context: PipelineContext) -> None:
        if build.kind is ResourceKind.ENTITY:
            for record in build.records.values():
                build.candidates.extend(
                    entity_candidates(
                        record,
                        redirect_aliases=build.redirect_aliases.get(record.id, ()),
                        include_aliases=self.include_aliases,
                    )
                )
        else:
            qualifiers = self.include_qualifiers and warn_if_qualifiers_unsupported(
                context.vocabulary
            )
            for record in build.records.values():
                build.candidates.extend(
                    property_candidates(
                        record,
                        vocabulary=context.vocabulary,
                        include_aliases=self.include_aliases,
                        include_qualifiers=qualifiers,
                    )
                )
        context.counters.candidates = len(build.candidates)


@dataclass(slots=True)
class ResolutionPhase:
    ambiguity: AmbiguityPolicy = field(default_factory=DropAmbiguous)
    alias_filter: AliasFilter = field(default_factory=KeepAllAliases)
    include_types: bool = False
    collect_unresolved: bool = False
    name: str = "resolution"

    def run(self, build: IndexBuild, *, context: PipelineContext) -> None:
        build.entries = resolve_candidates(
            build.candidates,
            records=build.records,
            vocabulary=context.vocabulary,
            counters=context.counters,
            ambiguity=self.ambiguity,
            alias_filter=self.alias_filter,
            include_types=self.include_types,
            unresolved=build.unresolved if self.collect_unresolved else None,
        )
        build.candidates.clear()


@dataclass(slots=True)
class InverseResolutionPhase:
    name: str = "inverse_resolution"

    def run(self, build: IndexBuild, *, context: PipelineContext) -> None:
        build.inverse_pairs = resolve_inverses(build.records, counters=context.counters)


@dataclass(slots=True)
class InfoDisambiguationPhase:
    """Re-offer ambiguity losers as ``label (info)`` forms; runs after resolution."""

    ambiguity: AmbiguityPolicy = field(default_factory=DropAmbiguous)
    include_types: bool = False
    name: str = "info_disambiguation"

    def run(self, build: IndexBuild, *, context: PipelineContext) -> None:
        if not build.unresolved:
            return
        build.entries.extend(
            disambiguate_with_info(
                build.unresolved,
                entries=build.entries,
                records=build.records,
                vocabulary=context.vocabulary,
                counters=context.counters,
                ambiguity=self.ambiguity,
                include_types=self.include_types,
            )
        )
        build.unresolved.clear()
        context.counters.entries = len(build.entries)
