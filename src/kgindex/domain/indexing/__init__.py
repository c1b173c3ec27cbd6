"""Index construction pipeline.

The pipeline runs as explicit, testable phases over one ``IndexBuild``:

1) fold redirect edges into extra surface forms (entities only)
2) generate (surface form, target) candidates per record
3) resolve every surface form to at most one target
   (optionally re-offering ambiguity losers as ``label (info)``, entities only)
4) resolve inverse-property pairs (properties only)

Phases share a ``PipelineContext`` holding the graph vocabulary and the
run-scoped counters reported in the run summary.
"""

from __future__ import annotations

from .context import IndexBuild, PipelineContext, RunCounters
from .orchestrator import (
    CandidateGenerationPhase,
    IndexPipeline,
    InfoDisambiguationPhase,
    InverseResolutionPhase,
    PipelinePhase,
    RedirectFoldingPhase,
    ResolutionPhase,
)
from .policy import (
    AliasFilter,
    AmbiguityPolicy,
    DropAmbiguous,
    KeepAllAliases,
    KeepMostCommon,
    PopularAliasFilter,
)
from .runner import entity_pipeline, property_pipeline, run_index_pipeline

__all__ = [
    "AliasFilter",
    "AmbiguityPolicy",
    "CandidateGenerationPhase",
    "DropAmbiguous",
    "IndexBuild",
    "IndexPipeline",
    "InfoDisambiguationPhase",
    "InverseResolutionPhase",
    "KeepAllAliases",
    "KeepMostCommon",
    "PipelineContext",
    "PipelinePhase",
    "PopularAliasFilter",
    "RedirectFoldingPhase",
    "ResolutionPhase",
    "RunCounters",
    "entity_pipeline",
    "property_pipeline",
    "run_index_pipeline",
]
