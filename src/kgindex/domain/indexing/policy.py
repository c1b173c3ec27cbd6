"""Ambiguity and alias-filter policies for surface-form resolution.

Two orthogonal strategies are composed by the resolver:

- an ``AliasFilter`` prunes alias candidates from a surface-form group before
  ambiguity is evaluated
- an ``AmbiguityPolicy`` decides what survives of a group that still points
  at more than one target

Both operate on groups in which every target appears once.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from kgindex.domain.model import AmbiguityMode, Provenance

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from kgindex.domain.model import Candidate


class AmbiguityPolicy(Protocol):
    """Pick the surviving candidate of an ambiguous group, or ``None`` to drop it."""

    name: str

    def choose(self, candidates: Sequence[Candidate]) -> Candidate | None: ...


class AliasFilter(Protocol):
    """Remove alias candidates from a group; return survivors and the discard count."""

    name: str

    def __call__(self, candidates: Sequence[Candidate]) -> tuple[list[Candidate], int]: ...


def pick_most_popular[T](
    items: Iterable[T],
    *,
    popularity: Callable[[T], int],
    tiebreak: Callable[[T], tuple[object, ...]],
) -> T:
    """Return the item with maximal popularity; ties go to the smallest ``tiebreak``."""

    return min(items, key=lambda item: (-popularity(item), *tiebreak(item)))


def candidate_tiebreak(candidate: Candidate) -> tuple[object, ...]:
    return (candidate.provenance.rank, candidate.id, candidate.namespace or "")


@dataclass(frozen=True, slots=True)
class DropAmbiguous:
    name: str = "drop-ambiguous"

    def choose(self, candidates: Sequence[Candidate]) -> Candidate | None:
        return None


@dataclass(frozen=True, slots=True)
class KeepMostCommon:
    """Keep the most popular candidate; prefer primary names, then the smaller id."""

    name: str = "keep-most-common"

    def choose(self, candidates: Sequence[Candidate]) -> Candidate | None:
        if not candidates:
            return None
        return pick_most_popular(
            candidates,
            popularity=lambda candidate: candidate.popularity,
            tiebreak=candidate_tiebreak,
        )


@dataclass(frozen=True, slots=True)
class KeepAllAliases:
    name: str = "keep-all-aliases"

    def __call__(self, candidates: Sequence[Candidate]) -> tuple[list[Candidate], int]:
        return list(candidates), 0


@dataclass(frozen=True, slots=True)
class PopularAliasFilter:
    """Discard aliases that would shadow a strictly more popular resource's own name."""

    name: str = "popular-alias-filter"

    def __call__(self, candidates: Sequence[Candidate]) -> tuple[list[Candidate], int]:
        primary_popularity = [
            candidate.popularity
            for candidate in candidates
            if candidate.provenance is Provenance.PRIMARY_NAME
        ]
        if not primary_popularity:
            return list(candidates), 0

        # targets are unique per group, so every primary name belongs to another target
        threshold = max(primary_popularity)
        kept = [
            candidate
            for candidate in candidates
            if not (candidate.provenance.is_alias and candidate.popularity < threshold)
        ]
        return kept, len(candidates) - len(kept)


def ambiguity_policy_for(mode: AmbiguityMode) -> AmbiguityPolicy:
    if mode is AmbiguityMode.KEEP_MOST_COMMON:
        return KeepMostCommon()
    return DropAmbiguous()


def alias_filter_for(*, check_popular_aliases: bool) -> AliasFilter:
    if check_popular_aliases:
        return PopularAliasFilter()
    return KeepAllAliases()
