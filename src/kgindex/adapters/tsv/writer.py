"""Index emission: ordering, id formatting and atomic TSV output.

All files of one run are staged as temporary files next to their targets and
only moved into place once every file has been written. Files being replaced
are set aside first; if a move fails, the files already moved are taken out
again and the set-aside ones restored, so a failing run leaves the previous
output in place.
"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from kgindex.domain.errors import OutputError

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from kgindex.domain.model import IdFormat, InversePropertyPair, ResolvedEntry, ResourceKind
    from kgindex.domain.vocabulary import GraphVocabulary, Namespace

log = logging.getLogger(__name__)

INDEX_FILE = "index.tsv"
INVERSES_FILE = "inverses.tsv"
PREFIXES_FILE = "prefixes.tsv"
REDIRECTS_FILE = "redirects.tsv"


def sort_entries(entries: Iterable[ResolvedEntry]) -> list[ResolvedEntry]:
    """Popularity descending, then surface form ascending."""

    return sorted(entries, key=lambda entry: (-entry.popularity, entry.surface_form))


def sort_inverse_pairs(pairs: Iterable[InversePropertyPair]) -> list[InversePropertyPair]:
    return sorted(pairs, key=lambda pair: (-pair.popularity, pair.property_id))


def _cell(value: str | None) -> str:
    if value is None:
        return ""
    return " ".join(value.replace("\t", " ").splitlines())


@dataclass(frozen=True, slots=True)
class IdFormatter:
    vocabulary: GraphVocabulary
    kind: ResourceKind
    id_format: IdFormat

    def __call__(self, resource_id: str, namespace: str | None = None) -> str:
        return self.vocabulary.format_id(
            resource_id, self.kind, self.id_format, namespace=namespace
        )


def index_lines(
    entries: Iterable[ResolvedEntry],
    *,
    format_id: IdFormatter,
    include_descriptions: bool = True,
    include_types: bool = False,
) -> list[str]:
    lines: list[str] = []
    for entry in sort_entries(entries):
        cells = [_cell(entry.surface_form), format_id(entry.resolved_id, entry.namespace)]
        if include_descriptions:
            cells.append(_cell(entry.description))
        if include_types:
            cells.append(_cell(entry.type_summary))
        lines.append("\t".join(cells))
    return lines


def inverse_lines(pairs: Iterable[InversePropertyPair], *, format_id: IdFormatter) -> list[str]:
    return [
        f"{format_id(pair.property_id)}\t{format_id(pair.inverse_id)}"
        for pair in sort_inverse_pairs(pairs)
    ]


def prefix_lines(namespaces: Iterable[Namespace]) -> list[str]:
    return [f"{namespace.prefix}\t{namespace.uri}" for namespace in namespaces]


def redirect_lines(
    applied: Mapping[str, Iterable[str]], *, format_id: IdFormatter
) -> list[str]:
    """One row per canonical id: canonical, then its sources, sorted."""

    return [
        "\t".join([format_id(canonical_id), *(format_id(source) for source in sorted(sources))])
        for canonical_id, sources in sorted(applied.items())
    ]


@dataclass(slots=True)
class OutputBundle:
    """The files one run produces, written together into ``directory``."""

    directory: Path
    files: dict[str, Sequence[str]] = field(default_factory=dict)

    def add(self, name: str, lines: Sequence[str]) -> None:
        self.files[name] = lines

    @property
    def paths(self) -> tuple[Path, ...]:
        return tuple(self.directory / name for name in self.files)

    def write(self) -> tuple[Path, ...]:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise OutputError(self.directory, exc.strerror or str(exc)) from exc

        staged: list[tuple[Path, Path]] = []
        swapped: list[tuple[Path, Path | None]] = []
        try:
            for name, lines in self.files.items():
                target = self.directory / name
                staged.append((_stage(target, lines), target))
            for temporary, target in staged:
                try:
                    swapped.append((target, _set_aside(target)))
                    os.replace(temporary, target)
                except OSError as exc:
                    _roll_back(swapped)
                    raise OutputError(target, exc.strerror or str(exc)) from exc
        finally:
            for temporary, _target in staged:
                temporary.unlink(missing_ok=True)

        for target, backup in swapped:
            if backup is not None:
                _discard(backup)
            log.info("Wrote %d rows to %s", len(self.files[target.name]), target)
        return self.paths


def _set_aside(target: Path) -> Path | None:
    """Move an existing ``target`` to a backup name; return the backup path."""

    if not target.exists():
        return None
    backup = target.with_name(f".{target.name}.{os.getpid()}.bak")
    os.replace(target, backup)
    return backup


def _roll_back(swapped: Sequence[tuple[Path, Path | None]]) -> None:
    for target, backup in reversed(swapped):
        try:
            if backup is None:
                target.unlink(missing_ok=True)
            elif backup.exists():
                os.replace(backup, target)
        except OSError:
            log.exception("Could not restore %s", target)


def _discard(backup: Path) -> None:
    try:
        backup.unlink(missing_ok=True)
    except OSError as exc:
        log.warning("Could not remove backup %s: %s", backup, exc)


def _stage(target: Path, lines: Sequence[str]) -> Path:
    try:
        handle = tempfile.NamedTemporaryFile(  # noqa: SIM115
            "w",
            encoding="utf-8",
            newline="\n",
            dir=target.parent,
            prefix=f".{target.name}.",
            suffix=".tmp",
            delete=False,
        )
    except OSError as exc:
        raise OutputError(target, exc.strerror or str(exc)) from exc

    temporary = Path(handle.name)
    try:
        with handle:
            for line in lines:
                handle.write(line)
                handle.write("\n")
    except OSError as exc:
        temporary.unlink(missing_ok=True)
        raise OutputError(target, exc.strerror or str(exc)) from exc
    return temporary
