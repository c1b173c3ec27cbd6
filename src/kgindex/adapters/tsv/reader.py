"""Readers for entity/property exports and redirect files.

Data rows are parsed in fixed-size chunks. With more than one worker the
chunks are handed to a thread pool; results are consumed in submission order,
so the parsed record sequence never depends on scheduling.

Every line after the header is a row. Blank lines and lines that are not
valid UTF-8 are skipped and counted like any other malformed row.
"""

from __future__ import annotations

import logging
from collections import deque
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from itertools import batched
from typing import TYPE_CHECKING

from tqdm import tqdm

from kgindex.config import DEFAULT_CHUNK_SIZE, DEFAULT_WORKERS
from kgindex.domain.errors import InputFileError, InputFormatError

from .schema import COLUMN_ALIASES, REQUIRED_COLUMNS
from .translator import parse_record, parse_redirect

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping, Sequence
    from concurrent.futures import Future
    from pathlib import Path
    from typing import TextIO

    from kgindex.domain.model import RedirectEdge, ResourceKind, ResourceRecord
    from kgindex.domain.vocabulary import GraphVocabulary

log = logging.getLogger(__name__)

type Chunk = tuple[tuple[int, str], ...]


@dataclass(frozen=True, slots=True)
class ColumnLayout:
    """Positions of the known logical columns inside a header."""

    width: int
    positions: Mapping[str, int]

    @classmethod
    def from_header(cls, header: str, *, path: Path) -> ColumnLayout:
        header = header.rstrip("\r\n")
        if not header.strip():
            raise InputFormatError(path, "missing header line")

        names = [cell.strip().lstrip("?").lower() for cell in header.split("\t")]
        positions: dict[str, int] = {}
        for index, name in enumerate(names):
            column = COLUMN_ALIASES.get(name)
            if column is None:
                log.debug("Ignoring unknown column %r in %s", name, path)
                continue
            positions.setdefault(column, index)

        missing = [column for column in REQUIRED_COLUMNS if column not in positions]
        if missing:
            raise InputFormatError(
                path, f"header has no {' or '.join(missing)} column ({', '.join(names)})"
            )
        return cls(width=len(names), positions=positions)

    def values(self, cells: Sequence[str]) -> dict[str, str]:
        return {column: cells[index] for column, index in self.positions.items()}


@dataclass(frozen=True, slots=True)
class ChunkResult:
    records: list[ResourceRecord] = field(default_factory=list["ResourceRecord"])
    rows: int = 0
    skipped: int = 0


@dataclass(frozen=True, slots=True)
class RecordParser:
    """Turns raw data lines into records for one file layout."""

    path: Path
    layout: ColumnLayout
    kind: ResourceKind
    vocabulary: GraphVocabulary

    def parse_chunk(self, chunk: Chunk) -> ChunkResult:
        records: list[ResourceRecord] = []
        rows = 0
        for line_number, line in chunk:
            rows += 1
            record = self.parse_line(line_number, line)
            if record is not None:
                records.append(record)
        return ChunkResult(records=records, rows=rows, skipped=rows - len(records))

    def parse_line(self, line_number: int, line: str) -> ResourceRecord | None:
        if not line.strip():
            log.debug("Skipping %s:%d: blank line", self.path.name, line_number)
            return None
        if not _is_decodable(line):
            log.debug("Skipping %s:%d: not valid UTF-8", self.path.name, line_number)
            return None
        cells = line.split("\t")
        if len(cells) != self.layout.width:
            log.debug(
                "Skipping %s:%d: expected %d columns, found %d",
                self.path.name,
                line_number,
                self.layout.width,
                len(cells),
            )
            return None
        try:
            record = parse_record(
                self.layout.values(cells), kind=self.kind, vocabulary=self.vocabulary
            )
        except ValueError as exc:
            log.debug("Skipping %s:%d: %s", self.path.name, line_number, exc)
            return None
        if record is None:
            log.debug("Skipping %s:%d: unusable identifier", self.path.name, line_number)
        return record


@dataclass(frozen=True, slots=True)
class ParseResult:
    records: tuple[ResourceRecord, ...]
    rows_read: int
    rows_skipped: int


@dataclass(frozen=True, slots=True)
class RedirectParseResult:
    edges: tuple[RedirectEdge, ...]
    rows_read: int
    rows_skipped: int


def read_records(
    path: Path,
    *,
    kind: ResourceKind,
    vocabulary: GraphVocabulary,
    workers: int = DEFAULT_WORKERS,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    progress: bool = False,
) -> ParseResult:
    """Parse an entity or property export into records, skipping malformed rows."""

    records: list[ResourceRecord] = []
    rows_read = 0
    rows_skipped = 0
    try:
        with path.open(encoding="utf-8-sig", errors="surrogateescape", newline="") as handle:
            layout = ColumnLayout.from_header(handle.readline(), path=path)
            parser = RecordParser(path=path, layout=layout, kind=kind, vocabulary=vocabulary)
            with tqdm(
                desc=f"Parsing {path.name}", unit="rows", disable=not progress
            ) as progress_bar:
                for result in _parse_chunks(
                    parser, _chunks(handle, chunk_size), workers=workers
                ):
                    records.extend(result.records)
                    rows_read += result.rows
                    rows_skipped += result.skipped
                    progress_bar.update(result.rows)
    except OSError as exc:
        raise InputFileError(path, exc.strerror or str(exc)) from exc

    if rows_skipped:
        log.info("Skipped %d of %d rows in %s", rows_skipped, rows_read, path)
    return ParseResult(records=tuple(records), rows_read=rows_read, rows_skipped=rows_skipped)


def read_redirects(path: Path, *, vocabulary: GraphVocabulary) -> RedirectParseResult:
    """Parse a redirect file; rows without a usable canonical or source id are skipped."""

    edges: list[RedirectEdge] = []
    rows_read = 0
    first_line = True
    try:
        with path.open(encoding="utf-8-sig", errors="surrogateescape", newline="") as handle:
            for line_number, line in _data_lines(handle):
                if first_line:
                    first_line = False
                    if line.startswith("?"):
                        continue
                rows_read += 1
                edge = (
                    parse_redirect(line.split("\t"), vocabulary=vocabulary)
                    if _is_decodable(line)
                    else None
                )
                if edge is None:
                    log.debug("Skipping %s:%d: unusable redirect row", path.name, line_number)
                    continue
                edges.append(edge)
    except OSError as exc:
        raise InputFileError(path, exc.strerror or str(exc)) from exc

    rows_skipped = rows_read - len(edges)
    if rows_skipped:
        log.info("Skipped %d of %d redirect rows in %s", rows_skipped, rows_read, path)
    return RedirectParseResult(edges=tuple(edges), rows_read=rows_read, rows_skipped=rows_skipped)


def _data_lines(handle: TextIO, *, start: int = 1) -> Iterator[tuple[int, str]]:
    for line_number, line in enumerate(handle, start=start):
        yield line_number, line.rstrip("\r\n")


def _is_decodable(line: str) -> bool:
    # undecodable bytes survive as lone surrogates (errors="surrogateescape")
    try:
        line.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def _chunks(handle: TextIO, chunk_size: int) -> Iterator[Chunk]:
    # line 1 is the header
    return batched(_data_lines(handle, start=2), chunk_size)


def _parse_chunks(
    parser: RecordParser,
    chunks: Iterable[Chunk],
    *,
    workers: int,
) -> Iterator[ChunkResult]:
    if workers <= 1:
        for chunk in chunks:
            yield parser.parse_chunk(chunk)
        return

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="kgindex-parse") as executor:
        pending: deque[Future[ChunkResult]] = deque()
        for chunk in chunks:
            pending.append(executor.submit(parser.parse_chunk, chunk))
            if len(pending) >= workers * 2:
                yield pending.popleft().result()
        while pending:
            yield pending.popleft().result()
