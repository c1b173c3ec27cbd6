from __future__ import annotations

from collections.abc import Callable  # noqa: TC003
from pathlib import Path

import pytest

from kgindex.adapters.tsv import read_records, read_redirects
from kgindex.domain.errors import InputFileError, InputFormatError
from kgindex.domain.model import ResourceKind
from kgindex.domain.vocabulary import FREEBASE, WIKIDATA

from tests.helpers.tsv import ENTITY_HEADER, PROPERTY_HEADER, literal, wd

TsvWriter = Callable[..., Path]


def _entity_rows() -> list[list[str]]:
    return [
        [wd("Q90"), literal("Paris"), literal("capital of France"), "1000", "City of Light", ""],
        [wd("Q64"), literal("Berlin"), "", "800", "", wd("Q515")],
        # malformed: missing columns
        [wd("Q1"), literal("Universe")],
        # malformed: foreign id
        ["<http://dbpedia.org/resource/Rome>", literal("Rome"), "", "5", "", ""],
        # malformed: empty name
        [wd("Q2"), "", "", "5", "", ""],
        [wd("Q60"), literal("New York City"), "", "oops", "Big Apple;NYC", ""],
    ]


def test_reads_well_formed_rows_and_counts_skipped(write_tsv: TsvWriter) -> None:
    path = write_tsv("entities.tsv", ENTITY_HEADER, _entity_rows())

    result = read_records(path, kind=ResourceKind.ENTITY, vocabulary=WIKIDATA)

    assert [record.id for record in result.records] == ["Q90", "Q64", "Q60"]
    assert result.rows_read == 6
    assert result.rows_skipped == 3


def test_unparseable_popularity_defaults_to_zero(write_tsv: TsvWriter) -> None:
    path = write_tsv("entities.tsv", ENTITY_HEADER, _entity_rows())

    result = read_records(path, kind=ResourceKind.ENTITY, vocabulary=WIKIDATA)

    nyc = next(record for record in result.records if record.id == "Q60")
    assert nyc.popularity == 0
    assert nyc.aliases == frozenset({"Big Apple", "NYC"})


@pytest.mark.parametrize(("workers", "chunk_size"), [(1, 1), (3, 1), (4, 2), (2, 100)])
def test_parallel_parsing_preserves_input_order(
    write_tsv: TsvWriter, workers: int, chunk_size: int
) -> None:
    rows = [[wd(f"Q{i}"), literal(f"item {i}"), "", str(i), "", ""] for i in range(1, 40)]
    path = write_tsv("entities.tsv", ENTITY_HEADER, rows)

    result = read_records(
        path,
        kind=ResourceKind.ENTITY,
        vocabulary=WIKIDATA,
        workers=workers,
        chunk_size=chunk_size,
    )

    assert [record.id for record in result.records] == [f"Q{i}" for i in range(1, 40)]
    assert result.rows_skipped == 0


def test_columns_are_located_by_header_name(write_tsv: TsvWriter) -> None:
    header = "?p_count\t?domain\t?p_label\t?p"
    path = write_tsv(
        "properties.tsv",
        header,
        [
            [
                "12",
                "people.person",
                "place of birth",
                "http://rdf.freebase.com/ns/people.person.place_of_birth",
            ]
        ],
    )

    result = read_records(path, kind=ResourceKind.PROPERTY, vocabulary=FREEBASE)

    assert len(result.records) == 1
    record = result.records[0]
    assert record.id == "people.person.place_of_birth"
    assert record.primary_name == "place of birth (person)"
    assert record.popularity == 12
    assert record.aliases == frozenset()


def test_property_rows_with_inverses(write_tsv: TsvWriter) -> None:
    path = write_tsv(
        "properties.tsv",
        PROPERTY_HEADER,
        [
            [wd("P40"), literal("child"), "9", "", wd("P22")],
            [wd("P22"), literal("father"), "7", "dad", ""],
        ],
    )

    result = read_records(path, kind=ResourceKind.PROPERTY, vocabulary=WIKIDATA)

    assert result.records[0].inverses == frozenset({"P22"})
    assert result.records[1].aliases == frozenset({"dad"})


def test_missing_file_raises_input_file_error(tmp_path: Path) -> None:
    with pytest.raises(InputFileError):
        read_records(tmp_path / "missing.tsv", kind=ResourceKind.ENTITY, vocabulary=WIKIDATA)


def test_empty_file_raises_input_format_error(tmp_path: Path) -> None:
    path = tmp_path / "empty.tsv"
    path.write_text("", encoding="utf-8")

    with pytest.raises(InputFormatError):
        read_records(path, kind=ResourceKind.ENTITY, vocabulary=WIKIDATA)


def test_header_without_name_column_raises(write_tsv: TsvWriter) -> None:
    path = write_tsv("entities.tsv", "?ent\t?links", [[wd("Q1"), "3"]])

    with pytest.raises(InputFormatError, match="name"):
        read_records(path, kind=ResourceKind.ENTITY, vocabulary=WIKIDATA)


def test_read_redirects(write_tsv: TsvWriter) -> None:
    path = write_tsv(
        "redirects.tsv",
        "?target\t?sources",
        [
            [wd("Q1"), f"{wd('Q2')};{wd('Q3')}"],
            ["nonsense", wd("Q4")],
            [wd("Q5"), wd("Q6"), wd("Q7")],
        ],
    )

    result = read_redirects(path, vocabulary=WIKIDATA)

    assert [(edge.canonical_id, sorted(edge.source_ids)) for edge in result.edges] == [
        ("Q1", ["Q2", "Q3"]),
        ("Q5", ["Q6", "Q7"]),
    ]
    assert result.rows_read == 3
    assert result.rows_skipped == 1


def test_read_redirects_without_header(write_tsv: TsvWriter) -> None:
    path = write_tsv("redirects.tsv", None, [[wd("Q1"), wd("Q2")]])

    result = read_redirects(path, vocabulary=WIKIDATA)

    assert len(result.edges) == 1
    assert result.rows_skipped == 0


def _write_lines(path: Path, lines: list[bytes]) -> Path:
    path.write_bytes(b"\n".join(lines) + b"\n")
    return path


@pytest.mark.parametrize("workers", [1, 2])
def test_row_with_invalid_utf8_is_skipped_not_fatal(tmp_path: Path, workers: int) -> None:
    path = _write_lines(
        tmp_path / "entities.tsv",
        [
            ENTITY_HEADER.encode(),
            "\t".join([wd("Q1"), literal("Bob"), "", "5", "", ""]).encode(),
            "\t".join([wd("Q2"), '"Bad \xff"@en', "", "5", "", ""]).encode("latin-1"),
            "\t".join([wd("Q3"), literal("Zoë"), "", "5", "", ""]).encode(),
        ],
    )

    result = read_records(
        path, kind=ResourceKind.ENTITY, vocabulary=WIKIDATA, workers=workers, chunk_size=1
    )

    assert [record.id for record in result.records] == ["Q1", "Q3"]
    assert result.records[1].primary_name == "Zoë"
    assert result.rows_read == 3
    assert result.rows_skipped == 1


def test_redirect_row_with_invalid_utf8_is_skipped(tmp_path: Path) -> None:
    path = _write_lines(
        tmp_path / "redirects.tsv",
        [
            f"{wd('Q1')}\t{wd('Q2')}".encode(),
            f"{wd('Q5')}\t".encode() + b"<http://www.wikidata.org/entity/Q6\xff>",
            f"{wd('Q7')}\t{wd('Q8')}".encode(),
        ],
    )

    result = read_redirects(path, vocabulary=WIKIDATA)

    assert [edge.canonical_id for edge in result.edges] == ["Q1", "Q7"]
    assert result.rows_read == 3
    assert result.rows_skipped == 1


def test_blank_lines_are_counted_as_skipped_rows(write_tsv: TsvWriter) -> None:
    rows = [
        [wd("Q1"), literal("Bob"), "", "5", "", ""],
        ["   "],
        [""],
        [wd("Q2"), literal("Alice"), "", "5", "", ""],
    ]
    path = write_tsv("entities.tsv", ENTITY_HEADER, rows)

    result = read_records(path, kind=ResourceKind.ENTITY, vocabulary=WIKIDATA)

    assert [record.id for record in result.records] == ["Q1", "Q2"]
    assert result.rows_read == 4
    assert result.rows_skipped == 2
