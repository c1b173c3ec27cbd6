from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from kgindex.domain.indexing import PipelineContext
from kgindex.domain.vocabulary import WIKIDATA

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from pathlib import Path


@pytest.fixture
def wikidata_context() -> PipelineContext:
    return PipelineContext(vocabulary=WIKIDATA)


@pytest.fixture
def write_tsv(tmp_path: Path) -> Callable[..., Path]:
    """Write ``header`` and ``rows`` (lists of cells) as a TSV file under ``tmp_path``."""

    def writer(name: str, header: str | None, rows: Iterable[Iterable[str]]) -> Path:
        path = tmp_path / name
        lines = [header] if header is not None else []
        lines.extend("\t".join(row) for row in rows)
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return writer


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("KGINDEX_WORKERS", "KGINDEX_CHUNK_SIZE", "KGINDEX_ID_FORMAT", "KGINDEX_PROGRESS"):
        monkeypatch.delenv(name, raising=False)
