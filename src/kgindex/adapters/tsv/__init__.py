"""Public interface for the TSV adapter."""

from __future__ import annotations

from .reader import ParseResult, RedirectParseResult, read_records, read_redirects
from .schema import ResourceRow, split_values, unwrap_term
from .translator import parse_record, parse_redirect
from .writer import (
    INDEX_FILE,
    INVERSES_FILE,
    PREFIXES_FILE,
    REDIRECTS_FILE,
    IdFormatter,
    OutputBundle,
    index_lines,
    inverse_lines,
    prefix_lines,
    redirect_lines,
)

__all__ = [
    "INDEX_FILE",
    "INVERSES_FILE",
    "PREFIXES_FILE",
    "REDIRECTS_FILE",
    "IdFormatter",
    "OutputBundle",
    "ParseResult",
    "RedirectParseResult",
    "ResourceRow",
    "index_lines",
    "inverse_lines",
    "parse_record",
    "parse_redirect",
    "prefix_lines",
    "read_records",
    "read_redirects",
    "redirect_lines",
    "split_values",
    "unwrap_term",
]
