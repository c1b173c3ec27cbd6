"""Fatal error kinds of an index build.

Row-level defects, numeric defects and redirect/inverse conflicts are recovered
locally and only counted; everything here aborts the run before any output is
written.
"""

from __future__ import annotations

from pathlib import Path


class IndexBuildError(RuntimeError):
    """Base class for errors that abort an index build."""


class InputFileError(IndexBuildError):
    """Raised when an input file is missing or unreadable."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read input file {path}: {reason}")


class InputFormatError(IndexBuildError):
    """Raised when an input file cannot be interpreted at all (bad or missing header)."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid input file {path}: {reason}")


class OutputError(IndexBuildError):
    """Raised when an output file cannot be written."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot write output file {path}: {reason}")
