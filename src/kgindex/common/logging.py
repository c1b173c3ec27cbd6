"""Shared logging helpers for kgindex."""

from __future__ import annotations

import logging


def configure_logging(*, level: int | str = logging.INFO, force: bool = False) -> None:
    """Initialise the root logger once with sensible defaults.

    Parameters mirror ``logging.basicConfig`` with a simplified contract: we default
    to INFO level and a terse format suitable for CLI output. ``level`` also accepts
    level names such as ``"DEBUG"``. Pass ``force=True`` to reconfigure during tests
    or specialised entry points.
    """

    if isinstance(level, str):
        level = level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
