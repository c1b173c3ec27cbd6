from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING, NoReturn

from dotenv import load_dotenv

from kgindex.app import build_entity_index, build_property_index
from kgindex.config import ConfigurationError, configure_logging, get_index_config
from kgindex.domain.errors import IndexBuildError
from kgindex.domain.model import AmbiguityMode, IdFormat, KnowledgeGraph

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from kgindex.app import RunSummary

log = logging.getLogger(__name__)


class _ArgumentError(ValueError):
    """Raised instead of argparse's own exit so usage errors share exit code 2."""


class _Parser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        raise _ArgumentError(message)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--file",
        type=Path,
        required=True,
        help="TSV export with one resource per row (first line is the header)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        required=True,
        help="Directory receiving index.tsv and companion files",
    )
    parser.add_argument(
        "--knowledge-graph",
        choices=[graph.value for graph in KnowledgeGraph],
        required=True,
        help="Knowledge graph the export was taken from",
    )
    parser.add_argument(
        "--id-format",
        choices=[id_format.value for id_format in IdFormat],
        default=None,
        help="How identifiers are written (defaults to config, bare)",
    )
    parser.add_argument(
        "--keep-most-common",
        action="store_true",
        help="Keep the most popular resource for ambiguous surface forms",
    )
    parser.add_argument(
        "--check-for-popular-aliases",
        action="store_true",
        help="Drop aliases shadowed by a more popular resource's primary name",
    )
    parser.add_argument(
        "--no-descriptions",
        action="store_true",
        help="Omit the description column",
    )
    parser.add_argument(
        "--no-aliases",
        action="store_true",
        help="Index primary names only",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of parser threads (defaults to config)",
    )
    parser.add_argument(
        "--chunk-size",
        type=int,
        default=None,
        help="Rows handed to a parser thread at once (defaults to config)",
    )
    parser.add_argument(
        "--progress",
        action="store_true",
        default=None,
        help="Show a progress bar while parsing",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (default: %(default)s)",
    )


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = _Parser(description="Build surface-form lookup indices for knowledge graphs")
    subparsers = parser.add_subparsers(dest="command", required=True, parser_class=_Parser)

    entities = subparsers.add_parser("entities", help="Build an entity index")
    _add_common_arguments(entities)
    entities.add_argument(
        "--redirects",
        type=Path,
        help="TSV file of redirects (canonical id, then redirected ids)",
    )
    entities.add_argument(
        "--include-types",
        action="store_true",
        help="Add a column with the most popular type of each resource",
    )
    entities.add_argument(
        "--disambiguate-with-info",
        action="store_true",
        help='Also index names lost to ambiguity as "name (type or description)"',
    )

    properties = subparsers.add_parser("properties", help="Build a property index")
    _add_common_arguments(properties)
    properties.add_argument(
        "--include-qualifiers",
        action="store_true",
        help="Add statement/qualifier/value variants of every property name (wikidata)",
    )
    properties.add_argument(
        "--no-inverses",
        action="store_true",
        help="Do not write inverses.tsv",
    )

    return parser.parse_args(list(argv))


def _run(parsed_args: argparse.Namespace) -> RunSummary:
    overrides: dict[str, object] = {
        "id_format": parsed_args.id_format,
        "ambiguity": AmbiguityMode.KEEP_MOST_COMMON if parsed_args.keep_most_common else None,
        "check_popular_aliases": parsed_args.check_for_popular_aliases or None,
        "include_descriptions": False if parsed_args.no_descriptions else None,
        "include_aliases": False if parsed_args.no_aliases else None,
        "workers": parsed_args.workers,
        "chunk_size": parsed_args.chunk_size,
        "progress": parsed_args.progress,
    }
    if parsed_args.command == "entities":
        overrides["redirects"] = parsed_args.redirects
        overrides["include_types"] = parsed_args.include_types or None
        overrides["disambiguate_with_info"] = parsed_args.disambiguate_with_info or None
        config = get_index_config(parsed_args.knowledge_graph, **overrides)
        return build_entity_index(parsed_args.file, parsed_args.output, config)

    overrides["include_qualifiers"] = parsed_args.include_qualifiers or None
    overrides["include_inverses"] = False if parsed_args.no_inverses else None
    config = get_index_config(parsed_args.knowledge_graph, **overrides)
    return build_property_index(parsed_args.file, parsed_args.output, config)


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        configure_logging(level=parsed_args.log_level)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)  # noqa: T201
        sys.exit(2)

    try:
        summary = _run(parsed_args)
    except ConfigurationError:
        log.exception("Invalid configuration")
        sys.exit(2)
    except IndexBuildError:
        log.exception("Fatal error during index build")
        sys.exit(1)

    print(summary.render())  # noqa: T201


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(130)


def run() -> None:
    """Console-script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
