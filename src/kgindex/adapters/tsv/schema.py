"""Pydantic models describing rows of the SPARQL TSV exports."""

from __future__ import annotations

import re
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

MULTI_VALUE_SEPARATOR: Final[str] = ";"

# header name (without the leading "?", lower-cased) -> ResourceRow field
COLUMN_ALIASES: Final[dict[str, str]] = {
    "ent": "id",
    "p": "id",
    "id": "id",
    "s": "id",
    "ent_name": "name",
    "p_label": "name",
    "label": "name",
    "name": "name",
    "ent_description": "description",
    "description": "description",
    "desc": "description",
    "links": "popularity",
    "p_count": "popularity",
    "ent_count": "popularity",
    "count": "popularity",
    "popularity": "popularity",
    "types": "types",
    "notables": "notable_types",
    "notable_types": "notable_types",
    "aliases": "aliases",
    "p_aliases": "aliases",
    "alias": "aliases",
    "keys": "extra_keys",
    "p_invs": "inverses",
    "inverse": "inverses",
    "inverses": "inverses",
}
REQUIRED_COLUMNS: Final[tuple[str, ...]] = ("id", "name")

_LITERAL = re.compile(r'"(?P<text>.*)"(?:@[A-Za-z][\w-]*|\^\^\S+)?', re.DOTALL)
_ESCAPE = re.compile(r'\\(["\\])')


def unwrap_term(value: str) -> str:
    """Return the lexical value of a SPARQL TSV term.

    ``"Paris"@en`` -> ``Paris``, ``"12"^^<xsd:int>`` -> ``12``,
    ``<http://x/y>`` -> ``http://x/y``; anything else is returned stripped.
    """

    value = value.strip()
    text = _literal_text(value)
    if text is not None:
        return text.strip()
    if value.startswith("<") and value.endswith(">"):
        return value[1:-1].strip()
    return value


def _literal_text(value: str) -> str | None:
    match = _LITERAL.fullmatch(value)
    if match is None:
        return None
    return _ESCAPE.sub(r"\1", match.group("text"))


def split_values(value: str) -> list[str]:
    """Split a multi-valued cell; pieces are unwrapped, trimmed and blanks dropped."""

    value = value.strip()
    text = _literal_text(value)
    if text is not None:
        value = text
    pieces = (unwrap_term(piece) for piece in value.split(MULTI_VALUE_SEPARATOR))
    return [piece for piece in pieces if piece]


def _unwrap(value: object) -> object:
    if isinstance(value, str):
        return unwrap_term(value)
    return value


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = unwrap_term(value)
        return stripped or None
    return value


def _to_count(value: object) -> object:
    if value is None:
        return 0
    if isinstance(value, int):
        return max(value, 0)
    try:
        return max(int(unwrap_term(str(value))), 0)
    except ValueError:
        return 0


def _to_value_set(value: object) -> object:
    if value is None:
        return frozenset()
    if isinstance(value, str):
        return frozenset(split_values(value))
    return value


class TsvBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class ResourceRow(TsvBaseModel):
    """One data row of an entity or property export, keyed by logical column."""

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    description: str | None = None
    popularity: int = 0
    types: frozenset[str] = frozenset()
    notable_types: frozenset[str] = frozenset()
    aliases: frozenset[str] = frozenset()
    extra_keys: frozenset[str] = frozenset()
    inverses: frozenset[str] = frozenset()

    _unwrap_required = field_validator("id", "name", mode="before")(_unwrap)
    _normalize_description = field_validator("description", mode="before")(_blank_to_none)
    _parse_popularity = field_validator("popularity", mode="before")(_to_count)
    _split_multi = field_validator(
        "types", "notable_types", "aliases", "extra_keys", "inverses", mode="before"
    )(_to_value_set)
