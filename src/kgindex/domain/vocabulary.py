"""Identifier vocabularies of the supported knowledge graphs.

A vocabulary knows how a graph spells its resource identifiers: which URI
namespaces hold entities and properties, what a bare identifier looks like,
which short prefixes are conventional, and which synthetic qualifier names a
property has. Records always carry bare identifiers; vocabularies convert from
input IRIs and back to the configured output format.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING
from urllib.parse import unquote

from .model import IdFormat, KnowledgeGraph, ResourceKind

if TYPE_CHECKING:
    from collections.abc import Callable


@dataclass(frozen=True, slots=True)
class Namespace:
    prefix: str
    uri: str


@dataclass(frozen=True, slots=True)
class QualifierVariant:
    """A synthetic surface form ``"{label} ({suffix})"`` addressed via ``namespace``."""

    suffix: str
    namespace: str

    def surface_form(self, label: str) -> str:
        return f"{label} ({self.suffix})"


type LabelRule = Callable[[str, str], str | None]
type Renderer = Callable[[str], tuple[Namespace, str]]


@dataclass(frozen=True, slots=True)
class IdScheme:
    """Identifier layout of one resource kind inside a graph."""

    input_bases: tuple[str, ...]
    bare_pattern: re.Pattern[str]
    namespaces: tuple[Namespace, ...]
    renderer: Renderer | None = None

    def local_id(self, value: str) -> str | None:
        for base in self.input_bases:
            if value.startswith(base):
                value = value[len(base) :]
                break
        else:
            if "://" in value:
                return None
        value = value.strip()
        if not value or self.bare_pattern.fullmatch(value) is None:
            return None
        return value

    def render(self, resource_id: str) -> tuple[Namespace, str]:
        if self.renderer is not None:
            return self.renderer(resource_id)
        return self.namespaces[0], resource_id


def _keep_label(label: str, _property_id: str) -> str | None:
    return label


@dataclass(frozen=True, slots=True)
class GraphVocabulary:
    graph: KnowledgeGraph
    entities: IdScheme
    properties: IdScheme
    textual_ids: bool = False
    qualifiers: tuple[QualifierVariant, ...] = ()
    qualifier_namespaces: tuple[Namespace, ...] = ()
    label_rule: LabelRule = _keep_label

    def scheme(self, kind: ResourceKind) -> IdScheme:
        return self.entities if kind is ResourceKind.ENTITY else self.properties

    def parse_id(self, value: str, kind: ResourceKind) -> str | None:
        """Return the bare id for an IRI or bare identifier, or ``None`` if foreign."""

        return self.scheme(kind).local_id(strip_iri(value))

    def property_label(self, label: str, property_id: str) -> str | None:
        """Graph-specific display label of a property, ``None`` if the id is unusable."""

        return self.label_rule(label, property_id)

    def is_opaque_entity_id(self, value: str) -> bool:
        """True for graphs whose entity ids carry no readable text (``Q42``)."""

        return not self.textual_ids and self.entities.bare_pattern.fullmatch(value) is not None

    def label_from_id(self, resource_id: str) -> str | None:
        """Readable surface form encoded in a textual id (``Barack_Obama`` -> ``Barack Obama``)."""

        if not self.textual_ids:
            return None
        label = unquote(resource_id).replace("_", " ").strip()
        return label or None

    def format_id(
        self,
        resource_id: str,
        kind: ResourceKind,
        id_format: IdFormat,
        *,
        namespace: str | None = None,
    ) -> str:
        if namespace is not None:
            if id_format is IdFormat.URI:
                return self.qualifier_namespace(namespace).uri + resource_id
            return f"{namespace}:{resource_id}"
        if id_format is IdFormat.BARE:
            return resource_id
        resolved, local = self.scheme(kind).render(resource_id)
        if id_format is IdFormat.URI:
            return resolved.uri + local
        return f"{resolved.prefix}:{local}"

    def prefixes(self, kind: ResourceKind, *, include_qualifiers: bool = False) -> list[Namespace]:
        """Short/long prefix pairs used by ``IdFormat.PREFIXED`` output for ``kind``."""

        namespaces = list(self.scheme(kind).namespaces)
        if include_qualifiers and kind is ResourceKind.PROPERTY:
            namespaces.extend(self.qualifier_namespaces)
        return namespaces

    def qualifier_namespace(self, prefix: str) -> Namespace:
        for namespace in self.qualifier_namespaces:
            if namespace.prefix == prefix:
                return namespace
        raise KeyError(f"{self.graph} has no qualifier namespace {prefix!r}")


def strip_iri(value: str) -> str:
    value = value.strip()
    if value.startswith("<") and value.endswith(">"):
        return value[1:-1].strip()
    return value


_WD_ENTITY = Namespace("wd", "http://www.wikidata.org/entity/")
_WD_DIRECT = Namespace("wdt", "http://www.wikidata.org/prop/direct/")
_FB = Namespace("fb", "http://rdf.freebase.com/ns/")
_DBR = Namespace("dbr", "http://dbpedia.org/resource/")
_DBO = Namespace("dbo", "http://dbpedia.org/ontology/")
_DBP = Namespace("dbp", "http://dbpedia.org/property/")


def _render_dbpedia_property(property_id: str) -> tuple[Namespace, str]:
    kind, _, local = property_id.partition("/")
    return (_DBO if kind == "ontology" else _DBP), local


def _freebase_property_label(label: str, property_id: str) -> str | None:
    segments = property_id.split(".")
    if len(segments) < 2:
        return None
    return f"{label} ({segments[-2].replace('_', ' ')})"


def _dbpedia_property_label(label: str, property_id: str) -> str | None:
    if property_id.startswith("ontology/"):
        return f"{label} (ontology)"
    return label


WIKIDATA = GraphVocabulary(
    graph=KnowledgeGraph.WIKIDATA,
    entities=IdScheme(
        input_bases=(_WD_ENTITY.uri,),
        bare_pattern=re.compile(r"Q\d+"),
        namespaces=(_WD_ENTITY,),
    ),
    properties=IdScheme(
        input_bases=(_WD_ENTITY.uri, _WD_DIRECT.uri),
        bare_pattern=re.compile(r"P\d+"),
        namespaces=(_WD_DIRECT,),
    ),
    qualifiers=(
        QualifierVariant("statement", "p"),
        QualifierVariant("qualifier", "pq"),
        QualifierVariant("normalized qualifier", "pqn"),
        QualifierVariant("value", "ps"),
        QualifierVariant("normalized value", "psn"),
    ),
    qualifier_namespaces=(
        Namespace("p", "http://www.wikidata.org/prop/"),
        Namespace("pq", "http://www.wikidata.org/prop/qualifier/"),
        Namespace("pqn", "http://www.wikidata.org/prop/qualifier/value-normalized/"),
        Namespace("ps", "http://www.wikidata.org/prop/statement/"),
        Namespace("psn", "http://www.wikidata.org/prop/statement/value-normalized/"),
    ),
)

FREEBASE = GraphVocabulary(
    graph=KnowledgeGraph.FREEBASE,
    entities=IdScheme(
        input_bases=(_FB.uri,),
        bare_pattern=re.compile(r"m\.[^\s<>]+"),
        namespaces=(_FB,),
    ),
    properties=IdScheme(
        input_bases=(_FB.uri,),
        bare_pattern=re.compile(r"[^\s<>]+"),
        namespaces=(_FB,),
    ),
    label_rule=_freebase_property_label,
)

DBPEDIA = GraphVocabulary(
    graph=KnowledgeGraph.DBPEDIA,
    entities=IdScheme(
        input_bases=(_DBR.uri,),
        bare_pattern=re.compile(r"[^\s<>]+"),
        namespaces=(_DBR,),
    ),
    properties=IdScheme(
        input_bases=("http://dbpedia.org/",),
        bare_pattern=re.compile(r"(?:property|ontology)/[^\s<>]+"),
        namespaces=(_DBO, _DBP),
        renderer=_render_dbpedia_property,
    ),
    textual_ids=True,
    label_rule=_dbpedia_property_label,
)

_VOCABULARIES: dict[KnowledgeGraph, GraphVocabulary] = {
    KnowledgeGraph.WIKIDATA: WIKIDATA,
    KnowledgeGraph.FREEBASE: FREEBASE,
    KnowledgeGraph.DBPEDIA: DBPEDIA,
}


def vocabulary_for(graph: KnowledgeGraph) -> GraphVocabulary:
    return _VOCABULARIES[graph]
