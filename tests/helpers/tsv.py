from __future__ import annotations

WD = "http://www.wikidata.org/entity/"

ENTITY_HEADER = "?ent\t?ent_name\t?ent_description\t?links\t?aliases\t?types"
PROPERTY_HEADER = "?p\t?p_label\t?p_count\t?p_aliases\t?p_invs"


def wd(resource_id: str) -> str:
    return f"<{WD}{resource_id}>"


def literal(text: str) -> str:
    return f'"{text}"@en'
