"""Catalog schema versions and projection of Notion pages into records.

The catalog database has changed shape over time (property names, price
spelling, which handler queried it). Instead of one handler per version, each
version is a :class:`FieldMapping` and the rest of the pipeline is shared.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

MISSING_NAME = "Sem nome"

FILTER_MODE_STRUCTURED = "structured"
FILTER_MODE_LEGACY = "legacy"


@dataclass(frozen=True)
class FieldMapping:
    name: str
    name_property: str
    name_type: str
    code_property: str
    code_type: str
    price_properties: tuple[str, ...]
    image_property: str
    filter_mode: str = FILTER_MODE_STRUCTURED

    def property_for(self, logical_field: str) -> tuple[str, str]:
        """Return ``(property name, property type)`` for ``"name"`` or ``"code"``."""
        if logical_field == "name":
            return self.name_property, self.name_type
        if logical_field == "code":
            return self.code_property, self.code_type
        raise KeyError(f"Unknown logical field: {logical_field}")


@dataclass(frozen=True)
class CandidateRecord:
    name: str
    code: Optional[str] = None
    price: Optional[float] = None
    image_url: Optional[str] = None

    def to_item(self) -> dict:
        return {"name": self.name, "preco": self.price, "img": self.image_url, "gtin": self.code}


SCHEMAS: Dict[str, FieldMapping] = {
    "nome": FieldMapping(
        name="nome",
        name_property="NOME",
        name_type="title",
        code_property="GTIN",
        code_type="rich_text",
        price_properties=("PREÇO", "PRECO"),
        image_property="IMAGEM",
    ),
    "legacy": FieldMapping(
        name="legacy",
        name_property="NOME",
        name_type="title",
        code_property="GTIN",
        code_type="rich_text",
        price_properties=("PREÇO", "PRECO"),
        image_property="IMAGEM",
        filter_mode=FILTER_MODE_LEGACY,
    ),
}


def get_mapping(name: str) -> FieldMapping:
    try:
        return SCHEMAS[name]
    except KeyError:
        raise ValueError(f"Unknown catalog schema {name!r}; expected one of {sorted(SCHEMAS)}") from None


def resolve_mapping(name: str) -> FieldMapping:
    """Like :func:`get_mapping`, but reports an unknown schema as a configuration failure."""
    try:
        return get_mapping(name)
    except ValueError as exc:
        raise ConfigurationError(str(exc)) from exc


def _plain_text(fragments: Any) -> str:
    if not isinstance(fragments, list):
        return ""
    return "".join(str(fragment.get("plain_text") or "") for fragment in fragments if isinstance(fragment, dict))


def _read_text(prop: Any) -> str:
    if not isinstance(prop, dict):
        return ""
    if "title" in prop:
        return _plain_text(prop["title"])
    if "rich_text" in prop:
        return _plain_text(prop["rich_text"])
    number = prop.get("number")
    if isinstance(number, (int, float)) and not isinstance(number, bool):
        return str(int(number)) if float(number).is_integer() else str(number)
    return ""


def _read_number(prop: Any) -> Optional[float]:
    if not isinstance(prop, dict):
        return None
    number = prop.get("number")
    if isinstance(number, (int, float)) and not isinstance(number, bool):
        return number
    return None


def _read_url(source: Any) -> Optional[str]:
    url = source.get("url") if isinstance(source, dict) else None
    return url if isinstance(url, str) and url else None


def _read_first_file_url(prop: Any) -> Optional[str]:
    files = prop.get("files") if isinstance(prop, dict) else None
    if not isinstance(files, list) or not files or not isinstance(files[0], dict):
        return None
    first = files[0]
    return _read_url(first.get("file")) or _read_url(first.get("external"))


def project_record(page: dict, mapping: FieldMapping) -> CandidateRecord:
    props = page.get("properties")
    if not isinstance(props, dict):
        props = {}
    price = None
    for prop_name in mapping.price_properties:
        price = _read_number(props.get(prop_name))
        if price is not None:
            break
    return CandidateRecord(
        name=_read_text(props.get(mapping.name_property)) or MISSING_NAME,
        code=_read_text(props.get(mapping.code_property)) or None,
        price=price,
        image_url=_read_first_file_url(props.get(mapping.image_property)),
    )
