"""Candidate filter construction for the Notion database query.

The filter is intentionally broad: it only narrows the catalog down to one
page of plausible candidates. Precision comes from :mod:`catalog_lookup.scoring`.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Union

from .query import Query
from .schema import FILTER_MODE_LEGACY, FILTER_MODE_STRUCTURED, FieldMapping
from .text import collapse_whitespace, normalize, tokenize

logger = logging.getLogger(__name__)

MAX_CONJUNCTION_TOKENS = 6

CODE_FIELD = "code"
NAME_FIELD = "name"


@dataclass(frozen=True)
class Contains:
    field: str
    value: str


@dataclass(frozen=True)
class Equals:
    field: str
    value: str


@dataclass(frozen=True)
class AllOf:
    children: tuple["FilterExpression", ...]


@dataclass(frozen=True)
class AnyOf:
    children: tuple["FilterExpression", ...]


FilterExpression = Union[Contains, Equals, AllOf, AnyOf]


def _fallback_predicate(query: Query) -> Contains:
    text = normalize(query.name_query) or collapse_whitespace(query.name_query) or query.raw
    return Contains(NAME_FIELD, text)


def build_filter(query: Query, mode: str = FILTER_MODE_STRUCTURED) -> FilterExpression:
    if query.code_query:
        return AnyOf((Equals(CODE_FIELD, query.code_query), Contains(CODE_FIELD, query.code_query)))

    if not query.tokens:
        return _fallback_predicate(query)

    if mode == FILTER_MODE_LEGACY:
        return AnyOf(tuple(Contains(NAME_FIELD, token) for token in query.tokens))

    predicates: List[FilterExpression] = []

    def add(predicate: FilterExpression) -> None:
        if predicate not in predicates:
            predicates.append(predicate)

    name_query = query.name_query
    add(Contains(NAME_FIELD, name_query))
    no_space = "".join(name_query.split())
    if no_space != name_query:
        add(Contains(NAME_FIELD, no_space))

    raw_tokens = tokenize(name_query, fold_plurals=False)[:MAX_CONJUNCTION_TOKENS]
    if len(raw_tokens) >= 2:
        conjunction = AllOf(tuple(Contains(NAME_FIELD, token) for token in raw_tokens))
        add(conjunction)
        folded = query.tokens[:MAX_CONJUNCTION_TOKENS]
        if folded != raw_tokens:
            add(AllOf(tuple(Contains(NAME_FIELD, token) for token in folded)))
    if len(query.tokens) == 1:
        add(Contains(NAME_FIELD, query.tokens[0]))

    return AnyOf(tuple(predicates))


def render_filter(expression: FilterExpression, mapping: FieldMapping) -> Dict[str, Any]:
    """Translate a filter expression into Notion's database query filter JSON."""
    if isinstance(expression, (Contains, Equals)):
        prop_name, prop_type = mapping.property_for(expression.field)
        operator = "contains" if isinstance(expression, Contains) else "equals"
        return {"property": prop_name, prop_type: {operator: expression.value}}
    if isinstance(expression, (AllOf, AnyOf)):
        children = [render_filter(child, mapping) for child in expression.children]
        if len(children) == 1:
            return children[0]
        key = "and" if isinstance(expression, AllOf) else "or"
        return {key: children}
    raise TypeError(f"Unsupported filter expression: {expression!r}")
