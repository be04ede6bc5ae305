"""Query classification: barcode (GTIN) lookup versus product-name lookup."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .errors import InputError
from .text import collapse_whitespace, digits_only, tokenize

logger = logging.getLogger(__name__)

MIN_CODE_DIGITS = 4


@dataclass(frozen=True)
class Query:
    raw: str
    code_query: str = ""
    name_query: str = ""
    tokens: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_code_like(self) -> bool:
        return bool(self.code_query)


def looks_like_code(text: str) -> bool:
    """True for digit-only input of at least four digits.

    Internal whitespace is tolerated ("789 1234"), letters are not: ``"arroz7"``
    and ``"123"`` are name queries.
    """
    digits = digits_only(text)
    no_space = "".join(text.split())
    return len(digits) >= MIN_CODE_DIGITS and digits == no_space


def classify(raw: str | None, explicit_code: str | None = None, explicit_name: str | None = None) -> Query:
    raw_text = (raw or "").strip()
    code_query = ""
    name_query = ""

    if explicit_code and explicit_code.strip():
        code_query = digits_only(explicit_code)
    elif explicit_name and explicit_name.strip():
        name_query = collapse_whitespace(explicit_name)
    elif looks_like_code(raw_text):
        code_query = digits_only(raw_text)
    else:
        name_query = collapse_whitespace(raw_text)

    if not code_query and not name_query:
        raise InputError()

    tokens = () if code_query else tokenize(name_query)
    query = Query(raw=raw_text, code_query=code_query, name_query=name_query, tokens=tokens)
    logger.debug(
        "classify raw=%r gtin=%r name=%r -> code=%r name=%r tokens=%s",
        raw,
        explicit_code,
        explicit_name,
        code_query,
        name_query,
        tokens,
    )
    return query
