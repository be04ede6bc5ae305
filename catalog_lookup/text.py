"""Utilities for query normalization and tokenization.

Both the query and every candidate name go through the same pipeline so that
comparisons happen on equal footing:

    1) :func:`normalize` transliterates to ASCII with ``unidecode`` (which also
       drops diacritics: ``"pão"`` -> ``"pao"``), lowercases, and turns every
       run of non-alphanumerics into a single space.
    2) :func:`tokenize` splits the normalized text, removes Portuguese
       stopwords and one-letter noise, folds simple plurals and deduplicates.

:func:`normalize_no_space` exists for the "missing space" typo class
(``"tododia"`` vs ``"Todo Dia"``).
"""
from __future__ import annotations

import logging
import re

from unidecode import unidecode

logger = logging.getLogger(__name__)

# Bounds the number of predicates a single query can fan out into.
MAX_TOKENS = 8
MIN_TOKEN_LENGTH = 2

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")
_NON_DIGIT_RE = re.compile(r"[^0-9]+")
_WHITESPACE_RE = re.compile(r"\s+")

STOPWORDS: frozenset[str] = frozenset(
    {
        "de",
        "da",
        "do",
        "das",
        "dos",
        "para",
        "pra",
        "com",
        "sem",
        "um",
        "uma",
        "uns",
        "umas",
        "e",
        "a",
        "o",
        "as",
        "os",
        "no",
        "na",
        "nos",
        "nas",
        "ao",
        "aos",
        "em",
    }
)


def normalize(text: str | None) -> str:
    """Lowercase, strip accents and collapse everything else to single spaces."""
    if not text:
        return ""
    ascii_text = unidecode(text).lower()
    return " ".join(_NON_ALNUM_RE.sub(" ", ascii_text).split())


def normalize_no_space(text: str | None) -> str:
    return normalize(text).replace(" ", "")


def digits_only(text: str | None) -> str:
    if not text:
        return ""
    return _NON_DIGIT_RE.sub("", text)


def collapse_whitespace(text: str | None) -> str:
    if not text:
        return ""
    return _WHITESPACE_RE.sub(" ", text).strip()


def fold_plural(token: str) -> str:
    """Naive plural -> singular fold: ``"produtos"`` -> ``"produto"``.

    Only tokens longer than three characters are touched, so ``"gas"`` is kept
    while ``"lapis"`` becomes ``"lapi"``. The mis-folds are accepted.
    """
    if len(token) > 3 and token.endswith("s"):
        return token[:-1]
    return token


def tokenize(text: str | None, fold_plurals: bool = True, limit: int = MAX_TOKENS) -> tuple[str, ...]:
    tokens: list[str] = []
    for piece in normalize(text).split():
        if len(piece) < MIN_TOKEN_LENGTH or piece in STOPWORDS:
            continue
        token = fold_plural(piece) if fold_plurals else piece
        if token in STOPWORDS or token in tokens:
            continue
        tokens.append(token)
    logger.debug("tokenize raw=%r fold=%s tokens=%s", text, fold_plurals, tokens)
    return tuple(tokens[:limit])
