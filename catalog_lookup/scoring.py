"""Local relevance scoring and ranking of store candidates.

Pure functions, no I/O: the store is treated as a high-recall candidate
source and all ordering decisions are made here.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, List

from .config import RESULT_LIMIT
from .query import Query
from .schema import CandidateRecord
from .text import digits_only, normalize

logger = logging.getLogger(__name__)

CODE_MATCH_SCORE = 200
NO_SPACE_MATCH_SCORE = 80
TOKEN_HIT_SCORE = 12
COMPLETENESS_BONUS = 40
COMPLETENESS_RATIO = 0.75


@dataclass(frozen=True)
class ScoredCandidate:
    record: CandidateRecord
    score: int


def completeness_threshold(token_count: int) -> int:
    return max(2, math.floor(token_count * COMPLETENESS_RATIO))


def score(query: Query, record: CandidateRecord) -> int:
    total = 0

    if query.code_query:
        if query.code_query in digits_only(record.code):
            total += CODE_MATCH_SCORE
        return total

    name_norm = normalize(record.name)
    name_no_space = name_norm.replace(" ", "")
    query_no_space = normalize(query.name_query).replace(" ", "")

    if query_no_space and query_no_space in name_no_space:
        total += NO_SPACE_MATCH_SCORE

    if query.tokens:
        hits = sum(1 for token in query.tokens if token in name_norm)
        total += hits * TOKEN_HIT_SCORE
        if hits >= completeness_threshold(len(query.tokens)):
            total += COMPLETENESS_BONUS

    return total


def rank(query: Query, records: Iterable[CandidateRecord], limit: int = RESULT_LIMIT) -> List[ScoredCandidate]:
    scored = [ScoredCandidate(record, score(query, record)) for record in records]
    matched = [item for item in scored if item.score > 0]
    # list.sort is stable, so ties keep the store's order.
    matched.sort(key=lambda item: item.score, reverse=True)
    logger.debug("rank candidates=%s matched=%s limit=%s", len(scored), len(matched), limit)
    return matched[:limit]
