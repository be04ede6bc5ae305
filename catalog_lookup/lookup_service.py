"""Lookup orchestration: classify, filter, fetch, score, rank."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from time import perf_counter
from typing import List, Optional

from .config import PAGE_SIZE, RESULT_LIMIT
from .errors import InternalError, LookupFailure
from .filters import build_filter, render_filter
from .notion_client import NotionStore
from .query import Query, classify
from .schema import SCHEMAS, FieldMapping, project_record
from .scoring import ScoredCandidate, rank

logger = logging.getLogger(__name__)


@dataclass
class LookupResult:
    query: Query
    items: List[ScoredCandidate]
    took_ms: float
    eta_ms: float

    @property
    def found(self) -> bool:
        return bool(self.items)

    def to_payload(self) -> dict:
        return {"found": self.found, "items": [item.record.to_item() for item in self.items]}


async def lookup_products(
    store: NotionStore,
    q: Optional[str],
    gtin: Optional[str] = None,
    name: Optional[str] = None,
    mapping: FieldMapping = SCHEMAS["nome"],
) -> LookupResult:
    try:
        return await _run_lookup(store, q, gtin, name, mapping)
    except LookupFailure:
        raise
    except Exception as exc:
        logger.exception("lookup failed q=%r gtin=%r name=%r", q, gtin, name)
        raise InternalError(details=str(exc)) from exc


async def _run_lookup(
    store: NotionStore,
    q: Optional[str],
    gtin: Optional[str],
    name: Optional[str],
    mapping: FieldMapping,
) -> LookupResult:
    t0 = perf_counter()
    query = classify(q, explicit_code=gtin, explicit_name=name)
    t1 = perf_counter()
    filter_body = render_filter(build_filter(query, mapping.filter_mode), mapping)
    t2 = perf_counter()
    pages = await store.query(filter_body, page_size=PAGE_SIZE)
    t3 = perf_counter()
    records = [project_record(page, mapping) for page in pages]
    ranked = rank(query, records, limit=RESULT_LIMIT)
    t4 = perf_counter()

    store_ms = (t3 - t2) * 1000
    total_ms = (t4 - t0) * 1000
    logger.info(
        "timing: total=%.2fms classify=%.2fms build=%.2fms store=%.2fms rank=%.2fms q=%r code=%r tokens=%s schema=%s candidates=%s results=%s",
        total_ms,
        (t1 - t0) * 1000,
        (t2 - t1) * 1000,
        store_ms,
        (t4 - t3) * 1000,
        query.raw,
        query.code_query,
        list(query.tokens),
        mapping.name,
        len(records),
        len(ranked),
    )
    return LookupResult(query=query, items=ranked, took_ms=store_ms, eta_ms=total_ms)
