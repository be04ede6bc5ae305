"""FastAPI application wiring the lookup service."""
from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse

from .config import settings
from .errors import InternalError, LookupFailure
from .lookup_service import lookup_products
from .models import ErrorResponse, HealthResponse, LookupResponse
from .notion_client import NotionStore, get_store
from .schema import FieldMapping, resolve_mapping

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_LEVEL = logging.getLevelName(settings.log_level.upper())

# Force a predictable logging setup even when run under uvicorn; ``force=True``
# replaces uvicorn's default handlers.
logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT, force=True)
for name in ("uvicorn", "uvicorn.error", "uvicorn.access", "httpx"):
    logging.getLogger(name).setLevel(LOG_LEVEL)

logger = logging.getLogger(__name__)
logger.info("Logging configured at %s", settings.log_level.upper())

app = FastAPI(title="Product Lookup Service")


def get_field_mapping() -> FieldMapping:
    return resolve_mapping(settings.catalog_schema)


@app.exception_handler(LookupFailure)
async def lookup_failure_handler(request: Request, exc: LookupFailure) -> JSONResponse:
    if exc.status_code >= 500:
        logger.warning("lookup %s failed with %s: %s", request.url.path, exc.status_code, exc.details)
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.exception_handler(Exception)
async def unexpected_failure_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unexpected failure on %s", request.url.path)
    failure = InternalError(details=str(exc))
    return JSONResponse(status_code=failure.status_code, content=failure.to_payload())


@app.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(status="ok", schema_name=settings.catalog_schema, configured=settings.store_configured)


@app.get(
    "/api/lookup",
    response_model=LookupResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def lookup(
    q: str = Query("", description="Free-text query or partial GTIN"),
    gtin: str | None = Query(None, description="Explicit GTIN, overrides q"),
    name: str | None = Query(None, description="Explicit product name, overrides q"),
    store: NotionStore = Depends(get_store),
    mapping: FieldMapping = Depends(get_field_mapping),
) -> LookupResponse:
    result = await lookup_products(store, q, gtin=gtin, name=name, mapping=mapping)
    return LookupResponse(**result.to_payload())
