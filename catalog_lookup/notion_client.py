"""Notion database client used as the catalog store.

Credentials are handed in at construction time; the client itself holds no
per-request state and opens a fresh ``httpx.AsyncClient`` for every query.
"""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Dict, List

import httpx

from .config import PAGE_SIZE, settings
from .errors import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)


class NotionStore:
    def __init__(
        self,
        token: str,
        database_id: str,
        *,
        api_url: str = "https://api.notion.com/v1",
        notion_version: str = "2022-06-28",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not token or not database_id:
            raise ConfigurationError()
        self.database_id = database_id
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Notion-Version": notion_version,
            "Content-Type": "application/json",
        }

    @property
    def query_url(self) -> str:
        return f"{self.api_url}/databases/{self.database_id}/query"

    async def query(self, filter_body: Dict[str, Any], page_size: int = PAGE_SIZE) -> List[dict]:
        payload = {"page_size": page_size, "filter": filter_body}
        logger.debug("Notion query url=%s payload=%s", self.query_url, payload)
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.query_url, headers=self._headers, json=payload)
        except httpx.TimeoutException as exc:
            logger.warning("Notion query timed out after %ss", self.timeout)
            raise UpstreamError(details=str(exc), status_code=504) from exc
        except httpx.HTTPError as exc:
            logger.warning("Notion query failed: %s", exc)
            raise UpstreamError(details=str(exc), status_code=502) from exc

        try:
            data = response.json()
        except ValueError:
            data = None

        if response.is_error:
            logger.warning("Notion responded %s: %s", response.status_code, data)
            raise UpstreamError(details=data if data is not None else {}, status_code=response.status_code)
        if not isinstance(data, dict):
            logger.warning("Notion returned an unreadable body (status %s)", response.status_code)
            raise UpstreamError(details={"body": response.text[:500]}, status_code=502)

        results = data.get("results")
        if not isinstance(results, list):
            return []
        malformed = [index for index, page in enumerate(results) if not isinstance(page, dict)]
        if malformed:
            logger.warning("Notion returned %s non-object results at %s", len(malformed), malformed[:10])
            raise UpstreamError(
                details={"malformed_results": malformed, "sample": repr(results[malformed[0]])[:200]},
                status_code=502,
            )
        return results


@lru_cache(maxsize=1)
def get_store() -> NotionStore:
    logger.info("Using Notion database %s at %s", settings.notion_db_id or "<unset>", settings.notion_api_url)
    return NotionStore(
        settings.notion_token,
        settings.notion_db_id,
        api_url=settings.notion_api_url,
        notion_version=settings.notion_version,
        timeout=settings.http_timeout_seconds,
    )
