"""Application configuration and constants."""
from __future__ import annotations

import os
from dataclasses import dataclass

# Notion caps a database query page at 100 records; we never paginate further.
PAGE_SIZE = 100
RESULT_LIMIT = 100


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name)
    return value if value is not None else default


@dataclass(frozen=True)
class Settings:
    """Simple settings container with environment variable overrides."""

    notion_token: str = _get_env("NOTION_TOKEN", "")
    notion_db_id: str = _get_env("NOTION_DB_ID", "")
    notion_api_url: str = _get_env("NOTION_API_URL", "https://api.notion.com/v1")
    notion_version: str = _get_env("NOTION_VERSION", "2022-06-28")
    http_timeout_seconds: float = float(_get_env("HTTP_TIMEOUT_SECONDS", "10"))
    catalog_schema: str = _get_env("CATALOG_SCHEMA", "nome")
    log_level: str = _get_env("LOG_LEVEL", "INFO")

    @property
    def store_configured(self) -> bool:
        return bool(self.notion_token and self.notion_db_id)


settings = Settings()
