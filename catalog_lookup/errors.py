"""Typed failures raised by the lookup pipeline.

Every failure carries the HTTP status and the JSON payload it should be
reported with, so the request boundary only needs one handler.
"""
from __future__ import annotations

from typing import Any


class LookupFailure(Exception):
    status_code = 500
    message = "Erro interno"

    def __init__(self, message: str | None = None, *, details: Any = None, status_code: int | None = None) -> None:
        self.message = message or self.message
        self.details = details
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def to_payload(self) -> dict:
        payload: dict[str, Any] = {"error": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class InputError(LookupFailure):
    """Empty query, or neither a code nor a name could be resolved."""

    status_code = 400
    message = "Informe um termo de busca"


class UpstreamError(LookupFailure):
    """The catalog store answered with an error or an unreadable body."""

    status_code = 502
    message = "Erro ao consultar Notion"


class InternalError(LookupFailure):
    status_code = 500
    message = "Erro interno"


class ConfigurationError(LookupFailure):
    status_code = 500
    message = "Variáveis NOTION_TOKEN / NOTION_DB_ID não configuradas"
