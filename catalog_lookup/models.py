"""Pydantic models for request/response payloads."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class LookupItem(BaseModel):
    name: str
    preco: float | None = None
    img: str | None = None
    gtin: str | None = None


class LookupResponse(BaseModel):
    found: bool
    items: list[LookupItem]


class ErrorResponse(BaseModel):
    error: str
    details: Any = None


class HealthResponse(BaseModel):
    status: str
    schema_name: str
    configured: bool
