"""Pydantic schemas for catalogue import API."""
from typing import Any

from pydantic import BaseModel, Field


class ImportFailure(BaseModel):
    """Row that could not be imported."""

    row: int
    error: str
    data: dict[str, Any] = Field(default_factory=dict)


class ImportResult(BaseModel):
    """Outcome of an import upload."""

    success: list[dict[str, Any]]
    failed: list[ImportFailure]
