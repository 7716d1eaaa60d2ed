from __future__ import annotations

from pydantic import BaseModel, Field


class RefreshResponse(BaseModel):
    success: bool
    updated: int = Field(ge=0)
    symbols: list[str]
    source: str
    note: str


class ErrorResponse(BaseModel):
    error: str
