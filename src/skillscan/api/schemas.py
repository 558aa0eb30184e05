"""Pydantic request models for the HTTP API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class AuditBody(BaseModel):
    path: str = Field(..., min_length=1, description="Skill directory on the server's filesystem")
    strict: bool | None = None
