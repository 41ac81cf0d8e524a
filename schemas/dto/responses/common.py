"""
Response DTOs shared across the submission endpoints.

SubmitResponse   — ``{"ok": true}`` success body of the HTTP adapters
CallableResult   — ``{"result": {"ok": true}}`` success body of the callable adapter
ErrorResponse    — ``{"error": ..., "details": ...}`` failure body of the HTTP adapters
HealthResponse   — GET /health
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel


class SubmitResponse(BaseModel):
    ok: bool = True


class CallableResult(BaseModel):
    result: SubmitResponse


class ErrorResponse(BaseModel):
    """Failure body. ``details`` carries the raw provider response on rejection."""

    error: str
    details: Optional[Any] = None


class HealthResponse(BaseModel):
    """Response body for GET /health."""

    status: str
    checks: dict[str, str]
