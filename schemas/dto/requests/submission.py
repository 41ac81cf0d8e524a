"""
Request DTOs for the submission endpoints.

These are produced by the request gate after its checks pass; they are not
used for FastAPI body validation, because each rejection must map to its own
error code and the token check must win over the payload check.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SubmissionRequest(BaseModel):
    """A gated submission: non-empty token plus a mapping payload."""

    model_config = ConfigDict(frozen=True)

    token: str = Field(min_length=1)
    payload: dict[str, Any]


class CallableRequest(BaseModel):
    """Envelope of the callable protocol: ``{"data": {...}}``."""

    data: Any = None
