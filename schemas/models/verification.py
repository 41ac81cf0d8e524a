"""
Typed view of a reCAPTCHA siteverify response.

The provider returns a loosely-shaped JSON object. It is validated once at
the parse boundary so downstream code never re-checks field presence:

- ``success`` defaults to False and a null flag is read as False, so a
  missing flag is always a rejection
- ``score`` is only present for v3 keys; absence is not a rejection. Any
  number is accepted here and judged by the acceptance policy
- the original mapping is kept in ``raw`` and returned to rejected callers
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class VerificationOutcome(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    success: bool = False
    score: Optional[float] = None
    action: Optional[str] = None
    hostname: Optional[str] = None
    challenge_ts: Optional[str] = None
    error_codes: list[str] = Field(default_factory=list, alias="error-codes")
    raw: dict[str, Any] = Field(default_factory=dict, exclude=True)

    @field_validator("success", mode="before")
    @classmethod
    def null_success_is_false(cls, v: Any) -> Any:
        return False if v is None else v

    @classmethod
    def from_provider(cls, data: dict[str, Any]) -> "VerificationOutcome":
        """Validate a decoded provider body, keeping a copy of it as ``raw``.

        Raises pydantic.ValidationError when a known field has the wrong type.
        """
        fields = {k: v for k, v in data.items() if k != "raw"}
        return cls.model_validate({**fields, "raw": dict(data)})
