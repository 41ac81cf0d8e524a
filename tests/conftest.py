"""
Shared test configuration.

Patches dotenv so pydantic-settings never reads a real .env file during
tests, and provides in-memory stand-ins for the verification provider and
the submission store so the pipeline can run without network access.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

import pytest

from schemas.models.verification import VerificationOutcome
from services.submission_pipeline import SubmissionPipeline


@pytest.fixture(autouse=True)
def disable_dotenv_loading(monkeypatch):
    """Prevent pydantic-settings from loading .env files in all tests."""
    import pydantic_settings.sources.providers.dotenv as ps_dotenv

    monkeypatch.setattr(ps_dotenv, "dotenv_values", lambda *a, **kw: {})


class FakeVerifier:
    """Returns a canned provider response, or raises ``error`` if set."""

    def __init__(
        self,
        response: Optional[dict[str, Any]] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.response = response if response is not None else {"success": True}
        self.error = error
        self.calls: list[tuple[str, Optional[str]]] = []

    async def verify(
        self, token: str, remote_ip: Optional[str] = None
    ) -> VerificationOutcome:
        self.calls.append((token, remote_ip))
        if self.error is not None:
            raise self.error
        return VerificationOutcome.from_provider(self.response)


class FakeStore:
    """Keeps appended records in memory, stamping submittedAt at write time."""

    def __init__(self, error: Optional[Exception] = None) -> None:
        self.error = error
        self.records: list[dict[str, Any]] = []

    async def append(self, payload: dict[str, Any]) -> str:
        if self.error is not None:
            raise self.error
        record = {**payload, "submittedAt": datetime.now(timezone.utc)}
        self.records.append(record)
        return f"doc-{len(self.records)}"


@pytest.fixture
def verifier() -> FakeVerifier:
    return FakeVerifier()


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def pipeline(verifier, store) -> SubmissionPipeline:
    return SubmissionPipeline(secret="test-secret", verifier=verifier, store=store)
