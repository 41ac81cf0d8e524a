"""SubmissionStore protocol — the pipeline depends on this, not the concrete implementation."""

from typing import Any, Protocol


class SubmissionStore(Protocol):
    async def append(self, payload: dict[str, Any]) -> str: ...
