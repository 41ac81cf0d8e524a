"""CaptchaProvider protocol — the pipeline depends on this, not the concrete implementation."""

from typing import Optional, Protocol

from schemas.models.verification import VerificationOutcome


class CaptchaProvider(Protocol):
    async def verify(
        self, token: str, remote_ip: Optional[str] = None
    ) -> VerificationOutcome: ...
