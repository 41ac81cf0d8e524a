"""reCAPTCHA v3 implementation of CaptchaProvider.

verify() performs exactly one siteverify call and returns the parsed
outcome; it does not decide acceptance. Anything that prevents a trustworthy
answer (network error, non-2xx, a body that is not a JSON object or does not
validate) raises VerificationUnavailableError, which callers treat as an
internal error rather than a rejection.

enforce_policy() applies the fixed acceptance threshold.
"""

from __future__ import annotations

from typing import Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from errors import LowScoreError, VerificationRejectedError, VerificationUnavailableError
from infrastructure.http_client import HttpClient
from schemas.models.verification import VerificationOutcome
from shared.logging import get_logger, hash_ip

log = get_logger(__name__)

RECAPTCHA_VERIFY_URL = "https://www.google.com/recaptcha/api/siteverify"

# Fixed threshold; scores strictly below it are rejected.
MIN_SCORE = 0.5


class RecaptchaProvider:
    def __init__(
        self,
        secret: str,
        http_client: HttpClient,
        verify_url: str = RECAPTCHA_VERIFY_URL,
        send_remote_ip: bool = True,
    ) -> None:
        self._secret = secret
        self._http = http_client
        self._verify_url = verify_url
        self._send_remote_ip = send_remote_ip

    async def verify(
        self, token: str, remote_ip: Optional[str] = None
    ) -> VerificationOutcome:
        data = {"secret": self._secret, "response": token}
        if remote_ip and self._send_remote_ip:
            data["remoteip"] = remote_ip

        try:
            response = await self._http.post_form(self._verify_url, data=data)
        except httpx.HTTPError as e:
            log.error(
                "recaptcha_request_failed", error=str(e), error_type=type(e).__name__
            )
            raise VerificationUnavailableError("reCAPTCHA request failed") from e

        if not 200 <= response.status_code < 300:
            log.error(
                "recaptcha_api_error",
                status_code=response.status_code,
                response_text=response.text[:200],
            )
            raise VerificationUnavailableError(
                f"reCAPTCHA returned HTTP {response.status_code}"
            )

        try:
            body = response.json()
        except ValueError as e:
            log.error("recaptcha_malformed_response", response_text=response.text[:200])
            raise VerificationUnavailableError("reCAPTCHA response is not JSON") from e

        if not isinstance(body, dict):
            log.error("recaptcha_malformed_response", body_type=type(body).__name__)
            raise VerificationUnavailableError("reCAPTCHA response is not an object")

        try:
            outcome = VerificationOutcome.from_provider(body)
        except PydanticValidationError as e:
            log.error("recaptcha_invalid_response", error_count=e.error_count())
            raise VerificationUnavailableError("reCAPTCHA response is invalid") from e

        log.debug(
            "recaptcha_verified",
            success=outcome.success,
            score=outcome.score,
            action=outcome.action,
            ip_hash=hash_ip(remote_ip),
        )
        return outcome


def is_accepted(outcome: VerificationOutcome) -> bool:
    """success AND (no score OR score >= MIN_SCORE)."""
    if not outcome.success:
        return False
    return outcome.score is None or outcome.score >= MIN_SCORE


def enforce_policy(outcome: VerificationOutcome) -> None:
    """Raise a VerificationRejectedError subclass unless the outcome is accepted."""
    if not outcome.success:
        raise VerificationRejectedError(
            "reCAPTCHA verification failed", details=outcome.raw
        )
    if not is_accepted(outcome):
        raise LowScoreError("Low reCAPTCHA score", details=outcome.raw)
