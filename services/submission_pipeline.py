"""
Verification-and-write pipeline shared by every transport adapter.

    gate -> verify -> enforce policy -> append

Each stage short-circuits on failure and nothing is retried. submit() never
raises: every failure, expected or not, is folded into a SubmissionOutcome
so adapters only have to encode it for their wire format.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from errors import (
    AppError,
    ConfigurationError,
    ForbiddenError,
    ValidationError,
)
from infrastructure.captcha.protocol import CaptchaProvider
from infrastructure.captcha.recaptcha import enforce_policy
from infrastructure.store.protocol import SubmissionStore
from services.request_gate import gate_request
from shared.logging import get_logger

log = get_logger(__name__)


class OutcomeKind(str, Enum):
    BAD_REQUEST = "bad_request"
    NOT_CONFIGURED = "not_configured"
    REJECTED = "rejected"
    INTERNAL_ERROR = "internal_error"
    ACCEPTED = "accepted"


@dataclass(frozen=True)
class SubmissionOutcome:
    kind: OutcomeKind
    reason: str
    details: Optional[Any] = None
    document_id: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.ACCEPTED

    @classmethod
    def from_error(cls, exc: AppError) -> "SubmissionOutcome":
        if isinstance(exc, ValidationError):
            kind = OutcomeKind.BAD_REQUEST
        elif isinstance(exc, ConfigurationError):
            kind = OutcomeKind.NOT_CONFIGURED
        elif isinstance(exc, ForbiddenError):
            kind = OutcomeKind.REJECTED
        else:
            kind = OutcomeKind.INTERNAL_ERROR
        return cls(kind=kind, reason=exc.reason, details=exc.details)


INTERNAL_OUTCOME = SubmissionOutcome(kind=OutcomeKind.INTERNAL_ERROR, reason="internal")


class SubmissionPipeline:
    def __init__(
        self,
        secret: str,
        verifier: CaptchaProvider,
        store: SubmissionStore,
    ) -> None:
        self._secret = secret
        self._verifier = verifier
        self._store = store

    async def submit(
        self, body: Any, remote_ip: Optional[str] = None
    ) -> SubmissionOutcome:
        try:
            request = gate_request(body, self._secret)
            outcome = await self._verifier.verify(request.token, remote_ip)
            enforce_policy(outcome)
            document_id = await self._store.append(request.payload)
        except ValidationError as e:
            log.info("submission_bad_request", reason=e.reason)
            return SubmissionOutcome.from_error(e)
        except ConfigurationError as e:
            log.error("submission_server_not_configured", reason=e.reason)
            return SubmissionOutcome.from_error(e)
        except ForbiddenError as e:
            log.warning(
                "submission_rejected",
                reason=e.reason,
                error_codes=(e.details or {}).get("error-codes"),
                score=(e.details or {}).get("score"),
            )
            return SubmissionOutcome.from_error(e)
        except AppError as e:
            log.error(
                "submission_failed",
                reason=e.reason,
                error=e.message,
                error_type=type(e).__name__,
            )
            return INTERNAL_OUTCOME
        except Exception as e:
            log.error(
                "submission_unexpected_error",
                error=str(e),
                error_type=type(e).__name__,
                exc_info=e,
            )
            return INTERNAL_OUTCOME

        log.info("submission_stored", document_id=document_id)
        return SubmissionOutcome(
            kind=OutcomeKind.ACCEPTED, reason="accepted", document_id=document_id
        )
