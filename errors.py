"""
Application error hierarchy and FastAPI exception handlers.

AppError is the base for all typed errors. Each subclass carries the HTTP
status a plain JSON adapter would use and a ``reason`` naming the pipeline
precondition that failed. The submission pipeline converts these into
tagged outcomes; anything that still escapes a route is turned into a
consistent JSON body by the global handlers below.

Non-AppError exceptions become an opaque 500 (with Sentry reporting in
production).
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from shared.logging import get_logger

log = get_logger(__name__)


class AppError(Exception):
    """Base application error. All typed errors inherit from this."""

    status_code: int = 500
    error_code: str = "internal"
    reason: str = "internal"

    def __init__(
        self,
        message: str,
        *,
        details: Optional[Any] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details
        self.headers = headers

    def to_dict(self) -> dict:
        payload: dict = {"error": self.error_code}
        if self.details is not None:
            payload["details"] = self.details
        return payload


# ── Client errors ─────────────────────────────────────────────────────────────


class ValidationError(AppError):
    status_code = 400


class MissingTokenError(ValidationError):
    error_code = "missing_recaptcha_token"
    reason = "missing_token"


class MissingPayloadError(ValidationError):
    error_code = "missing_payload"
    reason = "missing_payload"


class MethodNotAllowedError(AppError):
    status_code = 405
    error_code = "method_not_allowed"
    reason = "method_not_allowed"


# ── Deployment faults ─────────────────────────────────────────────────────────


class ConfigurationError(AppError):
    status_code = 500
    error_code = "server_not_configured"
    reason = "server_not_configured"


# ── Policy rejections ─────────────────────────────────────────────────────────


class ForbiddenError(AppError):
    status_code = 403
    error_code = "forbidden"
    reason = "forbidden"


class VerificationRejectedError(ForbiddenError):
    """Provider reported failure. ``details`` holds its raw response."""

    error_code = "recaptcha_failed"
    reason = "verification_failed"


class LowScoreError(VerificationRejectedError):
    reason = "low_score"


# ── Internal / transport errors ───────────────────────────────────────────────


class UpstreamError(AppError):
    status_code = 500
    error_code = "internal"
    reason = "internal"


class VerificationUnavailableError(UpstreamError):
    """Network failure, non-2xx status or malformed body from the provider."""


class SubmissionWriteError(UpstreamError):
    """The document store refused or failed the append."""


# ── Callable (RPC) wire errors ────────────────────────────────────────────────

CALLABLE_STATUS_CODES = {
    "invalid-argument": 400,
    "failed-precondition": 400,
    "permission-denied": 403,
    "internal": 500,
}


class CallableError(AppError):
    """Error shape of the callable protocol: ``{"error": {status, message}}``."""

    def __init__(
        self, code: str, message: str, *, details: Optional[Any] = None
    ) -> None:
        super().__init__(message, details=details)
        self.code = code
        self.status_code = CALLABLE_STATUS_CODES.get(code, 500)
        self.error_code = code

    def to_dict(self) -> dict:
        error: dict = {"status": self.code, "message": self.message}
        if self.details is not None:
            error["details"] = self.details
        return {"error": error}


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers on the FastAPI app."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code, content=exc.to_dict(), headers=exc.headers
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        # Sentry integration: if sentry_sdk is initialized it will auto-capture
        # unhandled exceptions before this handler fires.
        log.error(
            "unhandled_exception",
            path=request.url.path,
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return JSONResponse(status_code=500, content={"error": "internal"})
