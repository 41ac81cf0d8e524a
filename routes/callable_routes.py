"""
Callable (RPC-style) submission endpoint.

POST /submitFormWithCaptcha   body: {"data": {"token": str, "payload": {...}}}

Success is ``{"result": {"ok": true}}``. Failures are raised as
CallableError and rendered by the global handler as
``{"error": {"status": <code>, "message": <text>}}`` where code is one of
failed-precondition, invalid-argument, permission-denied or internal.
"""

from __future__ import annotations

import json
from typing import Any

from fastapi import APIRouter, Depends, Request

from dependencies import get_json_body, get_pipeline
from errors import CallableError
from schemas.dto.requests.submission import CallableRequest
from schemas.dto.responses.common import CallableResult, SubmitResponse
from services.submission_pipeline import SubmissionOutcome, SubmissionPipeline
from shared.ip_utils import get_client_ip

router = APIRouter(tags=["callable"])


def to_callable_error(outcome: SubmissionOutcome) -> CallableError:
    reason = outcome.reason
    if reason == "missing_token":
        return CallableError("failed-precondition", "Missing reCAPTCHA token.")
    if reason == "missing_payload":
        return CallableError("invalid-argument", "Missing payload.")
    if reason == "server_not_configured":
        return CallableError(
            "failed-precondition",
            "reCAPTCHA secret not configured. Set the RECAPTCHA_SECRET environment variable.",
        )
    if reason == "verification_failed":
        return CallableError(
            "permission-denied",
            f"reCAPTCHA verification failed: {json.dumps(outcome.details, default=str)}",
            details=outcome.details,
        )
    if reason == "low_score":
        return CallableError(
            "permission-denied", "Low reCAPTCHA score.", details=outcome.details
        )
    return CallableError("internal", "Internal error")


@router.post(
    "/submitFormWithCaptcha",
    response_model=CallableResult,
)
async def submit_form_callable(
    request: Request,
    body: Any = Depends(get_json_body),
    pipeline: SubmissionPipeline = Depends(get_pipeline),
) -> CallableResult:
    envelope = CallableRequest.model_validate(body if isinstance(body, dict) else {})
    outcome = await pipeline.submit(envelope.data, get_client_ip(request))
    if not outcome.ok:
        raise to_callable_error(outcome)
    return CallableResult(result=SubmitResponse())
