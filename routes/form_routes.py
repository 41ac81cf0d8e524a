"""
Direct HTTP submission endpoint.

POST /api/form/submit   body: {"token": str, "payload": {...}}

Responses use short machine-readable codes:
- 200 {"ok": true}
- 400 {"error": "missing_recaptcha_token" | "missing_payload"}
- 400 {"error": "recaptcha_failed", "details": <provider response>}
- 500 {"error": "server_not_configured" | "internal"}
Any other method gets 405 with ``Allow: POST``.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from dependencies import get_json_body, get_pipeline
from errors import MethodNotAllowedError
from schemas.dto.responses.common import ErrorResponse, SubmitResponse
from services.submission_pipeline import (
    OutcomeKind,
    SubmissionOutcome,
    SubmissionPipeline,
)
from shared.ip_utils import get_client_ip

router = APIRouter(tags=["forms"])

SUBMIT_PATH = "/api/form/submit"

_ERROR_CODES = {
    "missing_token": "missing_recaptcha_token",
    "missing_payload": "missing_payload",
    "server_not_configured": "server_not_configured",
    "verification_failed": "recaptcha_failed",
    "low_score": "recaptcha_failed",
}

_STATUS_BY_KIND = {
    OutcomeKind.ACCEPTED: 200,
    OutcomeKind.BAD_REQUEST: 400,
    OutcomeKind.REJECTED: 400,
    OutcomeKind.NOT_CONFIGURED: 500,
    OutcomeKind.INTERNAL_ERROR: 500,
}


def encode_outcome(outcome: SubmissionOutcome) -> JSONResponse:
    status_code = _STATUS_BY_KIND[outcome.kind]
    if outcome.ok:
        return JSONResponse(status_code=status_code, content=SubmitResponse().model_dump())

    body = ErrorResponse(
        error=_ERROR_CODES.get(outcome.reason, "internal"),
        details=outcome.details if outcome.kind is OutcomeKind.REJECTED else None,
    )
    return JSONResponse(
        status_code=status_code, content=body.model_dump(exclude_none=True)
    )


@router.post(
    SUBMIT_PATH,
    response_model=SubmitResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def submit_form(
    request: Request,
    body: Any = Depends(get_json_body),
    pipeline: SubmissionPipeline = Depends(get_pipeline),
) -> JSONResponse:
    outcome = await pipeline.submit(body, get_client_ip(request))
    return encode_outcome(outcome)


@router.api_route(
    SUBMIT_PATH,
    methods=["GET", "HEAD", "PUT", "PATCH", "DELETE", "OPTIONS"],
    include_in_schema=False,
)
async def submit_form_method_not_allowed() -> None:
    raise MethodNotAllowedError("Method Not Allowed", headers={"Allow": "POST"})
