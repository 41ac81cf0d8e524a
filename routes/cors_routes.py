"""
CORS-enabled submission endpoint for plain ``fetch`` callers.

POST|OPTIONS /submitFormWithCaptchaHttp
POST|OPTIONS /formSubmit   (alias without "captcha" in the URL, which some
                            ad-block filter lists block)

OPTIONS preflights are answered with 204 before the pipeline is entered.
Every other response except 405 carries the negotiated
Access-Control-Allow-Origin header (see shared.cors).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from config import AppSettings
from dependencies import get_json_body, get_pipeline, get_settings
from schemas.dto.responses.common import ErrorResponse, SubmitResponse
from services.submission_pipeline import (
    OutcomeKind,
    SubmissionOutcome,
    SubmissionPipeline,
)
from shared.cors import preflight_headers, response_headers
from shared.ip_utils import get_client_ip

router = APIRouter(tags=["forms"])

CORS_SUBMIT_PATHS = ("/submitFormWithCaptchaHttp", "/formSubmit")

_MESSAGES = {
    "missing_token": (400, "Missing reCAPTCHA token"),
    "missing_payload": (400, "Missing payload"),
    "server_not_configured": (500, "reCAPTCHA secret not configured"),
    "verification_failed": (403, "reCAPTCHA verification failed"),
    "low_score": (403, "reCAPTCHA verification failed"),
}
_INTERNAL = (500, "Internal error")


def encode_outcome(outcome: SubmissionOutcome, headers: dict[str, str]) -> JSONResponse:
    if outcome.ok:
        return JSONResponse(
            status_code=200, content=SubmitResponse().model_dump(), headers=headers
        )
    status_code, message = _MESSAGES.get(outcome.reason, _INTERNAL)
    body = ErrorResponse(
        error=message,
        details=outcome.details if outcome.kind is OutcomeKind.REJECTED else None,
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(exclude_none=True),
        headers=headers,
    )


async def submit_form_cors(
    request: Request,
    settings: AppSettings = Depends(get_settings),
    pipeline: SubmissionPipeline = Depends(get_pipeline),
) -> Response:
    origin = request.headers.get("origin")

    if request.method == "OPTIONS":
        return Response(status_code=204, headers=preflight_headers(origin))

    if request.method != "POST":
        return JSONResponse(status_code=405, content={"error": "Method Not Allowed"})

    body = await get_json_body(request)
    outcome = await pipeline.submit(body, get_client_ip(request))
    return encode_outcome(outcome, response_headers(origin, settings.cors_origins))


for _path in CORS_SUBMIT_PATHS:
    router.add_api_route(
        _path,
        submit_form_cors,
        methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        response_model=None,
        include_in_schema=_path == CORS_SUBMIT_PATHS[0],
    )
