"""
Health check endpoint.

GET /health — checks MongoDB connectivity and reCAPTCHA configuration.
Rules:
- MongoDB failure → "unhealthy" (503) — no submission can be stored.
- Missing reCAPTCHA secret → "degraded" (200) — every submission is refused
  with server_not_configured until it is set.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from config import AppSettings
from dependencies import get_db, get_settings
from schemas.dto.responses.common import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(
    db=Depends(get_db),
    settings: AppSettings = Depends(get_settings),
) -> JSONResponse:
    checks: dict[str, str] = {}
    overall = "healthy"

    try:
        await db.client.admin.command("ping")
        checks["mongodb"] = "ok"
    except Exception:
        checks["mongodb"] = "error"
        overall = "unhealthy"

    if settings.recaptcha.is_configured:
        checks["recaptcha"] = "configured"
    else:
        checks["recaptcha"] = "not_configured"
        if overall == "healthy":
            overall = "degraded"

    status_code = 503 if overall == "unhealthy" else 200
    return JSONResponse(
        status_code=status_code,
        content=HealthResponse(status=overall, checks=checks).model_dump(),
    )
