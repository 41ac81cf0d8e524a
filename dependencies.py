"""
FastAPI dependency providers.

All injectable dependencies are defined here as plain async functions
used with FastAPI's Depends() system. The settings object and the pipeline
are built once in the application lifespan and read from app.state.
"""

from __future__ import annotations

from typing import Any

from fastapi import Request

from config import AppSettings
from services.submission_pipeline import SubmissionPipeline


def get_settings(request: Request) -> AppSettings:
    """Return the AppSettings instance stored on app.state."""
    return request.app.state.settings


def get_pipeline(request: Request) -> SubmissionPipeline:
    """Return the shared SubmissionPipeline from app.state."""
    return request.app.state.pipeline


async def get_db(request: Request):
    """Return the async MongoDB database from app.state."""
    return request.app.state.db


async def get_json_body(request: Request) -> Any:
    """Decode the request body as JSON; an empty or non-JSON body decodes to None."""
    try:
        return await request.json()
    except ValueError:
        return None
