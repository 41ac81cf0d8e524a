"""
Integration test helpers.

Builds a minimal FastAPI app with the real routers and error handlers, and
the in-memory verifier/store injected through the lifespan. No real network
connections are made.
"""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from config import AppSettings, DatabaseSettings, RecaptchaSettings
from errors import register_error_handlers
from routes.callable_routes import router as callable_router
from routes.cors_routes import router as cors_router
from routes.form_routes import router as form_router
from routes.health_routes import router as health_router
from services.submission_pipeline import SubmissionPipeline
from shared.log_context import setup_logging_middleware


def build_settings(secret: str = "test-secret") -> AppSettings:
    return AppSettings(
        db=DatabaseSettings(mongodb_uri="mongodb://localhost:27017/"),
        recaptcha=RecaptchaSettings(recaptcha_secret=secret),
    )


def build_test_app(pipeline, settings=None, mongo_ok: bool = True) -> FastAPI:
    settings = settings or build_settings()

    mock_db = MagicMock()
    if mongo_ok:
        mock_db.client.admin.command = AsyncMock(return_value={"ok": 1})
    else:
        mock_db.client.admin.command = AsyncMock(
            side_effect=Exception("connection refused")
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.settings = settings
        app.state.db = mock_db
        app.state.pipeline = pipeline
        yield

    app = FastAPI(lifespan=lifespan)
    setup_logging_middleware(app)
    register_error_handlers(app)
    app.include_router(health_router)
    app.include_router(form_router)
    app.include_router(callable_router)
    app.include_router(cors_router)
    return app


@pytest.fixture
def client(pipeline):
    with TestClient(build_test_app(pipeline)) as c:
        yield c


@pytest.fixture
def unconfigured_client(verifier, store):
    pipeline = SubmissionPipeline(secret="", verifier=verifier, store=store)
    with TestClient(build_test_app(pipeline, settings=build_settings(secret=""))) as c:
        yield c


@pytest.fixture
def make_client(pipeline):
    """Factory for clients with non-default health conditions."""
    clients = []

    def _make(secret: str = "test-secret", mongo_ok: bool = True) -> TestClient:
        app = build_test_app(pipeline, settings=build_settings(secret), mongo_ok=mongo_ok)
        c = TestClient(app)
        c.__enter__()
        clients.append(c)
        return c

    yield _make
    for c in clients:
        c.__exit__(None, None, None)
