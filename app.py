"""
FastAPI application factory.
create_app() is the single entry point for building the app.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import sentry_sdk
from fastapi import FastAPI
from pymongo.asynchronous.mongo_client import AsyncMongoClient

from config import AppSettings
from errors import register_error_handlers
from infrastructure.captcha.recaptcha import RecaptchaProvider
from infrastructure.http_client import HttpClient
from infrastructure.store.mongo import MongoSubmissionStore
from routes.callable_routes import router as callable_router
from routes.cors_routes import router as cors_router
from routes.form_routes import router as form_router
from routes.health_routes import router as health_router
from services.submission_pipeline import SubmissionPipeline
from shared.log_context import setup_logging_middleware
from shared.logging import get_logger, setup_logging

log = get_logger(__name__)


def create_app(settings: Optional[AppSettings] = None) -> FastAPI:
    """Create and return a fully configured FastAPI application."""
    if settings is None:
        settings = AppSettings()

    setup_logging(
        settings.logging.log_level,
        settings.logging.log_format,
        production=settings.is_production,
    )

    # Initialise Sentry before anything else so it captures startup errors
    if settings.sentry.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry.sentry_dsn,
            send_default_pii=settings.sentry.sentry_send_pii,
            traces_sample_rate=settings.sentry.sentry_traces_sample_rate,
            environment=settings.env,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # ── Startup ──────────────────────────────────────────────────────────
        mongo_client: AsyncMongoClient = AsyncMongoClient(settings.db.mongodb_uri)
        db = mongo_client[settings.db.db_name]
        http_client = HttpClient(timeout=settings.recaptcha.recaptcha_timeout_seconds)

        verifier = RecaptchaProvider(
            secret=settings.recaptcha.recaptcha_secret,
            http_client=http_client,
            verify_url=settings.recaptcha.recaptcha_verify_url,
            send_remote_ip=settings.recaptcha.recaptcha_send_remote_ip,
        )
        app.state.settings = settings
        app.state.mongo_client = mongo_client
        app.state.db = db
        app.state.pipeline = SubmissionPipeline(
            secret=settings.recaptcha.recaptcha_secret,
            verifier=verifier,
            store=MongoSubmissionStore.from_database(db),
        )

        if not settings.recaptcha.is_configured:
            log.error(
                "recaptcha_not_configured",
                hint="set RECAPTCHA_SECRET; submissions are refused until then",
            )

        yield

        # ── Shutdown ─────────────────────────────────────────────────────────
        await http_client.aclose()
        await mongo_client.close()

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        docs_url=settings.docs_url,
        redoc_url=None,
        lifespan=lifespan,
    )

    setup_logging_middleware(app)
    register_error_handlers(app)
    app.include_router(health_router)
    app.include_router(form_router)
    app.include_router(callable_router)
    app.include_router(cors_router)

    return app
