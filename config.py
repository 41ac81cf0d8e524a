"""
Application configuration via pydantic-settings.

All settings are loaded from environment variables (and .env file).

The reCAPTCHA secret is read from RECAPTCHA_SECRET. RECAPTCHA_SECRET_KEY is
accepted as a fallback for deployments configured with the older name
(handled in RecaptchaSettings via model_validator). A missing secret is not
fatal at startup; every submission is answered with server_not_configured
until it is set. A missing MONGODB_URI is fatal.
"""

from __future__ import annotations

import json
from typing import Annotated, Any, Optional

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_CORS_ORIGINS = [
    "https://www.secondrm.com",
    "https://secondrm.com",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]


class DatabaseSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    mongodb_uri: str
    db_name: str = "forms"


class RecaptchaSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    recaptcha_secret: str = ""
    recaptcha_secret_key: str = ""  # older name, fallback only
    recaptcha_verify_url: str = "https://www.google.com/recaptcha/api/siteverify"
    recaptcha_timeout_seconds: float = 5.0
    recaptcha_send_remote_ip: bool = True

    @model_validator(mode="after")
    def _resolve_secret(self) -> "RecaptchaSettings":
        if not self.recaptcha_secret and self.recaptcha_secret_key:
            self.recaptcha_secret = self.recaptcha_secret_key
        return self

    @property
    def is_configured(self) -> bool:
        return bool(self.recaptcha_secret)


class LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    log_level: str = "INFO"
    log_format: str = "console"  # "json" in production


class SentrySettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    sentry_dsn: str = ""
    sentry_send_pii: bool = False
    sentry_traces_sample_rate: float = 0.1


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    env: str = "development"
    app_name: str = "form-gate"

    # Origins allowed on the CORS-enabled submission endpoint
    cors_origins: Annotated[list[str], NoDecode] = list(DEFAULT_CORS_ORIGINS)

    # OpenAPI docs URL (None disables the docs UI in production)
    docs_url: Optional[str] = "/docs"

    # Sub-configs (composed via model_validator below)
    db: Optional[DatabaseSettings] = None
    recaptcha: Optional[RecaptchaSettings] = None
    logging: Optional[LoggingSettings] = None
    sentry: Optional[SentrySettings] = None

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _parse_cors_origins(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
            if v.startswith("["):
                return json.loads(v)
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @model_validator(mode="after")
    def _populate_sub_configs(self) -> "AppSettings":
        # Populate sub-configs from the same env/dotenv source
        if self.db is None:
            self.db = DatabaseSettings()
        if self.recaptcha is None:
            self.recaptcha = RecaptchaSettings()
        if self.logging is None:
            self.logging = LoggingSettings()
        if self.sentry is None:
            self.sentry = SentrySettings()
        return self

    @property
    def is_production(self) -> bool:
        return self.env == "production"
