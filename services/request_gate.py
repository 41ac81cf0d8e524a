"""
Request gate: shape checks that run before any external call.

Order is significant and matches what callers observe:
token, then payload, then server configuration.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from errors import ConfigurationError, MissingPayloadError, MissingTokenError
from schemas.dto.requests.submission import SubmissionRequest


def gate_request(body: Any, secret: str) -> SubmissionRequest:
    """Validate a decoded request body.

    A body that is not a mapping is treated as empty.

    Raises:
        MissingTokenError: token missing, empty or not a string.
        MissingPayloadError: payload missing, null or not a mapping.
        ConfigurationError: no verification secret configured.
    """
    if not isinstance(body, Mapping):
        body = {}

    token = body.get("token")
    if not token or not isinstance(token, str):
        raise MissingTokenError("Missing reCAPTCHA token")

    payload = body.get("payload")
    if payload is None or not isinstance(payload, Mapping):
        raise MissingPayloadError("Missing payload")

    if not secret:
        raise ConfigurationError("reCAPTCHA secret not configured")

    return SubmissionRequest(token=token, payload=dict(payload))
