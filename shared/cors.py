"""
CORS negotiation for the CORS-enabled submission endpoint.

The global CORSMiddleware is not used here because the endpoint's contract
differs from it: preflight requests echo whatever origin asked (or ``*``),
while real responses only echo origins on the allow-list. A disallowed
origin gets no header at all; browsers then refuse to expose the response.
This is advisory, not access control.
"""

from __future__ import annotations

from typing import Iterable, Optional

ALLOW_METHODS = "POST, OPTIONS"
ALLOW_HEADERS = "Content-Type"


def preflight_headers(origin: Optional[str]) -> dict[str, str]:
    """Headers for a 204 answer to an OPTIONS preflight."""
    headers = {
        "Access-Control-Allow-Origin": origin or "*",
        "Access-Control-Allow-Methods": ALLOW_METHODS,
        "Access-Control-Allow-Headers": ALLOW_HEADERS,
    }
    if origin:
        headers["Vary"] = "Origin"
    return headers


def is_origin_allowed(origin: str, allowed_origins: Iterable[str]) -> bool:
    allowed = set(allowed_origins)
    return "*" in allowed or origin.rstrip("/") in allowed


def response_headers(
    origin: Optional[str], allowed_origins: Iterable[str]
) -> dict[str, str]:
    """Headers for a non-preflight response.

    No ``Origin`` header means a same-origin or server-to-server caller, which
    gets the wildcard.
    """
    if not origin:
        return {"Access-Control-Allow-Origin": "*"}
    if is_origin_allowed(origin, allowed_origins):
        return {"Access-Control-Allow-Origin": origin, "Vary": "Origin"}
    return {}
