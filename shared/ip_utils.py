"""
Client IP resolution for FastAPI requests.

The resolved address is forwarded to the verification provider as
``remoteip``; when nothing can be resolved the field is omitted, so this
returns ``None`` rather than an empty string.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Request

# Checked in priority order before the socket peer
PROXY_HEADERS: tuple[str, ...] = (
    "CF-Connecting-IP",  # Cloudflare
    "True-Client-IP",  # Akamai and others
    "X-Forwarded-For",  # first entry is the original client
    "X-Real-IP",  # nginx
    "X-Client-IP",
)


def get_client_ip(request: Request) -> Optional[str]:
    """Extract the real client IP from a FastAPI ``Request``.

    Args:
        request: The current FastAPI ``Request`` object.

    Returns:
        The resolved client IP, or ``None`` if none can be found.
    """
    for header in PROXY_HEADERS:
        ip_value: Optional[str] = request.headers.get(header)
        if ip_value:
            client_ip = ip_value.split(",")[0].strip()
            if client_ip:
                return client_ip

    if request.client and request.client.host:
        return request.client.host
    return None
