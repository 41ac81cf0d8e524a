"""Shared async HTTP client for outbound calls to the verification provider."""

from typing import Any, Optional

import httpx

DEFAULT_HEADERS = {"Accept": "application/json"}


class HttpClient:
    """Thin async wrapper around httpx.AsyncClient with a configurable timeout.

    Created once per process in the application lifespan and shared by all
    requests; httpx pools connections internally. No retries are configured.
    """

    def __init__(
        self,
        timeout: float = 5.0,
        headers: Optional[dict[str, str]] = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            timeout=timeout, headers={**DEFAULT_HEADERS, **(headers or {})}
        )

    async def post_form(self, url: str, data: dict[str, str]) -> httpx.Response:
        """POST ``data`` as application/x-www-form-urlencoded."""
        return await self._client.post(url, data=data)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()
