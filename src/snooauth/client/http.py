"""Asynchronous HTTP transport for snooauth.

:class:`HttpClient` wraps :class:`httpx.AsyncClient` and adds the two things
every Reddit request needs: a descriptive ``User-Agent`` header and a fully
buffered :class:`~snooauth.client.response.RawResponse`.

Example::

    async with HttpClient(format_user_agent("mybot", "1.0", "me")) as http:
        request = http.build_request("POST", ACCESS_TOKEN_PATH, data=[...])
        response = await http.execute(request)
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from snooauth.client.response import RawResponse
from snooauth.exceptions import TransportInitError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://www.reddit.com"
ACCESS_TOKEN_PATH = "/api/v1/access_token"
AUTHORIZE_PATH = "/api/v1/authorize"
AUTHORIZE_COMPACT_PATH = "/api/v1/authorize.compact"


def format_user_agent(app_id: str, app_version: str, username: str) -> str:
    """Build a User-Agent string in the format Reddit's API rules ask for."""
    return f"{app_id}:{app_version} (by /u/{username})"


class HttpClient:
    """Asynchronous HTTP client shared by every token exchange of a session.

    Args:
        user_agent: Value of the ``User-Agent`` header sent with every request.
        base_url: Scheme and host that request paths are resolved against.
        timeout: Per-request timeout in seconds.
        transport: Optional custom :class:`httpx.AsyncBaseTransport`
            (tests pass an :class:`httpx.MockTransport`).

    Raises:
        TransportInitError: If the underlying :class:`httpx.AsyncClient`
            cannot be created (e.g. an invalid base URL).
    """

    def __init__(
        self,
        user_agent: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.user_agent = user_agent
        try:
            self._client = httpx.AsyncClient(
                base_url=base_url,
                timeout=timeout,
                headers={"User-Agent": user_agent},
                transport=transport,
            )
        except (httpx.InvalidURL, ValueError, TypeError) as exc:
            raise TransportInitError(f"cannot create HTTP client: {exc}") from exc

    @property
    def base_url(self) -> httpx.URL:
        return self._client.base_url

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> HttpClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------ #
    # Requests
    # ------------------------------------------------------------------ #

    def build_request(self, method: str, path: str, **kwargs: Any) -> httpx.Request:
        """Build a request against the client's base URL.

        Keyword arguments are forwarded to :meth:`httpx.AsyncClient.build_request`.
        """
        return self._client.build_request(method, path, **kwargs)

    async def execute(self, request: httpx.Request) -> RawResponse:
        """Send *request* and read the whole response body.

        Raises:
            httpx.HTTPError: On transport failures. Callers map this onto
                :class:`~snooauth.exceptions.NetworkError`.
        """
        logger.debug("%s %s", request.method, request.url)
        response = await self._client.send(request)
        try:
            body = await response.aread()
        finally:
            await response.aclose()
        logger.debug("%s %s -> %d", request.method, request.url, response.status_code)
        return RawResponse(
            status_code=response.status_code,
            headers=response.headers,
            body=body,
        )
