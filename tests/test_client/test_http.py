"""Tests for snooauth.client.http."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from snooauth.client.http import ACCESS_TOKEN_PATH, HttpClient, format_user_agent
from snooauth.exceptions import TransportInitError


class TestFormatUserAgent:
    def test_format(self) -> None:
        assert format_user_agent("example-bot", "1.0.0", "example_bot") == (
            "example-bot:1.0.0 (by /u/example_bot)"
        )


class TestHttpClient:
    def test_sends_user_agent_and_buffers_body(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(201, headers={"X-Test": "1"}, content=b"payload")

        async def scenario():
            async with HttpClient(
                "bot:1 (by /u/me)", transport=httpx.MockTransport(handler)
            ) as http:
                request = http.build_request("POST", ACCESS_TOKEN_PATH, data={"a": "b"})
                return await http.execute(request)

        response = asyncio.run(scenario())

        assert response.status_code == 201
        assert response.body == b"payload"
        assert response.headers["X-Test"] == "1"
        assert response.is_success
        assert seen[0].headers["User-Agent"] == "bot:1 (by /u/me)"
        assert str(seen[0].url) == "https://www.reddit.com/api/v1/access_token"

    def test_custom_base_url(self) -> None:
        http = HttpClient("ua", base_url="https://oauth.example.com")
        request = http.build_request("GET", "/x")
        assert str(request.url) == "https://oauth.example.com/x"
        asyncio.run(http.aclose())

    def test_transport_errors_propagate(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async def scenario():
            async with HttpClient("ua", transport=httpx.MockTransport(handler)) as http:
                await http.execute(http.build_request("GET", "/"))

        with pytest.raises(httpx.ConnectError):
            asyncio.run(scenario())

    def test_invalid_base_url(self) -> None:
        with pytest.raises(TransportInitError):
            HttpClient("ua", base_url=12345)  # type: ignore[arg-type]
