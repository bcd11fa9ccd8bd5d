"""HTTP plumbing for snooauth.

Classes:
    :class:`HttpClient` -- :class:`httpx.AsyncClient` wrapper that sets the
    ``User-Agent`` header and buffers whole responses.
    :class:`RawResponse` -- status, headers and body of a buffered response.

The token-endpoint pipeline lives in :mod:`snooauth.client.exchange`.
"""

from snooauth.client.http import HttpClient, format_user_agent
from snooauth.client.response import RawResponse

__all__ = ["HttpClient", "RawResponse", "format_user_agent"]
