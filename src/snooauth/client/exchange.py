"""Token endpoint request/response pipeline.

A :class:`TokenExchange` performs one ``POST /api/v1/access_token`` call:

1. Build the request -- HTTP Basic auth with the app secrets and a
   form-encoded body produced by the strategy's
   :meth:`~snooauth.auth.strategies.AuthStrategy.to_form`.
2. Send it through the session's :class:`~snooauth.client.http.HttpClient`
   and buffer the whole body.
3. Interpret the result with
   :func:`~snooauth.client.response.credential_from_response`.

Every failure surfaces as a :class:`~snooauth.exceptions.SnooError`, so the
:class:`~snooauth.auth.acquisition.Acquisition` driving the exchange has a
single exception family to cache.
"""

from __future__ import annotations

import base64
import logging
from typing import TYPE_CHECKING

import httpx

from snooauth.client.http import ACCESS_TOKEN_PATH, HttpClient
from snooauth.client.response import credential_from_response
from snooauth.exceptions import InvalidRequestError, NetworkError
from snooauth.models import AppSecrets, Credential

if TYPE_CHECKING:
    from snooauth.auth.strategies import AuthStrategy

logger = logging.getLogger(__name__)


def build_token_request(
    http_client: HttpClient,
    strategy: AuthStrategy,
    app_secrets: AppSecrets,
) -> httpx.Request:
    """Build the token endpoint request for *strategy*.

    Raises:
        InvalidRequestError: If the request cannot be serialised.
    """
    raw = f"{app_secrets.client_id}:{app_secrets.client_secret or ''}"
    encoded = base64.b64encode(raw.encode("utf-8")).decode("ascii")
    try:
        return http_client.build_request(
            "POST",
            ACCESS_TOKEN_PATH,
            data=dict(strategy.to_form()),
            headers={"Accept": "application/json", "Authorization": f"Basic {encoded}"},
        )
    except (httpx.HTTPError, TypeError, ValueError) as exc:
        raise InvalidRequestError(f"cannot build token request: {exc}") from exc


class TokenExchange:
    """One token-endpoint call for a given strategy.

    The request is built eagerly so serialisation errors are captured at
    construction time and re-raised by :meth:`run`, mirroring how network
    errors surface.

    Args:
        http_client: Transport shared by the session.
        strategy: The grant to exchange.
        app_secrets: Secrets used for HTTP Basic authentication.
    """

    def __init__(
        self,
        http_client: HttpClient,
        strategy: AuthStrategy,
        app_secrets: AppSecrets,
    ) -> None:
        self._http_client = http_client
        self.grant_type = strategy.grant_type
        self._error: InvalidRequestError | None = None
        self._request: httpx.Request | None = None
        try:
            self._request = build_token_request(http_client, strategy, app_secrets)
        except InvalidRequestError as exc:
            self._error = exc

    async def run(self) -> Credential:
        """Execute the exchange.

        Returns:
            The freshly issued :class:`~snooauth.models.Credential`.

        Raises:
            InvalidRequestError: If the request could not be built.
            NetworkError: On transport failures.
            UnsuccessfulResponseError: On non-2xx statuses.
            BadCredentialsError: When the grant is rejected.
            InvalidResponseError: When the body is not a token response.
        """
        if self._error is not None:
            raise self._error
        assert self._request is not None

        if self._http_client.is_closed:
            logger.warning("Token request failed: HTTP client is closed")
            raise NetworkError("network error: the session's HTTP client has been closed")

        logger.debug("Requesting access token (grant_type=%s)", self.grant_type)
        try:
            response = await self._http_client.execute(self._request)
        except httpx.HTTPError as exc:
            logger.warning("Token request failed: %s", exc)
            raise NetworkError(f"network error: {exc}") from exc
        except RuntimeError as exc:
            # httpx raises RuntimeError when the client is closed mid-flight
            logger.warning("Token request failed: %s", exc)
            raise NetworkError(f"network error: {exc}") from exc

        credential = credential_from_response(response)
        logger.info(
            "Obtained access token (grant_type=%s, expires_in=%d, scope=%s)",
            self.grant_type,
            credential.ttl_seconds,
            credential.scope,
        )
        return credential
