"""Buffered HTTP responses and their interpretation as credentials.

:class:`RawResponse` holds a response whose body has been read in full.
:func:`credential_from_response` turns one into a
:class:`~snooauth.models.Credential` or raises the matching
:class:`~snooauth.exceptions.SnooError`.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field

import httpx
from pydantic import ValidationError

from snooauth.exceptions import BadCredentialsError, InvalidResponseError, error_for_status
from snooauth.models import Credential


@dataclass(frozen=True)
class RawResponse:
    """Status, headers and fully-read body of an HTTP response."""

    status_code: int
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    body: bytes = b""

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


def credential_from_response(response: RawResponse) -> Credential:
    """Interpret a token endpoint response.

    Args:
        response: The buffered response.

    Returns:
        A :class:`~snooauth.models.Credential` stamped with the current time.

    Raises:
        UnsuccessfulResponseError: For non-2xx statuses (401 and 403 raise
            the :class:`~snooauth.exceptions.UnauthorizedError` and
            :class:`~snooauth.exceptions.ForbiddenError` subclasses).
        BadCredentialsError: When the body carries ``"error": "invalid_grant"``,
            which is how Reddit rejects a wrong password or a used code.
        InvalidResponseError: When the body is not a valid token response.
    """
    if not response.is_success:
        raise error_for_status(response.status_code)

    try:
        return Credential.from_token_response(response.body)
    except ValidationError as exc:
        error = _error_field(response.body)
        if error == "invalid_grant":
            raise BadCredentialsError() from exc
        if error is not None:
            raise InvalidResponseError(f"token endpoint returned error: {error}") from exc
        raise InvalidResponseError() from exc


def _error_field(body: bytes) -> str | None:
    """Return the ``error`` member of a JSON object body, if any."""
    try:
        data = json.loads(body)
    except ValueError:
        return None
    if isinstance(data, dict) and isinstance(data.get("error"), str):
        return data["error"]
    return None
