"""Shared, memoizing handle to a credential that may still be in flight.

An :class:`Acquisition` behaves like a single-assignment future that any
number of holders can await:

- :meth:`Acquisition.resolved` wraps a credential that is already known
  (for example one restored by the caller at startup).
- :meth:`Acquisition.pending` wraps a
  :class:`~snooauth.client.exchange.TokenExchange`. The exchange runs as one
  :class:`asyncio.Task`, created the first time :meth:`~Acquisition.start`
  is called or the handle is awaited, so at most one HTTP call happens no
  matter how many holders await it.

The terminal value, a :class:`~snooauth.models.Credential` or a
:class:`~snooauth.exceptions.SnooError`, is written exactly once and every
later await observes the same value. Any other exception escaping the
exchange is cached as a plain ``SnooError``. Awaiters wait through
:func:`asyncio.shield`: a caller that is cancelled or times out leaves the
exchange running, and its outcome is still cached.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import TYPE_CHECKING, Any, Generator, Optional

from snooauth.exceptions import SnooError
from snooauth.models import Credential

if TYPE_CHECKING:
    from snooauth.client.exchange import TokenExchange

logger = logging.getLogger(__name__)


class Acquisition:
    """A credential that is either known or being fetched.

    Do not instantiate directly; use :meth:`resolved` or :meth:`pending`.

    Example::

        handle = authenticator.obtain()
        credential = await handle          # one HTTP call at most
        same = await handle                # cached, no I/O
        assert credential is same
    """

    def __init__(
        self,
        credential: Optional[Credential] = None,
        exchange: Optional[TokenExchange] = None,
    ) -> None:
        if (credential is None) == (exchange is None):
            raise ValueError("Acquisition needs exactly one of credential or exchange")
        self._lock = threading.Lock()
        self._exchange = exchange
        self._task: Optional[asyncio.Task[None]] = None
        self._credential = credential
        self._error: Optional[SnooError] = None
        self._done = credential is not None

    @classmethod
    def resolved(cls, credential: Credential) -> Acquisition:
        """Wrap an already-known credential."""
        return cls(credential=credential)

    @classmethod
    def pending(cls, exchange: TokenExchange) -> Acquisition:
        """Wrap a token exchange that has not completed yet."""
        return cls(exchange=exchange)

    # ------------------------------------------------------------------ #
    # Inspection
    # ------------------------------------------------------------------ #

    def done(self) -> bool:
        """Return ``True`` once the terminal value is known."""
        return self._done

    def peek(self) -> Optional[Credential]:
        """Return the credential if the acquisition resolved successfully.

        Returns ``None`` while the exchange is in flight and after it failed.
        """
        return self._credential

    def exception(self) -> Optional[SnooError]:
        """Return the cached failure, or ``None``."""
        return self._error

    # ------------------------------------------------------------------ #
    # Driving the exchange
    # ------------------------------------------------------------------ #

    def start(self) -> bool:
        """Start the exchange on the running event loop if it is not running yet.

        Safe to call from synchronous code: without a running loop nothing
        happens and the exchange starts on the first await instead.

        Returns:
            ``True`` if the exchange is running or finished.
        """
        if self._done or self._task is not None:
            return True
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return False
        self._ensure_task()
        return True

    def _ensure_task(self) -> asyncio.Task[None]:
        with self._lock:
            if self._task is None:
                self._task = asyncio.ensure_future(self._drive())
            return self._task

    async def _drive(self) -> None:
        assert self._exchange is not None
        try:
            credential = await self._exchange.run()
        except SnooError as exc:
            self._fail(exc)
        except Exception as exc:
            logger.warning("Token exchange raised %s: %s", type(exc).__name__, exc)
            error = SnooError(f"unexpected error: {exc}")
            error.__cause__ = exc
            self._fail(error)
        else:
            with self._lock:
                self._credential = credential
                self._done = True
        finally:
            self._exchange = None

    def _fail(self, error: SnooError) -> None:
        with self._lock:
            self._error = error
            self._done = True

    async def wait(self) -> Credential:
        """Wait for the terminal value.

        Returns:
            The acquired :class:`~snooauth.models.Credential`.

        Raises:
            SnooError: The cached failure, identical for every awaiter.
        """
        if not self._done:
            await asyncio.shield(self._ensure_task())
        if self._error is not None:
            raise self._error
        assert self._credential is not None
        return self._credential

    def __await__(self) -> Generator[Any, None, Credential]:
        return self.wait().__await__()

    def __repr__(self) -> str:
        if not self._done:
            state = "running" if self._task is not None else "pending"
        elif self._error is not None:
            state = f"failed: {self._error}"
        else:
            state = "resolved"
        return f"<Acquisition {state}>"
