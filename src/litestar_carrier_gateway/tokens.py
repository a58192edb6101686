"""Bearer token value and per-credential token cache."""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import anyio

from litestar_carrier_gateway.credentials import Credentials

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AccessToken:
    """Short-lived bearer token.

    ``expires_in`` is the lifetime in seconds reported by the carrier,
    or ``None`` when it did not report one.
    """

    token: str
    expires_in: float | None = None

    def __str__(self) -> str:
        return self.token

    def __repr__(self) -> str:
        return f"AccessToken(token='***', expires_in={self.expires_in!r})"


class TokenCache:
    """Reuse tokens per credential fingerprint until shortly before expiry.

    Refreshes for the same credentials are serialized, so concurrent
    callers wait for a single fetch instead of each hitting the token
    endpoint. Tokens without a reported lifetime are never reused.
    """

    def __init__(
        self,
        *,
        refresh_margin_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.refresh_margin_seconds = refresh_margin_seconds
        self._clock = clock
        self._tokens: dict[str, tuple[AccessToken, float]] = {}
        self._locks: dict[str, anyio.Lock] = {}

    def peek(self, credentials: Credentials) -> AccessToken | None:
        """Return the cached token if it is still usable."""
        entry = self._tokens.get(credentials.fingerprint)
        if entry is None:
            return None
        token, refresh_at = entry
        if self._clock() >= refresh_at:
            return None
        return token

    def store(self, credentials: Credentials, token: AccessToken) -> None:
        if token.expires_in is None:
            return
        refresh_at = (
            self._clock() + token.expires_in - self.refresh_margin_seconds
        )
        self._tokens[credentials.fingerprint] = (token, refresh_at)

    async def get(
        self,
        credentials: Credentials,
        fetch: Callable[[], Awaitable[AccessToken]],
    ) -> AccessToken:
        """Return a usable token, calling ``fetch`` only when needed."""
        cached = self.peek(credentials)
        if cached is not None:
            return cached

        lock = self._locks.setdefault(credentials.fingerprint, anyio.Lock())
        async with lock:
            # Another task may have refreshed while we waited.
            cached = self.peek(credentials)
            if cached is not None:
                return cached
            token = await fetch()
            self.store(credentials, token)
            logger.debug(
                "Fetched carrier token for client %s", credentials.client_id
            )
            return token

    def invalidate(self, credentials: Credentials) -> None:
        self._tokens.pop(credentials.fingerprint, None)
        self._drop_idle_lock(credentials.fingerprint)

    def clear(self) -> None:
        self._tokens.clear()
        for fingerprint in list(self._locks):
            self._drop_idle_lock(fingerprint)

    def _drop_idle_lock(self, fingerprint: str) -> None:
        # A held lock still guards a fetch in progress.
        lock = self._locks.get(fingerprint)
        if lock is not None and not lock.locked():
            del self._locks[fingerprint]
