"""Bounded retries with exponential backoff for transport failures."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

import anyio

from litestar_carrier_gateway.exceptions import TransportError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def compute_backoff_delay(attempt: int, backoff_seconds: float) -> float:
    """Compute the delay before the next attempt.

    delay = backoff_seconds * 2^(attempt - 1)
    """
    return backoff_seconds * (2 ** (attempt - 1))


async def call_with_retries(
    operation: Callable[[], Awaitable[T]],
    *,
    name: str,
    max_attempts: int,
    backoff_seconds: float,
) -> T:
    """Run ``operation``, retrying only on TransportError.

    Only wrap idempotent calls: a retried request may reach the carrier
    more than once.
    """
    attempts = max(1, max_attempts)
    attempt = 1
    while True:
        try:
            return await operation()
        except TransportError as exc:
            if attempt >= attempts:
                logger.warning(
                    "%s: giving up after %d attempts: %s",
                    name,
                    attempt,
                    exc,
                )
                raise
            delay = compute_backoff_delay(attempt, backoff_seconds)
            logger.warning(
                "%s: attempt %d failed, retrying in %.2fs: %s",
                name,
                attempt,
                delay,
                exc,
            )
            await anyio.sleep(delay)
            attempt += 1
