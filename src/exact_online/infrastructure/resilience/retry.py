# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Retry utilities (async) with jittered exponential backoff."""

from __future__ import annotations

import asyncio
import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Configuration for retry attempts."""

    total: int  # retries after the first attempt
    base: float  # base backoff seconds
    cap: float  # max backoff seconds
    jitter: bool = True

    def backoff(self, attempt: int) -> float:
        """Return the sleep in seconds before retry number ``attempt`` (0-based)."""
        delay = min(self.cap, self.base * (2**attempt))
        if self.jitter:
            delay = random.uniform(0, delay)  # noqa: S311
        return delay


async def retry_async(
    fn: Callable[[], Awaitable[T]],
    *,
    policy: RetryPolicy,
    retry_on: Callable[[Exception], bool],
    on_retry: Callable[[int, Exception], None] | None = None,
    delay_for: Callable[[Exception], float | None] | None = None,
) -> T:
    """Run ``fn`` until it succeeds, a non-retryable error occurs, or the budget ends.

    Args:
        fn: Zero-arg async function to execute.
        policy: Retry count and backoff.
        retry_on: Predicate returning True for retryable exceptions.
        on_retry: Optional hook called with ``(attempt, exc)`` before sleeping.
        delay_for: Optional hook returning a server-mandated delay for ``exc``
            (e.g. ``Retry-After``). A non-``None`` result replaces the policy
            backoff for that retry.

    Returns:
        The return value of ``fn``.

    Raises:
        Exception: The last exception once retries are exhausted or when it is
            not retryable. No sleep happens before that final raise.
    """
    attempt = 0
    while True:
        try:
            return await fn()
        except Exception as exc:  # noqa: BLE001
            if attempt >= policy.total or not retry_on(exc):
                raise
            if on_retry is not None:
                on_retry(attempt, exc)
            mandated = delay_for(exc) if delay_for is not None else None
            delay = mandated if mandated is not None else policy.backoff(attempt)
        await asyncio.sleep(delay)
        attempt += 1
