"""Retry controller built on tenacity.

Wraps the bounded retry policy into a tenacity ``AsyncRetrying`` so the
attempt loop, backoff and exhaustion handling stay in one place.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from retryfetch.domain.config.retry import BACKOFF_MULTIPLIER, RetryPolicy
from retryfetch.domain.errors import TransportError

SleepFn = Callable[[float], Awaitable[None]]


def backoff_wait(policy: RetryPolicy) -> wait_exponential:
    """Wait strategy: base_delay * 2 ** (attempt_number - 1), keyed on the completed attempt"""
    return wait_exponential(
        multiplier=policy.base_delay_s,
        exp_base=BACKOFF_MULTIPLIER,
        min=0,
    )


def create_retrying(
    policy: RetryPolicy,
    after: Callable[[RetryCallState], None] | None = None,
    sleep: SleepFn | None = None,
) -> AsyncRetrying:
    """Create a tenacity controller for one logical call.

    Args:
        policy: Retry policy
        after: Callback invoked after every failed attempt that is retryable,
            including the final one
        sleep: Awaitable sleep used between attempts (defaults to asyncio.sleep)

    Returns:
        AsyncRetrying that raises tenacity.RetryError on exhaustion
    """
    return AsyncRetrying(
        stop=stop_after_attempt(policy.max_retries),
        wait=backoff_wait(policy),
        retry=retry_if_exception_type(TransportError),
        reraise=False,
        after=after,
        sleep=sleep or asyncio.sleep,
    )
