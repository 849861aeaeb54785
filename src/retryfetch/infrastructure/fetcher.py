"""Bounded retrying fetcher.

Issues a request, cancels any attempt that outlives its timeout, retries
transport failures with exponential backoff and raises the last failure once
the policy is exhausted. HTTP status codes are never treated as failures.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Mapping, Optional

import httpx
from tenacity import RetryCallState, RetryError

from retryfetch.domain.config.retry import RetryPolicy
from retryfetch.domain.errors import RequestTimeoutError, RetryExhaustedError
from retryfetch.domain.models.attempt import AttemptFailure
from retryfetch.domain.models.request_spec import DEFAULT_TIMEOUT_MS, Body, RequestSpec
from retryfetch.infrastructure.retry import SleepFn, create_retrying
from retryfetch.infrastructure.transport.base import Transport
from retryfetch.infrastructure.transport.httpx_transport import HttpxTransport

logger = logging.getLogger(__name__)

FailureSink = Callable[[AttemptFailure], None]


def log_attempt_failure(failure: AttemptFailure) -> None:
    """Default diagnostic sink"""
    logger.warning(failure.describe())


@asynccontextmanager
async def attempt_scope(spec: RequestSpec) -> AsyncIterator[None]:
    """Cancellation scope for a single attempt.

    The deadline is armed on entry and disarmed on every exit path, so it
    never reaches the next attempt.

    Raises:
        RequestTimeoutError: If the body did not finish within spec.timeout_ms
    """
    deadline = asyncio.timeout(spec.timeout_s)
    try:
        async with deadline:
            yield
    except TimeoutError as e:
        if deadline.expired():
            raise RequestTimeoutError(f"Request timed out after {spec.timeout_ms} ms") from e
        # Raised by the transport itself, not by this scope's deadline
        raise RequestTimeoutError(str(e) or "Request timed out") from e


class BoundedRetryingFetcher:
    """Resilient request execution over a pluggable transport

    Usage:
        async with BoundedRetryingFetcher() as fetcher:
            response = await fetcher.execute(RequestSpec(url), RetryPolicy())
    """

    def __init__(
        self,
        transport: Optional[Transport] = None,
        *,
        sleep: Optional[SleepFn] = None,
        on_attempt_failed: Optional[FailureSink] = None,
        default_headers: Optional[Mapping[str, str]] = None,
    ):
        """Initialize fetcher

        Args:
            transport: Transport to send requests with (an owned HttpxTransport if None)
            sleep: Awaitable sleep between attempts (asyncio.sleep if None)
            on_attempt_failed: Diagnostic sink called once per failed attempt
                (logs a warning if None)
            default_headers: Headers added to every request unless the request sets them
        """
        self._owns_transport = transport is None
        self._transport = transport or HttpxTransport()
        self._sleep = sleep
        self._on_attempt_failed = on_attempt_failed or log_attempt_failure
        self._default_headers = dict(default_headers or {})

    @property
    def transport(self) -> Transport:
        return self._transport

    async def sleep(self, seconds: float) -> None:
        """Suspend using the fetcher's clock"""
        await (self._sleep or asyncio.sleep)(seconds)

    async def __aenter__(self) -> "BoundedRetryingFetcher":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the transport if this fetcher created it"""
        if self._owns_transport:
            await self._transport.aclose()

    async def execute(self, spec: RequestSpec, policy: Optional[RetryPolicy] = None) -> httpx.Response:
        """Execute a request with bounded retries

        Args:
            spec: Request to send
            policy: Retry policy (defaults: 3 attempts, 1000 ms base delay)

        Returns:
            Response of the first attempt that completed, whatever its status

        Raises:
            InvalidRequestError: If the request is malformed (no attempt is made)
            RetryExhaustedError: If every attempt failed
        """
        spec.validate()
        policy = policy or RetryPolicy()
        if self._default_headers:
            spec = spec.with_headers(self._default_headers)

        retrying = create_retrying(
            policy,
            after=self._failure_reporter(spec, policy),
            sleep=self._sleep,
        )
        try:
            return await retrying(self._attempt, spec)
        except RetryError as e:
            last_error = e.last_attempt.exception()
            logger.error(f"Request to {spec.url} failed after {policy.max_retries} attempts: {last_error}")
            raise RetryExhaustedError(last_error, policy.max_retries, url=spec.url) from last_error

    async def _attempt(self, spec: RequestSpec) -> httpx.Response:
        logger.debug(f"{spec.method} {spec.url} (timeout {spec.timeout_ms} ms)")
        async with attempt_scope(spec):
            return await self._transport.send(spec)

    def _failure_reporter(self, spec: RequestSpec, policy: RetryPolicy) -> Callable[[RetryCallState], None]:
        def _report(retry_state: RetryCallState) -> None:
            if retry_state.outcome is None:
                return
            error = retry_state.outcome.exception()
            self._on_attempt_failed(
                AttemptFailure(
                    url=spec.url,
                    attempt=retry_state.attempt_number,
                    max_attempts=policy.max_retries,
                    kind=error.kind,
                    message=str(error),
                    error=error,
                )
            )

        return _report


async def retry_fetch(
    url: str,
    *,
    method: str = "GET",
    headers: Optional[Mapping[str, str]] = None,
    body: Optional[Body] = None,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    policy: Optional[RetryPolicy] = None,
    transport: Optional[Transport] = None,
) -> httpx.Response:
    """One-shot resilient request

    Builds a RequestSpec, runs it through a BoundedRetryingFetcher and closes
    any transport it had to create.
    """
    spec = RequestSpec(
        url=url,
        method=method,
        headers=dict(headers or {}),
        body=body,
        timeout_ms=timeout_ms,
    )
    spec.validate()
    async with BoundedRetryingFetcher(transport) as fetcher:
        return await fetcher.execute(spec, policy)
