"""Connectivity probe built on the retrying fetcher"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from retryfetch.domain.config.probe import ProbeConfig
from retryfetch.domain.config.retry import RetryPolicy
from retryfetch.domain.errors import FetchError
from retryfetch.domain.models.connection import ConnectionReport, ConnectionStatus
from retryfetch.domain.models.request_spec import RequestSpec
from retryfetch.infrastructure.fetcher import BoundedRetryingFetcher

logger = logging.getLogger(__name__)

# A check is a single attempt; waiting is done by polling, not by retrying.
SINGLE_ATTEMPT = RetryPolicy(max_retries=1, base_delay_ms=0)


class ConnectivityProbe:
    """Classifies an endpoint as online, slow or offline with HEAD requests"""

    def __init__(
        self,
        fetcher: BoundedRetryingFetcher,
        url: str,
        timeout_ms: int = 5000,
        slow_threshold_ms: int = 3000,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize probe

        Args:
            fetcher: Fetcher used to send checks
            url: Endpoint to probe
            timeout_ms: Timeout of a single check
            slow_threshold_ms: Latency above which a 2xx response counts as slow
            clock: Monotonic clock in seconds
        """
        self.fetcher = fetcher
        self.url = url
        self.timeout_ms = timeout_ms
        self.slow_threshold_ms = slow_threshold_ms
        self._clock = clock
        self._status = ConnectionStatus.ONLINE
        self._last_report: Optional[ConnectionReport] = None

    @classmethod
    def from_config(
        cls, fetcher: BoundedRetryingFetcher, config: ProbeConfig, url: Optional[str] = None
    ) -> "ConnectivityProbe":
        target = url or config.url
        if not target:
            raise ValueError("No probe URL configured (set probe.url or RETRYFETCH_PROBE_URL)")
        return cls(
            fetcher,
            target,
            timeout_ms=config.timeout_ms,
            slow_threshold_ms=config.slow_threshold_ms,
        )

    @property
    def status(self) -> ConnectionStatus:
        """Status observed by the most recent check"""
        return self._status

    @property
    def last_report(self) -> Optional[ConnectionReport]:
        """Report of the most recent check, None before the first one"""
        return self._last_report

    async def check(self) -> ConnectionReport:
        """Run one connectivity check

        Returns:
            ConnectionReport; latency is set only when the endpoint answered 2xx
        """
        spec = RequestSpec(url=self.url, method="HEAD", timeout_ms=self.timeout_ms)
        started = self._clock()
        try:
            response = await self.fetcher.execute(spec, SINGLE_ATTEMPT)
        except FetchError as e:
            logger.debug(f"Connectivity check to {self.url} failed: {e}")
            return self._record(ConnectionReport(ConnectionStatus.OFFLINE))

        latency_ms = (self._clock() - started) * 1000.0
        if not response.is_success:
            logger.debug(f"Connectivity check to {self.url} returned {response.status_code}")
            return self._record(ConnectionReport(ConnectionStatus.OFFLINE))

        status = ConnectionStatus.SLOW if latency_ms > self.slow_threshold_ms else ConnectionStatus.ONLINE
        return self._record(ConnectionReport(status, latency_ms=latency_ms))

    async def wait_for_connection(self, max_wait_ms: int = 10000, poll_interval_ms: int = 1000) -> bool:
        """Poll until the endpoint is online or the budget is spent

        Returns:
            True if a check reported online, False otherwise
        """
        deadline = self._clock() + max_wait_ms / 1000.0
        while self._clock() < deadline:
            report = await self.check()
            if report.is_online:
                return True
            logger.info(f"Endpoint {self.url} is {report.status.value}, retrying in {poll_interval_ms} ms")
            await self.fetcher.sleep(poll_interval_ms / 1000.0)
        return False

    def _record(self, report: ConnectionReport) -> ConnectionReport:
        self._status = report.status
        self._last_report = report
        return report
