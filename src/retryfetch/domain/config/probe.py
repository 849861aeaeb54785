"""Connectivity probe configuration model."""

from typing import Optional

from pydantic import BaseModel, Field, model_validator


class ProbeConfig(BaseModel):
    """Configuration for connectivity checks.

    Attributes:
        url: Endpoint probed with HEAD requests
        timeout_ms: Timeout of a single check
        slow_threshold_ms: Latency above which a reachable endpoint counts as slow
        poll_interval_ms: Pause between checks while waiting for connection
        max_wait_ms: Total budget for waiting for connection
    """

    url: Optional[str] = None
    timeout_ms: int = Field(5000, gt=0)
    slow_threshold_ms: int = Field(3000, gt=0)
    poll_interval_ms: int = Field(1000, ge=0)
    max_wait_ms: int = Field(10000, ge=0)

    @model_validator(mode="after")
    def _check_threshold(self) -> "ProbeConfig":
        if self.slow_threshold_ms > self.timeout_ms:
            raise ValueError("slow_threshold_ms must not exceed timeout_ms")
        return self
