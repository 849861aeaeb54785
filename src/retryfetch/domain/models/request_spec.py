"""Request model"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional, Union

from retryfetch.domain.errors import InvalidRequestError

DEFAULT_TIMEOUT_MS = 30_000

Body = Union[str, bytes]


@dataclass(frozen=True)
class RequestSpec:
    """Describes one logical request; shared unchanged by all of its attempts"""

    url: str
    method: str = "GET"
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Optional[Body] = None
    timeout_ms: int = DEFAULT_TIMEOUT_MS

    @property
    def timeout_s(self) -> float:
        return self.timeout_ms / 1000.0

    def validate(self) -> None:
        """Check the request can be sent

        Raises:
            InvalidRequestError: If url or method is blank, or timeout is not positive
        """
        if not isinstance(self.url, str) or not self.url.strip():
            raise InvalidRequestError("Request URL must be a non-empty string")
        if not self.method or not self.method.strip():
            raise InvalidRequestError("Request method must be a non-empty string")
        if self.timeout_ms is None or self.timeout_ms <= 0:
            raise InvalidRequestError(f"timeout_ms must be positive, got {self.timeout_ms}")

    def with_headers(self, extra: Mapping[str, str]) -> "RequestSpec":
        """Return a copy with extra headers merged in (spec headers win)"""
        merged = dict(extra)
        merged.update(self.headers)
        return RequestSpec(
            url=self.url,
            method=self.method,
            headers=merged,
            body=self.body,
            timeout_ms=self.timeout_ms,
        )
