"""Error hierarchy for resilient fetching"""

from __future__ import annotations

from typing import Optional

from retryfetch.domain.models.attempt import FailureKind


class FetchError(Exception):
    """Base class for all fetch errors"""

    pass


class InvalidRequestError(FetchError):
    """Request is malformed and was never sent"""

    pass


class TransportError(FetchError):
    """Failure below the HTTP layer (DNS, refused or reset connection, abort)"""

    def __init__(self, message: str, kind: FailureKind = FailureKind.NETWORK):
        super().__init__(message)
        self.kind = kind


class RequestTimeoutError(TransportError):
    """Attempt did not settle within its timeout and was cancelled"""

    def __init__(self, message: str):
        super().__init__(message, kind=FailureKind.TIMEOUT)


class RetryExhaustedError(FetchError):
    """Every permitted attempt failed

    Attributes:
        last_error: Failure of the final attempt
        attempts: Number of attempts made
    """

    def __init__(self, last_error: TransportError, attempts: int, url: Optional[str] = None):
        target = f" to {url}" if url else ""
        super().__init__(f"Request{target} failed after {attempts} attempts: {last_error}")
        self.last_error = last_error
        self.attempts = attempts
        self.url = url
