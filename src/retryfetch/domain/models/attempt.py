"""Attempt outcome models"""

from dataclasses import dataclass
from enum import Enum


class FailureKind(str, Enum):
    """Classification of a failed attempt"""

    TIMEOUT = "timeout"
    NETWORK = "network"
    ABORTED = "aborted"


@dataclass(frozen=True)
class AttemptFailure:
    """Diagnostic record emitted for every failed attempt"""

    url: str
    attempt: int  # 1-based
    max_attempts: int
    kind: FailureKind
    message: str
    error: Exception

    @property
    def is_final(self) -> bool:
        """Check if no further attempt follows this one"""
        return self.attempt >= self.max_attempts

    def describe(self) -> str:
        """Format as a single log line"""
        return f"Request to {self.url} failed (attempt {self.attempt}/{self.max_attempts}): {self.message}"
