"""Retry policy model."""

from pydantic import BaseModel, ConfigDict, Field

BACKOFF_MULTIPLIER = 2


class RetryPolicy(BaseModel):
    """Bounded retry with exponential backoff.

    The delay after failed attempt ``n`` is ``base_delay_ms * 2 ** (n - 1)``.
    No delay follows the final attempt.

    Attributes:
        max_retries: Total number of attempts, including the first one
        base_delay_ms: Delay before the second attempt, in milliseconds
    """

    max_retries: int = Field(3, ge=1)
    base_delay_ms: float = Field(1000, ge=0)  # Allow 0 for tests

    model_config = ConfigDict(frozen=True, extra="forbid")

    @property
    def base_delay_s(self) -> float:
        return self.base_delay_ms / 1000.0

    def delay_after(self, attempt: int) -> float:
        """Delay in milliseconds that follows failed attempt ``attempt``"""
        if attempt >= self.max_retries:
            return 0.0
        return self.base_delay_ms * BACKOFF_MULTIPLIER ** (attempt - 1)

    def total_delay_ms(self) -> float:
        """Worst-case time spent sleeping between attempts"""
        return sum(self.delay_after(n) for n in range(1, self.max_retries))
