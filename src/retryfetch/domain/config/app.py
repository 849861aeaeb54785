"""Main application configuration model."""

from pydantic import BaseModel, ConfigDict, Field

from retryfetch.domain.config.probe import ProbeConfig
from retryfetch.domain.config.request import RequestConfig
from retryfetch.domain.config.retry import RetryPolicy


class AppConfig(BaseModel):
    """Main application configuration.

    Root model that aggregates all configuration sections.
    Validation is performed at load time to fail fast on configuration errors.

    Attributes:
        retry: Retry policy applied to every fetch
        request: Request defaults
        probe: Connectivity probe settings
    """

    retry: RetryPolicy = Field(default_factory=RetryPolicy)
    request: RequestConfig = Field(default_factory=RequestConfig)
    probe: ProbeConfig = Field(default_factory=ProbeConfig)

    model_config = ConfigDict(
        validate_assignment=True,  # Validate on attribute assignment
        extra="forbid",  # Reject unknown fields
        json_schema_extra={
            "example": {
                "retry": {
                    "max_retries": 3,
                    "base_delay_ms": 1000,
                },
                "request": {
                    "transport": "httpx",
                    "timeout_ms": 30000,
                    "headers": {"x-client-info": "admissions-portal"},
                },
                "probe": {
                    "url": "https://example.supabase.co/rest/v1/",
                    "timeout_ms": 5000,
                    "slow_threshold_ms": 3000,
                    "poll_interval_ms": 1000,
                    "max_wait_ms": 10000,
                },
            }
        },
    )
