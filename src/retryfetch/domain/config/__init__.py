"""Configuration models with Pydantic validation."""

from retryfetch.domain.config.app import AppConfig
from retryfetch.domain.config.probe import ProbeConfig
from retryfetch.domain.config.request import MockTransportConfig, RequestConfig
from retryfetch.domain.config.retry import RetryPolicy

__all__ = [
    "AppConfig",
    "MockTransportConfig",
    "ProbeConfig",
    "RequestConfig",
    "RetryPolicy",
]
