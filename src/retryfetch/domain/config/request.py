"""Request defaults configuration model."""

from typing import Dict, Literal

from pydantic import BaseModel, Field


class MockTransportConfig(BaseModel):
    """Canned response served by the mock transport.

    Attributes:
        status_code: HTTP status of every response
        body: Response body text
    """

    status_code: int = Field(200, ge=100, le=599)
    body: str = ""


class RequestConfig(BaseModel):
    """Defaults applied to every request.

    Attributes:
        transport: Transport backend (httpx or mock)
        timeout_ms: Per-attempt timeout in milliseconds
        headers: Headers sent with every request unless overridden
        mock: Response served when transport is mock
    """

    transport: Literal["httpx", "mock"] = "httpx"
    timeout_ms: int = Field(30000, gt=0)
    headers: Dict[str, str] = Field(default_factory=dict)
    mock: MockTransportConfig = Field(default_factory=MockTransportConfig)
