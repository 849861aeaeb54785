"""Network transports"""

from retryfetch.infrastructure.transport.base import Transport
from retryfetch.infrastructure.transport.httpx_transport import HttpxTransport
from retryfetch.infrastructure.transport.mock import Delay, MockTransport

__all__ = ["Delay", "HttpxTransport", "MockTransport", "Transport"]
