"""Factory for creating transports"""

import logging
from typing import Any, Dict

from retryfetch.infrastructure.transport.base import Transport
from retryfetch.infrastructure.transport.httpx_transport import HttpxTransport
from retryfetch.infrastructure.transport.mock import MockTransport

logger = logging.getLogger(__name__)


class TransportFactory:
    """Factory for creating transport instances"""

    TRANSPORTS = {
        "httpx": lambda config: HttpxTransport(),
        "mock": lambda config: MockTransport(config=config),
    }

    @classmethod
    def create(cls, transport_type: str, config: Dict[str, Any] = None) -> Transport:
        """Create transport instance

        Args:
            transport_type: Type of transport (httpx, mock)
            config: Transport configuration

        Returns:
            Transport instance

        Raises:
            ValueError: If transport type is not supported
        """
        if config is None:
            config = {}

        transport_type_lower = transport_type.lower()

        if transport_type_lower not in cls.TRANSPORTS:
            available = ", ".join(cls.TRANSPORTS.keys())
            raise ValueError(
                f"Unknown transport: {transport_type}. "
                f"Available transports: {available}"
            )

        logger.info(f"Creating {transport_type_lower} transport")
        return cls.TRANSPORTS[transport_type_lower](config)
