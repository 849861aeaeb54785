"""Base transport interface"""

from abc import ABC, abstractmethod

import httpx

from retryfetch.domain.models.request_spec import RequestSpec


class Transport(ABC):
    """Performs one network exchange for a request spec"""

    @abstractmethod
    async def send(self, spec: RequestSpec) -> httpx.Response:
        """Send a single request

        Args:
            spec: Request to send

        Returns:
            Response, whatever its status code

        Raises:
            TransportError: If the exchange failed below the HTTP layer
            InvalidRequestError: If the request cannot be sent at all
        """
        pass

    async def aclose(self) -> None:
        """Release transport resources"""
        pass
