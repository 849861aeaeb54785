"""Transport backed by httpx.AsyncClient"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from retryfetch.domain.errors import InvalidRequestError, RequestTimeoutError, TransportError
from retryfetch.domain.models.attempt import FailureKind
from retryfetch.domain.models.request_spec import RequestSpec
from retryfetch.infrastructure.transport.base import Transport

logger = logging.getLogger(__name__)


class HttpxTransport(Transport):
    """Sends requests through a shared httpx.AsyncClient

    Non-2xx responses are returned as-is; only exchange failures raise.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        """Initialize transport

        Args:
            client: Client to use. A client passed in is not closed by aclose().
        """
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(follow_redirects=True)

    async def send(self, spec: RequestSpec) -> httpx.Response:
        logger.debug(f"HTTP {spec.method} {spec.url}")
        try:
            return await self._client.request(
                spec.method,
                spec.url,
                headers=dict(spec.headers),
                content=spec.body,
                timeout=spec.timeout_s,
            )
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as e:
            raise InvalidRequestError(f"Cannot send request to {spec.url!r}: {e}") from e
        except httpx.TimeoutException as e:
            raise RequestTimeoutError(f"Request timed out: {str(e) or type(e).__name__}") from e
        except httpx.RemoteProtocolError as e:
            raise TransportError(str(e) or "Connection aborted by peer", kind=FailureKind.ABORTED) from e
        except httpx.TransportError as e:
            raise TransportError(str(e) or type(e).__name__, kind=FailureKind.NETWORK) from e

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
