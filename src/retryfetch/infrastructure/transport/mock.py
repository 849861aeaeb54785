"""Mock transport for testing and dry runs"""

import asyncio
from typing import Any, Dict, Iterable, List, Optional, Union

import httpx

from retryfetch.domain.models.request_spec import RequestSpec
from retryfetch.infrastructure.transport.base import Transport


class Delay:
    """Scripted outcome that keeps the attempt in flight for ``seconds``, then yields ``then``"""

    def __init__(self, seconds: float, then: "Outcome" = None):
        self.seconds = seconds
        self.then = then


Outcome = Union[httpx.Response, BaseException, Delay, None]


class MockTransport(Transport):
    """Transport that replays scripted outcomes

    Each call consumes the next outcome. A response is returned, an exception
    is raised, a Delay sleeps before resolving its own outcome. Once the script
    runs out, the last outcome repeats. With no script at all every call gets
    an empty 200 response.
    """

    def __init__(self, outcomes: Optional[Iterable[Outcome]] = None, config: Optional[Dict[str, Any]] = None):
        if config is None:
            config = {}
        self._validate_config(config)
        self.outcomes: List[Outcome] = list(outcomes or [])
        self.status_code = config.get("status_code", 200)
        self.body = config.get("body", "")
        self.requests: List[RequestSpec] = []
        self.in_flight = 0
        self.max_in_flight = 0

    def _validate_config(self, config: Dict[str, Any]) -> None:
        if "status_code" in config and not isinstance(config["status_code"], int):
            raise ValueError("status_code must be an integer")

    @property
    def calls(self) -> int:
        return len(self.requests)

    async def send(self, spec: RequestSpec) -> httpx.Response:
        self.requests.append(spec)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            return await self._resolve(self._next_outcome(), spec)
        finally:
            self.in_flight -= 1

    def _next_outcome(self) -> Outcome:
        if not self.outcomes:
            return None
        if len(self.outcomes) > 1:
            return self.outcomes.pop(0)
        return self.outcomes[0]

    async def _resolve(self, outcome: Outcome, spec: RequestSpec) -> httpx.Response:
        if isinstance(outcome, Delay):
            await asyncio.sleep(outcome.seconds)
            return await self._resolve(outcome.then, spec)
        if isinstance(outcome, BaseException):
            raise outcome
        if outcome is None:
            return self._default_response(spec)
        return outcome

    def _default_response(self, spec: RequestSpec) -> httpx.Response:
        return httpx.Response(
            self.status_code,
            text=self.body,
            request=httpx.Request(spec.method, spec.url),
        )
