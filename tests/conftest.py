from __future__ import annotations

from typing import List

import httpx
import pytest


class RecordingSleep:
    """Stand-in for asyncio.sleep that records requested delays"""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)

    @property
    def total(self) -> float:
        return sum(self.delays)


def make_response(status_code: int = 200, text: str = "", url: str = "http://example.test") -> httpx.Response:
    return httpx.Response(status_code, text=text, request=httpx.Request("GET", url))


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()
