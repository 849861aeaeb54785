"""Tests for MockTransport"""

import httpx
import pytest

from retryfetch.domain.errors import TransportError
from retryfetch.domain.models.request_spec import RequestSpec
from retryfetch.infrastructure.transport.factory import TransportFactory
from retryfetch.infrastructure.transport.httpx_transport import HttpxTransport
from retryfetch.infrastructure.transport.mock import Delay, MockTransport


@pytest.mark.asyncio
async def test_default_response():
    transport = MockTransport(config={"status_code": 204})

    response = await transport.send(RequestSpec("http://example.test", method="HEAD"))

    assert response.status_code == 204
    assert response.request.method == "HEAD"
    assert transport.calls == 1


@pytest.mark.asyncio
async def test_outcomes_are_consumed_in_order_and_last_repeats():
    transport = MockTransport([TransportError("down"), httpx.Response(200, text="up")])
    spec = RequestSpec("http://example.test")

    with pytest.raises(TransportError):
        await transport.send(spec)
    assert (await transport.send(spec)).text == "up"
    assert (await transport.send(spec)).text == "up"
    assert transport.calls == 3


@pytest.mark.asyncio
async def test_delay_resolves_to_its_outcome():
    transport = MockTransport([Delay(0, then=TransportError("late failure"))])

    with pytest.raises(TransportError, match="late failure"):
        await transport.send(RequestSpec("http://example.test"))
    assert transport.in_flight == 0


def test_invalid_config():
    with pytest.raises(ValueError, match="status_code"):
        MockTransport(config={"status_code": "200"})


class TestTransportFactory:
    def test_create_mock(self):
        assert isinstance(TransportFactory.create("mock"), MockTransport)

    @pytest.mark.asyncio
    async def test_create_httpx_case_insensitive(self):
        transport = TransportFactory.create("HTTPX")
        assert isinstance(transport, HttpxTransport)
        await transport.aclose()

    @pytest.mark.asyncio
    async def test_create_mock_with_config(self):
        transport = TransportFactory.create("mock", {"status_code": 418, "body": "teapot"})

        response = await transport.send(RequestSpec("http://example.test"))

        assert response.status_code == 418
        assert response.text == "teapot"

    def test_unknown_transport(self):
        with pytest.raises(ValueError, match="Unknown transport"):
            TransportFactory.create("curl")
