"""Tests for the HTTP and console transports."""

import json

import httpx
import pytest

from playtrace.serializer import JsonSerializer
from playtrace.transport.console import ConsoleTransport
from playtrace.transport.http import HttpTransport

ENDPOINT = "https://collector.test/v1/events"
HEADERS = {"Content-Type": "application/json", "X-API-Key": "test-key"}


class TestHttpTransport:
    @pytest.mark.asyncio
    async def test_success(self, make_event):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"accepted": 1})

        transport = HttpTransport(mock_transport=httpx.MockTransport(handler))
        await transport.start()
        try:
            payload = JsonSerializer().serialize([make_event("a")])
            result = await transport.send(ENDPOINT, payload, HEADERS, timeout=15)
        finally:
            await transport.stop()

        assert result.ok
        assert result.status_code == 200

        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == ENDPOINT
        assert request.headers["X-API-Key"] == "test-key"
        assert request.headers["Content-Type"] == "application/json"
        assert json.loads(request.content)["events"][0]["event_name"] == "a"

    @pytest.mark.asyncio
    async def test_non_success_status(self):
        transport = HttpTransport(
            mock_transport=httpx.MockTransport(lambda r: httpx.Response(401, text="bad key"))
        )
        result = await transport.send(ENDPOINT, b'{"events":[]}', HEADERS, timeout=15)
        await transport.stop()

        assert not result.ok
        assert result.status_code == 401
        assert result.reason == "HTTP 401: bad key"

    @pytest.mark.asyncio
    async def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        transport = HttpTransport(mock_transport=httpx.MockTransport(handler))
        result = await transport.send(ENDPOINT, b'{"events":[]}', HEADERS, timeout=15)
        await transport.stop()

        assert not result.ok
        assert "ConnectError" in result.reason

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        transport = HttpTransport(mock_transport=httpx.MockTransport(handler))
        result = await transport.send(ENDPOINT, b'{"events":[]}', HEADERS, timeout=0.5)
        await transport.stop()

        assert not result.ok
        assert result.reason == "timed out after 0.5s"

    @pytest.mark.asyncio
    async def test_health_check(self):
        transport = HttpTransport(mock_transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        assert not await transport.health_check()
        await transport.start()
        assert await transport.health_check()
        await transport.stop()
        assert not await transport.health_check()


class TestConsoleTransport:
    @pytest.mark.asyncio
    async def test_prints_events(self, make_event, capsys):
        payload = JsonSerializer().serialize([make_event("a", category="debug")])
        result = await ConsoleTransport().send(ENDPOINT, payload, HEADERS, timeout=15)

        out = capsys.readouterr().out
        assert result.ok
        assert f"POST {ENDPOINT} (1 events)" in out
        assert "debug/a" in out
