"""
Unit tests for interfaces/bridge_client.py using httpx.MockTransport
"""
import json
import httpx
import pytest

from tripcopilot.errors import BridgeError
from tripcopilot.interfaces.bridge_client import BridgeClient


def client_for(handler, base_url="http://web.local/"):
    return BridgeClient(base_url=base_url, timeout=1, transport=httpx.MockTransport(handler))


class TestPostJson:

    async def test_posts_json_and_decodes_object(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"status": "on_time"})

        data = await client_for(handler).post_json("/api/flights/status", {"flight_number": "AA123"})

        assert data == {"status": "on_time"}
        assert seen["url"] == "http://web.local/api/flights/status"
        assert seen["body"] == {"flight_number": "AA123"}

    async def test_error_status(self):
        def handler(request):
            return httpx.Response(502, text="bad gateway")

        with pytest.raises(BridgeError, match=r"next bridge error \(502\): bad gateway"):
            await client_for(handler).post_json("/api/transit/suggest", {})

    async def test_redirect_status_is_an_error(self):
        def handler(request):
            return httpx.Response(302, text="moved")

        with pytest.raises(BridgeError, match=r"\(302\)"):
            await client_for(handler).post_json("/x", {})

    async def test_non_object_body(self):
        def handler(request):
            return httpx.Response(200, json=[1, 2])

        with pytest.raises(BridgeError):
            await client_for(handler).post_json("/x", {})

    async def test_invalid_json(self):
        def handler(request):
            return httpx.Response(200, text="<html>")

        with pytest.raises(BridgeError):
            await client_for(handler).post_json("/x", {})

    async def test_transport_failure(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(BridgeError, match="connection refused"):
            await client_for(handler).post_json("/x", {})
