"""Tests for the httpx-backed transport."""

import logging

import httpx
import pytest

from skopelink_sdk.transport import HttpTransport


def _make_transport(handler):
    """Create a transport whose client answers from ``handler``."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpTransport(client=client), client


class TestPostSuccess:
    @pytest.mark.asyncio
    async def test_success_on_200(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"success": True})

        t, client = _make_transport(handler)
        response = await t.post(
            "https://api.example.com",
            headers={"Content-Type": "application/json", "Authorization": "Bearer k"},
            body='{"events": []}',
        )
        await client.aclose()

        assert response.ok
        assert response.status_code == 200
        assert len(seen) == 1
        assert seen[0].method == "POST"
        assert seen[0].url.host == "api.example.com"
        assert seen[0].headers["authorization"] == "Bearer k"
        assert seen[0].headers["content-type"] == "application/json"
        assert seen[0].content == b'{"events": []}'

    @pytest.mark.asyncio
    async def test_any_2xx_is_success(self):
        t, client = _make_transport(lambda request: httpx.Response(202))
        response = await t.post("https://e", headers={}, body="{}")
        await client.aclose()

        assert response.ok


class TestPostFailure:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status, reason",
        [(400, "Bad Request"), (401, "Unauthorized"), (503, "Service Unavailable")],
    )
    async def test_error_status_is_not_ok(self, status, reason):
        t, client = _make_transport(lambda request: httpx.Response(status))
        response = await t.post("https://e", headers={}, body="{}")
        await client.aclose()

        assert not response.ok
        assert response.status_code == status
        assert response.status_text == reason

    @pytest.mark.asyncio
    async def test_logs_rejection_body_at_debug(self, caplog):
        t, client = _make_transport(
            lambda request: httpx.Response(422, text="Validation error")
        )
        with caplog.at_level(logging.DEBUG, logger="skopelink_sdk.transport"):
            await t.post("https://e", headers={}, body="{}")
        await client.aclose()

        assert "rejected" in caplog.text.lower()
        assert "422" in caplog.text

    @pytest.mark.asyncio
    async def test_network_error_propagates(self):
        def handler(request):
            raise httpx.ConnectError("Connection refused", request=request)

        t, client = _make_transport(handler)
        with pytest.raises(httpx.ConnectError):
            await t.post("https://e", headers={}, body="{}")
        await client.aclose()


class TestClose:
    @pytest.mark.asyncio
    async def test_does_not_close_injected_client(self):
        t, client = _make_transport(lambda request: httpx.Response(200))
        await t.aclose()

        assert not client.is_closed
        await client.aclose()

    @pytest.mark.asyncio
    async def test_closes_own_client(self):
        t = HttpTransport(timeout=2.5)
        await t.aclose()

        assert t._client.is_closed
        assert t.timeout == 2.5
