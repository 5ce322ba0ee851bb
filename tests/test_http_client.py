"""Tests for the httpx-backed HTTP capability."""

import httpx
import pytest

from page_analyzer.exceptions import FetchError, LinkUnreachable
from page_analyzer.http_client import HttpxClient


def make_client(handler, **kwargs) -> HttpxClient:
    return HttpxClient(transport=httpx.MockTransport(handler), **kwargs)


class TestFetch:
    """Full page retrieval."""

    @pytest.mark.asyncio
    async def test_fetch_returns_body_and_encoding(self):
        def handler(request):
            assert request.method == "GET"
            return httpx.Response(
                200,
                content="<title>Hi</title>".encode("utf-8"),
                headers={"Content-Type": "text/html; charset=utf-8"},
            )

        async with make_client(handler) as client:
            page = await client.fetch("http://example.com/", timeout=5)

        assert page.status_code == 200
        assert page.content == b"<title>Hi</title>"
        assert page.encoding == "utf-8"
        assert page.final_url == "http://example.com/"

    @pytest.mark.asyncio
    async def test_fetch_follows_redirects(self):
        def handler(request):
            if request.url.path == "/old":
                return httpx.Response(301, headers={"Location": "http://example.com/new"})
            return httpx.Response(200, content=b"<html></html>")

        async with make_client(handler) as client:
            page = await client.fetch("http://example.com/old", timeout=5)

        assert page.url == "http://example.com/old"
        assert page.final_url == "http://example.com/new"

    @pytest.mark.asyncio
    async def test_fetch_error_status_raises(self):
        async with make_client(lambda request: httpx.Response(503)) as client:
            with pytest.raises(FetchError) as exc_info:
                await client.fetch("http://example.com/", timeout=5)

        assert exc_info.value.status_code == 503
        assert exc_info.value.kind == "fetch"

    @pytest.mark.asyncio
    async def test_connection_refused_raises_fetch_error(self):
        def handler(request):
            raise httpx.ConnectError("Connection refused", request=request)

        async with make_client(handler) as client:
            with pytest.raises(FetchError) as exc_info:
                await client.fetch("http://example.com/", timeout=5)

        assert exc_info.value.status_code is None
        assert exc_info.value.url == "http://example.com/"

    @pytest.mark.asyncio
    async def test_timeout_raises_fetch_error(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        async with make_client(handler) as client:
            with pytest.raises(FetchError, match="timeout"):
                await client.fetch("http://example.com/", timeout=5)

    @pytest.mark.asyncio
    async def test_user_agent_is_sent(self):
        seen = {}

        def handler(request):
            seen["ua"] = request.headers["User-Agent"]
            return httpx.Response(200, content=b"")

        async with make_client(handler, user_agent="TestBot/2.0") as client:
            await client.fetch("http://example.com/", timeout=5)

        assert seen["ua"] == "TestBot/2.0"


class TestProbe:
    """Lightweight existence checks."""

    @pytest.mark.asyncio
    async def test_probe_uses_head_and_returns_status(self):
        methods = []

        def handler(request):
            methods.append(request.method)
            return httpx.Response(404)

        async with make_client(handler) as client:
            status = await client.probe("http://example.com/missing", timeout=5)

        assert status == 404
        assert methods == ["HEAD"]

    @pytest.mark.asyncio
    async def test_probe_follows_redirects(self):
        def handler(request):
            if request.url.path == "/old":
                return httpx.Response(302, headers={"Location": "/new"})
            return httpx.Response(200)

        async with make_client(handler) as client:
            assert await client.probe("http://example.com/old", timeout=5) == 200

    @pytest.mark.asyncio
    async def test_probe_connect_error_raises_link_unreachable(self):
        def handler(request):
            raise httpx.ConnectError("Name or service not known", request=request)

        async with make_client(handler) as client:
            with pytest.raises(LinkUnreachable) as exc_info:
                await client.probe("http://nowhere.test/", timeout=5)

        assert exc_info.value.url == "http://nowhere.test/"

    @pytest.mark.asyncio
    async def test_probe_timeout_raises_link_unreachable(self):
        def handler(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        async with make_client(handler) as client:
            with pytest.raises(LinkUnreachable, match="timed out"):
                await client.probe("http://slow.test/", timeout=1)
