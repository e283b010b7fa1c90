"""上游代理客户端测试"""

import json

import httpx
import pytest

from app.core.exceptions import UpstreamServiceError
from app.services.proxy_client import BookProxyClient


class TestBookProxyClient:

    @pytest.mark.asyncio
    async def test_missing_token_raises_without_request(self, proxy_client_factory):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json=[])

        client = proxy_client_factory(handler, token="")
        assert client.configured is False
        with pytest.raises(UpstreamServiceError):
            await client.fetch_toc("idea")
        assert calls == []

    @pytest.mark.asyncio
    async def test_toc_request_shape(self, proxy_client_factory):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=[{"section_name": "A", "section_ideas": ["x"]}])

        client = proxy_client_factory(handler)
        sections = await client.fetch_toc("my idea")

        assert sections == [{"section_name": "A", "section_ideas": ["x"]}]
        assert seen["url"] == "https://proxy.test/toc"
        assert seen["auth"] == "Bearer proxy-token"
        assert seen["body"] == {"book_idea": "my idea"}

    @pytest.mark.asyncio
    async def test_non_array_toc_is_malformed(self, proxy_client_factory):
        client = proxy_client_factory(lambda request: httpx.Response(200, json={"toc": []}))
        with pytest.raises(UpstreamServiceError, match="Invalid TOC response format"):
            await client.fetch_toc("idea")

    @pytest.mark.asyncio
    async def test_non_2xx_carries_status_and_message(self, proxy_client_factory):
        client = proxy_client_factory(lambda request: httpx.Response(503, json={"error": "overloaded"}))
        with pytest.raises(UpstreamServiceError) as exc_info:
            await client.fetch_toc("idea")
        assert exc_info.value.status_code == 503
        assert "overloaded" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_transport_error_single_attempt(self, proxy_client_factory):
        calls = []

        def handler(request):
            calls.append(request)
            raise httpx.ConnectError("connection refused", request=request)

        client = proxy_client_factory(handler)
        with pytest.raises(UpstreamServiceError):
            await client.fetch_toc("idea")
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_invalid_json(self, proxy_client_factory):
        client = proxy_client_factory(lambda request: httpx.Response(200, content=b"<html>"))
        with pytest.raises(UpstreamServiceError, match="invalid JSON"):
            await client.fetch_toc("idea")

    @pytest.mark.asyncio
    async def test_generate_chapter_request_and_content(self, proxy_client_factory):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"generated_chapters": [{"title": "T", "chapter_content": "text"}]})

        client = proxy_client_factory(handler)
        chapter = await client.generate_chapter("idea", 2, "Book", "Me")

        assert chapter["chapter_content"] == "text"
        assert seen["path"] == "/generate-book-chapters"
        assert seen["body"] == {"book_idea": "idea", "chapters": [2], "title": "Book", "author": "Me"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [
        {},
        {"generated_chapters": []},
        {"generated_chapters": [{"title": "no content"}]},
    ])
    async def test_generate_chapter_malformed(self, proxy_client_factory, payload):
        client = proxy_client_factory(lambda request: httpx.Response(200, json=payload))
        with pytest.raises(UpstreamServiceError):
            await client.generate_chapter("idea", 1, "Book", "Me")

    @pytest.mark.asyncio
    async def test_cover_accepts_image_url(self, proxy_client_factory):
        client = proxy_client_factory(lambda request: httpx.Response(200, json={"image_url": "https://img"}))
        data = await client.generate_cover({"title": "T"})
        assert data["image_url"] == "https://img"

    @pytest.mark.asyncio
    async def test_pdf_requires_url(self, proxy_client_factory):
        client = proxy_client_factory(lambda request: httpx.Response(200, json={"total_pages": 3}))
        with pytest.raises(UpstreamServiceError, match="No PDF URL"):
            await client.generate_pdf({"title": "T"})


def test_defaults_come_from_settings(test_settings):
    test_settings.BOOK_PROXY_TOKEN = "from-settings"
    client = BookProxyClient()
    assert client.token == "from-settings"
    assert client.base_url == "https://proxy.test"
    assert client.configured is True
