"""生成后端与后端工厂测试"""

import httpx
import pytest
from unittest.mock import AsyncMock

from app.core.config import Settings
from app.core.exceptions import UpstreamServiceError
from app.schemas.book import (
    ChapterResponse, ContentDepth, ContentRequest, CoverRequest, TOCRequest, TOCSection,
)
from app.services.backends import (
    FallbackGenerationBackend,
    ProxyGenerationBackend,
    TemplateGenerationBackend,
    create_generation_backend,
)
from app.utils.page_math import count_words, estimate_pages


@pytest.fixture
def toc_request(book_payload):
    return TOCRequest(**book_payload, num_pages=100, style="inspirational")


@pytest.fixture
def content_request(book_payload, sample_toc):
    return ContentRequest(**book_payload, toc=[TOCSection(**s) for s in sample_toc])


class TestTemplateBackend:

    @pytest.mark.asyncio
    async def test_fixed_outline(self, toc_request):
        result = await TemplateGenerationBackend().generate_outline(toc_request)

        assert [s.section_name for s in result.toc] == ["Introduction", "Main Content", "Conclusion"]
        assert result.toc[0].section_ideas == ["Overview", "Background", "Objectives"]
        assert [s.estimated_pages for s in result.toc] == ["10-12", "40-50", "10-15"]
        assert result.total_estimated_pages == "100"
        assert result.book_summary == (
            f'This book "Focused Living" by Sam Rivera explores {toc_request.book_idea[:100]}...'
        )

    @pytest.mark.asyncio
    async def test_draft_chapter(self, content_request):
        chapter = await TemplateGenerationBackend().generate_chapter(content_request, 1)

        assert chapter.chapter_number == 1
        assert chapter.chapter_title == "Getting Started"
        assert chapter.content.startswith("# Getting Started")
        assert "## 1. Why habits matter" in chapter.content
        assert "## 2. Setting goals" in chapter.content
        assert "## Chapter Conclusion" in chapter.content
        assert chapter.word_count == count_words(chapter.content)
        assert chapter.estimated_pages == estimate_pages(chapter.word_count)

    @pytest.mark.asyncio
    async def test_outline_depth(self, content_request):
        content_request.content_depth = ContentDepth.OUTLINE
        chapter = await TemplateGenerationBackend().generate_chapter(content_request, 3)

        assert "## Chapter Outline" in chapter.content
        assert "1. **Weekly review**" in chapter.content
        assert "## Discussion Questions" in chapter.content
        assert "## Chapter Conclusion" not in chapter.content

    @pytest.mark.asyncio
    async def test_polished_extends_draft(self, content_request):
        backend = TemplateGenerationBackend()
        draft = await backend.generate_chapter(content_request, 2)
        content_request.content_depth = ContentDepth.POLISHED
        polished = await backend.generate_chapter(content_request, 2)

        assert polished.content.startswith(draft.content)
        assert "## Practical Exercises" in polished.content
        assert polished.word_count > draft.word_count

    @pytest.mark.asyncio
    async def test_placeholder_cover(self, book_payload):
        request = CoverRequest(
            title=book_payload["title"], author=book_payload["author"],
            book_description=book_payload["book_idea"], color_scheme="monochrome",
        )
        cover = await TemplateGenerationBackend().generate_cover(request)

        assert cover.cover_url.startswith("data:image/svg+xml;base64,")
        assert cover.color_palette[0] == "#374151"
        assert cover.design_description.startswith("A modern book cover design")


class TestProxyBackend:

    @pytest.mark.asyncio
    async def test_outline_distributes_pages(self, toc_request, proxy_client_factory):
        sections = [{"section_name": f"S{i}", "section_ideas": ["a"]} for i in range(1, 6)]
        backend = ProxyGenerationBackend(proxy_client_factory(lambda r: httpx.Response(200, json=sections)))

        result = await backend.generate_outline(toc_request)

        assert [s.estimated_pages for s in result.toc] == ["20-22"] * 5
        assert result.total_estimated_pages == "100"
        assert result.book_summary.startswith(
            'This inspirational book "Focused Living" by Sam Rivera covers 5 comprehensive chapters exploring'
        )
        assert not result.book_summary.endswith("...")

    @pytest.mark.asyncio
    async def test_outline_fills_missing_fields(self, toc_request, proxy_client_factory):
        sections = [{"section_ideas": "not a list"}, {"section_name": "Named"}, {}]
        toc_request.num_pages = 2
        backend = ProxyGenerationBackend(proxy_client_factory(lambda r: httpx.Response(200, json=sections)))

        result = await backend.generate_outline(toc_request)

        assert [s.section_name for s in result.toc] == ["Chapter 1", "Named", "Chapter 3"]
        assert result.toc[0].section_ideas == []
        assert [s.estimated_pages for s in result.toc] == ["1-3", "1-3", "1-2"]

    @pytest.mark.asyncio
    async def test_long_idea_summary_is_truncated(self, toc_request, proxy_client_factory):
        toc_request.book_idea = "y" * 200
        backend = ProxyGenerationBackend(proxy_client_factory(lambda r: httpx.Response(200, json=[{}])))

        result = await backend.generate_outline(toc_request)
        assert result.book_summary.endswith("y" * 150 + "...")

    @pytest.mark.asyncio
    async def test_chapter_uses_upstream_title_and_counts_words(self, content_request, proxy_client_factory):
        payload = {"generated_chapters": [{"title": "Upstream Title", "content": "word " * 301}]}
        backend = ProxyGenerationBackend(proxy_client_factory(lambda r: httpx.Response(200, json=payload)))

        chapter = await backend.generate_chapter(content_request, 2)

        assert chapter.chapter_title == "Upstream Title"
        assert chapter.word_count == 301
        assert chapter.estimated_pages == 2

    @pytest.mark.asyncio
    async def test_chapter_title_falls_back_to_section(self, content_request, proxy_client_factory):
        payload = {"generated_chapters": [{"chapter_content": "some text"}]}
        backend = ProxyGenerationBackend(proxy_client_factory(lambda r: httpx.Response(200, json=payload)))

        chapter = await backend.generate_chapter(content_request, 2)
        assert chapter.chapter_title == "Deep Work"

    @pytest.mark.asyncio
    async def test_cover_defaults(self, book_payload, proxy_client_factory):
        backend = ProxyGenerationBackend(
            proxy_client_factory(lambda r: httpx.Response(200, json={"cover_url": "https://img/c.png"}))
        )
        request = CoverRequest(
            title=book_payload["title"], author=book_payload["author"],
            book_description="desc", color_scheme="warm", design_style="classic",
        )
        cover = await backend.generate_cover(request)

        assert cover.cover_url == "https://img/c.png"
        assert cover.design_description.startswith("AI-generated classic book cover")
        assert cover.color_palette[0] == "#dc2626"


class TestFallbackBackend:

    @pytest.mark.asyncio
    async def test_upstream_failure_uses_fallback(self, toc_request, proxy_client_factory):
        failing = ProxyGenerationBackend(proxy_client_factory(lambda r: httpx.Response(500)))
        backend = FallbackGenerationBackend(failing, TemplateGenerationBackend())

        result = await backend.generate_outline(toc_request)

        assert [s.section_name for s in result.toc] == ["Introduction", "Main Content", "Conclusion"]
        assert result.total_estimated_pages == "100"

    @pytest.mark.asyncio
    async def test_primary_success_skips_fallback(self, content_request):
        expected = ChapterResponse(
            chapter_number=1, chapter_title="P", content="primary", word_count=1, estimated_pages=1,
        )
        primary = AsyncMock()
        primary.generate_chapter = AsyncMock(return_value=expected)
        fallback = AsyncMock()

        backend = FallbackGenerationBackend(primary, fallback)
        result = await backend.generate_chapter(content_request, 1)

        assert result is expected
        fallback.generate_chapter.assert_not_called()

    @pytest.mark.asyncio
    async def test_other_errors_propagate(self, content_request):
        primary = AsyncMock()
        primary.generate_chapter = AsyncMock(side_effect=KeyError("boom"))
        backend = FallbackGenerationBackend(primary, TemplateGenerationBackend())

        with pytest.raises(KeyError):
            await backend.generate_chapter(content_request, 1)

    @pytest.mark.asyncio
    async def test_cover_fallback_on_upstream_error(self, book_payload):
        primary = AsyncMock()
        primary.generate_cover = AsyncMock(side_effect=UpstreamServiceError("down"))
        backend = FallbackGenerationBackend(primary, TemplateGenerationBackend())

        cover = await backend.generate_cover(CoverRequest(
            title="T", author="A", book_description="d",
        ))
        assert cover.cover_url.startswith("data:image/svg+xml;base64,")


class TestFactory:

    def test_without_token_uses_templates(self):
        backend = create_generation_backend(Settings(BOOK_PROXY_TOKEN=None))
        assert isinstance(backend, TemplateGenerationBackend)

    def test_with_token_uses_proxy_then_templates(self):
        backend = create_generation_backend(Settings(BOOK_PROXY_TOKEN="t", BOOK_PROXY_BASE_URL="https://x"))
        assert isinstance(backend, FallbackGenerationBackend)
        assert isinstance(backend.primary, ProxyGenerationBackend)
        assert isinstance(backend.fallback, TemplateGenerationBackend)
        assert backend.primary.client.base_url == "https://x"


class TestProxyMalformedReplies:
    """2xx响应中字段类型错误视为上游格式错误，由组合后端降级"""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("sections", [
        [{"section_name": {"x": 1}}],
        [{"section_name": 7, "section_ideas": ["a"]}],
    ])
    async def test_outline_bad_section_name(self, toc_request, proxy_client_factory, sections):
        backend = ProxyGenerationBackend(proxy_client_factory(lambda r: httpx.Response(200, json=sections)))

        with pytest.raises(UpstreamServiceError, match="Invalid TOC response format"):
            await backend.generate_outline(toc_request)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("chapter", [
        {"content": ["a", "b"]},
        {"chapter_content": {"text": "x"}},
        {"content": "fine text", "title": ["not", "a", "title"]},
    ])
    async def test_chapter_bad_fields(self, content_request, proxy_client_factory, chapter):
        payload = {"generated_chapters": [chapter]}
        backend = ProxyGenerationBackend(proxy_client_factory(lambda r: httpx.Response(200, json=payload)))

        with pytest.raises(UpstreamServiceError, match="Invalid chapter response format"):
            await backend.generate_chapter(content_request, 1)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("data", [
        {"cover_url": "https://img/c.png", "color_palette": "red"},
        {"cover_url": "https://img/c.png", "design_description": 42},
        {"cover_url": 123},
    ])
    async def test_cover_bad_fields(self, proxy_client_factory, data):
        backend = ProxyGenerationBackend(proxy_client_factory(lambda r: httpx.Response(200, json=data)))

        with pytest.raises(UpstreamServiceError, match="Invalid cover response format"):
            await backend.generate_cover(CoverRequest(title="T", author="A", book_description="d"))

    @pytest.mark.asyncio
    async def test_fallback_covers_malformed_chapter(self, content_request, proxy_client_factory):
        payload = {"generated_chapters": [{"content": ["a", "b"]}]}
        primary = ProxyGenerationBackend(proxy_client_factory(lambda r: httpx.Response(200, json=payload)))
        backend = FallbackGenerationBackend(primary, TemplateGenerationBackend())

        chapter = await backend.generate_chapter(content_request, 1)
        assert chapter.content.startswith("# Getting Started")
