"""
上游代理后端
代理返回格式不符（包括2xx响应中字段类型错误）时抛出 UpstreamServiceError，由组合后端降级
"""
import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError

from app.core.exceptions import UpstreamServiceError
from app.schemas.book import (
    TOCRequest, TOCResponse, TOCSection,
    ContentRequest, ChapterResponse,
    CoverRequest, CoverResponse,
)
from app.services.backends.base import GenerationBackend
from app.services.proxy_client import BookProxyClient
from app.utils.cover_art import build_cover_prompt, get_color_palette
from app.utils.page_math import count_words, estimate_pages, distribute_pages, page_range

logger = logging.getLogger(__name__)

# 构建响应模型时视为上游格式错误的异常
MALFORMED_ERRORS = (ValidationError, TypeError, AttributeError)


def _optional_text(data: Dict[str, Any], key: str) -> Optional[str]:
    """可选字符串字段：缺失或为空返回None，类型不对抛TypeError"""
    value = data.get(key)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise TypeError(f"{key} must be a string, got {type(value).__name__}")
    return value


class ProxyGenerationBackend(GenerationBackend):
    name = "proxy"

    def __init__(self, client: Optional[BookProxyClient] = None):
        self.client = client or BookProxyClient()

    async def generate_outline(self, request: TOCRequest) -> TOCResponse:
        sections = await self.client.fetch_toc(request.book_idea)
        pages = distribute_pages(request.num_pages, len(sections))

        try:
            toc = []
            for index, section in enumerate(sections):
                section = section if isinstance(section, dict) else {}
                ideas = section.get("section_ideas")
                toc.append(TOCSection(
                    section_name=_optional_text(section, "section_name") or f"Chapter {index + 1}",
                    section_ideas=[str(idea) for idea in ideas] if isinstance(ideas, list) else [],
                    estimated_pages=page_range(pages[index]),
                ))
        except MALFORMED_ERRORS as e:
            raise UpstreamServiceError(f"Invalid TOC response format: {e}") from e

        idea = request.book_idea
        summary = (
            f'This {request.style} book "{request.title}" by {request.author} covers '
            f"{len(toc)} comprehensive chapters exploring {idea[:150]}"
            f"{'...' if len(idea) > 150 else ''}"
        )
        return TOCResponse(
            toc=toc,
            total_estimated_pages=str(request.num_pages),
            book_summary=summary,
        )

    async def generate_chapter(self, request: ContentRequest, chapter_number: int) -> ChapterResponse:
        section = request.toc[chapter_number - 1]
        generated = await self.client.generate_chapter(
            book_idea=request.book_idea,
            chapter_number=chapter_number,
            title=request.title,
            author=request.author,
        )

        try:
            content = _optional_text(generated, "content") or _optional_text(generated, "chapter_content")
            if content is None:
                raise TypeError("chapter content is empty")
            word_count = count_words(content)
            return ChapterResponse(
                chapter_number=chapter_number,
                chapter_title=_optional_text(generated, "title") or section.section_name,
                content=content,
                word_count=word_count,
                estimated_pages=estimate_pages(word_count),
            )
        except MALFORMED_ERRORS as e:
            raise UpstreamServiceError(f"Invalid chapter response format: {e}") from e

    async def generate_cover(self, request: CoverRequest) -> CoverResponse:
        color_scheme = request.color_scheme.value
        design_style = request.design_style.value
        prompt = build_cover_prompt(
            request.title,
            request.author,
            request.book_description,
            request.style_prompt,
            color_scheme,
            design_style,
        )

        data = await self.client.generate_cover({
            "title": request.title,
            "author": request.author,
            "book_description": request.book_description,
            "style_prompt": request.style_prompt,
            "color_scheme": color_scheme,
            "design_style": design_style,
            "prompt": prompt,
        })

        try:
            return CoverResponse(
                cover_url=_optional_text(data, "cover_url") or _optional_text(data, "image_url"),
                design_description=_optional_text(data, "design_description") or (
                    f'AI-generated {design_style} book cover for "{request.title}" by {request.author}. '
                    f"The design incorporates {color_scheme} colors and reflects the book's theme."
                ),
                color_palette=data.get("color_palette") or get_color_palette(color_scheme),
            )
        except MALFORMED_ERRORS as e:
            raise UpstreamServiceError(f"Invalid cover response format: {e}") from e
