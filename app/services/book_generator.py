"""
书籍生成服务
目录、章节、封面走生成后端（代理优先、模板降级），PDF只走上游代理
"""
import logging
from typing import Optional

from pydantic import ValidationError

from app.core.config import settings
from app.core.exceptions import ConfigurationError, InvalidRequestError, UpstreamServiceError
from app.schemas.book import (
    TOCRequest, TOCResponse,
    ContentRequest, ChapterResponse,
    CoverRequest, CoverResponse,
    PDFRequest, PDFResponse,
)
from app.services.backends import GenerationBackend, create_generation_backend
from app.services.proxy_client import BookProxyClient
from app.utils.markdown_html import render_book_html
from app.utils.page_math import count_words, estimate_pages, estimate_file_size_mb

logger = logging.getLogger(__name__)


class BookGeneratorService:
    """书籍生成服务类"""

    def __init__(
        self,
        backend: Optional[GenerationBackend] = None,
        proxy_client: Optional[BookProxyClient] = None,
    ):
        # 未注入时每次调用按当前配置构建，令牌变更无需重启
        self._backend = backend
        self._proxy_client = proxy_client

    @property
    def backend(self) -> GenerationBackend:
        return self._backend or create_generation_backend(settings)

    @property
    def proxy_client(self) -> BookProxyClient:
        return self._proxy_client or BookProxyClient()

    async def generate_outline(self, request: TOCRequest) -> TOCResponse:
        backend = self.backend
        logger.info(
            f"生成目录: '{request.title}' ({request.num_pages}页, 书脊标题={request.include_spine_title}, "
            f"后端={backend.name})"
        )
        return await backend.generate_outline(request)

    async def generate_chapter(self, request: ContentRequest) -> ChapterResponse:
        """
        生成单个章节

        Raises:
            InvalidRequestError: 章节号不在 [1, len(toc)] 内
        """
        chapter_number = 1 if request.chapter_number is None else request.chapter_number
        total = len(request.toc)
        if chapter_number < 1 or chapter_number > total:
            raise InvalidRequestError(f"Invalid chapter number. Must be between 1 and {total}")

        logger.info(
            f"生成第{chapter_number}/{total}章: depth={request.content_depth.value}, "
            f"mode={request.generation_mode.value}"
        )
        return await self.backend.generate_chapter(request, chapter_number)

    async def generate_cover(self, request: CoverRequest) -> CoverResponse:
        """
        生成封面

        Raises:
            ConfigurationError: 未配置上游代理令牌
        """
        if not self.proxy_client.configured:
            raise ConfigurationError(
                "BOOK_PROXY_TOKEN not configured. Please set the BOOK_PROXY_TOKEN environment variable."
            )
        return await self.backend.generate_cover(request)

    async def generate_pdf(self, request: PDFRequest) -> PDFResponse:
        """
        交给上游代理排版PDF，没有本地降级

        Raises:
            UpstreamServiceError: 未配置令牌或上游失败
        """
        data = await self.proxy_client.generate_pdf({
            "title": request.title,
            "author": request.author,
            "chapters": [chapter.model_dump() for chapter in request.chapters],
            "cover_url": request.cover_url,
            "include_toc": request.include_toc,
            "page_format": request.page_format.value,
        })

        word_count = sum(count_words(chapter.content) for chapter in request.chapters)
        try:
            return PDFResponse(
                pdf_url=data["pdf_url"],
                total_pages=data.get("total_pages") or estimate_pages(word_count),
                word_count=data.get("word_count") or word_count,
                file_size_mb=data.get("file_size_mb") or estimate_file_size_mb(word_count),
            )
        except ValidationError as e:
            raise UpstreamServiceError(f"Invalid PDF response format: {e}") from e

    def render_preview(self, request: PDFRequest) -> str:
        """渲染整本书的HTML预览"""
        return render_book_html(
            title=request.title,
            author=request.author,
            chapters=request.chapters,
            cover_url=request.cover_url,
            include_toc=request.include_toc,
            page_format=request.page_format.value,
        )


# 全局书籍生成服务实例
book_generator = BookGeneratorService()


def get_book_generator() -> BookGeneratorService:
    return book_generator
