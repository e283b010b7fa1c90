"""主后端失败时降级到备用后端"""
import logging

from app.core.exceptions import UpstreamServiceError
from app.schemas.book import (
    TOCRequest, TOCResponse,
    ContentRequest, ChapterResponse,
    CoverRequest, CoverResponse,
)
from app.services.backends.base import GenerationBackend

logger = logging.getLogger(__name__)


class FallbackGenerationBackend(GenerationBackend):
    name = "fallback"

    def __init__(self, primary: GenerationBackend, fallback: GenerationBackend):
        self.primary = primary
        self.fallback = fallback

    async def generate_outline(self, request: TOCRequest) -> TOCResponse:
        try:
            return await self.primary.generate_outline(request)
        except UpstreamServiceError as e:
            logger.warning(f"目录生成降级到{self.fallback.name}: {e}")
            return await self.fallback.generate_outline(request)

    async def generate_chapter(self, request: ContentRequest, chapter_number: int) -> ChapterResponse:
        try:
            return await self.primary.generate_chapter(request, chapter_number)
        except UpstreamServiceError as e:
            logger.warning(f"第{chapter_number}章生成降级到{self.fallback.name}: {e}")
            return await self.fallback.generate_chapter(request, chapter_number)

    async def generate_cover(self, request: CoverRequest) -> CoverResponse:
        try:
            return await self.primary.generate_cover(request)
        except UpstreamServiceError as e:
            logger.warning(f"封面生成降级到{self.fallback.name}: {e}")
            return await self.fallback.generate_cover(request)
