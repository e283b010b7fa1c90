"""生成后端接口"""
from abc import ABC, abstractmethod

from app.schemas.book import (
    TOCRequest, TOCResponse,
    ContentRequest, ChapterResponse,
    CoverRequest, CoverResponse,
)


class GenerationBackend(ABC):
    """目录、章节、封面三类生成操作的统一接口"""

    name: str

    @abstractmethod
    async def generate_outline(self, request: TOCRequest) -> TOCResponse:
        """生成目录"""

    @abstractmethod
    async def generate_chapter(self, request: ContentRequest, chapter_number: int) -> ChapterResponse:
        """生成指定章节，chapter_number 已由调用方校验在 [1, len(toc)] 内"""

    @abstractmethod
    async def generate_cover(self, request: CoverRequest) -> CoverResponse:
        """生成封面"""
