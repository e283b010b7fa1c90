"""
图书生成向导

把线性向导（想法 → 目录 → 内容 → 导出 → 封面）建模为显式的状态上下文，
每一步在转移前校验所需输入
"""
import asyncio
import logging
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, List, Optional, Tuple

from app.core.exceptions import WizardStateError, get_error_message
from app.schemas.book import (
    BookRequest, TOCSection, TOCRequest,
    ContentRequest, ChapterResponse, ContentDepth, GenerationMode,
    CoverRequest, CoverResponse, ColorScheme, DesignStyle,
    PDFChapter, PDFRequest, PDFResponse, PageFormat,
)
from app.services.book_generator import BookGeneratorService, book_generator
from app.utils.page_math import (
    WORDS_PER_PAGE, estimate_reading_minutes, toc_page_totals, word_count_range,
)

logger = logging.getLogger(__name__)


class WizardStep(IntEnum):
    IDEA = 1
    OUTLINE = 2
    CONTENT = 3
    EXPORT = 4
    COVER = 5


@dataclass
class OutlineSettings:
    style: str = "practical"
    chapter_count: int = 5
    target_length: str = "medium"


@dataclass
class ContentSettings:
    content_depth: ContentDepth = ContentDepth.DRAFT
    generation_mode: GenerationMode = GenerationMode.PARALLEL


@dataclass
class CoverSettings:
    color_scheme: ColorScheme = ColorScheme.PROFESSIONAL
    design_style: DesignStyle = DesignStyle.MODERN
    style_prompt: Optional[str] = None


@dataclass
class ExportSettings:
    include_toc: bool = True
    page_format: PageFormat = PageFormat.A4


@dataclass
class BookStats:
    total_pages: int = 0
    word_count: int = 0

    @property
    def reading_time(self) -> str:
        return f"{estimate_reading_minutes(self.total_pages)} minutes"


@dataclass
class WizardContext:
    """向导的全部状态，在各步骤之间传递"""
    book: BookRequest
    step: WizardStep = WizardStep.IDEA
    outline_settings: OutlineSettings = field(default_factory=OutlineSettings)
    content_settings: ContentSettings = field(default_factory=ContentSettings)
    cover_settings: CoverSettings = field(default_factory=CoverSettings)
    export_settings: ExportSettings = field(default_factory=ExportSettings)
    toc: Optional[List[TOCSection]] = None
    book_summary: Optional[str] = None
    chapters: Dict[int, ChapterResponse] = field(default_factory=dict)
    chapter_errors: Dict[int, str] = field(default_factory=dict)
    cover: Optional[CoverResponse] = None
    pdf: Optional[PDFResponse] = None
    stats: BookStats = field(default_factory=BookStats)

    @property
    def cover_url(self) -> Optional[str]:
        return self.cover.cover_url if self.cover else None

    @property
    def has_book_basics(self) -> bool:
        return bool(self.book.title and self.book.author and self.book.book_idea)

    @property
    def toc_page_range(self) -> Tuple[int, int]:
        """目录各章页数区间之和 (最少, 最多)，没有目录时为 (0, 0)"""
        if not self.toc:
            return 0, 0
        return toc_page_totals(section.estimated_pages for section in self.toc)

    @property
    def toc_word_range(self) -> Tuple[int, int]:
        return word_count_range(*self.toc_page_range)


class BookWizard:
    """向导编排器"""

    def __init__(self, context: WizardContext, generator: Optional[BookGeneratorService] = None):
        self.context = context
        self.generator = generator or book_generator

    # === 步骤移动 ===

    def advance(self) -> WizardStep:
        ctx = self.context
        if ctx.step == WizardStep.COVER:
            raise WizardStateError("Already at the last step")

        if ctx.step == WizardStep.IDEA and not ctx.has_book_basics:
            raise WizardStateError("Please fill in all required fields")
        if ctx.step == WizardStep.OUTLINE and not ctx.toc:
            raise WizardStateError("Generate a table of contents before continuing")
        if ctx.step == WizardStep.CONTENT and not ctx.chapters:
            raise WizardStateError("Generate at least one chapter before continuing")

        ctx.step = WizardStep(ctx.step + 1)
        return ctx.step

    def back(self) -> WizardStep:
        ctx = self.context
        if ctx.step == WizardStep.IDEA:
            raise WizardStateError("Already at the first step")
        ctx.step = WizardStep(ctx.step - 1)
        return ctx.step

    # === 生成操作 ===

    async def generate_outline(self) -> List[TOCSection]:
        ctx = self.context
        if not ctx.has_book_basics:
            raise WizardStateError("Please fill in all required fields")

        book = ctx.book
        settings = ctx.outline_settings
        result = await self.generator.generate_outline(TOCRequest(
            title=book.title,
            author=book.author,
            book_idea=book.book_idea,
            num_pages=book.num_pages,
            include_spine_title=book.include_spine_title,
            style=settings.style,
            chapter_count=settings.chapter_count,
            target_length=settings.target_length,
        ))

        try:
            total_pages = int(result.total_estimated_pages)
        except ValueError:
            total_pages = book.num_pages

        ctx.toc = result.toc
        ctx.book_summary = result.book_summary
        # 重新生成目录后旧章节作废
        ctx.chapters = {}
        ctx.chapter_errors = {}
        ctx.stats = BookStats(total_pages=total_pages, word_count=total_pages * WORDS_PER_PAGE)
        ctx.step = WizardStep.CONTENT
        logger.info(f"目录已生成: {len(result.toc)}章")
        return result.toc

    def _content_request(self, chapter_number: int) -> ContentRequest:
        ctx = self.context
        if not ctx.toc:
            raise WizardStateError("Generate a table of contents first")
        return ContentRequest(
            title=ctx.book.title,
            author=ctx.book.author,
            book_idea=ctx.book.book_idea,
            toc=ctx.toc,
            chapter_number=chapter_number,
            content_depth=ctx.content_settings.content_depth,
            generation_mode=ctx.content_settings.generation_mode,
        )

    async def generate_chapter(self, chapter_number: int) -> ChapterResponse:
        request = self._content_request(chapter_number)
        chapter = await self.generator.generate_chapter(request)
        self.context.chapters[chapter_number] = chapter
        self.context.chapter_errors.pop(chapter_number, None)
        return chapter

    async def _generate_chapter_captured(self, chapter_number: int) -> Optional[ChapterResponse]:
        try:
            return await self.generate_chapter(chapter_number)
        except Exception as e:
            message = get_error_message(e)
            logger.error(f"第{chapter_number}章生成失败: {message}")
            self.context.chapter_errors[chapter_number] = message
            return None

    async def generate_all_chapters(self) -> Dict[int, ChapterResponse]:
        """所有章节并发生成，单章失败只记录到 chapter_errors"""
        if not self.context.toc:
            raise WizardStateError("Generate a table of contents first")

        numbers = range(1, len(self.context.toc) + 1)
        await asyncio.gather(*(self._generate_chapter_captured(n) for n in numbers))
        return self.context.chapters

    async def export_pdf(self) -> PDFResponse:
        ctx = self.context
        if not ctx.chapters:
            raise WizardStateError("No chapters generated yet. Please generate content first.")

        chapters = [
            PDFChapter(
                chapter_number=chapter.chapter_number,
                chapter_title=chapter.chapter_title,
                content=chapter.content,
            )
            for _, chapter in sorted(ctx.chapters.items())
        ]
        result = await self.generator.generate_pdf(PDFRequest(
            title=ctx.book.title,
            author=ctx.book.author,
            chapters=chapters,
            cover_url=ctx.cover_url,
            include_toc=ctx.export_settings.include_toc,
            page_format=ctx.export_settings.page_format,
        ))

        ctx.pdf = result
        ctx.stats = BookStats(total_pages=result.total_pages, word_count=result.word_count)
        return result

    async def generate_cover(self) -> CoverResponse:
        ctx = self.context
        if not (ctx.book.title and ctx.book.author):
            raise WizardStateError("Title and author are required to generate a cover")

        settings = ctx.cover_settings
        result = await self.generator.generate_cover(CoverRequest(
            title=ctx.book.title,
            author=ctx.book.author,
            book_description=ctx.book.book_idea or ctx.book.title,
            style_prompt=settings.style_prompt,
            color_scheme=settings.color_scheme,
            design_style=settings.design_style,
        ))
        ctx.cover = result
        return result
