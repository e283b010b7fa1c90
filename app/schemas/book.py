from typing import Optional, List
from enum import Enum
from pydantic import BaseModel, Field


# === 枚举 ===

class ContentDepth(str, Enum):
    OUTLINE = "outline"    # 提纲
    DRAFT = "draft"        # 草稿
    POLISHED = "polished"  # 精修


class GenerationMode(str, Enum):
    SEQUENTIAL = "sequential"
    PARALLEL = "parallel"
    SELECTIVE = "selective"


class DesignStyle(str, Enum):
    MODERN = "modern"
    CLASSIC = "classic"
    MINIMALIST = "minimalist"
    BOLD = "bold"


class ColorScheme(str, Enum):
    PROFESSIONAL = "professional"
    VIBRANT = "vibrant"
    MONOCHROME = "monochrome"
    WARM = "warm"
    COOL = "cool"


class PageFormat(str, Enum):
    A4 = "A4"
    US_LETTER = "US Letter"
    SIX_BY_NINE = "6x9"
    FIVE_BY_EIGHT = "5x8"


# === 书籍基础信息 ===

class BookRequest(BaseModel):
    """向导第一步收集的书籍信息"""
    title: str = ""
    author: str = ""
    book_idea: str = ""
    num_pages: int = Field(default=100, ge=1)
    include_spine_title: bool = True
    additional_context: List[str] = Field(default_factory=list, description="上传文本片段")


# === 目录 ===

class TOCSection(BaseModel):
    section_name: str
    section_ideas: List[str] = Field(default_factory=list)
    estimated_pages: str = Field(default="", description="页数区间，如 '20-22'")


class TOCRequest(BaseModel):
    title: str = Field(min_length=1)
    author: str = Field(min_length=1)
    book_idea: str = Field(min_length=1)
    num_pages: int = Field(default=100, ge=0)
    include_spine_title: bool = True
    style: str = "practical"
    chapter_count: int = 5
    target_length: str = "medium"


class TOCResponse(BaseModel):
    toc: List[TOCSection]
    total_estimated_pages: str
    book_summary: str


# === 章节内容 ===

class ContentRequest(BaseModel):
    title: str = Field(min_length=1)
    author: str = Field(min_length=1)
    book_idea: str = Field(min_length=1)
    toc: List[TOCSection]
    chapter_number: Optional[int] = Field(default=None, description="缺省为第1章")
    content_depth: ContentDepth = ContentDepth.DRAFT
    generation_mode: GenerationMode = GenerationMode.SEQUENTIAL


class ChapterResponse(BaseModel):
    chapter_number: int
    chapter_title: str
    content: str
    word_count: int
    estimated_pages: int


# === 封面 ===

class CoverRequest(BaseModel):
    title: str = Field(min_length=1)
    author: str = Field(min_length=1)
    book_description: str = Field(min_length=1)
    style_prompt: Optional[str] = None
    color_scheme: ColorScheme = ColorScheme.PROFESSIONAL
    design_style: DesignStyle = DesignStyle.MODERN


class CoverResponse(BaseModel):
    cover_url: str
    design_description: str
    color_palette: List[str]


# === PDF ===

class PDFChapter(BaseModel):
    chapter_number: int
    chapter_title: str
    content: str


class PDFRequest(BaseModel):
    title: str = Field(min_length=1)
    author: str = Field(min_length=1)
    chapters: List[PDFChapter] = Field(min_length=1)
    cover_url: Optional[str] = None
    include_toc: bool = True
    page_format: PageFormat = PageFormat.A4


class PDFResponse(BaseModel):
    pdf_url: str
    total_pages: int
    word_count: int
    file_size_mb: float
