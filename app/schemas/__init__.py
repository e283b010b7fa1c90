from app.schemas.book import (
    BookRequest, TOCSection, TOCRequest, TOCResponse,
    ContentRequest, ChapterResponse,
    CoverRequest, CoverResponse,
    PDFChapter, PDFRequest, PDFResponse,
    ContentDepth, GenerationMode, DesignStyle, ColorScheme, PageFormat,
)
from app.schemas.submission import (
    SubmissionCreate, SubmissionResponse, AdminSubmissionResponse,
    SubmissionStatusUpdate, EmailNotifyRequest,
)
from app.schemas.billing import UserSubscriptionResponse, UserOrderResponse

__all__ = [
    # 书籍生成
    "BookRequest", "TOCSection", "TOCRequest", "TOCResponse",
    "ContentRequest", "ChapterResponse",
    "CoverRequest", "CoverResponse",
    "PDFChapter", "PDFRequest", "PDFResponse",
    "ContentDepth", "GenerationMode", "DesignStyle", "ColorScheme", "PageFormat",
    # 提交与管理
    "SubmissionCreate", "SubmissionResponse", "AdminSubmissionResponse",
    "SubmissionStatusUpdate", "EmailNotifyRequest",
    # 计费
    "UserSubscriptionResponse", "UserOrderResponse",
]
