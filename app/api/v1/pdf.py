import logging

from fastapi import APIRouter, HTTPException, status, Depends
from fastapi.responses import HTMLResponse

from app.core.exceptions import BookServiceError, get_error_message
from app.schemas.book import PDFRequest, PDFResponse
from app.services.book_generator import BookGeneratorService, get_book_generator

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/pdf", response_model=PDFResponse, summary="导出PDF")
async def generate_pdf(
    request: PDFRequest,
    generator: BookGeneratorService = Depends(get_book_generator),
):
    """由上游代理排版，失败返回500"""
    try:
        return await generator.generate_pdf(request)
    except BookServiceError:
        raise
    except Exception as e:
        logger.error(f"PDF生成失败: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=get_error_message(e),
        )


@router.post("/book-preview", response_class=HTMLResponse, summary="书籍HTML预览")
async def book_preview(
    request: PDFRequest,
    generator: BookGeneratorService = Depends(get_book_generator),
):
    try:
        return HTMLResponse(content=generator.render_preview(request))
    except Exception as e:
        logger.error(f"HTML预览渲染失败: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=get_error_message(e),
        )
