import logging

from fastapi import APIRouter, HTTPException, status, Depends

from app.core.exceptions import BookServiceError, get_error_message
from app.schemas.book import ContentRequest, ChapterResponse
from app.services.book_generator import BookGeneratorService, get_book_generator

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=ChapterResponse, summary="生成章节内容")
async def generate_chapter_content(
    request: ContentRequest,
    generator: BookGeneratorService = Depends(get_book_generator),
):
    """
    生成单个章节，chapter_number 缺省为1

    章节号不在 [1, len(toc)] 内返回400
    """
    try:
        return await generator.generate_chapter(request)
    except BookServiceError:
        raise
    except Exception as e:
        logger.error(f"章节生成失败: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=get_error_message(e),
        )
