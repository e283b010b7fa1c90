import logging

from fastapi import APIRouter, HTTPException, status, Depends

from app.core.exceptions import BookServiceError, get_error_message
from app.schemas.book import TOCRequest, TOCResponse
from app.services.book_generator import BookGeneratorService, get_book_generator

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=TOCResponse, summary="生成目录")
async def generate_outline(
    request: TOCRequest,
    generator: BookGeneratorService = Depends(get_book_generator),
):
    """
    生成书籍目录

    上游代理不可用或返回格式错误时返回固定的三段式目录
    """
    try:
        return await generator.generate_outline(request)
    except BookServiceError:
        raise
    except Exception as e:
        logger.error(f"目录生成失败: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=get_error_message(e),
        )
