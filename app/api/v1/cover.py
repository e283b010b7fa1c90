import logging

from fastapi import APIRouter, HTTPException, status, Depends

from app.core.exceptions import BookServiceError, get_error_message
from app.schemas.book import CoverRequest, CoverResponse
from app.services.book_generator import BookGeneratorService, get_book_generator

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=CoverResponse, summary="生成封面")
async def generate_cover(
    request: CoverRequest,
    generator: BookGeneratorService = Depends(get_book_generator),
):
    """未配置上游代理令牌时返回500，上游失败时返回SVG占位封面"""
    try:
        return await generator.generate_cover(request)
    except BookServiceError:
        raise
    except Exception as e:
        logger.error(f"封面生成失败: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=get_error_message(e),
        )
