"""管理员接口 - 使用 ADMIN_ACCESS_KEY 作为Bearer令牌"""
import logging
from typing import List

from fastapi import APIRouter, HTTPException, status, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import require_admin
from app.db.database import get_db
from app.schemas.submission import (
    AdminSubmissionResponse,
    SubmissionResponse,
    SubmissionStatusUpdate,
)
from app.services.submission import SubmissionService

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/submissions", response_model=List[AdminSubmissionResponse], summary="全部提交记录")
async def list_submissions(db: AsyncSession = Depends(get_db)):
    """全部提交记录（新的在前），附带所属用户邮箱"""
    rows = await SubmissionService(db).get_all_with_user_email()
    return [
        AdminSubmissionResponse(
            **SubmissionResponse.model_validate(submission).model_dump(),
            user_email=user_email,
        )
        for submission, user_email in rows
    ]


@router.put("/submissions", response_model=SubmissionResponse, summary="更新提交状态")
async def update_submission_status(
    update: SubmissionStatusUpdate,
    db: AsyncSession = Depends(get_db),
):
    submission = await SubmissionService(db).update_status(update.id, update.status)
    if not submission:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Submission not found",
        )

    logger.info(f"提交 {submission.id} 状态更新为 {submission.status.value}")
    return submission
