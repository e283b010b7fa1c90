import logging
from typing import List

from fastapi import APIRouter, BackgroundTasks, status, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import get_current_user_claims
from app.db.database import get_db, apply_row_scope
from app.schemas.submission import SubmissionCreate, SubmissionResponse
from app.services.notification import send_submission_notifications
from app.services.submission import SubmissionService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=SubmissionResponse, status_code=status.HTTP_201_CREATED, summary="提交图书需求")
async def create_submission(
    submission_data: SubmissionCreate,
    background_tasks: BackgroundTasks,
    claims: dict = Depends(get_current_user_claims),
    db: AsyncSession = Depends(get_db),
):
    """
    创建提交记录，提交成功后在后台发送通知邮件

    通知发送失败不影响提交结果
    """
    user_id = claims["user_id"]
    await apply_row_scope(db, user_id)

    submission = await SubmissionService(db).create(
        user_id, submission_data, user_email=claims.get("email")
    )
    response = SubmissionResponse.model_validate(submission)
    logger.info(f"新提交: {submission.id} ({submission.book_topic})")

    background_tasks.add_task(send_submission_notifications, response.model_dump(mode="json"))
    return response


@router.get("", response_model=List[SubmissionResponse], summary="我的提交记录")
async def list_my_submissions(
    claims: dict = Depends(get_current_user_claims),
    db: AsyncSession = Depends(get_db),
):
    user_id = claims["user_id"]
    await apply_row_scope(db, user_id)
    return await SubmissionService(db).get_by_user_id(user_id)
