import uuid
from datetime import datetime, timezone
from typing import List, Optional, Tuple
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.submission import FormSubmission, SubmissionStatus
from app.models.user import User
from app.schemas.submission import SubmissionCreate
from app.services.user import UserService


class SubmissionService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(
        self,
        user_id: uuid.UUID,
        submission_data: SubmissionCreate,
        user_email: Optional[str] = None,
    ) -> FormSubmission:
        """为当前用户创建提交记录，状态默认为pending"""
        await UserService(self.db).ensure_user(user_id, user_email)

        submission = FormSubmission(
            user_id=user_id,
            status=SubmissionStatus.PENDING,
            **submission_data.model_dump(),
        )
        self.db.add(submission)
        await self.db.commit()
        await self.db.refresh(submission)
        return submission

    async def get_by_id(self, submission_id: uuid.UUID) -> Optional[FormSubmission]:
        result = await self.db.execute(
            select(FormSubmission).where(FormSubmission.id == submission_id)
        )
        return result.scalar_one_or_none()

    async def get_by_user_id(self, user_id: uuid.UUID) -> List[FormSubmission]:
        """用户自己的提交记录，按创建时间倒序"""
        result = await self.db.execute(
            select(FormSubmission)
            .where(FormSubmission.user_id == user_id)
            .order_by(FormSubmission.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_all_with_user_email(self) -> List[Tuple[FormSubmission, Optional[str]]]:
        """管理员视图：全部提交记录及所属用户邮箱（孤立记录为None）"""
        result = await self.db.execute(
            select(FormSubmission, User.email)
            .outerjoin(User, FormSubmission.user_id == User.id)
            .order_by(FormSubmission.created_at.desc())
        )
        return [(submission, email) for submission, email in result.all()]

    async def update_status(
        self, submission_id: uuid.UUID, status: SubmissionStatus
    ) -> Optional[FormSubmission]:
        """任意状态之间均可切换，同时刷新updated_at"""
        submission = await self.get_by_id(submission_id)
        if not submission:
            return None

        submission.status = status
        submission.updated_at = datetime.now(timezone.utc)
        await self.db.commit()
        await self.db.refresh(submission)
        return submission
