import uuid
from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User


class UserService:
    """认证平台用户的本地镜像"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        result = await self.db.execute(
            select(User).where(User.id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(
            select(User).where(User.email == email)
        )
        return result.scalar_one_or_none()

    async def ensure_user(self, user_id: uuid.UUID, email: Optional[str] = None) -> User:
        """确保镜像行存在（不提交，由调用方统一提交）"""
        user = await self.get_by_id(user_id)
        if user:
            if email and not user.email:
                user.email = email
            return user

        if email and await self.get_by_email(email):
            # 邮箱已被其他镜像行占用，保持为空以满足唯一约束
            email = None

        user = User(id=user_id, email=email)
        self.db.add(user)
        await self.db.flush()
        return user
