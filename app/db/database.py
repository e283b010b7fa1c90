"""数据库引擎与会话管理"""
import logging
import uuid
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import settings
from app.db.base import Base  # noqa: F401  重新导出，供模型和迁移使用

logger = logging.getLogger(__name__)

engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DATABASE_ECHO,
    pool_pre_ping=True,
)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """依赖注入函数 - 每个请求一个会话"""
    async with async_session_maker() as session:
        yield session


async def apply_row_scope(session: AsyncSession, user_id: uuid.UUID) -> None:
    """
    为当前事务设置行级安全策略使用的用户ID

    仅PostgreSQL生效，策略通过 current_setting('app.current_user_id') 读取
    """
    if session.bind is None or session.bind.dialect.name != "postgresql":
        return
    await session.execute(
        text("SELECT set_config('app.current_user_id', :user_id, true)"),
        {"user_id": str(user_id)},
    )
