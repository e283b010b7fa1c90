"""
不经Alembic直接建表
用于本地开发数据库和测试用的SQLite内存库；生产环境使用迁移
"""
import asyncio
import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

import app.models  # noqa: F401  注册全部模型
from app.core.config import settings
from app.db.base import Base

logger = logging.getLogger(__name__)


async def create_tables(engine: AsyncEngine, drop_existing: bool = False) -> None:
    """按模型元数据创建所有表"""
    async with engine.begin() as conn:
        if drop_existing:
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


async def create_database(database_url: Optional[str] = None):
    """重建数据库表"""
    engine = create_async_engine(database_url or settings.DATABASE_URL, echo=True)
    try:
        await create_tables(engine, drop_existing=True)
    finally:
        await engine.dispose()
    logger.info("Database tables created successfully!")

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(create_database())
