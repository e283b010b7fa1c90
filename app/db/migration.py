"""
启动时自动迁移

只对PostgreSQL执行（迁移脚本中包含触发器、视图和行级安全策略），
其他数据库由 init_db.create_tables 直接建表
"""
import asyncio
import logging
from pathlib import Path
from typing import List, Optional

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from app.core.config import settings

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def build_alembic_config(database_url: Optional[str] = None) -> Config:
    ini_path = PROJECT_ROOT / "alembic.ini"
    if not ini_path.exists():
        raise FileNotFoundError(f"找不到alembic.ini: {ini_path}")

    config = Config(str(ini_path))
    config.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    config.set_main_option("sqlalchemy.url", database_url or settings.DATABASE_URL)
    # 日志已由应用配置，env.py 不再调用 fileConfig
    config.attributes["configure_logger"] = False
    return config


class DatabaseMigrationManager:
    """检查数据库版本并升级到head"""

    def __init__(self, engine: AsyncEngine, config: Optional[Config] = None):
        self.engine = engine
        self.config = config or build_alembic_config()
        self.scripts = ScriptDirectory.from_config(self.config)

    async def get_current_revision(self) -> Optional[str]:
        """数据库当前版本，空库为None"""
        def _read(sync_conn):
            return MigrationContext.configure(sync_conn).get_current_revision()

        async with self.engine.connect() as conn:
            return await conn.run_sync(_read)

    def get_head_revision(self) -> Optional[str]:
        return self.scripts.get_current_head()

    def pending_revisions(self, current: Optional[str]) -> List[str]:
        """从current（不含）到head之间待执行的版本，按执行顺序"""
        revisions = self.scripts.iterate_revisions("heads", current or "base")
        return [rev.revision for rev in reversed(list(revisions)) if rev.revision != current]

    def _upgrade(self) -> None:
        command.upgrade(self.config, "head")

    async def upgrade(self) -> bool:
        # env.py 内部用 asyncio.run 连接数据库，必须在独立线程里执行
        try:
            await asyncio.to_thread(self._upgrade)
        except (SQLAlchemyError, OSError, RuntimeError) as e:
            logger.error(f"❌ 迁移失败: {e}")
            return False
        logger.info("✅ 数据库已升级到最新版本")
        return True

    async def auto_migrate(self) -> bool:
        if self.engine.dialect.name != "postgresql":
            logger.info(f"跳过自动迁移（{self.engine.dialect.name}）")
            return True

        try:
            current = await self.get_current_revision()
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"读取数据库版本失败: {e}")
            return False

        pending = self.pending_revisions(current)
        if not pending:
            logger.info(f"数据库版本 {current} 已是最新")
            return True

        logger.info(f"待执行迁移: {', '.join(pending)}")
        return await self.upgrade()


async def run_auto_migration(engine: AsyncEngine) -> bool:
    return await DatabaseMigrationManager(engine).auto_migrate()
