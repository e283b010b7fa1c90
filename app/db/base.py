"""
数据库Base定义模块
Base与引擎分离，Alembic迁移和测试建表时不会触发异步引擎初始化
"""
from sqlalchemy import MetaData
from sqlalchemy.orm import declarative_base

# 统一约束命名，保证迁移脚本中的约束名稳定
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

Base = declarative_base(metadata=MetaData(naming_convention=NAMING_CONVENTION))
