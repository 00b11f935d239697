"""
SQLAlchemy 声明基类：所有模型继承此 Base
表统一放在 DB_SCHEMA 配置的 schema 下
"""

from sqlalchemy.orm import DeclarativeBase

from todoapp.config import get_settings

settings = get_settings()


class Base(DeclarativeBase):
    """声明基类，统一使用 DB_SCHEMA"""

    __abstract__ = True

    __table_args__ = {"schema": settings.DB_SCHEMA}
