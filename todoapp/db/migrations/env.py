"""
Alembic 迁移环境

连接参数全部来自 todoapp.config（alembic.ini 不写 sqlalchemy.url），
在线迁移用一次性的 asyncpg 引擎（NullPool），不占用应用连接池，也不经过连接闸门。
版本表与 todo 表放在同一个 DB_SCHEMA 下。
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool, text
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

from todoapp.config import get_settings
from todoapp.db.models import Base

settings = get_settings()
config = context.config

# 命令行运行时按 alembic.ini 配日志；lifespan 内调用时沿用应用的 structlog 配置
if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

SCHEMA = settings.DB_SCHEMA


def _configure(**kwargs) -> None:
    context.configure(
        target_metadata=Base.metadata,
        version_table_schema=SCHEMA,
        include_schemas=True,
        # 只比对自己 schema 里的表
        include_name=lambda name, type_, _: type_ != "schema" or name == SCHEMA,
        **kwargs,
    )


def run_migrations_offline() -> None:
    """--sql 模式：只输出 DDL，不连库"""
    _configure(
        url=settings.database_url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def _upgrade(connection: Connection) -> None:
    _configure(connection=connection)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    engine = create_async_engine(settings.database_url, poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.execute(text(f'CREATE SCHEMA IF NOT EXISTS "{SCHEMA}"'))
            await connection.commit()
            await connection.run_sync(_upgrade)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
