"""
数据库引擎：AsyncEngine 创建 + 连接闸门 + 事务执行器单例
"""

from sqlalchemy.ext.asyncio import create_async_engine

from todoapp.config import get_settings
from todoapp.db.gate import ConnectionGate
from todoapp.db.transaction import TransactionRunner

settings = get_settings()

# max_overflow=0：DB_POOL_SIZE 即在途事务上限
engine = create_async_engine(
    settings.database_url,
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=0,
    pool_timeout=settings.DB_POOL_TIMEOUT,
    pool_recycle=settings.DB_POOL_RECYCLE,
    pool_pre_ping=True,
    echo=settings.DB_ECHO,
    connect_args={"server_settings": {"search_path": settings.DB_SCHEMA}},
)

connection_gate = ConnectionGate(engine)
transaction_runner = TransactionRunner(connection_gate)


async def get_transaction_runner() -> TransactionRunner:
    """FastAPI 依赖注入：获取事务执行器"""
    return transaction_runner
