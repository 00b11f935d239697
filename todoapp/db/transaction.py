"""
事务执行器：在指定隔离级别 / 只读模式下执行一段工作单元

执行顺序：
1. 经 ConnectionGate 取连接
2. 在 BEGIN 之前设置 isolation_level 与 postgresql_readonly
3. 显式 BEGIN，调用 work(conn) 恰好一次
4. 正常返回 → COMMIT 并返回结果；任何异常（含取消）→ ROLLBACK 后原样抛出

不做自动重试：SERIALIZABLE 冲突同样回滚后抛给调用方。
连接在 finally 中归还连接池。
"""

import enum
import time
from collections.abc import Awaitable, Callable
from typing import TypeVar

import structlog
from sqlalchemy.ext.asyncio import AsyncConnection

from todoapp.db.gate import ConnectionGate
from todoapp.observability.metrics import TRANSACTION_DURATION, TRANSACTION_TOTAL

log = structlog.get_logger()

T = TypeVar("T")

# 工作单元：接收事务句柄，返回任意结果
Work = Callable[[AsyncConnection], Awaitable[T]]


class Isolation(str, enum.Enum):
    """事务隔离级别，值即 SQLAlchemy isolation_level 字符串"""

    READ_COMMITTED = "READ COMMITTED"
    REPEATABLE_READ = "REPEATABLE READ"
    SERIALIZABLE = "SERIALIZABLE"


class TransactionRunner:
    """事务执行器：保证 COMMIT / ROLLBACK 对称"""

    def __init__(self, gate: ConnectionGate):
        self._gate = gate

    async def run(self, isolation: Isolation, read_only: bool, work: Work[T]) -> T:
        conn = await self._gate.acquire()
        try:
            await conn.execution_options(
                isolation_level=isolation.value,
                postgresql_readonly=read_only,
            )
            start = time.monotonic()
            trans = await conn.begin()
            try:
                result = await work(conn)
                await trans.commit()
            except BaseException as e:
                await self._rollback(trans, isolation, e)
                raise
            finally:
                TRANSACTION_DURATION.labels(isolation=isolation.name).observe(
                    (time.monotonic() - start) * 1000
                )

            TRANSACTION_TOTAL.labels(isolation=isolation.name, outcome="commit").inc()
            log.debug("事务提交", isolation=isolation.name, read_only=read_only)
            return result
        finally:
            await conn.close()

    @staticmethod
    async def _rollback(trans, isolation: Isolation, cause: BaseException) -> None:
        TRANSACTION_TOTAL.labels(isolation=isolation.name, outcome="rollback").inc()
        log.warning(
            "事务回滚",
            isolation=isolation.name,
            error_type=type(cause).__name__,
            error=str(cause),
        )
        if not trans.is_active:
            # COMMIT 本身失败时事务已失效，数据库侧已回滚
            return
        try:
            await trans.rollback()
        except Exception as e:
            # 回滚失败（如连接已断开）只记录，保留原始异常向上抛
            log.error("事务回滚失败", error=str(e), exc_info=True)
