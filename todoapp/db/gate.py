"""
连接闸门：全进程同一时刻只允许一个协程向连接池要连接

闸门只串行化"取连接"这一步，与连接池自身的 pool_size 限制相互独立：
- 排队者按 FIFO 顺序依次进入（asyncio.Semaphore 的等待队列）
- 连接池在 pool_timeout 内给不出连接时抛 ResourceExhausted
- 闸门不管理事务状态，拿到连接后立即放行下一个排队者
"""

import asyncio
import time

import structlog
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

from todoapp.observability.metrics import CONNECTION_ACQUIRE_DURATION
from todoapp.todo.errors import ResourceExhausted

log = structlog.get_logger()


class ConnectionGate:
    """单槽位取连接闸门（进程级单例，随应用启动创建）"""

    def __init__(self, engine: AsyncEngine):
        self._engine = engine
        self._slot = asyncio.Semaphore(1)

    async def acquire(self) -> AsyncConnection:
        """排队取一个物理连接，调用方负责 close() 归还"""
        start = time.monotonic()
        try:
            async with self._slot:
                return await self._engine.connect()
        except PoolTimeoutError as e:
            log.error("连接池耗尽，取连接超时", error=str(e))
            raise ResourceExhausted("连接池耗尽") from e
        finally:
            CONNECTION_ACQUIRE_DURATION.observe((time.monotonic() - start) * 1000)
