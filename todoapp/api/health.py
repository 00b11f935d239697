"""
健康检查接口：探活 + 数据库状态
"""

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncConnection

from todoapp.db.engine import get_transaction_runner
from todoapp.db.transaction import Isolation, TransactionRunner

router = APIRouter(tags=["健康检查"])
log = structlog.get_logger()


async def _select_one(tx: AsyncConnection) -> None:
    await tx.execute(text("SELECT 1"))


async def ping_database(runner: TransactionRunner) -> None:
    """经闸门走一次只读事务执行 SELECT 1，失败时原样抛出"""
    await runner.run(Isolation.READ_COMMITTED, True, _select_one)


@router.get("/health")
async def health_check(runner: TransactionRunner = Depends(get_transaction_runner)):
    """健康检查：走一遍闸门 + 只读事务校验 PG 连接"""
    status = {"status": "ok", "postgres": "ok"}

    try:
        await ping_database(runner)
    except Exception as e:
        status["postgres"] = f"error: {e}"
        status["status"] = "degraded"
        log.error("PG 健康检查失败", error=str(e))

    return status
