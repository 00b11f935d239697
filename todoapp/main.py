"""
FastAPI 应用主入口
"""

import asyncio
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from prometheus_client import make_asgi_app

from todoapp import __version__
from todoapp.api.errors import install_error_handlers
from todoapp.api.health import ping_database
from todoapp.api.health import router as health_router
from todoapp.api.todo import router as todo_router
from todoapp.config import get_settings
from todoapp.db.engine import engine, transaction_runner
from todoapp.db.migrate import upgrade_head
from todoapp.observability.logging_config import setup_logging
from todoapp.observability.metrics_middleware import MetricsMiddleware
from todoapp.observability.request_logger import RequestLoggerMiddleware

settings = get_settings()

# 初始化日志（在 import 时就生效）
setup_logging(env=settings.ENV, level=settings.LOG_LEVEL)
log = structlog.get_logger()


@asynccontextmanager
async def lifespan(application: FastAPI):
    """应用生命周期：启动时迁移 + 预检数据库，关闭时释放连接池"""
    log.info(
        "应用启动",
        env=settings.ENV,
        app=settings.APP_NAME,
        pool_size=settings.DB_POOL_SIZE,
    )

    if settings.DB_MIGRATE_ON_STARTUP:
        await asyncio.to_thread(upgrade_head)
        log.info("数据库迁移完成")

    # ── Warm-up：Fail Fast，数据库不可用时拒绝启动 ──
    await ping_database(transaction_runner)
    log.info("PG 连接正常")

    yield

    # 关闭数据库连接池
    await engine.dispose()
    log.info("应用关闭，资源已释放")


app = FastAPI(
    title=settings.APP_NAME,
    version=__version__,
    lifespan=lifespan,
)

# ── 中间件（执行顺序：从下往上注册，从上往下执行） ──
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestLoggerMiddleware)

install_error_handlers(app)

# ── Prometheus 指标端点 ──
metrics_app = make_asgi_app()
app.mount("/metrics", metrics_app)

# ── 路由注册 ──
app.include_router(health_router)
app.include_router(todo_router)


def run() -> None:
    """console script 入口：todoapp-server"""
    import uvicorn

    uvicorn.run("todoapp.main:app", host="0.0.0.0", port=settings.APP_PORT)


if __name__ == "__main__":
    run()
