"""
全局配置模块：通过 pydantic-settings 读取环境变量 / .env
"""

from functools import lru_cache
from pathlib import Path

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import make_url


class Settings(BaseSettings):
    """应用全局配置，从 .env 文件加载"""

    model_config = SettingsConfigDict(
        env_file=Path(__file__).parent / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── 数据库 ──
    DATABASE_URL: str  # postgresql+asyncpg://host:port/db
    DATABASE_USERNAME: str | None = None  # 覆盖 URL 中的用户名
    DATABASE_PASSWORD: str | None = None  # 覆盖 URL 中的密码
    DB_SCHEMA: str = "public"

    DB_ECHO: bool = False  # 打印 SQL 日志，调试时可在 .env 设为 true

    # ── 连接池 ──
    # 默认单连接：所有事务串行执行，SERIALIZABLE 冲突只在调大后才可能出现
    DB_POOL_SIZE: int = 1
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800

    # 启动时执行 alembic upgrade head
    DB_MIGRATE_ON_STARTUP: bool = False

    # ── 应用 ──
    ENV: str = "development"  # development | production
    APP_NAME: str = "todoapp"
    APP_PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    @model_validator(mode="after")
    def _check_pool_and_credentials(self) -> "Settings":
        """连接池至少 1 个连接；生产环境必须显式配置数据库密码"""
        if self.DB_POOL_SIZE < 1:
            raise ValueError("DB_POOL_SIZE 必须 >= 1")
        if self.ENV == "production" and not (
            self.DATABASE_PASSWORD or make_url(self.DATABASE_URL).password
        ):
            raise ValueError(
                "生产环境必须配置数据库密码："
                "设置 DATABASE_PASSWORD 或在 DATABASE_URL 中携带凭据。"
            )
        return self

    @property
    def database_url(self) -> str:
        """合并 DATABASE_USERNAME / DATABASE_PASSWORD 后的最终连接串"""
        url = make_url(self.DATABASE_URL)
        if self.DATABASE_USERNAME:
            url = url.set(username=self.DATABASE_USERNAME)
        if self.DATABASE_PASSWORD:
            url = url.set(password=self.DATABASE_PASSWORD)
        return url.render_as_string(hide_password=False)


@lru_cache
def get_settings() -> Settings:
    """单例获取配置（带缓存）"""
    return Settings()
