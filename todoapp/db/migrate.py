"""
程序内执行 Alembic 迁移（DB_MIGRATE_ON_STARTUP=true 时由 lifespan 调用）
"""

from pathlib import Path

from alembic import command
from alembic.config import Config

MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"


def alembic_config() -> Config:
    """不依赖 alembic.ini 的配置，script_location 指向包内迁移目录"""
    config = Config()
    config.set_main_option("script_location", str(MIGRATIONS_DIR))
    return config


def upgrade_head() -> None:
    """同步执行 upgrade head；env.py 内部自带事件循环，须在独立线程中调用"""
    command.upgrade(alembic_config(), "head")
