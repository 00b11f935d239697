"""
模型统一导出：Alembic 自动发现需要导入所有模型
"""

from todoapp.db.models.base import Base
from todoapp.db.models.todo import TodoRecord

__all__ = ["Base", "TodoRecord"]
