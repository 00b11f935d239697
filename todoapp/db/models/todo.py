"""
Todo 表模型

index 是 SQL 关键字，SQLAlchemy 生成语句时会自动加引号。
仓储层只用本模型拼 Core 语句，不走 ORM Session。
"""

from sqlalchemy import Boolean, Identity, Integer, Text, false
from sqlalchemy.orm import Mapped, mapped_column

from todoapp.db.models.base import Base


class TodoRecord(Base):
    """todo 表：有序列表，index 全表连续无空洞"""

    __tablename__ = "todo"

    id: Mapped[int] = mapped_column(Integer, Identity(), primary_key=True)
    text: Mapped[str] = mapped_column(Text, nullable=False, comment="内容（已去除首尾空白）")
    done: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=false(), comment="是否完成"
    )
    index: Mapped[int] = mapped_column(Integer, nullable=False, comment="从 0 开始的位置")
