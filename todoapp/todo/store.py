"""
Todo 有序存储：事务内的数据访问原语

每个原语的第一个参数都是事务句柄（TransactionRunner 交给 work 的连接），
只做一次逻辑访问，从不 COMMIT / ROLLBACK（由事务执行器负责）。
"""

from sqlalchemy import bindparam, delete, func, insert, select, update
from sqlalchemy.engine import Row
from sqlalchemy.ext.asyncio import AsyncConnection

from todoapp.db.models.todo import TodoRecord
from todoapp.todo.schemas import Todo

_table = TodoRecord.__table__
_COLUMNS = (TodoRecord.id, TodoRecord.text, TodoRecord.done, TodoRecord.index)

# 批量更新语句：绑定参数名不能和列名重名
_UPDATE_BY_ID = (
    update(_table)
    .where(_table.c.id == bindparam("b_id"))
    .values(
        text=bindparam("b_text"),
        done=bindparam("b_done"),
        index=bindparam("b_index"),
    )
)


def _to_todo(row: Row) -> Todo:
    # Row 是元组子类，row.index 会命中 tuple.index 方法，只能按位置取
    todo_id, text, done, index = row
    return Todo(id=todo_id, text=text, done=done, index=index)


def _update_params(todo: Todo) -> dict:
    return {"b_id": todo.id, "b_text": todo.text, "b_done": todo.done, "b_index": todo.index}


class TodoStore:
    """todo 表的事务内 CRUD 原语（无状态）"""

    async def count(self, tx: AsyncConnection) -> int:
        result = await tx.execute(select(func.count()).select_from(TodoRecord))
        return result.scalar_one()

    async def select_all(self, tx: AsyncConnection) -> list[Todo]:
        """全部 Todo，按 index 升序"""
        result = await tx.execute(select(*_COLUMNS).order_by(TodoRecord.index))
        return [_to_todo(row) for row in result]

    async def select_by_id(self, tx: AsyncConnection, todo_id: int) -> Todo | None:
        result = await tx.execute(select(*_COLUMNS).where(TodoRecord.id == todo_id))
        row = result.one_or_none()
        return _to_todo(row) if row is not None else None

    async def insert(self, tx: AsyncConnection, todo: Todo) -> int:
        """插入新行并返回生成的 id（忽略 todo.id）"""
        result = await tx.execute(
            insert(_table)
            .values(text=todo.text, done=todo.done, index=todo.index)
            .returning(_table.c.id)
        )
        return result.scalar_one()

    async def update_one(self, tx: AsyncConnection, todo: Todo) -> None:
        await tx.execute(_UPDATE_BY_ID, _update_params(todo))

    async def update_many(self, tx: AsyncConnection, todos: list[Todo]) -> None:
        """一次 executemany 批量改写；空列表不发语句"""
        if not todos:
            return
        await tx.execute(_UPDATE_BY_ID, [_update_params(todo) for todo in todos])

    async def delete_by_id(self, tx: AsyncConnection, todo_id: int) -> None:
        await tx.execute(delete(_table).where(_table.c.id == todo_id))
