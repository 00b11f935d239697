"""
Todo 用例层：创建 / 列表 / 更新 / 删除

每个用例只开一个事务，在事务内组合 TodoStore 原语，维持 index 连续无空洞：
- 创建：SERIALIZABLE 下先 count 再插入，新条目永远追加在队尾
- 删除：删掉目标后把其后所有条目（tail）的 index 减 1，批量改写
- 更新：只改 text / done，index 与 id 不动

用例本身无状态，所有中间数据只活在单个事务里。
"""

from dataclasses import replace

import structlog
from sqlalchemy.ext.asyncio import AsyncConnection

from todoapp.db.transaction import Isolation, TransactionRunner
from todoapp.todo.errors import TodoNotFound
from todoapp.todo.schemas import Todo
from todoapp.todo.store import TodoStore

log = structlog.get_logger()


class TodoService:
    """Todo 用例集合"""

    def __init__(self, runner: TransactionRunner, store: TodoStore):
        self._runner = runner
        self._store = store

    async def create(self, text: str) -> Todo:
        """追加到队尾：index = 当前条数"""

        async def work(tx: AsyncConnection) -> Todo:
            count = await self._store.count(tx)
            todo = Todo(id=0, text=text.strip(), done=False, index=count)
            todo_id = await self._store.insert(tx, todo)
            return replace(todo, id=todo_id)

        todo = await self._runner.run(Isolation.SERIALIZABLE, False, work)
        log.info("Todo 已创建", todo_id=todo.id, index=todo.index)
        return todo

    async def list(self) -> list[Todo]:
        """按 index 升序返回全部 Todo"""

        async def work(tx: AsyncConnection) -> list[Todo]:
            return await self._store.select_all(tx)

        return await self._runner.run(Isolation.REPEATABLE_READ, True, work)

    async def update(
        self,
        todo_id: int,
        text: str | None = None,
        done: bool | None = None,
    ) -> Todo:
        """只改传入的字段；目标不存在时抛 TodoNotFound（事务内未写任何数据）"""

        async def work(tx: AsyncConnection) -> Todo:
            todo = await self._store.select_by_id(tx, todo_id)
            if todo is None:
                raise TodoNotFound(todo_id)
            if text is not None:
                todo = replace(todo, text=text.strip())
            if done is not None:
                todo = replace(todo, done=done)
            await self._store.update_one(tx, todo)
            return todo

        todo = await self._runner.run(Isolation.SERIALIZABLE, False, work)
        log.info("Todo 已更新", todo_id=todo.id, done=todo.done)
        return todo

    async def delete(self, todo_id: int) -> None:
        """删除并收拢空洞；目标不存在时静默成功"""

        async def work(tx: AsyncConnection) -> int | None:
            todo = await self._store.select_by_id(tx, todo_id)
            if todo is None:
                return None
            await self._store.delete_by_id(tx, todo.id)
            # 没有"index > X 全部减一"的原语，只能逐条改写 tail
            tail = [
                replace(item, index=item.index - 1)
                for item in await self._store.select_all(tx)
                if item.index > todo.index
            ]
            await self._store.update_many(tx, tail)
            return len(tail)

        shifted = await self._runner.run(Isolation.SERIALIZABLE, False, work)
        if shifted is None:
            log.info("删除目标不存在，忽略", todo_id=todo_id)
        else:
            log.info("Todo 已删除", todo_id=todo_id, tail=shifted)
