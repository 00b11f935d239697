"""
/todo 接口：请求解码 → 调用用例 → 响应编码

端点：
- GET    /todo：按 index 升序列出全部
- POST   /todo：追加到队尾，201
- PUT    /todo/{id}：更新 text / done，id 非法（非整数或超出 int4）或不存在时 404
- DELETE /todo/{id}：删除并收拢 index，id 非法或不存在时也返回 200

请求 / 响应体统一包一层 {"todo": ...}。
"""

import re

import structlog
from fastapi import APIRouter, Depends, Request, Response
from pydantic import BaseModel, ValidationError, field_validator

from todoapp.api.errors import validation_message
from todoapp.db.engine import transaction_runner
from todoapp.todo.errors import RequestDecodingError, TodoNotFound
from todoapp.todo.schemas import Todo
from todoapp.todo.service import TodoService
from todoapp.todo.store import TodoStore

router = APIRouter(tags=["Todo"])
log = structlog.get_logger()

# ── 单例组件（无状态，可复用） ──
todo_service = TodoService(transaction_runner, TodoStore())


async def get_todo_service() -> TodoService:
    """FastAPI 依赖注入：获取 Todo 用例"""
    return todo_service


# ── 请求/响应模型 ──

class TodoView(BaseModel):
    id: int
    text: str
    done: bool
    index: int

    @classmethod
    def of(cls, todo: Todo) -> "TodoView":
        return cls(id=todo.id, text=todo.text, done=todo.done, index=todo.index)


def _non_blank(value: str | None) -> str | None:
    if value is not None and not value.strip():
        raise ValueError("text 不能为空")
    return value


class TodoCreate(BaseModel):
    text: str

    _check_text = field_validator("text")(_non_blank)


class TodoCreateRequest(BaseModel):
    todo: TodoCreate


class TodoUpdate(BaseModel):
    text: str | None = None
    done: bool | None = None

    _check_text = field_validator("text")(_non_blank)


class TodoUpdateRequest(BaseModel):
    todo: TodoUpdate


class TodoResponse(BaseModel):
    todo: TodoView


class TodoListResponse(BaseModel):
    todo: list[TodoView]


# id 列是 PostgreSQL integer（int4）
INT4_MIN, INT4_MAX = -(2**31), 2**31 - 1
_ID_PATTERN = re.compile(r"[+-]?[0-9]+")


def _parse_id(raw: str) -> int | None:
    """路径参数宽松解析：非整数或超出 int4 范围返回 None，由各端点决定语义"""
    if not _ID_PATTERN.fullmatch(raw):
        return None
    value = int(raw)
    if not INT4_MIN <= value <= INT4_MAX:
        return None
    return value


def _decode_update(raw: bytes) -> TodoUpdateRequest:
    try:
        return TodoUpdateRequest.model_validate_json(raw)
    except ValidationError as e:
        raise RequestDecodingError(validation_message(e.errors())) from e


# ── 接口 ──

@router.get("/todo", response_model=TodoListResponse)
async def read_todo(service: TodoService = Depends(get_todo_service)):
    """按 index 升序列出全部 Todo"""
    todos = await service.list()
    return TodoListResponse(todo=[TodoView.of(t) for t in todos])


@router.post("/todo", response_model=TodoResponse, status_code=201)
async def create_todo(
    body: TodoCreateRequest,
    service: TodoService = Depends(get_todo_service),
):
    """创建 Todo，追加到队尾"""
    todo = await service.create(body.todo.text)
    return TodoResponse(todo=TodoView.of(todo))


@router.put("/todo/{todo_id}", response_model=TodoResponse)
async def update_todo(
    todo_id: str,
    request: Request,
    service: TodoService = Depends(get_todo_service),
):
    """更新 text / done，index 不变；先校验 id 再解析请求体"""
    parsed_id = _parse_id(todo_id)
    if parsed_id is None:
        raise TodoNotFound(todo_id)
    body = _decode_update(await request.body())
    todo = await service.update(parsed_id, text=body.todo.text, done=body.todo.done)
    return TodoResponse(todo=TodoView.of(todo))


@router.delete("/todo/{todo_id}")
async def delete_todo(todo_id: str, service: TodoService = Depends(get_todo_service)):
    """删除 Todo；目标不存在视为成功"""
    parsed_id = _parse_id(todo_id)
    if parsed_id is None:
        log.info("删除请求 id 非法，忽略", todo_id=todo_id)
    else:
        await service.delete(parsed_id)
    return Response(status_code=200)
