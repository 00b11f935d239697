"""
领域错误：用例层以异常形式上报的可预期失败

- TodoNotFound：更新不存在的 Todo
- ResourceExhausted：连接池耗尽，闸门拿不到连接
- RequestDecodingError：HTTP 边界上请求体无法解析（核心不产生，只透传）

数据库层面的其他异常（连接中断、序列化冲突、约束冲突）不包装，
事务回滚后原样抛给调用方，由 HTTP 层统一映射为 500。
"""


class DomainError(Exception):
    """领域错误基类"""


class TodoNotFound(DomainError):
    """目标 Todo 不存在"""

    def __init__(self, todo_id: int | str):
        super().__init__(f"todo {todo_id} 不存在")
        self.todo_id = todo_id


class ResourceExhausted(DomainError):
    """连接池耗尽"""


class RequestDecodingError(DomainError):
    """请求体解析失败"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
