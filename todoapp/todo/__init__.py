"""
Todo 模块：有序 Todo 列表的领域模型、存储原语（store）与用例（service）

包级只导出值对象与错误类型，db 层会反向引用 errors，避免循环导入。
"""

from todoapp.todo.errors import DomainError, RequestDecodingError, ResourceExhausted, TodoNotFound
from todoapp.todo.schemas import Todo

__all__ = ["DomainError", "RequestDecodingError", "ResourceExhausted", "Todo", "TodoNotFound"]
