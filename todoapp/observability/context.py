"""
链路追踪上下文：trace_id 绑定到 structlog 的 contextvars，随协程传播

调用方可以通过 X-Trace-ID 请求头透传 trace_id，缺省时由服务端生成。
"""

import uuid

import structlog

TRACE_HEADER = "X-Trace-ID"


def new_trace_id() -> str:
    return uuid.uuid4().hex


def bind_request_context(incoming: str | None, method: str) -> str:
    """开启一次请求的日志上下文，返回本次使用的 trace_id"""
    trace_id = incoming or new_trace_id()
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(trace_id=trace_id, method=method)
    return trace_id
