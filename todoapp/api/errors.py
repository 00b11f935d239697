"""
HTTP 错误映射：领域错误 / 请求解析错误 / 未预期错误 → 状态码 + 纯文本消息

- TodoNotFound           → 404 Todo not found
- RequestDecodingError   → 400 <解析失败原因>
- ResourceExhausted      → 503 Service unavailable
- SQLAlchemyError 及其他 → 500 Internal error（记录堆栈 + 错误计数）
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from sqlalchemy.exc import SQLAlchemyError

from todoapp.observability.metrics import ERROR_TOTAL
from todoapp.todo.errors import (
    DomainError,
    RequestDecodingError,
    ResourceExhausted,
    TodoNotFound,
)

log = structlog.get_logger()


@dataclass(frozen=True)
class HttpError:
    """对外暴露的错误：状态码 + 消息"""

    status_code: int
    message: str

    @classmethod
    def not_found(cls, message: str = "Todo not found") -> "HttpError":
        return cls(404, message)

    @classmethod
    def bad_request(cls, message: str) -> "HttpError":
        return cls(400, message)

    @classmethod
    def service_unavailable(cls) -> "HttpError":
        return cls(503, "Service unavailable")

    @classmethod
    def internal_server_error(cls) -> "HttpError":
        return cls(500, "Internal error")

    def to_response(self) -> PlainTextResponse:
        return PlainTextResponse(self.message, status_code=self.status_code)


def to_http_error(error: DomainError) -> HttpError:
    if isinstance(error, TodoNotFound):
        return HttpError.not_found()
    if isinstance(error, RequestDecodingError):
        return HttpError.bad_request(error.message)
    if isinstance(error, ResourceExhausted):
        return HttpError.service_unavailable()
    return HttpError.internal_server_error()


def validation_message(errors: Sequence[Mapping]) -> str:
    """把 pydantic 校验错误压成一行可读文本"""
    parts = []
    for err in errors:
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "Can not receive request"


async def _handle_validation_error(request: Request, exc: RequestValidationError) -> PlainTextResponse:
    decoding_error = RequestDecodingError(validation_message(exc.errors()))
    log.info("请求解析失败", path=request.url.path, error=decoding_error.message)
    return to_http_error(decoding_error).to_response()


async def _handle_domain_error(request: Request, exc: DomainError) -> PlainTextResponse:
    http_error = to_http_error(exc)
    if http_error.status_code >= 500:
        ERROR_TOTAL.labels(error_type=type(exc).__name__).inc()
        log.error("领域错误", path=request.url.path, error=str(exc))
    return http_error.to_response()


async def _handle_unexpected_error(request: Request, exc: Exception) -> PlainTextResponse:
    ERROR_TOTAL.labels(error_type=type(exc).__name__).inc()
    log.error("未预期错误", path=request.url.path, error=str(exc), exc_info=exc)
    return HttpError.internal_server_error().to_response()


def install_error_handlers(app: FastAPI) -> None:
    """注册全局异常处理器"""
    app.add_exception_handler(RequestValidationError, _handle_validation_error)
    app.add_exception_handler(DomainError, _handle_domain_error)
    # 数据库异常（含 SERIALIZABLE 冲突）在事务回滚后到达这里
    app.add_exception_handler(SQLAlchemyError, _handle_unexpected_error)
    app.add_exception_handler(Exception, _handle_unexpected_error)
