"""
请求日志中间件

每个请求一条结束日志：路由模板、目标 todo_id、状态码、耗时。
5xx 记 error，4xx 记 warning，其余 info；/metrics 抓取不记。
"""

import time

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from todoapp.observability.context import TRACE_HEADER, bind_request_context
from todoapp.observability.metrics_middleware import route_template

log = structlog.get_logger()


class RequestLoggerMiddleware(BaseHTTPMiddleware):
    """请求日志 + trace_id 注入（响应头带回 X-Trace-ID / X-Duration-Ms）"""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path.startswith("/metrics"):
            return await call_next(request)

        trace_id = bind_request_context(request.headers.get(TRACE_HEADER), request.method)
        start = time.monotonic()

        response = await call_next(request)

        duration_ms = int((time.monotonic() - start) * 1000)
        # 路由匹配后 scope 里才有 route / path_params
        fields = {
            "route": route_template(request),
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        }
        todo_id = request.scope.get("path_params", {}).get("todo_id")
        if todo_id is not None:
            fields["todo_id"] = todo_id

        if response.status_code >= 500:
            log.error("请求失败", **fields)
        elif response.status_code >= 400:
            log.warning("请求被拒绝", **fields)
        else:
            log.info("请求完成", **fields)

        response.headers[TRACE_HEADER] = trace_id
        response.headers["X-Duration-Ms"] = str(duration_ms)
        return response
