"""
Prometheus 指标定义

所有指标统一在此文件定义，中间件、事务执行器和连接闸门按需引用。
"""

from prometheus_client import Counter, Histogram

# ── 请求级指标 ──

REQUEST_TOTAL = Counter(
    "todoapp_request_total",
    "HTTP 请求总数",
    ["method", "endpoint", "status_code"],
)

REQUEST_DURATION = Histogram(
    "todoapp_request_duration_ms",
    "HTTP 请求耗时（毫秒）",
    ["method", "endpoint"],
    buckets=[5, 10, 25, 50, 100, 200, 500, 1000, 2000, 5000],
)

# ── 数据库指标 ──

CONNECTION_ACQUIRE_DURATION = Histogram(
    "todoapp_connection_acquire_ms",
    "连接闸门排队 + 取连接耗时（毫秒）",
    buckets=[1, 5, 10, 25, 50, 100, 500, 1000, 5000, 30000],
)

TRANSACTION_TOTAL = Counter(
    "todoapp_transaction_total",
    "事务总数",
    ["isolation", "outcome"],  # outcome: commit/rollback
)

TRANSACTION_DURATION = Histogram(
    "todoapp_transaction_duration_ms",
    "事务耗时（毫秒，不含取连接）",
    ["isolation"],
    buckets=[1, 5, 10, 25, 50, 100, 200, 500, 1000, 5000],
)

# ── 错误指标 ──

ERROR_TOTAL = Counter(
    "todoapp_error_total",
    "未预期错误总数",
    ["error_type"],  # 异常类名，如 DBAPIError / OperationalError
)
