from prometheus_client import Counter, Histogram, Gauge, Info, REGISTRY
from prometheus_client.exposition import generate_latest, CONTENT_TYPE_LATEST
from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
import time
from app.core.config import settings

# System Info
system_info = Info("app_info", "Application information")
system_info.info({
    "version": settings.VERSION,
    "environment": settings.ENVIRONMENT
})

HTTP_REQUESTS_TOTAL = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'path', 'status']
)

HTTP_REQUEST_DURATION = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'path']
)

HTTP_REQUESTS_IN_PROGRESS = Gauge(
    'http_requests_in_progress',
    'Number of HTTP requests in progress',
    ['method', 'path']
)

# Database Metrics
DB_QUERIES_TOTAL = Counter(
    'db_queries_total',
    'Total database write operations',
    ['operation']
)

db_query_duration_seconds = Histogram(
    "db_query_duration_seconds",
    "Database operation duration in seconds",
    ["operation"],
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5]
)

# Scheduling Metrics
ASSIGNMENTS_CREATED_TOTAL = Counter(
    'assignments_created_total',
    'Total assignment rows created',
    ['source']  # direct, template
)

TEMPLATE_USAGE_UPDATE_FAILURES_TOTAL = Counter(
    'template_usage_update_failures_total',
    'Template usage counter updates that failed after assignments were saved'
)

class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware for collecting request metrics."""

    async def dispatch(self, request: Request, call_next) -> Response:
        start_time = time.time()
        method = request.method
        path = request.url.path

        HTTP_REQUESTS_IN_PROGRESS.labels(method=method, path=path).inc()

        try:
            response = await call_next(request)
            HTTP_REQUEST_DURATION.labels(method=method, path=path).observe(time.time() - start_time)
            HTTP_REQUESTS_TOTAL.labels(
                method=method,
                path=path,
                status=str(response.status_code)
            ).inc()
            return response
        except Exception:
            HTTP_REQUESTS_TOTAL.labels(method=method, path=path, status="500").inc()
            raise
        finally:
            HTTP_REQUESTS_IN_PROGRESS.labels(method=method, path=path).dec()

def record_db_operation(operation: str, duration: float) -> None:
    """Record database operation metrics."""
    DB_QUERIES_TOTAL.labels(operation=operation).inc()
    db_query_duration_seconds.labels(operation=operation).observe(duration)

def record_assignments_created(source: str, count: int) -> None:
    """Record how many assignment rows a request produced."""
    if count > 0:
        ASSIGNMENTS_CREATED_TOTAL.labels(source=source).inc(count)

def record_template_usage_failure() -> None:
    TEMPLATE_USAGE_UPDATE_FAILURES_TOTAL.inc()

def setup_metrics(app: FastAPI) -> None:
    """Configure metrics collection for the application."""
    app.add_middleware(MetricsMiddleware)

    @app.get("/metrics", include_in_schema=False)
    async def metrics():
        return Response(
            generate_latest(REGISTRY),
            media_type=CONTENT_TYPE_LATEST
        )
