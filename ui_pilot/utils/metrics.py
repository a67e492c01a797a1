"""
Prometheus metrics for monitoring
"""

import time
from functools import wraps
from typing import Callable

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest


# Metrics
requests_total = Counter(
    "uipilot_requests_total", "Total requests", ["endpoint", "status"]
)

request_duration_seconds = Histogram(
    "uipilot_request_duration_seconds",
    "Request duration in seconds",
    ["endpoint"],
    buckets=[0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0, 120.0],
)

model_calls_total = Counter(
    "uipilot_model_calls_total", "Total model invocations", ["purpose", "model"]
)

json_retries_total = Counter(
    "uipilot_json_retries_total", "Capture calls retried after unparseable output"
)

errors_total = Counter("uipilot_errors_total", "Total errors", ["endpoint", "error_type"])


def track_request(endpoint: str):
    """Decorator to track request metrics.

    The wrapped handler may return a Response; its status code is recorded,
    otherwise 200 is assumed.
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args, **kwargs):
            start_time = time.time()
            status = "500"

            try:
                result = await func(*args, **kwargs)
                status = str(getattr(result, "status_code", 200))
                return result
            except Exception as e:
                status = str(getattr(e, "status_code", 500))
                errors_total.labels(
                    endpoint=endpoint, error_type=type(e).__name__
                ).inc()
                raise
            finally:
                requests_total.labels(endpoint=endpoint, status=status).inc()
                duration = time.time() - start_time
                request_duration_seconds.labels(endpoint=endpoint).observe(duration)

        return wrapper

    return decorator


def get_metrics() -> bytes:
    """Get current metrics in Prometheus format"""
    return generate_latest()


METRICS_CONTENT_TYPE = CONTENT_TYPE_LATEST
