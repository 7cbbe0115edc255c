# 요청 처리 시간 측정 미들웨어

import time
import logging
import json
import threading
from collections import defaultdict
from typing import Callable, Dict, Optional
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from route_planner.core.config import settings

logger = logging.getLogger(__name__)

PROCESS_TIME_HEADER = "X-Process-Time-Ms"


class PerformanceMonitoringMiddleware(BaseHTTPMiddleware):
    """
    경로 계산 API 처리 시간 측정

    - 응답 헤더에 X-Process-Time-Ms 추가
    - 요청마다 PERFORMANCE JSON 한 줄 로깅
    - SLOW_REQUEST_THRESHOLD_MS 초과 시 경고
    """

    def __init__(self, app: ASGIApp, slow_threshold_ms: Optional[float] = None):
        super().__init__(app)
        self.slow_threshold_ms = (
            slow_threshold_ms
            if slow_threshold_ms is not None
            else settings.SLOW_REQUEST_THRESHOLD_MS
        )

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        started = time.perf_counter()
        endpoint = f"{request.method} {request.url.path}"

        try:
            response = await call_next(request)
        except Exception:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.error(f"요청 실패: {endpoint}, {elapsed_ms:.2f}ms", exc_info=True)
            get_metrics_collector().record(endpoint, 500, elapsed_ms, is_slow=False)
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers[PROCESS_TIME_HEADER] = f"{elapsed_ms:.2f}"

        is_slow = elapsed_ms > self.slow_threshold_ms
        if is_slow:
            logger.warning(
                f"⚠️ 느린 요청: {endpoint}, {elapsed_ms:.2f}ms "
                f"(기준 {self.slow_threshold_ms}ms)"
            )

        logger.info(
            "PERFORMANCE: "
            + json.dumps(
                {
                    "event": "api_request",
                    "endpoint": endpoint,
                    "status_code": response.status_code,
                    "elapsed_ms": round(elapsed_ms, 2),
                    "slow": is_slow,
                },
                ensure_ascii=False,
            )
        )
        get_metrics_collector().record(endpoint, response.status_code, elapsed_ms, is_slow)
        return response


class _EndpointStats:
    __slots__ = ("count", "total_ms", "max_ms")

    def __init__(self):
        self.count = 0
        self.total_ms = 0.0
        self.max_ms = 0.0


class MetricsCollector:
    """
    엔드포인트별 처리 시간 누적 (메모리)

    /health 응답에 포함
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._endpoints: Dict[str, _EndpointStats] = defaultdict(_EndpointStats)
        self.slow_count = 0
        self.client_error_count = 0
        self.server_error_count = 0

    def record(self, endpoint: str, status_code: int, elapsed_ms: float, is_slow: bool):
        with self._lock:
            stats = self._endpoints[endpoint]
            stats.count += 1
            stats.total_ms += elapsed_ms
            stats.max_ms = max(stats.max_ms, elapsed_ms)

            if is_slow:
                self.slow_count += 1
            if status_code >= 500:
                self.server_error_count += 1
            elif status_code >= 400:
                self.client_error_count += 1

    def reset(self):
        with self._lock:
            self._endpoints.clear()
            self.slow_count = 0
            self.client_error_count = 0
            self.server_error_count = 0

    def get_summary(self) -> dict:
        with self._lock:
            total = sum(stats.count for stats in self._endpoints.values())
            return {
                "total_requests": total,
                "slow_requests": self.slow_count,
                "client_errors": self.client_error_count,
                "server_errors": self.server_error_count,
                "endpoints": {
                    endpoint: {
                        "count": stats.count,
                        "avg_ms": round(stats.total_ms / stats.count, 2),
                        "max_ms": round(stats.max_ms, 2),
                    }
                    for endpoint, stats in sorted(self._endpoints.items())
                },
            }


_metrics_collector = MetricsCollector()


def get_metrics_collector() -> MetricsCollector:
    return _metrics_collector
