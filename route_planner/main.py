"""
Subway Route Planner - FastAPI Application

최단 경로 + 장애 노선 회피 대체 경로 API
"""

import logging
import time
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from route_planner import __version__
from route_planner.api.v1.router import api_router
from route_planner.core.config import settings
from route_planner.middleware.performance_monitoring import (
    PerformanceMonitoringMiddleware,
    get_metrics_collector,
)
from route_planner.services.route_factory import get_engine_info, get_route_engine

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    시작 시 카탈로그를 읽어 그래프를 만든다

    카탈로그 오류면 서버를 띄우지 않음
    """
    try:
        engine = get_route_engine()
        logger.info(f"🚇 Route Planner 준비 완료: {engine.graph!r}")
    except Exception as e:
        logger.error(f"❌ 그래프 초기화 실패 ({settings.CATALOG_PATH}): {e}", exc_info=True)
        raise

    yield

    logger.info("✓ Route Planner 종료")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="""
    ## 지하철 경로 계산

    - 🚇 최단 시간 경로 (환승 페널티 반영)
    - 🔄 장애 노선 회피 대체 경로
    - 🚉 역 검색 / 노선 목록

    대체 경로 사유: **DELAY**(지연), **SUSPENSION**(운행 중단), **CONGESTION**(혼잡)
    """,
    lifespan=lifespan,
)

# allow_credentials=True => allow_origins에 "*" 불가
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

if settings.ENABLE_PERFORMANCE_MONITORING:
    app.add_middleware(PerformanceMonitoringMiddleware)

app.include_router(api_router, prefix="/v1")


@app.get("/")
async def root():
    return {
        "service": settings.PROJECT_NAME,
        "version": __version__,
        "endpoints": {
            "calculate": "/v1/routes/calculate",
            "alternatives": "/v1/routes/alternatives",
            "stations": "/v1/stations/search",
        },
        "docs": "/docs",
    }


@app.get("/health")
async def health_check():
    """
    그래프 적재 여부 + 통계

    역이 하나도 없으면 503
    """
    try:
        engine_info = get_engine_info()
        healthy = engine_info["station_count"] > 0
    except Exception as e:
        logger.error(f"헬스 체크 실패: {e}")
        engine_info = {"error": str(e)}
        healthy = False

    content = {
        "status": "healthy" if healthy else "unhealthy",
        "timestamp": time.time(),
        "engine": engine_info,
    }
    if settings.ENABLE_PERFORMANCE_MONITORING:
        content["performance"] = get_metrics_collector().get_summary()

    return JSONResponse(status_code=200 if healthy else 503, content=content)


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    logger.error(f"처리되지 않은 오류: {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "message": "서버 내부 오류가 발생했습니다",
            "code": "INTERNAL_ERROR",
            "detail": str(exc) if settings.DEBUG else None,
        },
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "route_planner.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info",
    )
