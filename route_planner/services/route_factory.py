# 경로 계산 엔진 팩토리

import logging
from functools import lru_cache

from route_planner.core.config import settings
from route_planner.db.catalog import load_catalog
from route_planner.services.route_service import RouteEngine

logger = logging.getLogger(__name__)


@lru_cache()
def get_route_engine() -> RouteEngine:
    """
    프로세스 전역 RouteEngine 반환 (싱글톤)

    최초 호출 시 CATALOG_PATH의 카탈로그로 그래프 구축
    카탈로그가 잘못된 경우 InvalidTopologyException이 그대로 전파됨 => 서버 시작 실패
    """
    engine = RouteEngine()
    lines, stations = load_catalog(settings.CATALOG_PATH)
    engine.rebuild_graph(lines, stations)
    logger.info("✓ RouteEngine 초기화 완료")
    return engine


def get_engine_info() -> dict:
    """
    현재 그래프 정보 반환

    Returns:
        dict: 엔진/그래프 정보
    """
    engine = get_route_engine()
    stats = engine.graph.stats()

    return {
        "engine_class": engine.__class__.__name__,
        "catalog_path": settings.CATALOG_PATH,
        "minutes_per_hop": engine.minutes_per_hop,
        "transfer_penalty_minutes": engine.transfer_penalty_minutes,
        "station_count": stats.station_count,
        "line_count": stats.line_count,
        "ride_edge_count": stats.ride_edge_count,
        "transfer_edge_count": stats.transfer_edge_count,
    }
