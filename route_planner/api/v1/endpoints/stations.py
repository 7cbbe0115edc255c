"""
역 검색 / 노선 조회 REST API 엔드포인트
"""

from fastapi import APIRouter, Depends, Query, HTTPException
import logging

from route_planner.api.deps import get_engine
from route_planner.models.responses import StationInfoResponse, StationSearchResponse
from route_planner.services.route_display import get_line_color
from route_planner.services.route_service import RouteEngine

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/search", response_model=StationSearchResponse)
def search_stations(
    q: str = Query(..., description="검색 키워드", min_length=1, max_length=50),
    limit: int = Query(10, ge=1, le=50, description="최대 결과 수"),
    engine: RouteEngine = Depends(get_engine),
):
    """
    역 검색 (자동완성용)

    - **q**: 검색 키워드 (1-50자)
    - **limit**: 최대 결과 수 (1-50, 기본값 10)

    Example:
        GET /v1/stations/search?q=강남&limit=5
    """
    logger.info(f"역 검색: keyword={q}, limit={limit}")
    results = engine.search_stations(q, limit)

    return {
        "keyword": q,
        "count": len(results),
        "results": results,
    }


@router.get("/lines")
def get_all_lines(engine: RouteEngine = Depends(get_engine)):
    """
    전체 노선 목록 조회

    Returns:
        {
            "lines": [{"id": "2", "name": "2호선", "color": "#00A84D", "station_ids": [...]}],
            "total_lines": 4
        }
    """
    graph = engine.graph
    lines = [
        {
            "id": line.id,
            "name": line.name,
            "color": get_line_color(graph, line.id),
            "is_circular": line.is_circular,
            "station_ids": list(line.station_ids),
        }
        for line in sorted(graph.lines.values(), key=lambda line: line.id)
    ]
    return {
        "lines": lines,
        "total_lines": len(lines),
    }


@router.get("/{station_id}", response_model=StationInfoResponse)
def get_station(station_id: str, engine: RouteEngine = Depends(get_engine)):
    """
    역 정보 조회 (운행 노선 포함)

    Example:
        GET /v1/stations/0222
    """
    info = engine.station_info(station_id)
    if info is None:
        raise HTTPException(
            status_code=404,
            detail={"message": f"역을 찾을 수 없습니다: {station_id}", "code": "INVALID_STATION"},
        )
    return info
