"""
내부 관리용 엔드포인트 (카탈로그 동기화 => 그래프 재구축)
"""

from fastapi import APIRouter, Depends, HTTPException
import logging

from route_planner.api.deps import get_engine, require_admin_token
from route_planner.core.exceptions import InvalidTopologyException
from route_planner.models.requests import GraphRebuildRequest
from route_planner.models.responses import GraphStatsResponse
from route_planner.services.route_service import RouteEngine

router = APIRouter(dependencies=[Depends(require_admin_token)])
logger = logging.getLogger(__name__)


@router.post("/graph/rebuild", response_model=GraphStatsResponse)
def rebuild_graph(
    request: GraphRebuildRequest,
    engine: RouteEngine = Depends(get_engine),
):
    """
    전달받은 카탈로그로 그래프 재구축

    검증 실패 시 422 + 문제 목록, 기존 그래프는 계속 사용됨
    """
    try:
        graph = engine.rebuild_graph(
            [line.to_domain() for line in request.lines],
            [station.to_domain() for station in request.stations],
        )
        return GraphStatsResponse.from_domain(graph.stats())

    except InvalidTopologyException as e:
        logger.error(f"그래프 재구축 거부: {e.message}")
        raise HTTPException(
            status_code=422,
            detail={"message": e.message, "code": e.code, "problems": e.problems},
        )
