# 경로 계산 엔진 서비스

import logging
import time
import json
import threading
from typing import Iterable, List, Optional, Sequence, Union

from route_planner.algorithms.alternative_search import find_alternative_routes
from route_planner.algorithms.graph_builder import build_graph
from route_planner.algorithms.path_solver import evaluate_route
from route_planner.core.config import REASON_SEVERITY, settings
from route_planner.core.exceptions import InvalidTopologyException
from route_planner.models.domain import (
    AlternativeReason,
    AlternativeRoute,
    AlternativeRouteOptions,
    Disruption,
    Line,
    Route,
    RouteCalculationResult,
    Station,
)
from route_planner.models.graph import Graph

logger = logging.getLogger(__name__)


class RouteEngine:
    """
    현재 그래프 참조 하나만 보관하는 엔진

    - 질의: 그래프 참조를 지역 변수로 한 번만 읽음 => 재구축 중에도 기존 스냅샷으로 끝까지 계산
    - 재구축: lock으로 직렬화, 검증 통과 후 참조 한 번에 교체
    """

    def __init__(
        self,
        graph: Optional[Graph] = None,
        minutes_per_hop: Optional[float] = None,
        transfer_penalty_minutes: Optional[float] = None,
    ):
        self._graph = graph if graph is not None else Graph.empty()
        self._rebuild_lock = threading.Lock()
        self.minutes_per_hop = (
            minutes_per_hop
            if minutes_per_hop is not None
            else settings.DEFAULT_MINUTES_PER_HOP
        )
        self.transfer_penalty_minutes = (
            transfer_penalty_minutes
            if transfer_penalty_minutes is not None
            else settings.DEFAULT_TRANSFER_PENALTY_MINUTES
        )
        logger.info(f"RouteEngine 초기화 완료: {self._graph!r}")

    @property
    def graph(self) -> Graph:
        return self._graph

    def rebuild_graph(self, lines: Sequence[Line], stations: Sequence[Station]) -> Graph:
        """
        카탈로그로 새 그래프를 만들어 교체

        Raises:
            InvalidTopologyException: 카탈로그 오류 => 기존 그래프 유지
        """
        with self._rebuild_lock:
            start_time = time.time()
            try:
                graph = build_graph(
                    lines,
                    stations,
                    minutes_per_hop=self.minutes_per_hop,
                    transfer_penalty_minutes=self.transfer_penalty_minutes,
                )
            except InvalidTopologyException as e:
                logger.error(f"그래프 재구축 실패, 기존 그래프 유지: {e.message}")
                raise

            self._graph = graph
            logger.info(
                f"✓ 그래프 교체 완료: {graph!r}, "
                f"소요시간={(time.time() - start_time) * 1000:.1f}ms"
            )
            return graph

    def evaluate_route(
        self,
        from_station_id: str,
        to_station_id: str,
        transfer_penalty_minutes: Optional[float] = None,
    ) -> RouteCalculationResult:
        """최단 경로 + 실패 사유"""
        graph = self._graph
        start_time = time.time()

        result = evaluate_route(
            graph, from_station_id, to_station_id, transfer_penalty_minutes
        )

        self._log_route_metrics(
            event="route_calculation",
            response_time_ms=(time.time() - start_time) * 1000,
            from_station_id=from_station_id,
            to_station_id=to_station_id,
            success=result.success,
            error=result.error.value if result.error else None,
            total_minutes=result.route.total_minutes if result.route else None,
        )
        return result

    def calculate_route(
        self,
        from_station_id: str,
        to_station_id: str,
        transfer_penalty_minutes: Optional[float] = None,
    ) -> Optional[Route]:
        """최단 시간 경로, 없거나 잘못된 입력이면 None"""
        return self.evaluate_route(
            from_station_id, to_station_id, transfer_penalty_minutes
        ).route

    def find_alternative_routes(
        self,
        from_station_id: str,
        to_station_id: str,
        blocked_line_ids: Iterable[str],
        reason: Union[AlternativeReason, str],
        options: Optional[AlternativeRouteOptions] = None,
        original_route: Optional[Route] = None,
    ) -> List[AlternativeRoute]:
        """
        장애 노선을 피하는 대체 경로 (최대 options.max_alternatives개)

        원래 경로가 장애 노선을 쓰지 않으면 탐색 없이 []
        """
        graph = self._graph
        start_time = time.time()
        blocked = sorted(set(blocked_line_ids))

        alternatives = find_alternative_routes(
            graph,
            from_station_id,
            to_station_id,
            blocked,
            reason,
            options=options,
            original_route=original_route,
        )

        self._log_route_metrics(
            event="alternative_search",
            response_time_ms=(time.time() - start_time) * 1000,
            from_station_id=from_station_id,
            to_station_id=to_station_id,
            success=bool(alternatives),
            blocked_line_ids=blocked,
            alternatives_found=len(alternatives),
        )
        return alternatives

    def find_alternatives_for_disruptions(
        self,
        from_station_id: str,
        to_station_id: str,
        disruptions: Sequence[Disruption],
        options: Optional[AlternativeRouteOptions] = None,
    ) -> List[AlternativeRoute]:
        """
        노선별 장애 목록으로 대체 경로 탐색

        모든 장애 노선을 회피하고, 사유는 원래 경로에 영향을 주는 장애 중 가장 심각한 것
        """
        if not disruptions:
            return []

        graph = self._graph
        penalty = options.transfer_penalty_minutes if options else None
        original = evaluate_route(graph, from_station_id, to_station_id, penalty).route
        if original is None:
            return []

        reason = _dominant_reason(disruptions, original.line_ids)
        if reason is None:
            logger.debug(
                f"장애 노선이 원래 경로와 무관함: {[d.line_id for d in disruptions]}"
            )
            return []

        return self.find_alternative_routes(
            from_station_id,
            to_station_id,
            [d.line_id for d in disruptions],
            reason,
            options=options,
            original_route=original,
        )

    def station_info(self, station_id: str) -> Optional[dict]:
        """역 정보 + 실제 운행 노선, 없는 역이면 None"""
        graph = self._graph
        station = graph.station(station_id)
        if station is None:
            return None

        line_ids = graph.lines_at(station_id)
        return {
            "id": station.id,
            "name": station.name,
            "name_en": station.name_en,
            "latitude": station.latitude,
            "longitude": station.longitude,
            "line_ids": list(line_ids),
            "is_transfer_station": len(line_ids) > 1,
        }

    def search_stations(self, keyword: str, limit: int = 10) -> List[dict]:
        """역 이름 검색 (정확히 일치 > 앞부분 일치 > 포함)"""
        graph = self._graph
        keyword = keyword.strip().lower()
        if not keyword:
            return []

        results = []
        for station in graph.stations.values():
            name_lower = station.name.lower()
            if keyword not in name_lower:
                continue
            if name_lower == keyword:
                priority = 1
            elif name_lower.startswith(keyword):
                priority = 2
            else:
                priority = 3
            results.append((priority, station))

        results.sort(key=lambda x: (x[0], len(x[1].name), x[1].name, x[1].id))
        return [
            {
                "id": station.id,
                "name": station.name,
                "line_ids": list(graph.lines_at(station.id)),
            }
            for _, station in results[:limit]
        ]

    def _log_route_metrics(
        self,
        event: str,
        response_time_ms: float,
        from_station_id: str,
        to_station_id: str,
        success: bool,
        **extra,
    ) -> None:
        """
        경로 계산 메트릭 로깅 => ELK Stack, CloudWatch 등에서 분석하기
        """
        if not settings.ENABLE_ROUTE_METRICS:
            return

        metrics = {
            "event": event,
            "response_time_ms": round(response_time_ms, 2),
            "from_station_id": from_station_id,
            "to_station_id": to_station_id,
            "success": success,
        }
        metrics.update({key: value for key, value in extra.items() if value is not None})

        logger.info(f"METRICS: {json.dumps(metrics, ensure_ascii=False)}")


def _dominant_reason(
    disruptions: Sequence[Disruption], route_line_ids: Iterable[str]
) -> Optional[AlternativeReason]:
    """원래 경로에 영향을 주는 장애 중 가장 심각한 사유, 없으면 None"""
    used = set(route_line_ids)
    reasons = [
        AlternativeReason(d.reason) for d in disruptions if d.line_id in used
    ]
    if not reasons:
        return None
    return max(reasons, key=lambda reason: REASON_SEVERITY[reason.value])
