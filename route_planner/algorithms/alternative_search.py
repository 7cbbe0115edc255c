"""
장애 노선 회피 대체 경로 탐색

1. 원래 경로 계산 (또는 전달받음) => 장애 노선과 겹치지 않으면 즉시 빈 리스트
2. 장애 노선을 제외한 GraphView 생성
3. k-최단경로를 비용 오름차순으로 꺼내며 조건 검사
4. 장애 노선 사용/원래 경로와 동일/중복/환승 초과 후보 제외
5. 시간 차이 계산 후 정렬, max_alternatives개로 자름
"""

import logging
from typing import Iterable, List, Optional, Union

from route_planner.algorithms.k_shortest_paths import iter_k_shortest_paths
from route_planner.algorithms.path import ExpansionBudget
from route_planner.algorithms.path_solver import calculate_route
from route_planner.algorithms.route_ranker import (
    rank_alternatives,
    to_public_alternative,
    to_public_route,
)
from route_planner.core.config import settings
from route_planner.core.exceptions import SearchBudgetExceeded
from route_planner.models.domain import (
    AlternativeReason,
    AlternativeRoute,
    AlternativeRouteOptions,
    Route,
)
from route_planner.models.graph import Graph

logger = logging.getLogger(__name__)


def find_alternative_routes(
    graph: Graph,
    from_station_id: str,
    to_station_id: str,
    blocked_line_ids: Iterable[str],
    reason: Union[AlternativeReason, str],
    options: Optional[AlternativeRouteOptions] = None,
    original_route: Optional[Route] = None,
) -> List[AlternativeRoute]:
    """
    장애 노선을 피하는 대체 경로 목록

    Args:
        graph: 현재 그래프 스냅샷
        from_station_id / to_station_id: 출발/도착역 ID
        blocked_line_ids: 장애 노선 ID
        reason: 대체 경로 사유 (DELAY / SUSPENSION / CONGESTION)
        options: 개수, 시간 차이 상한, 환승 상한 등
        original_route: 이미 계산된 원래 경로 (없으면 여기서 계산)

    Returns:
        시간 차이 -> 환승 횟수 -> 노선 순서로 정렬된 AlternativeRoute 리스트
        원래 경로가 없거나, 장애와 무관하거나, 대체 경로가 없으면 []
    """
    options = options or AlternativeRouteOptions()
    reason = AlternativeReason(reason)
    blocked = frozenset(blocked_line_ids)

    if options.max_alternatives <= 0:
        return []

    if original_route is None:
        original_route = calculate_route(
            graph,
            from_station_id,
            to_station_id,
            transfer_penalty_minutes=options.transfer_penalty_minutes,
        )
    if original_route is None:
        logger.info(f"원래 경로 없음 => 대체 경로 탐색 생략: {from_station_id} → {to_station_id}")
        return []

    affected = [line_id for line_id in original_route.line_ids if line_id in blocked]
    if not affected:
        logger.debug(f"장애 노선 {sorted(blocked)}이 원래 경로와 무관함")
        return []

    view = graph.without_lines(blocked)
    max_expansions = (
        options.max_expansions
        if options.max_expansions is not None
        else settings.ALTERNATIVE_SEARCH_MAX_EXPANSIONS
    )
    budget = ExpansionBudget(max_expansions)
    candidate_limit = max(settings.ALTERNATIVE_CANDIDATE_LIMIT, options.max_alternatives)

    alternatives: List[AlternativeRoute] = []
    seen_signatures = {original_route.signature}
    examined = 0

    try:
        for path in iter_k_shortest_paths(
            view,
            from_station_id,
            to_station_id,
            transfer_penalty_minutes=options.transfer_penalty_minutes,
            budget=budget,
        ):
            examined += 1
            route = to_public_route(graph, path)
            alternative = to_public_alternative(route, original_route, reason, blocked)

            # 후보는 비용 오름차순 => 이후 후보도 모두 상한 초과
            if (
                options.max_time_difference_minutes is not None
                and alternative.time_difference_minutes > options.max_time_difference_minutes
            ):
                break

            if (
                path.is_simple
                and not blocked.intersection(route.line_ids)
                and route.signature not in seen_signatures
                and (options.max_transfers is None or route.transfer_count <= options.max_transfers)
            ):
                seen_signatures.add(route.signature)
                alternatives.append(alternative)

            if len(alternatives) >= options.max_alternatives or examined >= candidate_limit:
                break
    except SearchBudgetExceeded as e:
        logger.warning(
            f"⚠️ 대체 경로 탐색 예산 초과 ({from_station_id} → {to_station_id}): "
            f"{e.message}, 후보 {len(alternatives)}개 반환"
        )

    ranked = rank_alternatives(alternatives, options.max_alternatives)
    logger.info(
        f"대체 경로 {len(ranked)}개: {from_station_id} → {to_station_id}, "
        f"장애 노선 {affected}, 확장 노드 {budget.used}"
    )
    return ranked
