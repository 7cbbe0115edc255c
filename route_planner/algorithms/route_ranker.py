"""
내부 탐색 경로 -> 공개용 Route / AlternativeRoute 변환, 정렬 및 개수 제한

탐색 노드 표현 (station_id, line_id)을 외부에 노출하지 않기 위한 계층
알고리즘적인 판단은 하지 않음 => 구간 순서 변경/삭제 없음
"""

from typing import Iterable, List, Optional, Sequence, Tuple

from route_planner.algorithms.path import PathResult
from route_planner.core.config import LINE_NAMES
from route_planner.models.domain import (
    AlternativeReason,
    AlternativeRoute,
    Route,
    Segment,
)


def _station_name(graph, station_id: str) -> str:
    station = graph.station(station_id)
    return station.name if station else station_id


def _line_name(graph, line_id: str) -> str:
    line = graph.line(line_id)
    if line and line.name:
        return line.name
    return LINE_NAMES.get(line_id, f"{line_id}호선")


def _make_segment(graph, line_id: str, station_ids: List[str], minutes: float, is_transfer: bool) -> Segment:
    return Segment(
        from_station_id=station_ids[0],
        from_station_name=_station_name(graph, station_ids[0]),
        to_station_id=station_ids[-1],
        to_station_name=_station_name(graph, station_ids[-1]),
        line_id=line_id,
        line_name=_line_name(graph, line_id),
        is_transfer=is_transfer,
        duration_minutes=round(minutes, 6),
        station_ids=tuple(station_ids),
    )


def to_public_route(graph, path: PathResult) -> Route:
    """
    같은 노선의 연속 승차 구간을 하나의 Segment로 병합

    환승 간선 직후의 Segment에만 is_transfer=True
    Segment.duration_minutes에는 환승 페널티가 포함되지 않음 (Route.transfer_minutes에 별도 합산)
    """
    first_station, run_line = path.nodes[0]
    run_stations = [first_station]
    run_minutes = 0.0
    run_after_transfer = False

    segments: List[Segment] = []
    transfer_minutes = 0.0

    for step in path.steps:
        if step.is_transfer:
            if len(run_stations) > 1:
                segments.append(
                    _make_segment(graph, run_line, run_stations, run_minutes, run_after_transfer)
                )
            transfer_minutes += step.minutes
            run_line = step.to_node[1]
            run_stations = [step.to_node[0]]
            run_minutes = 0.0
            run_after_transfer = True
        else:
            run_stations.append(step.to_node[0])
            run_minutes += step.minutes

    if len(run_stations) > 1:
        segments.append(
            _make_segment(graph, run_line, run_stations, run_minutes, run_after_transfer)
        )

    ride_minutes = sum(segment.duration_minutes for segment in segments)
    return Route(
        from_station_id=path.nodes[0][0],
        to_station_id=path.nodes[-1][0],
        segments=tuple(segments),
        ride_minutes=round(ride_minutes, 6),
        transfer_minutes=round(transfer_minutes, 6),
    )


def calculate_confidence(time_difference_minutes: float, transfer_count: int) -> float:
    """시간 차이와 환승 횟수 기반 신뢰도 (0-100)"""
    return max(0.0, 100.0 - abs(time_difference_minutes) * 5 - transfer_count * 10)


def to_public_alternative(
    route: Route,
    original_route: Route,
    reason: AlternativeReason,
    blocked_line_ids: Iterable[str],
) -> AlternativeRoute:
    blocked = frozenset(blocked_line_ids)
    # 필터링된 그래프는 원래 그래프의 부분집합 => 음수가 될 수 없음
    time_difference = max(0.0, round(route.total_minutes - original_route.total_minutes, 4))
    return AlternativeRoute(
        route=route,
        original_route=original_route,
        time_difference_minutes=time_difference,
        reason=AlternativeReason(reason),
        avoided_line_ids=tuple(sorted(blocked)),
        affected_line_ids=tuple(
            line_id for line_id in original_route.line_ids if line_id in blocked
        ),
        confidence=calculate_confidence(time_difference, route.transfer_count),
    )


def alternative_sort_key(alternative: AlternativeRoute) -> Tuple[float, int, Tuple[str, ...]]:
    return (
        alternative.time_difference_minutes,
        alternative.route.transfer_count,
        alternative.route.line_sequence,
    )


def rank_alternatives(
    alternatives: Sequence[AlternativeRoute], limit: Optional[int] = None
) -> List[AlternativeRoute]:
    """시간 차이 -> 환승 횟수 -> 노선 순서 오름차순, 상위 limit개"""
    ranked = sorted(alternatives, key=alternative_sort_key)
    if limit is not None:
        ranked = ranked[: max(limit, 0)]
    return ranked
