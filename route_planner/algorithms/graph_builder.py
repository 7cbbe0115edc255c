"""
평면 카탈로그(노선/역 목록) => 그래프 모델 변환

카탈로그 일관성을 검증하고, 문제가 하나라도 있으면 INVALID_TOPOLOGY로 실패
이전 그래프는 어떤 경우에도 건드리지 않음
"""

import logging
from itertools import combinations
from typing import Dict, List, Optional, Sequence, Set

from route_planner.core.config import settings
from route_planner.core.exceptions import InvalidTopologyException
from route_planner.models.domain import Line, RideEdge, Station, TransferEdge
from route_planner.models.graph import Graph

logger = logging.getLogger(__name__)


def _validate_catalog(
    lines: Sequence[Line],
    stations: Sequence[Station],
    minutes_per_hop: float,
    transfer_penalty_minutes: float,
) -> List[str]:
    problems = []

    if minutes_per_hop <= 0:
        problems.append(f"기본 구간 소요시간은 0보다 커야 합니다: {minutes_per_hop}")
    if transfer_penalty_minutes < 0:
        problems.append(f"환승 페널티는 음수일 수 없습니다: {transfer_penalty_minutes}")

    station_ids: Set[str] = set()
    for station in stations:
        if station.id in station_ids:
            problems.append(f"중복된 역 ID: {station.id}")
        station_ids.add(station.id)

    line_ids: Set[str] = set()
    for line in lines:
        if line.id in line_ids:
            problems.append(f"중복된 노선 ID: {line.id}")
        line_ids.add(line.id)

        if len(line.station_ids) < 2:
            problems.append(f"{line.id} 노선의 역이 2개 미만입니다")

        seen_on_line: Set[str] = set()
        for station_id in line.station_ids:
            if station_id not in station_ids:
                problems.append(f"{line.id} 노선이 알 수 없는 역을 참조합니다: {station_id}")
            if station_id in seen_on_line:
                problems.append(f"{line.id} 노선에 같은 역이 두 번 등장합니다: {station_id}")
            seen_on_line.add(station_id)

        if line.travel_times is not None:
            expected = _hop_count(line)
            if len(line.travel_times) != expected:
                problems.append(
                    f"{line.id} 노선의 구간 소요시간 개수가 맞지 않습니다: "
                    f"{len(line.travel_times)} != {expected}"
                )
            if any(minutes <= 0 for minutes in line.travel_times):
                problems.append(f"{line.id} 노선에 0 이하의 구간 소요시간이 있습니다")

    # 역이 주장하는 소속 노선이 카탈로그에 없는 경우
    for station in stations:
        for line_id in station.line_ids:
            if line_id not in line_ids:
                problems.append(f"{station.id} 역이 알 수 없는 노선에 소속되어 있습니다: {line_id}")

    return problems


def _hop_count(line: Line) -> int:
    if _closes_loop(line):
        return len(line.station_ids)
    return max(len(line.station_ids) - 1, 0)


def _closes_loop(line: Line) -> bool:
    # 역 3개 이상일 때만 순환 연결 => 2개 역이면 같은 간선이 중복됨
    return line.is_circular and len(line.station_ids) >= 3


def _build_ride_edges(line: Line, minutes_per_hop: float) -> List[RideEdge]:
    edges = []
    ids = line.station_ids
    pairs = list(zip(ids, ids[1:]))
    if _closes_loop(line):
        pairs.append((ids[-1], ids[0]))

    for index, (station_a, station_b) in enumerate(pairs):
        minutes = (
            line.travel_times[index] if line.travel_times is not None else minutes_per_hop
        )
        edges.append(RideEdge(station_a, station_b, line.id, float(minutes)))
    return edges


def build_graph(
    lines: Sequence[Line],
    stations: Sequence[Station],
    minutes_per_hop: Optional[float] = None,
    transfer_penalty_minutes: Optional[float] = None,
) -> Graph:
    """
    카탈로그로부터 새 Graph 생성

    Args:
        lines: 노선 목록 (역 순서 포함)
        stations: 역 목록
        minutes_per_hop: 구간별 시간이 없을 때 쓰는 역 간 소요시간(분)
        transfer_penalty_minutes: 환승 간선 가중치(분)

    Raises:
        InvalidTopologyException: 카탈로그가 내부적으로 모순될 때
    """
    if minutes_per_hop is None:
        minutes_per_hop = settings.DEFAULT_MINUTES_PER_HOP
    if transfer_penalty_minutes is None:
        transfer_penalty_minutes = settings.DEFAULT_TRANSFER_PENALTY_MINUTES

    problems = _validate_catalog(lines, stations, minutes_per_hop, transfer_penalty_minutes)
    if problems:
        logger.error(f"그래프 구축 실패: 문제 {len(problems)}건 - {problems[:5]}")
        raise InvalidTopologyException(
            f"노선 카탈로그가 유효하지 않습니다 ({len(problems)}건)", problems=problems
        )

    stations_by_id: Dict[str, Station] = {station.id: station for station in stations}
    lines_by_id: Dict[str, Line] = {line.id: line for line in lines}

    # 1. 승차 간선
    ride_edges: List[RideEdge] = []
    membership: Dict[str, List[str]] = {}
    for line in lines:
        ride_edges.extend(_build_ride_edges(line, minutes_per_hop))
        for station_id in line.station_ids:
            membership.setdefault(station_id, []).append(line.id)

    # 노선 순서가 기준, 역이 주장만 하는 소속은 무시
    for station in stations:
        claimed_only = set(station.line_ids) - set(membership.get(station.id, ()))
        if claimed_only:
            logger.warning(
                f"{station.id} 역의 소속 노선 {sorted(claimed_only)}이 노선 순서에 없어 무시합니다"
            )

    # 2. 환승 간선 => 2개 이상 노선이 지나는 역, 노선 쌍마다 하나
    transfer_edges: List[TransferEdge] = []
    for station_id, station_lines in membership.items():
        if len(station_lines) < 2:
            continue
        for line_a, line_b in combinations(sorted(station_lines), 2):
            transfer_edges.append(
                TransferEdge(station_id, line_a, line_b, float(transfer_penalty_minutes))
            )

    graph = Graph(stations_by_id, lines_by_id, ride_edges, transfer_edges)
    logger.info(
        f"✓ 그래프 구축 완료: 역 {len(stations_by_id)}개, 노선 {len(lines_by_id)}개, "
        f"승차 간선 {len(ride_edges)}개, 환승 간선 {len(transfer_edges)}개"
    )
    return graph
