# 최단 시간 경로 탐색 (Dijkstra, 환승 페널티 반영)

import heapq
import logging
from itertools import count
from typing import Dict, FrozenSet, Iterable, List, Optional, Set, Tuple

from route_planner.algorithms.path import (
    TIME_PRECISION,
    ExpansionBudget,
    PathResult,
    PathStep,
    build_path,
)
from route_planner.algorithms.route_ranker import to_public_route
from route_planner.models.domain import Route, RouteCalculationResult, RouteError
from route_planner.models.graph import Graph, Node

logger = logging.getLogger(__name__)

# 가상 출발 노드 => (SOURCE, (출발역, 노선)) 간선 금지에 사용
SOURCE: Node = ("__source__", "")

# (노드, 누적 시간, 누적 환승 횟수, 노선 순서)
StartLabel = Tuple[Node, float, int, Tuple[str, ...]]
LabelKey = Tuple[float, int, Tuple[str, ...]]


def source_labels(
    network, origin: str, banned_arcs: FrozenSet[Tuple[Node, Node]] = frozenset()
) -> List[StartLabel]:
    """가상 출발 노드 -> 출발역의 모든 (역, 노선) 노드, 비용 0"""
    labels = []
    for line_id in network.lines_at(origin):
        node = (origin, line_id)
        if (SOURCE, node) in banned_arcs:
            continue
        labels.append((node, 0.0, 0, (line_id,)))
    return labels


def find_shortest_path(
    network,
    origin: str,
    destination: str,
    transfer_penalty_minutes: Optional[float] = None,
    start_labels: Optional[Iterable[StartLabel]] = None,
    banned_nodes: FrozenSet[Node] = frozenset(),
    banned_stations: FrozenSet[str] = frozenset(),
    banned_arcs: FrozenSet[Tuple[Node, Node]] = frozenset(),
    budget: Optional[ExpansionBudget] = None,
    allow_start_transfer: bool = True,
) -> Optional[PathResult]:
    """
    (역, 노선) 노드 위 Dijkstra

    Args:
        network: Graph 또는 GraphView (lines_at / arcs_from 제공)
        origin: 출발역 ID
        destination: 도착역 ID => 어떤 노선으로든 도착하면 종료 (가상 도착 노드)
        transfer_penalty_minutes: 질의별 환승 페널티, None이면 간선 가중치 사용
        start_labels: 시작 라벨 (None => 가상 출발 노드에서 시작)
        banned_nodes / banned_stations / banned_arcs: k-최단경로의 spur 탐색용 제외 목록
        budget: 노드 확장 예산, 초과 시 SearchBudgetExceeded
        allow_start_transfer: 시작 노드에서 바로 환승 허용 여부
            (spur 직전 단계가 환승이면 False => 연속 환승 금지)

    Returns:
        PathResult 또는 None (도착 불가)
    """
    if start_labels is None:
        start_labels = source_labels(network, origin, banned_arcs)
    start_labels = list(start_labels)

    # 시작역으로 되돌아오는 승차 금지, 시작역 환승은 시작 노드에서 한 번만
    # => 반환 경로는 항상 같은 역을 두 번 지나지 않음
    start_nodes = {label[0] for label in start_labels}
    start_stations = {node[0] for node in start_nodes}

    # 출발/도착역에서의 환승은 의미 없음 => 가상 노드가 이미 모든 노선과 연결됨
    endpoints = {origin, destination}

    best: Dict[Node, LabelKey] = {}
    elapsed: Dict[Node, float] = {}
    previous: Dict[Node, Optional[Tuple[Node, PathStep]]] = {}
    settled: Set[Node] = set()
    heap: list = []
    tie = count()

    for node, minutes, transfers, lines in start_labels:
        key = (round(minutes, TIME_PRECISION), transfers, lines)
        if node not in best or key < best[node]:
            best[node] = key
            elapsed[node] = minutes
            previous[node] = None
            heapq.heappush(heap, (key, next(tie), node))

    while heap:
        key, _, node = heapq.heappop(heap)
        if node in settled or key != best[node]:
            continue  # 이미 더 좋은 라벨로 확정된 노드
        settled.add(node)
        if budget is not None:
            budget.spend()

        if node[0] == destination:
            return _reconstruct(node, previous)

        _, transfers, lines = key
        for arc in network.arcs_from(node):
            target = arc.target
            if target in settled or target in banned_nodes:
                continue
            if target[0] in banned_stations or (node, target) in banned_arcs:
                continue

            if arc.is_transfer:
                if node[0] in endpoints:
                    continue
                if node[0] in start_stations and (
                    not allow_start_transfer or node not in start_nodes
                ):
                    continue
                minutes = (
                    transfer_penalty_minutes
                    if transfer_penalty_minutes is not None
                    else arc.minutes
                )
                new_elapsed = elapsed[node] + minutes
                new_key = (
                    round(new_elapsed, TIME_PRECISION),
                    transfers + 1,
                    lines + (target[1],),
                )
            else:
                if target[0] in start_stations:
                    continue
                minutes = arc.minutes
                new_elapsed = elapsed[node] + minutes
                new_key = (round(new_elapsed, TIME_PRECISION), transfers, lines)

            if target not in best or new_key < best[target]:
                best[target] = new_key
                elapsed[target] = new_elapsed
                previous[target] = (node, PathStep(node, target, minutes, arc.is_transfer))
                heapq.heappush(heap, (new_key, next(tie), target))

    return None


def _reconstruct(end_node: Node, previous: Dict[Node, Optional[Tuple[Node, PathStep]]]) -> PathResult:
    """이전 노드 포인터 역추적 leaf -> root"""
    steps: List[PathStep] = []
    node = end_node
    while previous[node] is not None:
        prev_node, step = previous[node]
        steps.append(step)
        node = prev_node
    steps.reverse()
    return build_path(node, steps)


def evaluate_route(
    graph: Graph,
    from_station_id: str,
    to_station_id: str,
    transfer_penalty_minutes: Optional[float] = None,
) -> RouteCalculationResult:
    """경로 계산 + 실패 사유 (INVALID_STATION / SAME_STATION / NO_PATH)"""
    if not graph.has_station(from_station_id) or not graph.has_station(to_station_id):
        logger.warning(f"알 수 없는 역: {from_station_id} → {to_station_id}")
        return RouteCalculationResult(error=RouteError.INVALID_STATION)

    if from_station_id == to_station_id:
        logger.debug(f"출발역과 도착역이 같음: {from_station_id}")
        return RouteCalculationResult(error=RouteError.SAME_STATION)

    path = find_shortest_path(
        graph,
        from_station_id,
        to_station_id,
        transfer_penalty_minutes=transfer_penalty_minutes,
    )
    if path is None:
        logger.info(f"경로 없음: {from_station_id} → {to_station_id}")
        return RouteCalculationResult(error=RouteError.NO_PATH)

    return RouteCalculationResult(route=to_public_route(graph, path))


def calculate_route(
    graph: Graph,
    from_station_id: str,
    to_station_id: str,
    transfer_penalty_minutes: Optional[float] = None,
) -> Optional[Route]:
    """최단 시간 경로, 답이 없으면 None"""
    return evaluate_route(
        graph, from_station_id, to_station_id, transfer_penalty_minutes
    ).route
