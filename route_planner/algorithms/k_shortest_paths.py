"""
Yen's k-shortest simple paths

path_solver.find_shortest_path를 최단경로 기본 연산으로 사용
경로는 비용(시간 -> 환승 -> 노선 순서) 오름차순으로 하나씩 생성됨
=> 호출 측에서 필요한 만큼만 꺼내고 멈출 수 있음 (generator)
"""

import heapq
import logging
from itertools import count
from typing import Iterator, List, Optional, Set, Tuple

from route_planner.algorithms.path import ExpansionBudget, PathResult, build_path
from route_planner.algorithms.path_solver import SOURCE, find_shortest_path, source_labels
from route_planner.models.graph import Node

logger = logging.getLogger(__name__)


def _prefix_state(path: PathResult, index: int) -> Tuple[float, int, Tuple[str, ...]]:
    """path.nodes[index]까지의 누적 (시간, 환승, 노선 순서)"""
    prefix = build_path(path.nodes[0], path.steps[:index])
    return prefix.total_minutes, prefix.transfer_count, prefix.line_sequence


def iter_k_shortest_paths(
    network,
    origin: str,
    destination: str,
    transfer_penalty_minutes: Optional[float] = None,
    budget: Optional[ExpansionBudget] = None,
) -> Iterator[PathResult]:
    """
    단순 경로를 비용 오름차순으로 생성

    spur 노드 index=-1은 가상 출발 노드 => 출발 노선 선택 자체를 바꾸는 후보
    마지막 노드는 spur 대상에서 제외 (도착역을 다시 지나야 하므로 단순 경로가 아님)

    Raises:
        SearchBudgetExceeded: budget 초과 시 (이미 생성된 경로는 유효)
    """
    first = find_shortest_path(
        network,
        origin,
        destination,
        transfer_penalty_minutes=transfer_penalty_minutes,
        budget=budget,
    )
    if first is None:
        return

    accepted: List[PathResult] = [first]
    seen: Set[Tuple[Node, ...]] = {first.nodes}
    candidates: list = []
    tie = count()
    yield first

    while True:
        last = accepted[-1]

        for index in range(-1, len(last.nodes) - 1):
            root_nodes = last.nodes[: index + 1]

            # 같은 root를 공유하는 기존 경로의 다음 간선 금지
            banned_arcs = set()
            for path in accepted:
                if path.nodes[: index + 1] == root_nodes and len(path.nodes) > index + 1:
                    tail = path.nodes[index] if index >= 0 else SOURCE
                    banned_arcs.add((tail, path.nodes[index + 1]))
            banned_arcs = frozenset(banned_arcs)

            if index < 0:
                start_labels = source_labels(network, origin, banned_arcs)
                banned_nodes = frozenset()
                banned_stations = frozenset()
                allow_start_transfer = True
            else:
                spur_node = root_nodes[-1]
                minutes, transfers, lines = _prefix_state(last, index)
                start_labels = [(spur_node, minutes, transfers, lines)]
                # root 경로의 역은 다시 지날 수 없음, spur 역 재진입은 solver가 막음
                banned_nodes = frozenset(root_nodes[:-1])
                banned_stations = frozenset(
                    station_id for station_id, _ in root_nodes[:-1]
                ) - {spur_node[0]}
                # root가 환승으로 spur 노드에 도착했다면 곧바로 다시 환승 불가
                allow_start_transfer = index == 0 or not last.steps[index - 1].is_transfer

            if not start_labels:
                continue

            spur = find_shortest_path(
                network,
                origin,
                destination,
                transfer_penalty_minutes=transfer_penalty_minutes,
                start_labels=start_labels,
                banned_nodes=banned_nodes,
                banned_stations=banned_stations,
                banned_arcs=banned_arcs,
                budget=budget,
                allow_start_transfer=allow_start_transfer,
            )
            if spur is None:
                continue

            root_steps = last.steps[:index] if index >= 0 else ()
            candidate = build_path(
                last.nodes[0] if index >= 0 else spur.nodes[0],
                tuple(root_steps) + spur.steps,
            )
            if candidate.nodes in seen:
                continue
            seen.add(candidate.nodes)
            heapq.heappush(candidates, (candidate.sort_key, next(tie), candidate))

        if not candidates:
            logger.debug(f"k-최단경로 후보 소진: {len(accepted)}개 생성")
            return

        _, _, best = heapq.heappop(candidates)
        accepted.append(best)
        yield best
