from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from route_planner.core.exceptions import SearchBudgetExceeded
from route_planner.models.graph import Node

# 동률 판정용 시간 반올림 자릿수 => 부동소수 누적 오차 무시
TIME_PRECISION = 6


@dataclass(frozen=True)
class PathStep:
    from_node: Node
    to_node: Node
    minutes: float
    is_transfer: bool


# 탐색 내부 경로 표현 (역, 노선) 노드 단위
# 공개용 Route로의 변환은 route_ranker에서 담당
@dataclass(frozen=True)
class PathResult:
    nodes: Tuple[Node, ...]
    steps: Tuple[PathStep, ...]
    total_minutes: float
    transfer_count: int
    # 승차한 노선 순서 => 환승할 때만 추가됨
    line_sequence: Tuple[str, ...]

    @property
    def sort_key(self) -> Tuple[float, int, Tuple[str, ...]]:
        """시간 -> 환승 횟수 -> 노선 순서(사전순)"""
        return (round(self.total_minutes, TIME_PRECISION), self.transfer_count, self.line_sequence)

    @property
    def station_ids(self) -> Tuple[str, ...]:
        # 환승으로 같은 역이 연속되는 경우는 하나로 합침
        stations = []
        for station_id, _ in self.nodes:
            if not stations or stations[-1] != station_id:
                stations.append(station_id)
        return tuple(stations)

    @property
    def is_simple(self) -> bool:
        """같은 물리적 역을 두 번 지나지 않고, 한 역에서 연속 환승하지 않는지"""
        stations = self.station_ids
        if len(stations) != len(set(stations)):
            return False
        return not any(
            a.is_transfer and b.is_transfer for a, b in zip(self.steps, self.steps[1:])
        )

    @property
    def line_ids(self) -> Tuple[str, ...]:
        return tuple(dict.fromkeys(self.line_sequence))


def build_path(first_node: Node, steps: Sequence[PathStep]) -> PathResult:
    """시작 노드 + 이동 단계로 경로 재구성 (누적값 재계산)"""
    nodes = [first_node]
    total = 0.0
    transfers = 0
    lines = [first_node[1]]
    for step in steps:
        nodes.append(step.to_node)
        total += step.minutes
        if step.is_transfer:
            transfers += 1
            lines.append(step.to_node[1])
    return PathResult(
        nodes=tuple(nodes),
        steps=tuple(steps),
        total_minutes=total,
        transfer_count=transfers,
        line_sequence=tuple(lines),
    )


class ExpansionBudget:
    """노드 확장 횟수 상한 => 여러 번의 탐색에 걸쳐 공유"""

    def __init__(self, limit: Optional[int]):
        self.limit = limit
        self.used = 0

    @property
    def exhausted(self) -> bool:
        return self.limit is not None and self.used >= self.limit

    def spend(self, count: int = 1) -> None:
        self.used += count
        if self.limit is not None and self.used > self.limit:
            raise SearchBudgetExceeded(
                f"노드 확장 예산 초과: {self.used} > {self.limit}"
            )
