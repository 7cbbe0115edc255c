"""
노선망 그래프 모델

탐색 노드 = (station_id, line_id)
"L호선의 S역에 있는 승객"과 "M호선의 S역에 있는 승객"은 서로 다른 노드
=> 승차 간선은 같은 노선 노드끼리, 환승 간선은 같은 역의 다른 노선 노드끼리 연결

Graph는 한 번 구축된 뒤 절대 변경되지 않음
재구축 시에는 새 Graph 객체를 만들어 참조만 교체
"""

from collections import defaultdict
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Mapping, NamedTuple, Optional, Tuple

from route_planner.models.domain import (
    GraphStats,
    Line,
    RideEdge,
    Station,
    TransferEdge,
)

Node = Tuple[str, str]  # (station_id, line_id)


class Arc(NamedTuple):
    target: Node
    minutes: float
    is_transfer: bool


class Graph:
    def __init__(
        self,
        stations: Mapping[str, Station],
        lines: Mapping[str, Line],
        ride_edges: Iterable[RideEdge],
        transfer_edges: Iterable[TransferEdge],
    ):
        self._stations = MappingProxyType(dict(stations))
        self._lines = MappingProxyType(dict(lines))
        self._ride_edges = tuple(ride_edges)
        self._transfer_edges = tuple(transfer_edges)

        adjacency: Dict[Node, List[Arc]] = defaultdict(list)
        lines_at: Dict[str, set] = defaultdict(set)
        ride_minutes: Dict[Tuple[str, str, str], float] = {}

        # 승차 간선 => 양방향 동일 비용
        for edge in self._ride_edges:
            a = (edge.station_a, edge.line_id)
            b = (edge.station_b, edge.line_id)
            adjacency[a].append(Arc(b, edge.travel_time_minutes, False))
            adjacency[b].append(Arc(a, edge.travel_time_minutes, False))
            lines_at[edge.station_a].add(edge.line_id)
            lines_at[edge.station_b].add(edge.line_id)
            ride_minutes[(edge.station_a, edge.station_b, edge.line_id)] = (
                edge.travel_time_minutes
            )
            ride_minutes[(edge.station_b, edge.station_a, edge.line_id)] = (
                edge.travel_time_minutes
            )

        # 환승 간선 => 방향과 무관하게 동일 페널티
        for edge in self._transfer_edges:
            a = (edge.station_id, edge.line_id_a)
            b = (edge.station_id, edge.line_id_b)
            adjacency[a].append(Arc(b, edge.transfer_penalty_minutes, True))
            adjacency[b].append(Arc(a, edge.transfer_penalty_minutes, True))

        self._adjacency = MappingProxyType(
            {node: tuple(arcs) for node, arcs in adjacency.items()}
        )
        self._lines_at = MappingProxyType(
            {station_id: tuple(sorted(ids)) for station_id, ids in lines_at.items()}
        )
        self._ride_minutes = MappingProxyType(ride_minutes)

    @classmethod
    def empty(cls) -> "Graph":
        return cls({}, {}, (), ())

    @property
    def stations(self) -> Mapping[str, Station]:
        return self._stations

    @property
    def lines(self) -> Mapping[str, Line]:
        return self._lines

    @property
    def ride_edges(self) -> Tuple[RideEdge, ...]:
        return self._ride_edges

    @property
    def transfer_edges(self) -> Tuple[TransferEdge, ...]:
        return self._transfer_edges

    @property
    def graph(self) -> "Graph":
        # GraphView와 같은 인터페이스 유지
        return self

    @property
    def excluded_line_ids(self) -> FrozenSet[str]:
        return frozenset()

    def has_station(self, station_id: str) -> bool:
        return station_id in self._stations

    def station(self, station_id: str) -> Optional[Station]:
        return self._stations.get(station_id)

    def line(self, line_id: str) -> Optional[Line]:
        return self._lines.get(line_id)

    def lines_at(self, station_id: str) -> Tuple[str, ...]:
        """역에서 실제 운행 중인 노선 (정렬됨)"""
        return self._lines_at.get(station_id, ())

    def arcs_from(self, node: Node) -> Tuple[Arc, ...]:
        return self._adjacency.get(node, ())

    def ride_minutes(self, from_station_id: str, to_station_id: str, line_id: str) -> Optional[float]:
        return self._ride_minutes.get((from_station_id, to_station_id, line_id))

    def without_lines(self, line_ids: Iterable[str]) -> "GraphView":
        """장애 노선을 제외한 읽기 전용 뷰 생성 (원본 그래프는 그대로)"""
        return GraphView(self, frozenset(line_ids))

    def stats(self) -> GraphStats:
        return GraphStats(
            station_count=len(self._stations),
            line_count=len(self._lines),
            ride_edge_count=len(self._ride_edges),
            transfer_edge_count=len(self._transfer_edges),
            node_count=len(self._adjacency),
            transfer_station_ids=tuple(
                sorted({edge.station_id for edge in self._transfer_edges})
            ),
        )

    def __repr__(self) -> str:
        return (
            f"Graph(stations={len(self._stations)}, lines={len(self._lines)}, "
            f"ride_edges={len(self._ride_edges)}, transfer_edges={len(self._transfer_edges)})"
        )


class GraphView:
    """
    노선 필터링 뷰

    제외 노선의 승차 간선은 모두 사라짐
    환승 간선 자체는 그대로지만, 제외 노선 쪽 노드에는 승차 간선이 없으므로
    해당 노드로 들어가거나 나오는 환승은 건너뜀
    """

    def __init__(self, graph: Graph, excluded_line_ids: FrozenSet[str]):
        self._graph = graph
        self._excluded = excluded_line_ids

    @property
    def graph(self) -> Graph:
        return self._graph

    @property
    def excluded_line_ids(self) -> FrozenSet[str]:
        return self._excluded

    @property
    def stations(self) -> Mapping[str, Station]:
        return self._graph.stations

    @property
    def lines(self) -> Mapping[str, Line]:
        return self._graph.lines

    def has_station(self, station_id: str) -> bool:
        return self._graph.has_station(station_id)

    def station(self, station_id: str) -> Optional[Station]:
        return self._graph.station(station_id)

    def line(self, line_id: str) -> Optional[Line]:
        return self._graph.line(line_id)

    def lines_at(self, station_id: str) -> Tuple[str, ...]:
        return tuple(
            line_id
            for line_id in self._graph.lines_at(station_id)
            if line_id not in self._excluded
        )

    def arcs_from(self, node: Node) -> Tuple[Arc, ...]:
        if node[1] in self._excluded:
            return ()
        return tuple(
            arc
            for arc in self._graph.arcs_from(node)
            if arc.target[1] not in self._excluded
        )

    def ride_minutes(self, from_station_id: str, to_station_id: str, line_id: str) -> Optional[float]:
        if line_id in self._excluded:
            return None
        return self._graph.ride_minutes(from_station_id, to_station_id, line_id)

    def without_lines(self, line_ids: Iterable[str]) -> "GraphView":
        return GraphView(self._graph, self._excluded | frozenset(line_ids))

    def __repr__(self) -> str:
        return f"GraphView({self._graph!r}, excluded={sorted(self._excluded)})"
