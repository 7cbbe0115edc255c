"""
최단 경로 탐색 테스트
"""

import pytest

from route_planner.algorithms.graph_builder import build_graph
from route_planner.algorithms.path import ExpansionBudget
from route_planner.algorithms.path_solver import (
    calculate_route,
    evaluate_route,
    find_shortest_path,
)
from route_planner.core.exceptions import SearchBudgetExceeded
from route_planner.models.domain import Line, RouteError, Station


def assert_route_invariants(route, penalty):
    """구간 연결 + 시간 합산 검증"""
    assert route.segments
    assert route.segments[0].from_station_id == route.from_station_id
    assert route.segments[-1].to_station_id == route.to_station_id
    for previous, current in zip(route.segments, route.segments[1:]):
        assert previous.to_station_id == current.from_station_id

    ride = sum(segment.duration_minutes for segment in route.segments)
    assert route.total_minutes == pytest.approx(ride + penalty * route.transfer_count)


class TestCalculateRoute:
    """calculate_route 테스트 클래스"""

    def test_scenario1_direct_line(self, scenario1_graph):
        """1호선 직통 10분, 환승 없음"""
        route = calculate_route(scenario1_graph, "S1", "S3")

        assert route is not None
        assert route.total_minutes == 10
        assert route.transfer_count == 0
        assert route.line_ids == ("1",)
        assert len(route.segments) == 1
        assert route.segments[0].station_ids == ("S1", "S2", "S3")
        assert route.segments[0].from_station_name == "가산"
        assert route.segments[0].line_name == "1호선"

    def test_same_station(self, scenario1_graph):
        assert calculate_route(scenario1_graph, "S1", "S1") is None

        result = evaluate_route(scenario1_graph, "S1", "S1")
        assert result.error == RouteError.SAME_STATION
        assert not result.success

    def test_unknown_station(self, scenario1_graph):
        """알 수 없는 역 => 예외 없이 None"""
        assert calculate_route(scenario1_graph, "unknown", "S1") is None
        assert calculate_route(scenario1_graph, "S1", "unknown") is None

        result = evaluate_route(scenario1_graph, "unknown", "unknown")
        assert result.error == RouteError.INVALID_STATION

    def test_no_path(self, disconnected_graph):
        assert calculate_route(disconnected_graph, "A", "D") is None
        assert evaluate_route(disconnected_graph, "A", "D").error == RouteError.NO_PATH

    def test_transfer_segment_flag(self):
        """환승 직후 구간에만 is_transfer"""
        lines = [
            Line(id="1", name="1호선", station_ids=("A", "B"), travel_times=(3,)),
            Line(id="2", name="2호선", station_ids=("B", "C", "D"), travel_times=(2, 2)),
        ]
        stations = [Station(id=s, name=s) for s in "ABCD"]
        graph = build_graph(lines, stations, transfer_penalty_minutes=4)

        route = calculate_route(graph, "A", "D")

        assert [segment.line_id for segment in route.segments] == ["1", "2"]
        assert [segment.is_transfer for segment in route.segments] == [False, True]
        assert route.transfer_count == 1
        assert route.ride_minutes == 7
        assert route.transfer_minutes == 4
        assert route.total_minutes == 11
        assert route.segments[1].duration_minutes == 4  # 환승 페널티 제외
        assert_route_invariants(route, 4)

    def test_tie_break_fewer_transfers(self):
        """같은 시간이면 환승이 적은 경로"""
        lines = [
            Line(id="1", name="1호선", station_ids=("A", "B", "C"), travel_times=(2, 6)),
            Line(id="2", name="2호선", station_ids=("B", "C"), travel_times=(4,)),
        ]
        stations = [Station(id=s, name=s) for s in "ABC"]
        graph = build_graph(lines, stations, transfer_penalty_minutes=2)

        # 직통 8분 == 1호선 2분 + 환승 2분 + 2호선 4분
        route = calculate_route(graph, "A", "C")

        assert route.total_minutes == 8
        assert route.transfer_count == 0

    def test_tie_break_line_order(self):
        """시간, 환승 같으면 노선 ID 사전순"""
        lines = [
            Line(id="B", name="B선", station_ids=("X", "Y"), travel_times=(5,)),
            Line(id="A", name="A선", station_ids=("X", "Y"), travel_times=(5,)),
        ]
        stations = [Station(id="X", name="X"), Station(id="Y", name="Y")]
        graph = build_graph(lines, stations)

        route = calculate_route(graph, "X", "Y")

        assert route.line_ids == ("A",)

    def test_transfer_penalty_override(self):
        """질의별 환승 페널티가 간선 가중치를 대체"""
        lines = [
            Line(id="1", name="1호선", station_ids=("A", "B", "C"), travel_times=(1, 10)),
            Line(id="2", name="2호선", station_ids=("B", "C"), travel_times=(1,)),
        ]
        stations = [Station(id=s, name=s) for s in "ABC"]
        graph = build_graph(lines, stations, transfer_penalty_minutes=4)

        # 기본 페널티 4분 => 환승 6분 < 직통 11분
        assert calculate_route(graph, "A", "C").transfer_count == 1
        # 페널티 20분 => 직통
        route = calculate_route(graph, "A", "C", transfer_penalty_minutes=20)
        assert route.transfer_count == 0
        assert route.total_minutes == 11

    def test_no_transfer_at_endpoints(self, scenario2_graph):
        """출발/도착역에서의 환승은 경로에 나타나지 않음"""
        route = calculate_route(scenario2_graph, "S1", "S3")

        assert route.transfer_count == 0
        assert all(segment.station_count > 0 for segment in route.segments)

    def test_determinism(self, seoul_graph):
        routes = [calculate_route(seoul_graph, "0222", "0151") for _ in range(5)]

        assert all(route == routes[0] for route in routes)

    def test_seoul_routes_reachable(self, seoul_graph):
        """샘플 카탈로그의 모든 역 쌍 도달 가능 + 경로 불변식"""
        station_ids = sorted(seoul_graph.stations)
        for from_id in station_ids[::4]:
            for to_id in station_ids[1::5]:
                if from_id == to_id:
                    continue
                route = calculate_route(seoul_graph, from_id, to_id)
                assert route is not None, f"{from_id} → {to_id}"
                assert_route_invariants(route, 4.0)

    def test_circular_line_shortcut(self, seoul_graph):
        """2호선 순환 연결 사용 (충정로 -> 시청)"""
        route = calculate_route(seoul_graph, "0240", "0151")

        assert route.line_ids == ("2",)
        assert route.total_minutes == 7
        assert route.segments[0].station_ids == ("0240", "0243", "0151")


class TestFindShortestPath:
    """탐색 내부 동작"""

    def test_budget_exceeded(self, scenario1_graph):
        with pytest.raises(SearchBudgetExceeded):
            find_shortest_path(scenario1_graph, "S1", "S3", budget=ExpansionBudget(1))

    def test_budget_shared(self, scenario1_graph):
        budget = ExpansionBudget(1000)
        find_shortest_path(scenario1_graph, "S1", "S3", budget=budget)
        used = budget.used
        find_shortest_path(scenario1_graph, "S1", "S3", budget=budget)

        assert used > 0
        assert budget.used == used * 2

    def test_banned_stations(self, scenario2_graph):
        path = find_shortest_path(scenario2_graph, "S1", "S3", banned_stations=frozenset({"S2"}))

        assert path is None

    def test_path_result(self, scenario1_graph):
        path = find_shortest_path(scenario1_graph, "S1", "S3")

        assert path.station_ids == ("S1", "S2", "S3")
        assert path.is_simple
        assert path.sort_key == (10, 0, ("1",))

    def test_start_label_never_reentered(self, detour_graph):
        """시작역 환승이 막혀도 시작역으로 되돌아오는 경로는 만들지 않음"""
        view = detour_graph.without_lines(["X"])

        path = find_shortest_path(
            view,
            "A",
            "D",
            start_labels=[(("S", "L"), 1.0, 0, ("L",))],
            banned_nodes=frozenset({("A", "L")}),
            banned_stations=frozenset({"A"}),
            banned_arcs=frozenset({(("S", "L"), ("S", "M"))}),
        )

        assert path.is_simple
        assert path.station_ids == ("S", "T", "U", "D")
        # PathResult는 시작 노드 이후 구간만 합산
        assert path.total_minutes == 5
        assert path.line_sequence == ("L", "N")

    def test_no_transfer_right_after_transfer(self, detour_graph):
        view = detour_graph.without_lines(["X"])

        path = find_shortest_path(
            view,
            "A",
            "D",
            start_labels=[(("S", "M"), 2.0, 1, ("L", "M"))],
            banned_arcs=frozenset({(("S", "M"), ("D", "M"))}),
            allow_start_transfer=False,
        )

        assert not path.steps[0].is_transfer
        assert path.station_ids == ("S", "T", "U", "D")
        assert path.total_minutes == 6
