"""
Yen's k-shortest paths 테스트
"""

from itertools import islice

import pytest

from route_planner.algorithms.k_shortest_paths import iter_k_shortest_paths
from route_planner.algorithms.path import ExpansionBudget, PathStep, build_path
from route_planner.core.exceptions import SearchBudgetExceeded


def enumerate_simple_paths(network, origin, destination):
    """같은 역을 두 번 지나지 않는 모든 경로 (완전 탐색)"""
    paths = []

    def visit(first, node, steps, visited):
        if node[0] == destination:
            paths.append(build_path(first, steps))
            return
        for arc in network.arcs_from(node):
            if arc.is_transfer:
                if node[0] == origin or (steps and steps[-1].is_transfer):
                    continue
            elif arc.target[0] in visited:
                continue
            steps.append(PathStep(node, arc.target, arc.minutes, arc.is_transfer))
            visit(first, arc.target, steps, visited | {arc.target[0]})
            steps.pop()

    for line_id in network.lines_at(origin):
        start = (origin, line_id)
        visit(start, start, [], {origin})
    return paths


class TestKShortestPaths:
    """iter_k_shortest_paths 테스트 클래스"""

    def test_scenario2_order(self, scenario2_graph):
        """비용 오름차순: 1호선 직통 -> 2호선 직통 -> 2호선+1호선 -> 1호선+2호선"""
        paths = list(iter_k_shortest_paths(scenario2_graph, "S1", "S3"))

        assert [path.total_minutes for path in paths[:4]] == [10, 12, 12, 16]
        assert paths[0].line_sequence == ("1",)
        assert paths[1].line_sequence == ("2",)
        assert paths[2].line_sequence == ("2", "1")
        assert paths[3].line_sequence == ("1", "2")

    def test_non_decreasing_cost(self, seoul_graph):
        paths = list(islice(iter_k_shortest_paths(seoul_graph, "0222", "0151"), 8))

        keys = [path.sort_key for path in paths]
        assert keys == sorted(keys)
        assert len(paths) == 8

    def test_paths_are_unique_and_simple(self, seoul_graph):
        paths = list(islice(iter_k_shortest_paths(seoul_graph, "0150", "0223"), 10))

        assert len({path.nodes for path in paths}) == len(paths)
        assert all(path.is_simple for path in paths)
        assert all(path.station_ids[0] == "0150" for path in paths)
        assert all(path.station_ids[-1] == "0223" for path in paths)

    def test_first_path_matches_shortest(self, seoul_graph):
        from route_planner.algorithms.path_solver import find_shortest_path

        first = next(iter_k_shortest_paths(seoul_graph, "0222", "0151"))

        assert first == find_shortest_path(seoul_graph, "0222", "0151")

    def test_no_path(self, disconnected_graph):
        assert list(iter_k_shortest_paths(disconnected_graph, "A", "D")) == []

    def test_finite_on_small_graph(self, scenario1_graph):
        """단순 경로가 유한하면 생성도 종료됨"""
        paths = list(iter_k_shortest_paths(scenario1_graph, "S1", "S3"))

        # 1호선 직통(10분), 1호선 -> 2호선 환승(5 + 3 + 8분)
        assert [path.line_sequence for path in paths] == [("1",), ("1", "2")]
        assert [path.total_minutes for path in paths] == [10, 16]

    def test_budget_exceeded_after_first(self, seoul_graph):
        budget = ExpansionBudget(60)
        generator = iter_k_shortest_paths(seoul_graph, "0222", "0151", budget=budget)

        with pytest.raises(SearchBudgetExceeded):
            for _ in generator:
                pass


class TestKShortestPathsCompleteness:
    """생성 결과 == 완전 탐색으로 구한 단순 경로 전체 (비용 순)"""

    def test_detour_second_path(self, detour_graph):
        """시작역 재진입 경로에 가려 더 짧은 단순 경로가 빠지지 않음"""
        view = detour_graph.without_lines(["X"])

        paths = list(iter_k_shortest_paths(view, "A", "D"))

        assert [path.total_minutes for path in paths] == [3, 6, 8]
        assert [path.line_sequence for path in paths] == [
            ("L", "M"),
            ("L", "N"),
            ("L", "M", "L", "N"),
        ]
        assert all(path.is_simple for path in paths)

    @pytest.mark.parametrize(
        "graph_name, excluded, origin, destination",
        [
            ("detour_graph", ["X"], "A", "D"),
            ("detour_graph", [], "A", "D"),
            ("detour_graph", [], "D", "A"),
            ("detour_graph", [], "S", "U"),
            ("scenario1_graph", [], "S1", "S3"),
            ("scenario1_graph", [], "S4", "S1"),
            ("scenario2_graph", [], "S1", "S3"),
            ("scenario2_graph", ["1"], "S1", "S3"),
        ],
    )
    def test_matches_exhaustive_enumeration(
        self, request, graph_name, excluded, origin, destination
    ):
        graph = request.getfixturevalue(graph_name)
        network = graph.without_lines(excluded) if excluded else graph

        generated = list(iter_k_shortest_paths(network, origin, destination))
        expected = enumerate_simple_paths(network, origin, destination)

        assert [path.sort_key for path in generated] == sorted(
            path.sort_key for path in expected
        )
        assert {path.nodes for path in generated} == {path.nodes for path in expected}
