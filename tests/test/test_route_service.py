"""
RouteEngine 테스트
"""

import json
import logging
from concurrent.futures import ThreadPoolExecutor

import pytest

from route_planner.core.config import settings
from route_planner.core.exceptions import InvalidTopologyException
from route_planner.models.domain import (
    AlternativeReason,
    AlternativeRouteOptions,
    Disruption,
    Line,
    RouteError,
    Station,
)
from route_planner.services.route_service import RouteEngine


class TestRouteEngine:
    """RouteEngine 테스트 클래스"""

    def test_empty_engine_is_total(self):
        """그래프 구축 전 질의 => 예외 없이 None / []"""
        engine = RouteEngine()

        assert engine.calculate_route("S1", "S3") is None
        assert engine.evaluate_route("S1", "S3").error == RouteError.INVALID_STATION
        assert engine.find_alternative_routes("S1", "S3", ["1"], "DELAY") == []
        assert engine.station_info("S1") is None

    def test_calculate_route(self, scenario2_engine):
        route = scenario2_engine.calculate_route("S1", "S3")

        assert route.total_minutes == 10
        assert route.line_ids == ("1",)

    def test_boundaries(self, scenario2_engine):
        assert scenario2_engine.calculate_route("S1", "S1") is None
        assert scenario2_engine.calculate_route("unknown", "S1") is None
        assert scenario2_engine.evaluate_route("S1", "S1").error == RouteError.SAME_STATION

    def test_find_alternative_routes(self, scenario2_engine):
        alternatives = scenario2_engine.find_alternative_routes(
            "S1", "S3", ["1"], AlternativeReason.SUSPENSION, AlternativeRouteOptions()
        )

        assert len(alternatives) == 1
        assert alternatives[0].time_difference_minutes == 2

    def test_rebuild_graph_swaps_reference(self, scenario2_engine, scenario1_catalog):
        old_graph = scenario2_engine.graph

        new_graph = scenario2_engine.rebuild_graph(*scenario1_catalog)

        assert scenario2_engine.graph is new_graph
        assert new_graph is not old_graph
        # 이전 그래프는 변경되지 않음
        assert old_graph.lines_at("S1") == ("1", "2")
        assert new_graph.lines_at("S1") == ("1",)

    def test_rebuild_failure_keeps_old_graph(self, scenario2_engine):
        old_graph = scenario2_engine.graph
        lines = [Line(id="1", name="1호선", station_ids=("S1", "ZZ"))]
        stations = [Station(id="S1", name="S1")]

        with pytest.raises(InvalidTopologyException) as exc_info:
            scenario2_engine.rebuild_graph(lines, stations)

        assert exc_info.value.problems
        assert scenario2_engine.graph is old_graph
        assert scenario2_engine.calculate_route("S1", "S3") is not None

    def test_rebuild_uses_engine_weights(self, scenario2_catalog):
        engine = RouteEngine(minutes_per_hop=1.0, transfer_penalty_minutes=7.0)
        graph = engine.rebuild_graph(*scenario2_catalog)

        assert all(edge.transfer_penalty_minutes == 7.0 for edge in graph.transfer_edges)

    def test_concurrent_queries_during_rebuild(self, scenario2_engine, scenario2_catalog):
        """재구축 중에도 질의는 항상 완전한 그래프 중 하나로 계산"""

        def query(_):
            return scenario2_engine.calculate_route("S1", "S3")

        def rebuild(_):
            return scenario2_engine.rebuild_graph(*scenario2_catalog)

        with ThreadPoolExecutor(max_workers=4) as executor:
            rebuilds = [executor.submit(rebuild, i) for i in range(5)]
            routes = list(executor.map(query, range(50)))

        assert all(future.result() is not None for future in rebuilds)
        assert all(route is not None and route.total_minutes == 10 for route in routes)


class TestDisruptions:
    """find_alternatives_for_disruptions"""

    def test_reason_from_route_disruptions(self, scenario2_engine):
        """경로와 무관한 장애 노선의 사유는 무시"""
        alternatives = scenario2_engine.find_alternatives_for_disruptions(
            "S1",
            "S3",
            [
                Disruption("1", AlternativeReason.DELAY),
                Disruption("9", AlternativeReason.SUSPENSION),
            ],
        )

        assert len(alternatives) == 1
        assert alternatives[0].reason == AlternativeReason.DELAY
        assert alternatives[0].avoided_line_ids == ("1", "9")

    def test_most_severe_reason(self, scenario2_engine):
        alternatives = scenario2_engine.find_alternatives_for_disruptions(
            "S1",
            "S3",
            [
                Disruption("1", AlternativeReason.CONGESTION),
                Disruption("1", AlternativeReason.SUSPENSION),
            ],
        )

        assert alternatives[0].reason == AlternativeReason.SUSPENSION

    def test_unrelated_disruptions(self, scenario2_engine, mocker):
        spy = mocker.spy(scenario2_engine, "find_alternative_routes")

        alternatives = scenario2_engine.find_alternatives_for_disruptions(
            "S1", "S3", [Disruption("2", AlternativeReason.SUSPENSION)]
        )

        assert alternatives == []
        spy.assert_not_called()

    def test_no_disruptions(self, scenario2_engine):
        assert scenario2_engine.find_alternatives_for_disruptions("S1", "S3", []) == []


class TestStations:
    """역 조회 / 검색"""

    def test_station_info(self, seoul_engine):
        info = seoul_engine.station_info("0150")

        assert info["name"] == "서울역"
        assert info["line_ids"] == ["1", "4"]
        assert info["is_transfer_station"] is True

    def test_search_priority(self, seoul_engine):
        """정확히 일치 > 앞부분 일치 > 포함"""
        results = seoul_engine.search_stations("종로")

        assert [r["name"] for r in results] == ["종로3가", "종로5가"]

        results = seoul_engine.search_stations("강남")
        assert results[0]["id"] == "0222"

    def test_search_limit_and_blank(self, seoul_engine):
        assert len(seoul_engine.search_stations("역", limit=1)) == 1
        assert seoul_engine.search_stations("   ") == []


class TestMetrics:
    """METRICS 로깅"""

    def test_metrics_logged(self, scenario2_engine, caplog, monkeypatch):
        monkeypatch.setattr(settings, "ENABLE_ROUTE_METRICS", True)

        with caplog.at_level(logging.INFO, logger="route_planner.services.route_service"):
            scenario2_engine.calculate_route("S1", "S3")

        lines = [r.getMessage() for r in caplog.records if r.getMessage().startswith("METRICS: ")]
        assert lines
        metrics = json.loads(lines[-1][len("METRICS: "):])
        assert metrics["event"] == "route_calculation"
        assert metrics["success"] is True
        assert metrics["total_minutes"] == 10

    def test_metrics_disabled(self, scenario2_engine, caplog, monkeypatch):
        monkeypatch.setattr(settings, "ENABLE_ROUTE_METRICS", False)

        with caplog.at_level(logging.INFO):
            scenario2_engine.calculate_route("S1", "S3")

        assert "METRICS:" not in caplog.text
