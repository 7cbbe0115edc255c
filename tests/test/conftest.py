"""
Pytest 설정 및 공통 Fixture
"""

import os
import pytest
import sys
from pathlib import Path

# 테스트 모드 환경 변수 설정 (모듈 임포트 전에 설정해야 함)
os.environ['TESTING'] = 'true'

# 프로젝트 루트를 sys.path에 추가
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from route_planner.algorithms.graph_builder import build_graph  # noqa: E402
from route_planner.db.catalog import load_catalog  # noqa: E402
from route_planner.core.config import settings  # noqa: E402
from route_planner.models.domain import Line, Station  # noqa: E402
from route_planner.services.route_service import RouteEngine  # noqa: E402


def make_station(station_id, name=None, line_ids=()):
    return Station(id=station_id, name=name or f"{station_id}역", line_ids=tuple(line_ids))


@pytest.fixture
def scenario1_catalog():
    """
    1호선: S1-S2-S3 (구간 5분)
    2호선: S2-S4-S3 (구간 4분)
    => S1은 1호선에만 있음
    """
    lines = [
        Line(id="1", name="1호선", station_ids=("S1", "S2", "S3"), travel_times=(5, 5)),
        Line(id="2", name="2호선", station_ids=("S2", "S4", "S3"), travel_times=(4, 4)),
    ]
    stations = [
        make_station("S1", "가산", ["1"]),
        make_station("S2", "나루", ["1", "2"]),
        make_station("S3", "다온", ["1", "2"]),
        make_station("S4", "라온", ["2"]),
    ]
    return lines, stations


@pytest.fixture
def scenario2_catalog():
    """
    1호선: S1-S2-S3 (구간 5분) => 10분
    2호선: S1-S2-S4-S3 (구간 4분) => 12분
    """
    lines = [
        Line(id="1", name="1호선", station_ids=("S1", "S2", "S3"), travel_times=(5, 5)),
        Line(id="2", name="2호선", station_ids=("S1", "S2", "S4", "S3"), travel_times=(4, 4, 4)),
    ]
    stations = [
        make_station("S1", "가산", ["1", "2"]),
        make_station("S2", "나루", ["1", "2"]),
        make_station("S3", "다온", ["1", "2"]),
        make_station("S4", "라온", ["2"]),
    ]
    return lines, stations


@pytest.fixture
def scenario1_graph(scenario1_catalog):
    lines, stations = scenario1_catalog
    return build_graph(lines, stations, transfer_penalty_minutes=3)


@pytest.fixture
def scenario2_graph(scenario2_catalog):
    lines, stations = scenario2_catalog
    return build_graph(lines, stations, transfer_penalty_minutes=3)


@pytest.fixture
def disconnected_graph():
    """서로 연결되지 않은 두 노선"""
    lines = [
        Line(id="1", name="1호선", station_ids=("A", "B")),
        Line(id="2", name="2호선", station_ids=("C", "D")),
    ]
    stations = [
        make_station("A", line_ids=["1"]),
        make_station("B", line_ids=["1"]),
        make_station("C", line_ids=["2"]),
        make_station("D", line_ids=["2"]),
    ]
    return build_graph(lines, stations)


@pytest.fixture(scope="session")
def seoul_catalog():
    """번들된 서울 지하철 샘플 카탈로그 (1~4호선 일부, 2호선 순환)"""
    return load_catalog(settings.CATALOG_PATH)


@pytest.fixture
def seoul_graph(seoul_catalog):
    lines, stations = seoul_catalog
    return build_graph(lines, stations, minutes_per_hop=2.5, transfer_penalty_minutes=4.0)


@pytest.fixture
def scenario2_engine(scenario2_catalog):
    engine = RouteEngine(minutes_per_hop=2.5, transfer_penalty_minutes=3)
    engine.rebuild_graph(*scenario2_catalog)
    return engine


@pytest.fixture
def seoul_engine(seoul_catalog):
    engine = RouteEngine(minutes_per_hop=2.5, transfer_penalty_minutes=4.0)
    engine.rebuild_graph(*seoul_catalog)
    return engine


@pytest.fixture
def detour_graph():
    """
    L: A-S-T-U (구간 1분), M: T-S-D (구간 1분), N: U-D (2분), X: A-D (1분), 환승 1분
    => X 차단 시 S에서 M으로 환승(3분), S에 다시 들르지 않는 L+N(6분) 순
    """
    lines = [
        Line(id="L", name="L선", station_ids=("A", "S", "T", "U"), travel_times=(1, 1, 1)),
        Line(id="M", name="M선", station_ids=("T", "S", "D"), travel_times=(1, 1)),
        Line(id="N", name="N선", station_ids=("U", "D"), travel_times=(2,)),
        Line(id="X", name="X선", station_ids=("A", "D"), travel_times=(1,)),
    ]
    stations = [
        make_station("A", line_ids=["L", "X"]),
        make_station("S", line_ids=["L", "M"]),
        make_station("T", line_ids=["L", "M"]),
        make_station("U", line_ids=["L", "N"]),
        make_station("D", line_ids=["M", "N", "X"]),
    ]
    return build_graph(lines, stations, transfer_penalty_minutes=1)
