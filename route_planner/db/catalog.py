"""
역/노선 카탈로그 로더 (JSON)

형식:
    {
        "lines": [{"id": "2", "name": "2호선", "color": "#00A84D",
                   "station_ids": [...], "is_circular": true, "travel_times": [...]}],
        "stations": [{"id": "0222", "name": "강남", "line_ids": ["2"],
                      "latitude": 37.49, "longitude": 127.02, "name_en": "Gangnam"}]
    }

구조 오류(필수 키 누락, 타입 불일치)는 InvalidTopologyException
노선/역 사이의 일관성 검증은 graph_builder에서 담당
"""

import json
import logging
from pathlib import Path
from typing import List, Tuple, Union

from route_planner.core.config import LINE_COLORS, LINE_NAMES
from route_planner.core.exceptions import InvalidTopologyException
from route_planner.models.domain import Line, Station

logger = logging.getLogger(__name__)

Catalog = Tuple[List[Line], List[Station]]


def _parse_line(raw: dict) -> Line:
    line_id = str(raw["id"])
    travel_times = raw.get("travel_times")
    return Line(
        id=line_id,
        name=raw.get("name") or LINE_NAMES.get(line_id, f"{line_id}호선"),
        station_ids=tuple(str(station_id) for station_id in raw["station_ids"]),
        color=raw.get("color") or LINE_COLORS.get(line_id),
        travel_times=(
            tuple(float(minutes) for minutes in travel_times)
            if travel_times is not None
            else None
        ),
        is_circular=bool(raw.get("is_circular", False)),
    )


def _parse_station(raw: dict) -> Station:
    latitude = raw.get("latitude")
    longitude = raw.get("longitude")
    return Station(
        id=str(raw["id"]),
        name=raw["name"],
        line_ids=tuple(str(line_id) for line_id in raw.get("line_ids", ())),
        latitude=float(latitude) if latitude is not None else None,
        longitude=float(longitude) if longitude is not None else None,
        name_en=raw.get("name_en"),
    )


def parse_catalog(data: dict) -> Catalog:
    """
    dict => (lines, stations)

    Raises:
        InvalidTopologyException: 필수 필드 누락 또는 타입 오류
    """
    if not isinstance(data, dict):
        raise InvalidTopologyException(
            "카탈로그 형식이 올바르지 않습니다", problems=["최상위 객체가 dict가 아닙니다"]
        )

    problems = []
    lines: List[Line] = []
    stations: List[Station] = []

    for index, raw in enumerate(data.get("lines", [])):
        try:
            lines.append(_parse_line(raw))
        except (KeyError, TypeError, ValueError) as e:
            problems.append(f"lines[{index}] 파싱 실패: {e!r}")

    for index, raw in enumerate(data.get("stations", [])):
        try:
            stations.append(_parse_station(raw))
        except (KeyError, TypeError, ValueError) as e:
            problems.append(f"stations[{index}] 파싱 실패: {e!r}")

    if problems:
        logger.error(f"카탈로그 파싱 실패: 문제 {len(problems)}건")
        raise InvalidTopologyException(
            f"카탈로그 형식이 올바르지 않습니다 ({len(problems)}건)", problems=problems
        )

    return lines, stations


def load_catalog(path: Union[str, Path]) -> Catalog:
    """JSON 파일에서 카탈로그 로드"""
    path = Path(path)
    logger.info(f"카탈로그 로드 중: {path}")

    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise InvalidTopologyException(
            "카탈로그 JSON을 읽을 수 없습니다", problems=[f"{path}: {e}"]
        )

    lines, stations = parse_catalog(data)
    logger.info(f"✓ 카탈로그 로드 완료: 노선 {len(lines)}개, 역 {len(stations)}개")
    return lines, stations
