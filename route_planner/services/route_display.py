"""
경로/대체 경로 표시용 헬퍼

화면 표시에 필요한 요약 문자열, 시간 차이 라벨, 노선 색상 등
탐색 결과 자체는 변경하지 않음
"""

import re
from typing import Iterable, List

from route_planner.core.config import DEFAULT_LINE_COLOR, LINE_COLORS, LINE_NAMES, REASON_LABELS
from route_planner.models.domain import AlternativeReason, Disruption, Route

# 시간 차이 심각도 기준 (분)
FASTER_THRESHOLD = -2
SAME_THRESHOLD = 2
MUCH_SLOWER_THRESHOLD = 10

_SUSPENSION_PATTERN = re.compile(r"중단|중지")
_CONGESTION_PATTERN = re.compile(r"혼잡")


def get_line_name(line_id: str) -> str:
    return LINE_NAMES.get(line_id, f"{line_id}호선")


def get_line_color(graph, line_id: str) -> str:
    """카탈로그 색상 -> 기본 노선 색상 -> 회색"""
    line = graph.line(line_id)
    if line is not None and line.color:
        return line.color
    return LINE_COLORS.get(line_id, DEFAULT_LINE_COLOR)


def get_route_summary(route: Route) -> str:
    """예: 2호선 → 3호선"""
    names = []
    for segment in route.segments:
        if not names or names[-1] != segment.line_name:
            names.append(segment.line_name)
    return " → ".join(names)


def route_uses_line(route: Route, line_id: str) -> bool:
    return line_id in route.line_ids


def format_time_difference(minutes: float) -> str:
    # 반올림 후 0이면 동일
    rounded = round(minutes)
    if rounded == 0:
        return "동일"
    if rounded > 0:
        return f"+{rounded}분"
    return f"{rounded}분"


def get_time_difference_severity(minutes: float) -> str:
    if minutes < FASTER_THRESHOLD:
        return "faster"
    if minutes <= SAME_THRESHOLD:
        return "same"
    if minutes <= MUCH_SLOWER_THRESHOLD:
        return "slower"
    return "much_slower"


def classify_delay_reason(text: str) -> AlternativeReason:
    """지연 제보 문구 => 대체 경로 사유"""
    if not text:
        return AlternativeReason.DELAY
    if _SUSPENSION_PATTERN.search(text):
        return AlternativeReason.SUSPENSION
    if _CONGESTION_PATTERN.search(text):
        return AlternativeReason.CONGESTION
    return AlternativeReason.DELAY


def get_reason_label(reason) -> str:
    return REASON_LABELS.get(AlternativeReason(reason).value, "")


def format_route_display(route: Route) -> str:
    """예: 강남 → 시청"""
    if not route.segments:
        return f"{route.from_station_id} → {route.to_station_id}"
    return f"{route.segments[0].from_station_name} → {route.segments[-1].to_station_name}"


def get_transfer_stations(route: Route) -> List[str]:
    """환승역 이름 (경로 순서)"""
    return [segment.from_station_name for segment in route.segments if segment.is_transfer]


def find_affected_line_ids(route: Route, disruptions: Iterable[Disruption]) -> List[str]:
    """경로가 지나는 노선 중 장애가 있는 노선 (경로 순서)"""
    disrupted = {disruption.line_id for disruption in disruptions}
    return [line_id for line_id in route.line_ids if line_id in disrupted]
