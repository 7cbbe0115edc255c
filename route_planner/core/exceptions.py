# custom exception 정의 및 관리

from typing import List, Optional


class RoutePlannerException(Exception):  # 예외 구조 정의
    def __init__(self, message: str, code: str = "INTERNAL_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)


class StationNotFoundException(RoutePlannerException):
    def __init__(self, message: str = "역을 찾을 수 없습니다"):
        super().__init__(message, code="INVALID_STATION")


class SameStationException(RoutePlannerException):
    def __init__(self, message: str = "출발역과 도착역이 같습니다"):
        super().__init__(message, code="SAME_STATION")


class RouteNotFoundException(RoutePlannerException):
    def __init__(self, message: str = "경로를 찾을 수 없습니다"):
        super().__init__(message, code="NO_PATH")


class InvalidTopologyException(RoutePlannerException):
    """카탈로그가 내부적으로 모순될 때 => 그래프 재구축 실패, 기존 그래프 유지"""

    def __init__(
        self,
        message: str = "노선 카탈로그가 유효하지 않습니다",
        problems: Optional[List[str]] = None,
    ):
        self.problems = list(problems or [])
        super().__init__(message, code="INVALID_TOPOLOGY")


class SearchBudgetExceeded(RoutePlannerException):
    # 내부 전용 => 대체 경로 탐색에서 잡아서 결과를 잘라냄
    def __init__(self, message: str = "탐색 예산을 초과했습니다"):
        super().__init__(message, code="SEARCH_BUDGET_EXCEEDED")
