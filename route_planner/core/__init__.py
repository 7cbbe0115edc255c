"""
Core 설정 및 utilities, 커스텀 예외
"""

from route_planner.core.config import settings

from route_planner.core.exceptions import (
    RoutePlannerException,
    StationNotFoundException,
    SameStationException,
    RouteNotFoundException,
    InvalidTopologyException,
    SearchBudgetExceeded,
)

__all__ = [
    "settings",
    "RoutePlannerException",
    "StationNotFoundException",
    "SameStationException",
    "RouteNotFoundException",
    "InvalidTopologyException",
    "SearchBudgetExceeded",
]
