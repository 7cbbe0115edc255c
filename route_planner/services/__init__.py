"""
Business logic services
"""

from route_planner.services.route_service import RouteEngine
from route_planner.services.route_factory import get_route_engine

__all__ = [
    "RouteEngine",
    "get_route_engine",
]
