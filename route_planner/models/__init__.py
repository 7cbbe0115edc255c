"""
도메인 값 객체 + pydantic models for 요청, 응답
"""

from route_planner.models.domain import (
    AlternativeReason,
    AlternativeRoute,
    AlternativeRouteOptions,
    Disruption,
    GraphStats,
    Line,
    RideEdge,
    Route,
    RouteCalculationResult,
    RouteError,
    Segment,
    Station,
    TransferEdge,
)
from route_planner.models.graph import Graph, GraphView
from route_planner.models.requests import (
    AlternativeRoutesRequest,
    GraphRebuildRequest,
    RouteCalculateRequest,
)
from route_planner.models.responses import (
    AlternativeRoutesResponse,
    ErrorResponse,
    RouteResponse,
)

__all__ = [
    "AlternativeReason",
    "AlternativeRoute",
    "AlternativeRouteOptions",
    "Disruption",
    "GraphStats",
    "Line",
    "RideEdge",
    "Route",
    "RouteCalculationResult",
    "RouteError",
    "Segment",
    "Station",
    "TransferEdge",
    "Graph",
    "GraphView",
    "AlternativeRoutesRequest",
    "GraphRebuildRequest",
    "RouteCalculateRequest",
    "AlternativeRoutesResponse",
    "ErrorResponse",
    "RouteResponse",
]
