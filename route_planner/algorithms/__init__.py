"""
그래프 구축 + 최단경로(Dijkstra) + 대체 경로(Yen's k-shortest paths) 알고리즘
"""

from route_planner.algorithms.graph_builder import build_graph
from route_planner.algorithms.path_solver import (
    calculate_route,
    evaluate_route,
    find_shortest_path,
)
from route_planner.algorithms.k_shortest_paths import iter_k_shortest_paths
from route_planner.algorithms.alternative_search import find_alternative_routes
from route_planner.algorithms.route_ranker import (
    rank_alternatives,
    to_public_alternative,
    to_public_route,
)

__all__ = [
    "build_graph",
    "calculate_route",
    "evaluate_route",
    "find_shortest_path",
    "iter_k_shortest_paths",
    "find_alternative_routes",
    "rank_alternatives",
    "to_public_alternative",
    "to_public_route",
]
