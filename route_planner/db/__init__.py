"""
역/노선 카탈로그 로드
"""

from route_planner.db.catalog import load_catalog, parse_catalog

__all__ = [
    "load_catalog",
    "parse_catalog",
]
