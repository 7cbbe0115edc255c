"""
Subway Route Planner

지하철 최단 경로 및 장애 노선 회피 대체 경로 계산
"""

__version__ = "1.0.0"
