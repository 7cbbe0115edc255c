from typing import List, Optional
from pydantic import BaseModel, Field

from route_planner.models.domain import (
    AlternativeReason,
    AlternativeRoute,
    GraphStats,
    Route,
    Segment,
)

# service 별 응답 구조 정의


class SegmentResponse(BaseModel):
    from_station_id: str
    from_station_name: str
    to_station_id: str
    to_station_name: str
    line_id: str
    line_name: str
    is_transfer: bool = Field(..., description="노선 변경 직후 구간 여부")
    duration_minutes: float = Field(..., description="승차 시간(분), 환승 페널티 제외")
    station_ids: List[str] = Field(default_factory=list, description="통과 역 (양 끝 포함)")
    station_count: int = Field(..., description="이동 역 수")

    @classmethod
    def from_domain(cls, segment: Segment) -> "SegmentResponse":
        return cls(
            from_station_id=segment.from_station_id,
            from_station_name=segment.from_station_name,
            to_station_id=segment.to_station_id,
            to_station_name=segment.to_station_name,
            line_id=segment.line_id,
            line_name=segment.line_name,
            is_transfer=segment.is_transfer,
            duration_minutes=segment.duration_minutes,
            station_ids=list(segment.station_ids),
            station_count=segment.station_count,
        )


# 경로 응답
class RouteResponse(BaseModel):
    from_station_id: str = Field(..., description="출발역 ID")
    to_station_id: str = Field(..., description="도착역 ID")
    segments: List[SegmentResponse]
    line_ids: List[str] = Field(..., description="사용 노선 (첫 사용 순서)")
    total_minutes: float = Field(..., description="총 소요시간 (분)")
    ride_minutes: float = Field(..., description="승차 시간 합계 (분)")
    transfer_minutes: float = Field(..., description="환승 페널티 합계 (분)")
    transfer_count: int = Field(..., description="환승 횟수")
    summary: str = Field(..., description="노선 요약 (예: 2호선 → 3호선)")

    @classmethod
    def from_domain(cls, route: Route, summary: str) -> "RouteResponse":
        return cls(
            from_station_id=route.from_station_id,
            to_station_id=route.to_station_id,
            segments=[SegmentResponse.from_domain(s) for s in route.segments],
            line_ids=list(route.line_ids),
            total_minutes=route.total_minutes,
            ride_minutes=route.ride_minutes,
            transfer_minutes=route.transfer_minutes,
            transfer_count=route.transfer_count,
            summary=summary,
        )


class AlternativeRouteResponse(BaseModel):
    rank: int = Field(..., description="순위 (1부터)")
    route: RouteResponse
    time_difference_minutes: float = Field(..., description="원래 경로 대비 추가 시간 (분)")
    time_difference_label: str = Field(..., description="표시용 시간 차이 (예: +3분)")
    severity: str = Field(..., description="faster/same/slower/much_slower")
    reason: AlternativeReason
    reason_label: str = Field(..., description="사유 표시 문구 (예: 운행 중단)")
    avoided_line_ids: List[str]
    affected_line_ids: List[str]
    confidence: float = Field(..., ge=0, le=100, description="신뢰도 (0-100)")


class AlternativeRoutesResponse(BaseModel):
    original_route: Optional[RouteResponse] = Field(None, description="원래 최단 경로")
    affected_line_ids: List[str] = Field(default_factory=list, description="원래 경로 중 장애 노선")
    alternatives: List[AlternativeRouteResponse] = Field(default_factory=list)
    count: int = Field(..., description="대체 경로 수")


# 역 검색 응답 (자동완성)
class StationSearchResponse(BaseModel):
    keyword: str = Field(..., description="검색 키워드")
    count: int = Field(..., description="검색 결과 수")
    results: List[dict] = Field(default_factory=list, description="역 정보 리스트")


class StationInfoResponse(BaseModel):
    id: str
    name: str
    name_en: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    line_ids: List[str] = Field(..., description="실제 운행 노선")
    is_transfer_station: bool


class GraphStatsResponse(BaseModel):
    station_count: int
    line_count: int
    ride_edge_count: int
    transfer_edge_count: int
    node_count: int
    transfer_station_count: int

    @classmethod
    def from_domain(cls, stats: GraphStats) -> "GraphStatsResponse":
        return cls(
            station_count=stats.station_count,
            line_count=stats.line_count,
            ride_edge_count=stats.ride_edge_count,
            transfer_edge_count=stats.transfer_edge_count,
            node_count=stats.node_count,
            transfer_station_count=len(stats.transfer_station_ids),
        )


# 에러 응답
class ErrorResponse(BaseModel):
    message: str = Field(..., description="에러 메시지")
    code: Optional[str] = Field(None, description="에러 코드")
