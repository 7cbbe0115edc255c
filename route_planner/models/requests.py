from typing import List, Optional
from pydantic import BaseModel, Field, model_validator

from route_planner.core.config import settings
from route_planner.models.domain import (
    AlternativeReason,
    AlternativeRouteOptions,
    Disruption,
    Line,
    Station,
)

# service별 requests 구조 정의


# 최단 경로 계산
class RouteCalculateRequest(BaseModel):
    from_station_id: str = Field(..., min_length=1, description="출발역 ID")
    to_station_id: str = Field(..., min_length=1, description="도착역 ID")
    transfer_penalty_minutes: Optional[float] = Field(
        default=None, ge=0, description="환승 페널티(분), 미입력 시 기본값"
    )


class AlternativeOptionsRequest(BaseModel):
    max_alternatives: int = Field(
        default_factory=lambda: settings.DEFAULT_MAX_ALTERNATIVES,
        ge=1,
        le=10,
        description="최대 대체 경로 수",
    )
    transfer_penalty_minutes: Optional[float] = Field(default=None, ge=0)
    max_time_difference_minutes: Optional[float] = Field(
        default_factory=lambda: settings.DEFAULT_MAX_TIME_DIFFERENCE_MINUTES,
        ge=0,
        description="원래 경로 대비 허용 추가 시간(분)",
    )
    max_transfers: Optional[int] = Field(default=None, ge=0)

    def to_domain(self) -> AlternativeRouteOptions:
        return AlternativeRouteOptions(
            max_alternatives=self.max_alternatives,
            transfer_penalty_minutes=self.transfer_penalty_minutes,
            max_time_difference_minutes=self.max_time_difference_minutes,
            max_transfers=self.max_transfers,
        )


class DisruptionRequest(BaseModel):
    line_id: str = Field(..., min_length=1)
    reason: AlternativeReason = AlternativeReason.DELAY

    def to_domain(self) -> Disruption:
        return Disruption(line_id=self.line_id, reason=self.reason)


# 대체 경로 요청 => blocked_line_ids 또는 disruptions 중 하나는 필수
class AlternativeRoutesRequest(BaseModel):
    from_station_id: str = Field(..., min_length=1, description="출발역 ID")
    to_station_id: str = Field(..., min_length=1, description="도착역 ID")
    blocked_line_ids: List[str] = Field(default_factory=list, description="장애 노선 ID")
    disruptions: List[DisruptionRequest] = Field(
        default_factory=list, description="노선별 장애 정보 (사유 포함)"
    )
    reason: AlternativeReason = Field(
        default=AlternativeReason.DELAY, description="대체 경로 사유 (DELAY/SUSPENSION/CONGESTION)"
    )
    options: AlternativeOptionsRequest = Field(default_factory=AlternativeOptionsRequest)

    @model_validator(mode="after")
    def check_blocked_lines(self):
        if not self.blocked_line_ids and not self.disruptions:
            raise ValueError("blocked_line_ids 또는 disruptions 중 하나는 필요합니다")
        return self


# 그래프 재구축 (내부 관리용)
class StationPayload(BaseModel):
    id: str = Field(..., min_length=1)
    name: str
    line_ids: List[str] = Field(default_factory=list)
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    name_en: Optional[str] = None

    def to_domain(self) -> Station:
        return Station(
            id=self.id,
            name=self.name,
            line_ids=tuple(self.line_ids),
            latitude=self.latitude,
            longitude=self.longitude,
            name_en=self.name_en,
        )


class LinePayload(BaseModel):
    id: str = Field(..., min_length=1)
    name: str
    station_ids: List[str]
    color: Optional[str] = None
    travel_times: Optional[List[float]] = None
    is_circular: bool = False

    def to_domain(self) -> Line:
        return Line(
            id=self.id,
            name=self.name,
            station_ids=tuple(self.station_ids),
            color=self.color,
            travel_times=tuple(self.travel_times) if self.travel_times is not None else None,
            is_circular=self.is_circular,
        )


class GraphRebuildRequest(BaseModel):
    lines: List[LinePayload]
    stations: List[StationPayload]
