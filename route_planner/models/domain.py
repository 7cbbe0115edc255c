from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from route_planner.core.config import settings

# domain 정의 => 모든 값 객체는 불변(frozen), 질의마다 새로 생성


class AlternativeReason(str, Enum):
    DELAY = "DELAY"
    SUSPENSION = "SUSPENSION"
    CONGESTION = "CONGESTION"


class RouteError(str, Enum):
    INVALID_STATION = "INVALID_STATION"
    SAME_STATION = "SAME_STATION"
    NO_PATH = "NO_PATH"


@dataclass(frozen=True)
class Station:
    id: str
    name: str
    line_ids: Tuple[str, ...] = ()  # 역이 주장하는 소속 노선
    latitude: Optional[float] = None  # 표시용, 탐색에는 사용 X
    longitude: Optional[float] = None
    name_en: Optional[str] = None


@dataclass(frozen=True)
class Line:
    id: str
    name: str
    station_ids: Tuple[str, ...]
    color: Optional[str] = None
    # 구간별 소요시간(분), 없으면 기본값 사용
    travel_times: Optional[Tuple[float, ...]] = None
    # 순환선 => 마지막 역과 첫 역 연결 (2호선)
    is_circular: bool = False


@dataclass(frozen=True)
class RideEdge:
    station_a: str
    station_b: str
    line_id: str
    travel_time_minutes: float


@dataclass(frozen=True)
class TransferEdge:
    station_id: str
    line_id_a: str
    line_id_b: str
    transfer_penalty_minutes: float


@dataclass(frozen=True)
class Segment:
    from_station_id: str
    from_station_name: str
    to_station_id: str
    to_station_name: str
    line_id: str
    line_name: str
    is_transfer: bool  # 노선 변경 직후 구간에서만 True
    duration_minutes: float  # 승차 시간만, 환승 페널티 제외
    station_ids: Tuple[str, ...] = ()  # 통과 역 (양 끝 포함)

    @property
    def station_count(self) -> int:
        return max(len(self.station_ids) - 1, 0)


@dataclass(frozen=True)
class Route:
    from_station_id: str
    to_station_id: str
    segments: Tuple[Segment, ...]
    ride_minutes: float
    transfer_minutes: float

    @property
    def total_minutes(self) -> float:
        return round(self.ride_minutes + self.transfer_minutes, 6)

    @property
    def transfer_count(self) -> int:
        return sum(1 for segment in self.segments if segment.is_transfer)

    @property
    def line_ids(self) -> Tuple[str, ...]:
        """사용 노선 (첫 사용 순서, 중복 제거)"""
        seen = []
        for segment in self.segments:
            if segment.line_id not in seen:
                seen.append(segment.line_id)
        return tuple(seen)

    @property
    def line_sequence(self) -> Tuple[str, ...]:
        """구간별 노선 순서 => 동률 시 사전순 비교 기준"""
        return tuple(segment.line_id for segment in self.segments)

    @property
    def signature(self) -> Tuple[Tuple[str, ...], ...]:
        # 동일 경로 판별용
        return tuple(
            (segment.line_id,) + segment.station_ids for segment in self.segments
        )


@dataclass(frozen=True)
class AlternativeRoute:
    route: Route
    original_route: Route
    time_difference_minutes: float  # 후보 - 원래 경로, 항상 >= 0
    reason: AlternativeReason
    avoided_line_ids: Tuple[str, ...]
    affected_line_ids: Tuple[str, ...] = ()
    confidence: float = 80.0

    @property
    def line_ids(self) -> Tuple[str, ...]:
        return self.route.line_ids

    @property
    def transfer_count(self) -> int:
        return self.route.transfer_count


@dataclass(frozen=True)
class AlternativeRouteOptions:
    max_alternatives: int = field(default_factory=lambda: settings.DEFAULT_MAX_ALTERNATIVES)
    transfer_penalty_minutes: Optional[float] = None  # None => 엔진 기본값
    # None => 상한 없음
    max_time_difference_minutes: Optional[float] = field(
        default_factory=lambda: settings.DEFAULT_MAX_TIME_DIFFERENCE_MINUTES
    )
    max_transfers: Optional[int] = None
    max_expansions: Optional[int] = None  # None => 설정값


@dataclass(frozen=True)
class Disruption:
    line_id: str
    reason: AlternativeReason = AlternativeReason.DELAY


@dataclass(frozen=True)
class RouteCalculationResult:
    route: Optional[Route] = None
    error: Optional[RouteError] = None

    @property
    def success(self) -> bool:
        return self.route is not None


@dataclass(frozen=True)
class GraphStats:
    station_count: int
    line_count: int
    ride_edge_count: int
    transfer_edge_count: int
    node_count: int = 0
    transfer_station_ids: Tuple[str, ...] = field(default_factory=tuple)
