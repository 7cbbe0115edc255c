"""
REST API 경로 계산 / 대체 경로 엔드포인트
"""

from fastapi import APIRouter, HTTPException, Depends
import logging

from route_planner.api.deps import get_engine
from route_planner.core.exceptions import (
    RoutePlannerException,
    RouteNotFoundException,
    SameStationException,
    StationNotFoundException,
)
from route_planner.models.domain import (
    AlternativeRoute,
    Disruption,
    RouteCalculationResult,
    RouteError,
)
from route_planner.models.requests import AlternativeRoutesRequest, RouteCalculateRequest
from route_planner.models.responses import (
    AlternativeRouteResponse,
    AlternativeRoutesResponse,
    RouteResponse,
)
from route_planner.services.route_display import (
    find_affected_line_ids,
    format_time_difference,
    get_reason_label,
    get_route_summary,
    get_time_difference_severity,
)
from route_planner.services.route_service import RouteEngine


router = APIRouter()
logger = logging.getLogger(__name__)

# 에러 코드 => HTTP 상태 코드
_STATUS_BY_CODE = {
    "INVALID_STATION": 404,
    "SAME_STATION": 400,
    "NO_PATH": 404,
}


def _raise_for_result(result: RouteCalculationResult, from_id: str, to_id: str) -> None:
    if result.error == RouteError.INVALID_STATION:
        raise StationNotFoundException(f"역을 찾을 수 없습니다: {from_id}, {to_id}")
    if result.error == RouteError.SAME_STATION:
        raise SameStationException()
    if result.error == RouteError.NO_PATH:
        raise RouteNotFoundException(f"{from_id}에서 {to_id}까지 경로를 찾을 수 없습니다")


def _to_http_exception(e: RoutePlannerException) -> HTTPException:
    return HTTPException(
        status_code=_STATUS_BY_CODE.get(e.code, 400),
        detail={"message": e.message, "code": e.code},
    )


def _alternative_response(rank: int, alternative: AlternativeRoute) -> AlternativeRouteResponse:
    diff = alternative.time_difference_minutes
    return AlternativeRouteResponse(
        rank=rank,
        route=RouteResponse.from_domain(alternative.route, get_route_summary(alternative.route)),
        time_difference_minutes=diff,
        time_difference_label=format_time_difference(diff),
        severity=get_time_difference_severity(diff),
        reason=alternative.reason,
        reason_label=get_reason_label(alternative.reason),
        avoided_line_ids=list(alternative.avoided_line_ids),
        affected_line_ids=list(alternative.affected_line_ids),
        confidence=alternative.confidence,
    )


@router.post("/calculate", response_model=RouteResponse)
def calculate_route(
    request: RouteCalculateRequest,
    engine: RouteEngine = Depends(get_engine),
):
    """
    최단 시간 경로 계산

    - **from_station_id**: 출발역 ID
    - **to_station_id**: 도착역 ID
    - **transfer_penalty_minutes**: 환승 페널티(분), 선택

    Example:
        POST /v1/routes/calculate
        {
            "from_station_id": "0222",
            "to_station_id": "0151"
        }
    """
    try:
        logger.info(f"REST 경로 계산: {request.from_station_id} → {request.to_station_id}")

        result = engine.evaluate_route(
            request.from_station_id,
            request.to_station_id,
            transfer_penalty_minutes=request.transfer_penalty_minutes,
        )
        _raise_for_result(result, request.from_station_id, request.to_station_id)

        return RouteResponse.from_domain(result.route, get_route_summary(result.route))

    except RoutePlannerException as e:
        logger.error(f"경로 계산 실패: {e.message}")
        raise _to_http_exception(e)


@router.post("/alternatives", response_model=AlternativeRoutesResponse)
def find_alternative_routes(
    request: AlternativeRoutesRequest,
    engine: RouteEngine = Depends(get_engine),
):
    """
    장애 노선을 피하는 대체 경로

    blocked_line_ids는 요청의 reason으로, disruptions는 각자의 사유로 처리
    원래 경로가 장애 노선을 쓰지 않으면 alternatives는 빈 리스트

    Example:
        POST /v1/routes/alternatives
        {
            "from_station_id": "0222",
            "to_station_id": "0151",
            "blocked_line_ids": ["2"],
            "reason": "SUSPENSION",
            "options": {"max_alternatives": 3}
        }
    """
    try:
        options = request.options.to_domain()
        logger.info(
            f"REST 대체 경로: {request.from_station_id} → {request.to_station_id}, "
            f"blocked={request.blocked_line_ids}, disruptions={len(request.disruptions)}"
        )

        result = engine.evaluate_route(
            request.from_station_id,
            request.to_station_id,
            transfer_penalty_minutes=options.transfer_penalty_minutes,
        )
        _raise_for_result(result, request.from_station_id, request.to_station_id)
        original = result.route

        disruptions = [d.to_domain() for d in request.disruptions]
        disruptions.extend(
            Disruption(line_id=line_id, reason=request.reason)
            for line_id in request.blocked_line_ids
        )

        if request.disruptions:
            alternatives = engine.find_alternatives_for_disruptions(
                request.from_station_id,
                request.to_station_id,
                disruptions,
                options=options,
            )
        else:
            alternatives = engine.find_alternative_routes(
                request.from_station_id,
                request.to_station_id,
                request.blocked_line_ids,
                request.reason,
                options=options,
                original_route=original,
            )

        return AlternativeRoutesResponse(
            original_route=RouteResponse.from_domain(original, get_route_summary(original)),
            affected_line_ids=find_affected_line_ids(original, disruptions),
            alternatives=[
                _alternative_response(rank, alternative)
                for rank, alternative in enumerate(alternatives, start=1)
            ],
            count=len(alternatives),
        )

    except RoutePlannerException as e:
        logger.error(f"대체 경로 탐색 실패: {e.message}")
        raise _to_http_exception(e)
