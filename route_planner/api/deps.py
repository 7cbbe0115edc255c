import secrets
from typing import Optional
from fastapi import Header, HTTPException, status

from route_planner.core.config import settings
from route_planner.services.route_factory import get_route_engine
from route_planner.services.route_service import RouteEngine


# lru_cache 싱글톤을 의존성으로 주입 => 테스트에서 dependency_overrides로 교체
def get_engine() -> RouteEngine:
    return get_route_engine()


# 관리용 엔드포인트 보호 => ADMIN_TOKEN 미설정 시 항상 거부
async def require_admin_token(
    x_admin_token: Optional[str] = Header(default=None, alias="X-Admin-Token"),
) -> None:
    expected = settings.ADMIN_TOKEN
    if not expected or x_admin_token is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"message": "관리자 토큰이 필요합니다", "code": "FORBIDDEN"},
        )

    if not secrets.compare_digest(x_admin_token, expected):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"message": "관리자 토큰이 올바르지 않습니다", "code": "FORBIDDEN"},
        )
