import os
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

load_dotenv()  # 환경변수 읽어오기

_PACKAGE_DIR = Path(__file__).resolve().parent.parent


def _optional_float(name: str) -> Optional[float]:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return None
    return float(value)


class Settings:
    PROJECT_NAME: str = "Subway Route Planner"
    VERSION: str = "1.0.0"

    DEBUG: bool = os.getenv("DEBUG", "False").lower() == "true"
    PORT: int = int(os.getenv("PORT", 8001))

    # 역 간 기본 소요시간(분) <- 구간별 시간이 없을 때 사용
    DEFAULT_MINUTES_PER_HOP: float = float(os.getenv("DEFAULT_MINUTES_PER_HOP", 2.5))
    # 환승 페널티(분) => 0이 아니어야 불필요한 환승을 억제함
    DEFAULT_TRANSFER_PENALTY_MINUTES: float = float(
        os.getenv("DEFAULT_TRANSFER_PENALTY_MINUTES", 4.0)
    )

    # 대체 경로 설정
    DEFAULT_MAX_ALTERNATIVES: int = int(os.getenv("DEFAULT_MAX_ALTERNATIVES", 3))
    # 미설정 => 시간 차이 상한 없음
    DEFAULT_MAX_TIME_DIFFERENCE_MINUTES: Optional[float] = _optional_float(
        "DEFAULT_MAX_TIME_DIFFERENCE_MINUTES"
    )
    # k-최단경로 후보 최대 생성 수
    ALTERNATIVE_CANDIDATE_LIMIT: int = int(
        os.getenv("ALTERNATIVE_CANDIDATE_LIMIT", 20)
    )
    # 노드 확장 예산 <- 환승이 밀집된 토폴로지 보호
    ALTERNATIVE_SEARCH_MAX_EXPANSIONS: int = int(
        os.getenv("ALTERNATIVE_SEARCH_MAX_EXPANSIONS", 200000)
    )

    # 역/노선 카탈로그 (JSON)
    CATALOG_PATH: str = os.getenv(
        "CATALOG_PATH", str(_PACKAGE_DIR / "data" / "sample_catalog.json")
    )

    # 그래프 재구축 엔드포인트 보호용 토큰, 미설정 시 엔드포인트 비활성화
    ADMIN_TOKEN: Optional[str] = os.getenv("ADMIN_TOKEN") or None

    # 경로 계산 메트릭 로깅 활성화 플래그
    ENABLE_ROUTE_METRICS: bool = (
        os.getenv("ENABLE_ROUTE_METRICS", "true").lower() == "true"
    )

    # 성능 모니터링
    ENABLE_PERFORMANCE_MONITORING: bool = (
        os.getenv("ENABLE_PERFORMANCE_MONITORING", "true").lower() == "true"
    )
    SLOW_REQUEST_THRESHOLD_MS: float = float(
        os.getenv("SLOW_REQUEST_THRESHOLD_MS", 500)
    )

    ALLOWED_ORIGINS: list[str] = os.getenv(
        "ALLOWED_ORIGINS",
        "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000",
    ).split(",")


settings = Settings()  # 모듈화


# 노선 표시 이름
LINE_NAMES = {
    "1": "1호선",
    "2": "2호선",
    "3": "3호선",
    "4": "4호선",
    "5": "5호선",
    "6": "6호선",
    "7": "7호선",
    "8": "8호선",
    "9": "9호선",
}

# 노선 대표 색상 <- 카탈로그에 색상이 없을 때 사용
LINE_COLORS = {
    "1": "#0052A4",
    "2": "#00A84D",
    "3": "#EF7C1C",
    "4": "#00A5DE",
    "5": "#996CAC",
    "6": "#CD7C2F",
    "7": "#747F00",
    "8": "#E6186C",
    "9": "#BDB092",
}

DEFAULT_LINE_COLOR = "#888888"

# 대체 경로 사유별 표시 문구
REASON_LABELS = {
    "DELAY": "지연",
    "SUSPENSION": "운행 중단",
    "CONGESTION": "혼잡",
}

# 여러 장애가 겹칠 때 대표 사유 선택 기준 (클수록 심각)
REASON_SEVERITY = {
    "CONGESTION": 1,
    "DELAY": 2,
    "SUSPENSION": 3,
}
