# src/sitescout/core/urls.py
from __future__ import annotations
import os
from typing import Final

# 베이스 도메인은 .env로 덮어쓸 수 있게
POWER_BASE: Final[str] = os.getenv("POWER_BASE", "https://power.larc.nasa.gov")
GOOGLE_MAPS_BASE: Final[str] = os.getenv("GOOGLE_MAPS_BASE", "https://maps.googleapis.com")

# 경로 상수 (도메인과 분리)
POWER_PATHS = {
    # 일 단위 포인트 데이터
    "daily_point": "/api/temporal/daily/point",
}

GOOGLE_MAPS_PATHS = {
    "geocode": "/maps/api/geocode/json",
}


def power_url(path_key: str) -> str:
    """
    NASA POWER endpoint 빌더.
    ex) power_url("daily_point") -> "https://power.larc.nasa.gov/api/temporal/daily/point"
    """
    return f"{POWER_BASE}{POWER_PATHS[path_key]}"


def google_maps_url(path_key: str) -> str:
    return f"{GOOGLE_MAPS_BASE}{GOOGLE_MAPS_PATHS[path_key]}"
