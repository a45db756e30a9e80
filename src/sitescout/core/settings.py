# src/sitescout/core/settings.py
from __future__ import annotations
import os
from typing import Final, Tuple

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# NASA POWER
POWER_COMMUNITY = os.getenv("POWER_COMMUNITY", "RE")
POWER_TIMEOUT_S = float(os.getenv("POWER_TIMEOUT_S", "30"))
MISSING_SENTINEL = float(os.getenv("POWER_MISSING_SENTINEL", "-999"))

# 사이트 스카우트 요약 카드용 (일사량/풍속/기온/강수)
SITE_SCOUT_PARAMETERS: Final[Tuple[str, ...]] = (
    "ALLSKY_SFC_SW_DWN", "WS10M", "T2M", "T2M_MIN", "T2M_MAX", "PRECTOTCORR",
)
# 지도 재생용 (기온 + 50m 풍속)
PLAYBACK_PARAMETERS: Final[Tuple[str, ...]] = (
    "T2M", "T2M_MAX", "T2M_MIN", "WS50M", "WS50M_MAX", "WS50M_MIN",
)
PLAYBACK_DELAY_MS = int(os.getenv("PLAYBACK_DELAY_MS", "2000"))

# Google
GOOGLE_MAPS_API_KEY = os.getenv("GOOGLE_MAPS_API_KEY", "")
GEOCODING_TIMEOUT_S = float(os.getenv("GEOCODING_TIMEOUT_S", "7"))

# LLM
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
GEMINI_TEMPERATURE = float(os.getenv("GEMINI_TEMPERATURE", "0.7"))

# Auth
SECRET_KEY = os.getenv("SECRET_KEY", "dev_secret")  # 기본값은 dev용
ALGORITHM = "HS256"

CORS_ORIGINS = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173").split(",")
    if o.strip()
]
