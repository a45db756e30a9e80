# src/sitescout/core/jwt_key.py
"""HS256 서명 키 로딩. Base64로 배포된 비밀값은 디코딩한 바이트로 서명한다."""
from __future__ import annotations
import base64
import binascii
import logging
from typing import Optional

logger = logging.getLogger(__name__)

MIN_HMAC_BYTES = 32  # HS256 권장 최소 길이


def _strict_b64(value: str) -> Optional[bytes]:
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError):
        return None


def load_hmac_key(secret: str, *, min_bytes: int = MIN_HMAC_BYTES) -> bytes:
    # .env에 여러 줄로 붙여넣은 키도 한 줄로
    s = "".join((secret or "").split())
    decoded = _strict_b64(s)
    if decoded is not None and len(decoded) >= min_bytes:
        return decoded

    key = s.encode("utf-8")
    if len(key) < min_bytes:
        logger.warning("⚠️ SECRET_KEY가 %d바이트 미만 → 개발용으로만 사용하세요", min_bytes)
    return key
