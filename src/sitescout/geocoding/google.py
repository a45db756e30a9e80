"""
Google Geocoding API 모듈
-------------------------

장소 이름(예: "Paris, France", "Sahara Desert")을 위경도로 바꿉니다.
좌표 계산 자체는 하지 않고 Google 웹 서비스 결과를 그대로 사용합니다.

- `geocode_location()`: 첫 번째 결과의 geometry.location 반환
- status가 OK가 아니거나 결과가 없으면 GeocodingError

공식 문서: https://developers.google.com/maps/documentation/geocoding/requests-geocoding
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

import httpx

from sitescout.core.settings import GOOGLE_MAPS_API_KEY, GEOCODING_TIMEOUT_S
from sitescout.core.urls import google_maps_url


class GeocodingError(Exception):
    pass


@dataclass
class Coordinates:
    lat: float
    lng: float


def _failure(name: str, reason: str) -> GeocodingError:
    return GeocodingError(f'Geocoding failed for "{name}". Reason: {reason}')


async def geocode_location(
    name: str,
    *,
    client: Optional[httpx.AsyncClient] = None,
    api_key: Optional[str] = None,
) -> Coordinates:
    key = api_key or GOOGLE_MAPS_API_KEY
    if not key:
        raise GeocodingError("GOOGLE_MAPS_API_KEY missing")

    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(timeout=GEOCODING_TIMEOUT_S)
    try:
        r = await client.get(google_maps_url("geocode"), params={"address": name, "key": key})
        r.raise_for_status()
        body = r.json()
    except httpx.HTTPStatusError as e:
        raise _failure(name, f"HTTP {e.response.status_code}") from e
    except httpx.HTTPError as e:
        raise _failure(name, str(e) or type(e).__name__) from e
    except ValueError as e:
        raise _failure(name, "invalid JSON response") from e
    finally:
        if owns_client:
            await client.aclose()

    if not isinstance(body, dict):
        raise _failure(name, "malformed response")
    status = body.get("status", "UNKNOWN_ERROR")
    results = body.get("results") or []
    if status != "OK" or not results:
        raise _failure(name, status)

    # 첫 결과의 geometry.location만 사용
    try:
        loc = results[0]["geometry"]["location"]
        return Coordinates(lat=float(loc["lat"]), lng=float(loc["lng"]))
    except (KeyError, TypeError, ValueError) as e:
        raise _failure(name, "malformed response") from e


class GoogleGeocoder:
    def __init__(self, api_key: Optional[str] = None) -> None:
        self.api_key = api_key

    async def geocode(self, name: str) -> Coordinates:
        return await geocode_location(name, api_key=self.api_key)
