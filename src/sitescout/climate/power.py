"""
NASA POWER 일 단위 포인트 데이터 모듈
-------------------------------------

`/api/temporal/daily/point` 엔드포인트에서 위경도/기간별 일 단위 관측값을 받아
파라미터별 시계열(daily)과 요약 통계(stats)로 정리합니다.

- 요청 1회 = 외부 호출 1회 (재시도/캐시 없음)
- 전송 실패, 타임아웃, 2xx 이외 상태코드 → FetchError
- JSON이 아니거나 properties.parameter가 없으면 → ParseError
- 개별 파라미터 누락은 빈 시계열로 처리 (해당 통계 버킷만 빠짐)

공식 문서: https://power.larc.nasa.gov/docs/services/api/temporal/daily/
"""

from __future__ import annotations
import asyncio
import logging
from datetime import date
from typing import Any, Dict, Optional, Sequence

import httpx

from sitescout.core.settings import POWER_COMMUNITY, POWER_TIMEOUT_S
from sitescout.core.urls import power_url
from sitescout.climate.stats import groups_for, summarize
from sitescout.climate.types import (
    AggregationResult,
    ClimateQuery,
    DailySeries,
    FetchCancelled,
    FetchError,
    MetricGroup,
    ParseError,
    PowerDate,
)

logger = logging.getLogger(__name__)


def power_date(value: PowerDate) -> str:
    # 문자열은 호출자가 준 그대로 전달 (형식 검증은 업스트림 몫)
    if isinstance(value, date):
        return value.strftime("%Y%m%d")
    return str(value)


def build_params(query: ClimateQuery) -> Dict[str, str]:
    return {
        "parameters": ",".join(query.parameters),
        "community": POWER_COMMUNITY,
        "latitude": str(query.latitude),
        "longitude": str(query.longitude),
        "start": power_date(query.start),
        "end": power_date(query.end),
        "format": "JSON",
    }


def _upstream_message(response: httpx.Response) -> str:
    """POWER는 422 등에서 {"messages": [...]} 형태로 사유를 준다."""
    try:
        body = response.json()
    except ValueError:
        return ""
    if isinstance(body, dict):
        msgs = body.get("messages") or body.get("message") or body.get("detail")
        if isinstance(msgs, list):
            return "; ".join(str(m) for m in msgs)
        if msgs:
            return str(msgs)
    return ""


def parse_daily(payload: Any, parameters: Sequence[str]) -> DailySeries:
    if not isinstance(payload, dict):
        raise ParseError("NASA POWER response is not a JSON object.")
    properties = payload.get("properties")
    container = properties.get("parameter") if isinstance(properties, dict) else None
    if not isinstance(container, dict):
        raise ParseError("NASA POWER response without 'properties.parameter' data.")

    daily: DailySeries = {}
    for code in parameters:
        series = container.get(code)
        if not isinstance(series, dict):
            logger.warning("⚠️ NASA POWER 응답에 %s 파라미터 없음 → 빈 시계열", code)
            daily[code] = {}
            continue
        try:
            daily[code] = {str(k): float(v) for k, v in series.items()}
        except (TypeError, ValueError) as e:
            raise ParseError(f"Non-numeric value in NASA POWER series {code}: {e}") from e
    return daily


async def _send(
    client: httpx.AsyncClient,
    params: Dict[str, str],
    cancel: Optional[asyncio.Event],
    timeout: float,
) -> httpx.Response:
    request = client.get(power_url("daily_point"), params=params, timeout=timeout)
    if cancel is None:
        return await request

    fetch = asyncio.ensure_future(request)
    stop = asyncio.ensure_future(cancel.wait())
    try:
        await asyncio.wait({fetch, stop}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        # 호출자 태스크가 취소된 경우에도 요청 태스크를 남기지 않음
        for task in (fetch, stop):
            task.cancel()
        await asyncio.wait({fetch, stop})
    if fetch.cancelled():
        raise FetchCancelled("NASA POWER request was cancelled.")
    return fetch.result()


async def aggregate(
    query: ClimateQuery,
    *,
    client: Optional[httpx.AsyncClient] = None,
    timeout: Optional[float] = None,
    cancel: Optional[asyncio.Event] = None,
    groups: Optional[Sequence[MetricGroup]] = None,
    strict_sentinels: bool = False,
) -> AggregationResult:
    """
    위경도/기간으로 NASA POWER 일 단위 데이터를 받아 요약합니다.

    Args:
        query: 위경도, 시작/종료일(YYYYMMDD 또는 date), 파라미터 코드
        client: 주입할 httpx.AsyncClient (없으면 호출마다 새로 생성)
        timeout: 요청 타임아웃(초), 기본 POWER_TIMEOUT_S
        cancel: set()되면 응답 대기를 중단하고 FetchCancelled
        groups: 통계 버킷 정의 (기본은 파라미터 집합에 맞춰 선택)
        strict_sentinels: True면 -999 이하 값을 모두 빼고 계산

    Returns:
        AggregationResult(meta, daily, stats)
    """
    if cancel is not None and cancel.is_set():
        raise FetchCancelled("NASA POWER request was cancelled.")

    params = build_params(query)
    logger.info("🛰️ NASA POWER 요청: lat=%s lon=%s %s~%s", query.latitude, query.longitude, params["start"], params["end"])

    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(timeout=timeout or POWER_TIMEOUT_S)
    try:
        response = await _send(client, params, cancel, timeout or POWER_TIMEOUT_S)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        status = exc.response.status_code
        detail = _upstream_message(exc.response)
        message = f"NASA POWER API request failed with status {status}"
        if detail:
            message = f"{message}: {detail}"
        raise FetchError(message, status_code=status) from exc
    except httpx.TimeoutException as exc:
        raise FetchError("NASA POWER API request timed out.") from exc
    except httpx.HTTPError as exc:
        raise FetchError(f"Communication failure with NASA POWER: {exc}") from exc
    finally:
        if owns_client:
            await client.aclose()

    try:
        payload = response.json()
    except ValueError as exc:
        raise ParseError("NASA POWER response is not valid JSON.") from exc

    daily = parse_daily(payload, query.parameters)
    stats = summarize(daily, groups or groups_for(query.parameters), strict_sentinels=strict_sentinels)
    logger.info("✅ NASA POWER 요약 완료: %s", sorted(stats))

    return AggregationResult(
        meta={
            "lat": query.latitude,
            "lon": query.longitude,
            "start": params["start"],
            "end": params["end"],
            "parameters": list(query.parameters),
        },
        daily=daily,
        stats=stats,
    )


class NasaPowerProvider:
    """ClimateProvider 구현. 파이프라인/라우터에 주입하기 위한 얇은 래퍼."""

    def __init__(self, *, timeout: Optional[float] = None, strict_sentinels: bool = False) -> None:
        self.timeout = timeout
        self.strict_sentinels = strict_sentinels

    async def aggregate(self, query: ClimateQuery, *, cancel: Optional[asyncio.Event] = None) -> AggregationResult:
        return await aggregate(query, timeout=self.timeout, cancel=cancel, strict_sentinels=self.strict_sentinels)
