"""
일자별 마커 재생 (playback)
---------------------------

NASA POWER 일 단위 결과를 날짜당 마커 하나로 펼치고, 한 번에 하나만 보이도록
순서대로 넘겨 보여주는 도우미입니다.

상태는 전역 변수가 아니라 호출자가 가진 `PlaybackSession`에 담깁니다.
세션은 반드시 조회 결과(AggregationResult)로부터 만들어지므로
데이터 없이 마커만 있는 상태는 생기지 않습니다.

오류 처리 정책: 조회(aggregate)는 예외를 올리지만, 여기 표시용 함수들은
잘못된 입력이면 경고 로그만 남기고 아무것도 바꾸지 않습니다.
"""

from __future__ import annotations
import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Awaitable, Callable, List, Optional

import httpx

from sitescout.core.settings import PLAYBACK_DELAY_MS, PLAYBACK_PARAMETERS
from sitescout.climate.power import aggregate
from sitescout.climate.stats import PLAYBACK_GROUPS
from sitescout.climate.types import AggregationResult, ClimateQuery
from sitescout.utils.daterange import months_back_range

logger = logging.getLogger(__name__)

METRIC_LABELS = {
    "T2M": "Avg Temp (°C)",
    "T2M_MAX": "Max Temp (°C)",
    "T2M_MIN": "Min Temp (°C)",
    "WS50M": "Wind Speed @50m (m/s)",
    "WS50M_MAX": "Max Wind @50m (m/s)",
    "WS50M_MIN": "Min Wind @50m (m/s)",
}

Sleep = Callable[[float], Awaitable[None]]


@dataclass
class Marker:
    index: int
    date: str
    lat: float
    lon: float
    show: bool = False
    description: str = ""


@dataclass
class PlaybackSession:
    result: AggregationResult
    markers: List[Marker] = field(default_factory=list)
    active_index: int = 0
    playing: bool = False

    @classmethod
    def from_result(cls, result: AggregationResult) -> "PlaybackSession":
        lat = result.meta["lat"]
        lon = result.meta["lon"]
        markers = [
            Marker(index=i, date=d, lat=lat, lon=lon, show=(i == 0), description=summary_description(result, d))
            for i, d in enumerate(result.dates)
        ]
        return cls(result=result, markers=markers)

    @property
    def visible(self) -> List[int]:
        return [m.index for m in self.markers if m.show]


def _value(result: AggregationResult, code: str, day: str):
    return result.daily.get(code, {}).get(day)


def summary_description(result: AggregationResult, day: str) -> str:
    def v(code: str):
        return _value(result, code, day)

    return (
        f"<strong>NASA Data ({day})</strong><br/>"
        f"🌡 Temp: {v('T2M')} °C (Min: {v('T2M_MIN')}, Max: {v('T2M_MAX')})<br/>"
        f"💨 Wind @50m: {v('WS50M')} m/s (Min: {v('WS50M_MIN')}, Max: {v('WS50M_MAX')})"
    )


async def fetch_and_plot(
    lat: float,
    lon: float,
    months_back: int,
    *,
    today: Optional[date] = None,
    client: Optional[httpx.AsyncClient] = None,
    cancel: Optional[asyncio.Event] = None,
) -> PlaybackSession:
    """최근 N개월 기온/50m 풍속을 받아 마커 세션을 만든다. 조회 실패는 그대로 올린다."""
    start, end = months_back_range(months_back, today=today)
    query = ClimateQuery(latitude=lat, longitude=lon, start=start, end=end, parameters=PLAYBACK_PARAMETERS)
    result = await aggregate(query, client=client, cancel=cancel, groups=PLAYBACK_GROUPS)
    session = PlaybackSession.from_result(result)
    logger.info("📍 마커 %d개 생성 (%s~%s)", len(session.markers), start, end)
    return session


def select_day(session: PlaybackSession, index: int, metric: str = "T2M") -> PlaybackSession:
    series = session.result.daily.get(metric)
    if not (0 <= index < len(session.markers)) or not series:
        logger.warning("⚠️ Invalid index or variable: index=%s metric=%s", index, metric)
        return session

    for m in session.markers:
        m.show = m.index == index

    marker = session.markers[index]
    label = METRIC_LABELS.get(metric, metric)
    marker.description = (
        f"<strong>{label}</strong><br/>"
        f"Date: {marker.date}<br/>"
        f"Value: {series.get(marker.date)}"
    )
    session.active_index = index
    return session


async def _pause(sleep: Sleep, seconds: float, cancel: Optional[asyncio.Event]) -> None:
    """cancel이 set()되면 남은 대기 시간을 버리고 바로 돌아온다."""
    if cancel is None:
        await sleep(seconds)
        return

    nap = asyncio.ensure_future(sleep(seconds))
    stop = asyncio.ensure_future(cancel.wait())
    try:
        await asyncio.wait({nap, stop}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for task in (nap, stop):
            task.cancel()
        await asyncio.wait({nap, stop})
    if not nap.cancelled():
        nap.result()


async def play_days(
    session: PlaybackSession,
    metric: str = "T2M",
    delay_ms: int = PLAYBACK_DELAY_MS,
    *,
    sleep: Sleep = asyncio.sleep,
    cancel: Optional[asyncio.Event] = None,
) -> PlaybackSession:
    """
    0..n 순서로 하루씩 보여준다. 단계 사이 대기는 delay_ms로 일정.
    같은 세션에 대한 재생이 이미 진행 중이면 무시한다.
    """
    if not session.markers or not session.result.daily:
        logger.warning("⚠️ No data or markers loaded")
        return session
    if not session.result.daily.get(metric):
        logger.warning("⚠️ Unknown metric for playback: %s", metric)
        return session
    if session.playing:
        logger.warning("⚠️ Playback already running for this session")
        return session

    session.playing = True
    try:
        for i in range(len(session.markers)):
            if cancel is not None and cancel.is_set():
                logger.info("⏹️ 재생 중단 (index=%d)", i)
                break
            select_day(session, i, metric)
            await _pause(sleep, delay_ms / 1000, cancel)
    finally:
        session.playing = False
    return session
