# src/sitescout/climate/types.py
from __future__ import annotations
import asyncio
from dataclasses import dataclass, field
from datetime import date
from typing import Protocol, Dict, Any, List, Optional, Tuple, Union

from sitescout.core.settings import SITE_SCOUT_PARAMETERS

DailySeries = Dict[str, Dict[str, float]]
PowerDate = Union[str, date]


class ClimateDataError(Exception):
    """NASA POWER 조회/파싱 실패의 공통 부모."""


class FetchError(ClimateDataError):
    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class FetchCancelled(FetchError):
    pass


class ParseError(ClimateDataError):
    pass


@dataclass(frozen=True)
class MetricGroup:
    """
    통계 버킷 하나의 정의.
    mean 채널로 평균을 내고, min/max는 전용 채널이 있을 때만 계산한다.
    """
    key: str
    mean: str
    min_channel: Optional[str] = None
    max_channel: Optional[str] = None


@dataclass
class ClimateQuery:
    latitude: float
    longitude: float
    start: PowerDate
    end: PowerDate
    parameters: Tuple[str, ...] = SITE_SCOUT_PARAMETERS


@dataclass
class MetricStats:
    avg: float
    min: Optional[float] = None
    max: Optional[float] = None

    def to_dict(self) -> Dict[str, float]:
        out = {"avg": self.avg}
        if self.min is not None:
            out["min"] = self.min
        if self.max is not None:
            out["max"] = self.max
        return out


@dataclass
class AggregationResult:
    meta: Dict[str, Any]
    daily: DailySeries
    stats: Dict[str, MetricStats] = field(default_factory=dict)

    @property
    def dates(self) -> List[str]:
        """요청 파라미터들이 공유하는 날짜 키 (시간순)."""
        for code in self.meta.get("parameters", []):
            series = self.daily.get(code)
            if series:
                return sorted(series)
        return []

    def stats_dict(self) -> Dict[str, Dict[str, float]]:
        return {k: v.to_dict() for k, v in self.stats.items()}

    def to_dict(self) -> Dict[str, Any]:
        return {"meta": self.meta, "daily": self.daily, "stats": self.stats_dict()}


class ClimateProvider(Protocol):
    async def aggregate(self, query: ClimateQuery, *, cancel: Optional[asyncio.Event] = None) -> AggregationResult: ...
