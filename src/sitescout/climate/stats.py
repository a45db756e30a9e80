# src/sitescout/climate/stats.py
from __future__ import annotations
from typing import Dict, List, Optional, Sequence, Tuple

from sitescout.core.settings import MISSING_SENTINEL
from sitescout.climate.types import DailySeries, MetricGroup, MetricStats

# ✅ 사이트 스카우트 카드 버킷
SITE_SCOUT_GROUPS: Tuple[MetricGroup, ...] = (
    MetricGroup("ghi", "ALLSKY_SFC_SW_DWN"),
    MetricGroup("wind", "WS10M"),
    MetricGroup("temp", "T2M", min_channel="T2M_MIN", max_channel="T2M_MAX"),
    MetricGroup("precip", "PRECTOTCORR"),
)

# ✅ 지도 재생용 버킷 (기온 + 50m 풍속)
PLAYBACK_GROUPS: Tuple[MetricGroup, ...] = (
    MetricGroup("temp", "T2M", min_channel="T2M_MIN", max_channel="T2M_MAX"),
    MetricGroup("wind", "WS50M", min_channel="WS50M_MIN", max_channel="WS50M_MAX"),
)


def ordered_values(series: Dict[str, float]) -> List[float]:
    # 날짜 키(YYYYMMDD)는 문자열 정렬 == 시간순
    return [float(series[k]) for k in sorted(series)]


def is_missing(value: float) -> bool:
    return value <= MISSING_SENTINEL


def _channel(values: List[float], *, strict: bool) -> List[float]:
    if strict:
        return [v for v in values if not is_missing(v)]
    return values


def group_stats(group: MetricGroup, daily: DailySeries, *, strict_sentinels: bool = False) -> Optional[MetricStats]:
    """
    버킷 하나의 통계.
    - mean 채널이 비어 있거나 첫 값이 결측(-999 이하)이면 None
    - strict_sentinels=True면 모든 결측값을 제외하고 계산
    """
    values = ordered_values(daily.get(group.mean) or {})
    if not values or is_missing(values[0]):
        return None

    values = _channel(values, strict=strict_sentinels)
    if not values:
        return None
    stats = MetricStats(avg=sum(values) / len(values))

    if group.min_channel:
        mins = _channel(ordered_values(daily.get(group.min_channel) or {}), strict=strict_sentinels)
        if mins:
            stats.min = min(mins)
    if group.max_channel:
        maxs = _channel(ordered_values(daily.get(group.max_channel) or {}), strict=strict_sentinels)
        if maxs:
            stats.max = max(maxs)
    return stats


def summarize(daily: DailySeries, groups: Sequence[MetricGroup], *, strict_sentinels: bool = False) -> Dict[str, MetricStats]:
    out: Dict[str, MetricStats] = {}
    for group in groups:
        stats = group_stats(group, daily, strict_sentinels=strict_sentinels)
        if stats is not None:
            out[group.key] = stats
    return out


def groups_for(parameters: Sequence[str]) -> Tuple[MetricGroup, ...]:
    """요청 파라미터 집합에 맞는 버킷 정의를 고른다."""
    if "WS50M" in parameters:
        return PLAYBACK_GROUPS
    return SITE_SCOUT_GROUPS
