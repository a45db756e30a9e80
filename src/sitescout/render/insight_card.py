# src/sitescout/render/insight_card.py
from __future__ import annotations
from typing import List, Mapping, Optional, Sequence

from pydantic import BaseModel

from sitescout.climate.types import MetricStats


class InsightMetric(BaseModel):
    key: str
    label: str
    value: str
    unit: Optional[str] = None
    description: str


class InsightCard(BaseModel):
    title: str = "NASA POWER Data Summary"
    metrics: List[InsightMetric]


def _ghi(s: MetricStats, _: Sequence[str]) -> InsightMetric:
    return InsightMetric(
        key="ghi", label="Solar Irradiance (GHI)", value=f"{s.avg:.2f}", unit="kWh/m²/day",
        description="Avg. daily energy from the sun.",
    )


def _wind(s: MetricStats, parameters: Sequence[str]) -> InsightMetric:
    height = "50m" if "WS50M" in parameters else "10m"
    return InsightMetric(
        key="wind", label=f"Wind Speed ({height})", value=f"{s.avg:.2f}", unit="m/s",
        description=f"Avg. wind speed {height} above ground.",
    )


def _temp(s: MetricStats, _: Sequence[str]) -> InsightMetric:
    parts = []
    if s.min is not None:
        parts.append(f"min: {s.min:.1f}°")
    if s.max is not None:
        parts.append(f"max: {s.max:.1f}°")
    description = f"Avg. with {' / '.join(parts)}" if parts else "Avg. daily air temperature."
    return InsightMetric(key="temp", label="Air Temperature", value=f"{s.avg:.1f}°C", description=description)


def _precip(s: MetricStats, _: Sequence[str]) -> InsightMetric:
    return InsightMetric(
        key="precip", label="Precipitation", value=f"{s.avg:.1f}", unit="mm/day",
        description="Avg. daily rainfall equivalent.",
    )


# 카드 표시 순서 고정
CARD_BUILDERS = (("ghi", _ghi), ("wind", _wind), ("temp", _temp), ("precip", _precip))


def build_insight_card(stats: Mapping[str, MetricStats], parameters: Sequence[str] = ()) -> InsightCard:
    metrics = [build(stats[key], parameters) for key, build in CARD_BUILDERS if key in stats]
    return InsightCard(metrics=metrics)

