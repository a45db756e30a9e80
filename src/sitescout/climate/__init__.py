from .types import (
    AggregationResult,
    ClimateDataError,
    ClimateQuery,
    FetchCancelled,
    FetchError,
    MetricStats,
    ParseError,
)
from .power import aggregate, NasaPowerProvider

__all__ = [
    "AggregationResult",
    "ClimateDataError",
    "ClimateQuery",
    "FetchCancelled",
    "FetchError",
    "MetricStats",
    "ParseError",
    "aggregate",
    "NasaPowerProvider",
]
