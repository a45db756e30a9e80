# src/sitescout/api/climate.py
import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError

from sitescout.climate.power import NasaPowerProvider
from sitescout.climate.types import ClimateProvider, ClimateQuery, FetchError, ParseError
from sitescout.models.schemas import ClimateRequest
from sitescout.render.insight_card import build_insight_card
from sitescout.utils.daterange import resolve_range

logger = logging.getLogger(__name__)

router = APIRouter()


def get_climate_provider() -> ClimateProvider:
    return NasaPowerProvider()


@router.get("/climate")
async def climate_summary(
    latitude: float,
    longitude: float,
    start: str | None = None,
    end: str | None = None,
    provider: ClimateProvider = Depends(get_climate_provider),
):
    """
    위경도/기간의 NASA POWER 요약
    - start/end 생략 시 직전 연도 전체
    - 응답: {meta, daily, stats, card}
    """
    try:
        req = ClimateRequest(latitude=latitude, longitude=longitude, start=start, end=end)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))

    start, end = resolve_range(req.start, req.end)
    query = ClimateQuery(latitude=req.latitude, longitude=req.longitude, start=start, end=end)

    try:
        result = await provider.aggregate(query)
    except FetchError as e:
        logger.error("❌ NASA POWER 조회 실패: %s", e)
        raise HTTPException(status_code=502, detail=str(e))
    except ParseError as e:
        logger.error("❌ NASA POWER 응답 파싱 실패: %s", e)
        raise HTTPException(status_code=502, detail=str(e))

    return {
        **result.to_dict(),
        "card": build_insight_card(result.stats, result.meta["parameters"]).model_dump(),
    }
