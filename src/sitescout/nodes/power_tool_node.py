# power_tool_node.py
import json
import logging
from typing import Any, Dict, Optional

from langchain_core.messages import ToolMessage
from pydantic import ValidationError

from sitescout.climate.types import ClimateDataError, ClimateProvider, ClimateQuery
from sitescout.geocoding.google import GeocodingError
from sitescout.models.lg_schemas import State
from sitescout.models.schemas import GetPowerDataArgs
from sitescout.nodes.prompts import TOOL_ERROR_REPLY
from sitescout.nodes.scout_llm_node import POWER_TOOL_NAME
from sitescout.utils.daterange import resolve_range

logger = logging.getLogger(__name__)


class MissingLocationError(ValueError):
    pass


async def resolve_coordinates(args: GetPowerDataArgs, geocoder) -> tuple:
    """location 우선, 없으면 명시 좌표. 둘 다 없으면 오류."""
    if args.location:
        coords = await geocoder.geocode(args.location)
        return coords.lat, coords.lng, f'\n> _Geocoded "{args.location}" to {coords.lat:.4f}, {coords.lng:.4f}._\n'
    if args.latitude is not None and args.longitude is not None:
        return args.latitude, args.longitude, None
    raise MissingLocationError(
        f"Please provide either a location name or latitude/longitude coordinates for the `{POWER_TOOL_NAME}` tool."
    )


def tool_response(stats: Dict[str, Any], location: str) -> Dict[str, Any]:
    return {**stats, "location": location}


def make_power_tool_node(climate: ClimateProvider, geocoder):
    async def power_tool_node(state: State) -> Dict[str, Any]:
        call: Dict[str, Any] = state["tool_call"] or {}
        notes = list(state.get("notes", []))
        try:
            args = GetPowerDataArgs.model_validate(call.get("args") or {})
            lat, lon, note = await resolve_coordinates(args, geocoder)
            if note:
                notes.append(note)

            start, end = resolve_range(args.start, args.end)
            result = await climate.aggregate(ClimateQuery(latitude=lat, longitude=lon, start=start, end=end))
        except (ClimateDataError, GeocodingError, ValidationError, MissingLocationError) as e:
            logger.error("❌ get_power_data 실패: %s", e)
            return {"tool_done": True, "notes": notes, "error": TOOL_ERROR_REPLY.format(reason=e)}
        except Exception as e:
            logger.exception("❌ get_power_data 예기치 못한 오류")
            return {"tool_done": True, "notes": notes, "error": TOOL_ERROR_REPLY.format(reason=e)}

        location: Optional[str] = args.location or f"{lat:.2f}, {lon:.2f}"
        payload = tool_response(result.stats_dict(), location)
        reply = ToolMessage(
            content=json.dumps(payload, ensure_ascii=False),
            name=POWER_TOOL_NAME,
            tool_call_id=call.get("id") or POWER_TOOL_NAME,
        )
        logger.info("✅ get_power_data 완료: %s", payload)
        return {
            "tool_done": True,
            "notes": notes,
            "insight": result,
            "location": location,
            "messages": [*state.get("messages", []), reply],
        }

    return power_tool_node
