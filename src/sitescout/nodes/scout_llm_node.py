# scout_llm_node.py
import logging
from typing import Any, Dict, List

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from sitescout.models.lg_schemas import State
from sitescout.nodes.prompts import SYSTEM_INSTRUCTIONS, ERROR_REPLY

logger = logging.getLogger(__name__)

POWER_TOOL_NAME = "get_power_data"

# Gemini 함수 선언 (OpenAI function 형식 → langchain이 변환)
POWER_TOOL: Dict[str, Any] = {
    "name": POWER_TOOL_NAME,
    "description": (
        "Fetches NASA POWER daily data (solar, wind, temp, precipitation) for a location. "
        "Provide either a location name for geocoding, or explicit latitude and longitude coordinates."
    ),
    "parameters": {
        "type": "object",
        "properties": {
            "location": {
                "type": "string",
                "description": 'The name of the location (e.g., "Paris, France", "Sahara Desert"). '
                               "Use this if latitude and longitude are not provided.",
            },
            "latitude": {"type": "number", "description": "Latitude for the location."},
            "longitude": {"type": "number", "description": "Longitude for the location."},
            "start": {
                "type": "string",
                "description": "Optional start date in YYYYMMDD format. Defaults to the start of the previous full calendar year.",
            },
            "end": {
                "type": "string",
                "description": "Optional end date in YYYYMMDD format. Defaults to the end of the previous full calendar year.",
            },
        },
    },
}


def message_text(msg: Any) -> str:
    """AIMessage.content는 str 또는 part 리스트."""
    content = getattr(msg, "content", msg)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for p in content:
            if isinstance(p, str):
                parts.append(p)
            elif isinstance(p, dict) and p.get("type") == "text":
                parts.append(p.get("text", ""))
        return "".join(parts)
    return str(content or "")


def initial_messages(state: State) -> List[BaseMessage]:
    msgs: List[BaseMessage] = [SystemMessage(content=SYSTEM_INSTRUCTIONS)]
    for turn in state.get("history", []):
        if turn.get("role") == "assistant":
            msgs.append(AIMessage(content=turn.get("text", "")))
        else:
            msgs.append(HumanMessage(content=turn.get("text", "")))
    msgs.append(HumanMessage(content=state["query"]))
    return msgs


def make_scout_llm_node(llm):
    """
    툴이 묶인 모델을 한 번 호출한다.
    - 첫 호출: 답변 텍스트 누적 + get_power_data 호출 요청이 있으면 첫 번째 것만 보관
    - 툴 응답 이후 호출: 최종 답변 텍스트만 누적
    """
    bound = llm.bind_tools([POWER_TOOL])

    async def scout_llm_node(state: State) -> Dict[str, Any]:
        messages = state.get("messages") or initial_messages(state)
        try:
            reply = await bound.ainvoke(messages)
        except Exception as e:
            logger.exception("⛔️ LLM 호출 중 오류 발생: %s", e)
            return {"messages": messages, "error": ERROR_REPLY}

        text = state.get("text", "") + message_text(reply)
        out: Dict[str, Any] = {"messages": [*messages, reply], "text": text}

        if not state.get("tool_done"):
            calls = [c for c in (getattr(reply, "tool_calls", None) or []) if c.get("name") == POWER_TOOL_NAME]
            if calls:
                logger.info("🔧 툴 호출 요청: %s", calls[0].get("args"))
                out["tool_call"] = calls[0]
        return out

    return scout_llm_node
