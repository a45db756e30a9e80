from typing import Any, Dict, Optional

from langgraph.graph import StateGraph, END

from sitescout.climate.power import NasaPowerProvider
from sitescout.climate.types import ClimateProvider
from sitescout.config import get_llm
from sitescout.geocoding.google import GoogleGeocoder
from sitescout.models.lg_schemas import State
from sitescout.nodes.power_tool_node import make_power_tool_node
from sitescout.nodes.scout_llm_node import make_scout_llm_node
from sitescout.nodes.title_node import make_title_node


def route_after_scout(state: State) -> str:
    if state.get("error"):
        return "title"
    if state.get("tool_call") and not state.get("tool_done"):
        return "power_tool"
    return "title"


def route_after_tool(state: State) -> str:
    # 툴 실패 시 모델 재호출 없이 종료 단계로
    return "title" if state.get("error") else "scout"


def build_workflow(
    llm: Any = None,
    climate: Optional[ClimateProvider] = None,
    geocoder: Any = None,
) -> StateGraph:
    """
    scout(LLM) → [power_tool → scout] → title → END
    llm/climate/geocoder는 테스트에서 주입 가능.
    """
    llm = llm or get_llm()
    climate = climate or NasaPowerProvider()
    geocoder = geocoder or GoogleGeocoder()

    graph = StateGraph(State)
    graph.add_node("scout", make_scout_llm_node(llm))
    graph.add_node("power_tool", make_power_tool_node(climate, geocoder))
    graph.add_node("title", make_title_node(llm))

    graph.set_entry_point("scout")
    graph.add_conditional_edges("scout", route_after_scout, {"power_tool": "power_tool", "title": "title"})
    graph.add_conditional_edges("power_tool", route_after_tool, {"scout": "scout", "title": "title"})
    graph.add_edge("title", END)
    return graph


def initial_state(message: str, history: Optional[list] = None) -> Dict[str, Any]:
    return {
        "query": message,
        "history": history or [],
        "messages": [],
        "tool_call": None,
        "tool_done": False,
        "insight": None,
        "location": None,
        "notes": [],
        "text": "",
        "title": None,
        "error": None,
    }
