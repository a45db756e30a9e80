# src/sitescout/models/lg_schemas.py
from typing import List, Dict, Optional, Any, TypedDict

from langchain_core.messages import BaseMessage

from sitescout.climate.types import AggregationResult

# LangGraph State 스키마


class State(TypedDict, total=False):
    """툴 호출 대화 한 턴의 상태."""
    query: str                          # 이번 사용자 메시지
    history: List[Dict[str, str]]       # 이전 대화 [{role, text}]
    messages: List[BaseMessage]         # LLM에 보낸/받은 메시지 누적
    tool_call: Optional[Dict[str, Any]] # 모델이 요청한 get_power_data 호출
    tool_done: bool                     # 툴 결과를 이미 돌려줬는지
    insight: Optional[AggregationResult]
    location: Optional[str]             # 툴 응답에 실은 위치 표기
    notes: List[str]                    # 지오코딩 결과 등 부가 안내
    text: str                           # 누적된 모델 답변
    title: Optional[str]
    error: Optional[str]
