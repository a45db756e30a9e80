# src/sitescout/api/chat.py
import logging
from functools import lru_cache

from fastapi import APIRouter, Depends

from sitescout.core.auth import verify_token
from sitescout.models.schemas import ChatRequest, ChatResponse
from sitescout.pipelines.pipeline import build_workflow, initial_state
from sitescout.render.insight_card import build_insight_card

logger = logging.getLogger(__name__)

router = APIRouter()


@lru_cache(maxsize=1)
def get_workflow():
    return build_workflow().compile()


@router.post("/chat", response_model=ChatResponse)
async def chat(
    body: ChatRequest,
    token_payload: dict = Depends(verify_token),
    workflow=Depends(get_workflow),
):
    """
    사이트 스카우트 대화 한 턴
    - Header: Authorization: Bearer <JWT>
    - Body: {message, history: [{role, text}]}
    """
    logger.info("📡 chat 호출: sub=%s", token_payload.get("sub"))
    history = [t.model_dump() for t in body.history]
    final_state = await workflow.ainvoke(initial_state(body.message, history))

    insight = final_state.get("insight")
    return ChatResponse(
        text=final_state.get("text", ""),
        title=final_state.get("title"),
        notes=final_state.get("notes", []),
        insight=insight.to_dict() if insight else None,
        card=build_insight_card(insight.stats, insight.meta["parameters"]).model_dump() if insight else None,
        error=final_state.get("error"),
    )
