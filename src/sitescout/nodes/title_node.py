# title_node.py
import logging
from typing import Any, Dict

from sitescout.models.lg_schemas import State
from sitescout.nodes.prompts import TITLE_PROMPT
from sitescout.nodes.scout_llm_node import message_text

logger = logging.getLogger(__name__)


def make_title_node(llm):
    async def title_node(state: State) -> Dict[str, Any]:
        # 새 대화(히스토리 없음)이고 답변이 있을 때만
        if state.get("history") or not state.get("text"):
            return {}
        prompt = TITLE_PROMPT.format(user=state["query"], assistant=state["text"])
        try:
            reply = await llm.ainvoke(prompt)
        except Exception as e:
            logger.warning("⚠️ 제목 생성 실패: %s", e)
            return {}
        title = message_text(reply).replace('"', "").strip()
        return {"title": title or None}

    return title_node
