# src/sitescout/config.py
from functools import lru_cache

from langchain_google_genai import ChatGoogleGenerativeAI

from sitescout.core.settings import GEMINI_MODEL, GEMINI_TEMPERATURE


# LLM 초기화 (키는 GOOGLE_API_KEY 환경 변수에서 읽음, 첫 호출 시 생성)
@lru_cache(maxsize=1)
def get_llm() -> ChatGoogleGenerativeAI:
    return ChatGoogleGenerativeAI(
        model=GEMINI_MODEL,
        temperature=GEMINI_TEMPERATURE,
    )
