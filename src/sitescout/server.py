import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sitescout.api import chat, climate, health
from sitescout.core.settings import CORS_ORIGINS, LOG_LEVEL


def create_app() -> FastAPI:
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = FastAPI(title="Renewable Site Scout API")

    # ============================================================
    # 🌐 CORS 설정
    # ============================================================
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ============================================================
    # 📦 라우터 등록
    # ============================================================
    app.include_router(climate.router, prefix="/api")
    app.include_router(chat.router, prefix="/api")
    app.include_router(health.router)

    return app


app = create_app()
