from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from writing_assistant.api.http.analysis import router as analysis_router
from writing_assistant.api.http.documents import router as documents_router
from writing_assistant.api.http.health import router as health_router
from writing_assistant.api.http.suggestions import router as suggestions_router
from writing_assistant.api.ws.session import manager as session_manager
from writing_assistant.api.ws.session import router as websocket_router
from writing_assistant.core.db import init_models
from writing_assistant.core.errors import unhandled_exception_handler
from writing_assistant.core.logging import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    await init_models()
    logger.info("Writing assistant started")
    yield
    # Несохраненные правки открытых сессий уходят в хранилище
    await session_manager.shutdown()
    logger.info("Writing assistant stopped")


def create_app(use_lifespan: bool = True) -> FastAPI:
    app = FastAPI(
        title="Writing Assistant",
        description="Анализ текста, подсказки и автосохранение документов",
        version="1.0.0",
        lifespan=lifespan if use_lifespan else None
    )

    # Настройка CORS для работы с frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Подключаем роутеры
    app.include_router(health_router)
    app.include_router(documents_router)
    app.include_router(suggestions_router)
    app.include_router(analysis_router)
    app.include_router(websocket_router)

    @app.get("/")
    async def root():
        """Корневой эндпоинт"""
        return {
            "message": "Writing Assistant API",
            "version": "1.0.0",
            "docs": "/docs",
            "health": "/health"
        }

    return app


app = create_app()
