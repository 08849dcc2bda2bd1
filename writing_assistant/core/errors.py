"""
Ошибки домена и глобальный обработчик исключений.

Ошибки хранилища оборачиваются в PersistenceError на уровне репозиториев,
роутеры переводят доменные ошибки в HTTPException. Все остальное попадает
в unhandled_exception_handler: полный стек пишется в лог, клиент получает
минимальный ответ 500 без внутренних деталей.
"""

import logging
from typing import Any, Dict

from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class WritingAssistantError(Exception):
    """Базовая ошибка приложения"""


class DocumentNotFoundError(WritingAssistantError):
    def __init__(self, document_id):
        super().__init__(f"Document {document_id} not found")
        self.document_id = document_id


class VersionNotFoundError(WritingAssistantError):
    def __init__(self, version_id):
        super().__init__(f"Version {version_id} not found")
        self.version_id = version_id


class PersistenceError(WritingAssistantError):
    """Сбой внешнего хранилища при чтении или записи"""


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Последний рубеж для необработанных исключений"""
    logger.exception(
        "Unhandled exception during request: %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )

    payload: Dict[str, Any] = {
        "error": "internal_server_error",
        "detail": "Internal server error",
    }
    return JSONResponse(status_code=500, content=payload)
