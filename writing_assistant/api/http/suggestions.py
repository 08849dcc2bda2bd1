from datetime import datetime, timezone
from typing import Optional
import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from writing_assistant.core.auth import get_current_user_id
from writing_assistant.core.db import get_db
from writing_assistant.core.errors import DocumentNotFoundError, PersistenceError
from writing_assistant.domains.documents.services import DocumentService, SuggestionMirrorService
from writing_assistant.domains.suggestions import SuggestionEngine, get_engine, suggestion_stats
from writing_assistant.domains.suggestions.schemas import (
    SuggestionListResponse, SuggestionRequest, SuggestionResponse, SuggestionStatsResponse
)

router = APIRouter(prefix="/documents", tags=["suggestions"])


@router.post("/{document_uuid}/suggestions", response_model=SuggestionListResponse)
async def generate_document_suggestions(
    document_uuid: uuid.UUID,
    request: Optional[SuggestionRequest] = None,
    user_id: uuid.UUID = Depends(get_current_user_id),
    engine: SuggestionEngine = Depends(get_engine),
    db: AsyncSession = Depends(get_db)
):
    """Генерация подсказок для документа с заменой сохраненного списка.

    Без тела запроса проверяется сохраненное содержимое документа. Подсказки
    к присланному тексту сохраняются, только если он совпадает с документом.
    """
    document_service = DocumentService(db)
    mirror_service = SuggestionMirrorService(db)

    try:
        document = await document_service.get_document(document_uuid, user_id)
        content = request.content if request is not None else document.content
        suggestions = engine.suggest(content)
        if content == document.content:
            await mirror_service.store(document_uuid, suggestions, user_id)
    except DocumentNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Document not found"
        )
    except PersistenceError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )

    return SuggestionListResponse(
        suggestions=[SuggestionResponse.from_entity(s) for s in suggestions],
        stats=SuggestionStatsResponse(**suggestion_stats(content, suggestions)),
        generated_at=datetime.now(timezone.utc)
    )


@router.get("/{document_uuid}/suggestions", response_model=SuggestionListResponse)
async def get_document_suggestions(
    document_uuid: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Сохраненные подсказки документа по возрастанию позиции"""
    mirror_service = SuggestionMirrorService(db)

    try:
        suggestions = await mirror_service.load(document_uuid, user_id)
    except DocumentNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Document not found"
        )

    return SuggestionListResponse(
        suggestions=[SuggestionResponse.from_entity(s) for s in suggestions]
    )
