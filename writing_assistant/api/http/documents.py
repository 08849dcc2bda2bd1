from fastapi import APIRouter, Depends, HTTPException, status, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from writing_assistant.core.auth import get_current_user_id
from writing_assistant.core.db import get_db
from writing_assistant.core.errors import DocumentNotFoundError, PersistenceError, VersionNotFoundError
from writing_assistant.domains.analysis import fingerprint
from writing_assistant.domains.documents.schemas import (
    DocumentCreate, DocumentUpdate, DocumentResponse, DocumentListResponse,
    DocumentSaveResponse, DocumentVersionCreate, DocumentVersionCreateResponse,
    DocumentVersionListResponse, DocumentVersionResponse, ReadabilityResponse
)
from writing_assistant.domains.documents.services import DocumentService, DocumentVersionService

router = APIRouter(prefix="/documents", tags=["documents"])


def _save_response(saved, version_created: bool) -> DocumentSaveResponse:
    return DocumentSaveResponse(
        document_id=saved.document_id,
        title=saved.title,
        content_length=len(saved.content),
        readability=ReadabilityResponse.from_metrics(saved.metrics),
        saved_at=saved.saved_at,
        version_created=version_created
    )


@router.post("/", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
async def create_document(
    document_data: DocumentCreate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Создание нового документа"""
    document_service = DocumentService(db)

    try:
        document = await document_service.create_document(document_data, user_id)
    except PersistenceError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )

    return DocumentResponse.from_entity(document)


@router.get("/", response_model=DocumentListResponse)
async def get_user_documents(
    page: int = Query(1, ge=1),
    per_page: int = Query(10, ge=1, le=100),
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Получение списка документов, последние измененные первыми"""
    document_service = DocumentService(db)

    offset = (page - 1) * per_page
    documents, total = await document_service.get_user_documents(
        user_id,
        limit=per_page,
        offset=offset
    )

    return DocumentListResponse(
        documents=[DocumentResponse.from_entity(doc) for doc in documents],
        total=total,
        page=page,
        per_page=per_page
    )


@router.get("/{document_uuid}", response_model=DocumentResponse)
async def get_document(
    document_uuid: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Получение документа по UUID"""
    document_service = DocumentService(db)

    try:
        document = await document_service.get_document(document_uuid, user_id)
    except DocumentNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Document not found"
        )

    return DocumentResponse.from_entity(document)


@router.put("/{document_uuid}", response_model=DocumentSaveResponse)
async def update_document(
    document_uuid: uuid.UUID,
    update_data: DocumentUpdate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Сохранение документа с пересчетом метрик и снимком прежнего содержимого"""
    document_service = DocumentService(db)

    try:
        saved, version_created = await document_service.update_document(
            document_uuid,
            update_data,
            user_id
        )
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

    return _save_response(saved, version_created)


@router.delete("/{document_uuid}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(
    document_uuid: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Удаление документа"""
    document_service = DocumentService(db)

    try:
        success = await document_service.delete_document(document_uuid, user_id)
    except DocumentNotFoundError:
        success = False

    if not success:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Document not found"
        )


# Версии документов
@router.get("/{document_uuid}/versions", response_model=DocumentVersionListResponse)
async def get_document_versions(
    document_uuid: uuid.UUID,
    limit: int = Query(50, ge=1, le=50),
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Получение версий документа, новые первыми"""
    version_service = DocumentVersionService(db)

    try:
        versions, total = await version_service.get_document_versions(document_uuid, user_id, limit)
    except DocumentNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Document not found"
        )

    return DocumentVersionListResponse(
        versions=[DocumentVersionResponse.from_entity(version) for version in versions],
        total=total
    )


@router.post("/{document_uuid}/versions", response_model=DocumentVersionCreateResponse)
async def create_document_version(
    document_uuid: uuid.UUID,
    version_data: DocumentVersionCreate,
    response: Response,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Явный снимок содержимого; повторный снимок того же текста не создается"""
    version_service = DocumentVersionService(db)

    try:
        created = await version_service.create_snapshot(document_uuid, version_data.content, user_id)
    except DocumentNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Document not found"
        )

    if created:
        response.status_code = status.HTTP_201_CREATED
        message = "Version created"
    else:
        response.status_code = status.HTTP_200_OK
        message = "Version already exists"

    return DocumentVersionCreateResponse(
        created=created,
        message=message,
        content_hash=fingerprint(version_data.content)
    )


@router.post("/{document_uuid}/versions/{version_uuid}/restore", response_model=DocumentSaveResponse)
async def restore_document_version(
    document_uuid: uuid.UUID,
    version_uuid: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Восстановление документа из версии"""
    version_service = DocumentVersionService(db)

    try:
        saved, version_created = await version_service.restore_version(
            document_uuid,
            version_uuid,
            user_id
        )
    except (DocumentNotFoundError, VersionNotFoundError):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Document or version not found"
        )
    except PersistenceError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )

    return _save_response(saved, version_created)
