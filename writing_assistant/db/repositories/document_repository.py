import logging
import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import and_, delete, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from writing_assistant.core.errors import DocumentNotFoundError, PersistenceError
from writing_assistant.db.models.document import Document as DocumentModel, DocumentVersion as DocumentVersionModel
from writing_assistant.db.models.suggestion import StoredSuggestion as StoredSuggestionModel
from writing_assistant.domains.analysis import ReadabilityMetrics

if TYPE_CHECKING:
    from writing_assistant.domains.documents.entities import Document, DocumentVersion, SavedDocument

logger = logging.getLogger(__name__)


class DocumentRepository:
    """Репозиторий для работы с документами"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, document: "Document") -> "Document":
        """Создание нового документа"""
        db_document = DocumentModel(
            uuid=document.uuid,
            title=document.title,
            content=document.content,
            readability=document.metrics.to_dict(),
            last_edited_at=document.last_edited_at,
            owner_id=document.owner_id
        )

        self.session.add(db_document)
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise PersistenceError(f"Failed to create document: {e}") from e
        await self.session.refresh(db_document)
        return self._to_domain(db_document)

    async def get_by_uuid(self, document_uuid: uuid.UUID) -> Optional["Document"]:
        """Получение документа по UUID"""
        result = await self.session.execute(
            select(DocumentModel).where(DocumentModel.uuid == document_uuid)
        )
        db_document = result.scalar_one_or_none()
        return self._to_domain(db_document) if db_document else None

    async def get_by_owner(self, owner_id: uuid.UUID, limit: int = 100, offset: int = 0) -> List["Document"]:
        """Получение документов по владельцу, последние измененные первыми"""
        result = await self.session.execute(
            select(DocumentModel)
            .where(DocumentModel.owner_id == owner_id)
            .order_by(DocumentModel.last_edited_at.desc())
            .offset(offset)
            .limit(limit)
        )
        return [self._to_domain(doc) for doc in result.scalars().all()]

    async def count_by_owner(self, owner_id: uuid.UUID) -> int:
        result = await self.session.execute(
            select(func.count(DocumentModel.uuid)).where(DocumentModel.owner_id == owner_id)
        )
        return result.scalar()

    async def persist(
        self,
        document_uuid: uuid.UUID,
        title: str,
        content: str,
        metrics: ReadabilityMetrics
    ) -> "SavedDocument":
        """Атомарная запись заголовка, содержимого, метрик и времени правки"""
        from writing_assistant.domains.documents.entities import SavedDocument

        saved_at = datetime.now(timezone.utc)
        stmt = (
            update(DocumentModel)
            .where(DocumentModel.uuid == document_uuid)
            .values(
                title=title,
                content=content,
                readability=metrics.to_dict(),
                last_edited_at=saved_at
            )
        )

        try:
            result = await self.session.execute(stmt)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise PersistenceError(f"Failed to save document {document_uuid}: {e}") from e

        if result.rowcount == 0:
            raise DocumentNotFoundError(document_uuid)

        return SavedDocument(
            document_id=document_uuid,
            title=title,
            content=content,
            metrics=metrics,
            saved_at=saved_at
        )

    async def delete(self, document_uuid: uuid.UUID) -> bool:
        """Удаление документа вместе с версиями и подсказками"""
        await self.session.execute(
            delete(DocumentVersionModel).where(DocumentVersionModel.document_id == document_uuid)
        )
        await self.session.execute(
            delete(StoredSuggestionModel).where(StoredSuggestionModel.document_id == document_uuid)
        )
        result = await self.session.execute(
            delete(DocumentModel).where(DocumentModel.uuid == document_uuid)
        )
        await self.session.commit()
        return result.rowcount > 0

    def _to_domain(self, db_document: DocumentModel) -> "Document":
        """Преобразование модели БД в доменную сущность"""
        from writing_assistant.domains.documents.entities import Document

        return Document(
            uuid=db_document.uuid,
            title=db_document.title,
            owner_id=db_document.owner_id,
            content=db_document.content or "",
            metrics=ReadabilityMetrics.from_dict(db_document.readability),
            last_edited_at=db_document.last_edited_at,
            created_at=db_document.created_at,
            updated_at=db_document.updated_at
        )


class DocumentVersionRepository:
    """Репозиторий для работы с версиями документов"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def exists_with_hash(self, document_id: uuid.UUID, content_hash: str) -> bool:
        """Есть ли у документа версия с таким отпечатком"""
        try:
            result = await self.session.execute(
                select(DocumentVersionModel.uuid)
                .where(
                    and_(
                        DocumentVersionModel.document_id == document_id,
                        DocumentVersionModel.content_hash == content_hash
                    )
                )
                .limit(1)
            )
        except SQLAlchemyError as e:
            raise PersistenceError(f"Version lookup failed for document {document_id}: {e}") from e
        return result.first() is not None

    async def create(self, version: "DocumentVersion") -> Optional["DocumentVersion"]:
        """Создание версии; None, если версия с таким отпечатком уже записана"""
        db_version = DocumentVersionModel(
            uuid=version.uuid,
            document_id=version.document_id,
            content=version.content,
            readability=version.metrics.to_dict(),
            content_hash=version.content_hash,
            created_at=version.created_at
        )

        self.session.add(db_version)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            logger.info(f"Version {version.content_hash} already stored for document {version.document_id}")
            return None
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise PersistenceError(f"Failed to write version for document {version.document_id}: {e}") from e

        await self.session.refresh(db_version)
        return self._to_domain(db_version)

    async def get_by_uuid(self, version_uuid: uuid.UUID) -> Optional["DocumentVersion"]:
        result = await self.session.execute(
            select(DocumentVersionModel).where(DocumentVersionModel.uuid == version_uuid)
        )
        db_version = result.scalar_one_or_none()
        return self._to_domain(db_version) if db_version else None

    async def get_by_document(
        self,
        document_id: uuid.UUID,
        limit: int = 50,
        offset: int = 0
    ) -> List["DocumentVersion"]:
        """Получение версий документа, новые первыми"""
        result = await self.session.execute(
            select(DocumentVersionModel)
            .where(DocumentVersionModel.document_id == document_id)
            .order_by(DocumentVersionModel.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        return [self._to_domain(version) for version in result.scalars().all()]

    async def count_by_document(self, document_id: uuid.UUID) -> int:
        result = await self.session.execute(
            select(func.count(DocumentVersionModel.uuid))
            .where(DocumentVersionModel.document_id == document_id)
        )
        return result.scalar()

    def _to_domain(self, db_version: DocumentVersionModel) -> "DocumentVersion":
        """Преобразование модели БД в доменную сущность"""
        from writing_assistant.domains.documents.entities import DocumentVersion

        return DocumentVersion(
            uuid=db_version.uuid,
            document_id=db_version.document_id,
            content=db_version.content,
            content_hash=db_version.content_hash,
            metrics=ReadabilityMetrics.from_dict(db_version.readability),
            created_at=db_version.created_at
        )
