import logging
import uuid
from typing import Callable, List, Optional, Protocol, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from writing_assistant.core.config import settings
from writing_assistant.core.errors import (
    DocumentNotFoundError, PersistenceError, VersionNotFoundError
)
from writing_assistant.core.logging import timed
from writing_assistant.db.repositories.document_repository import DocumentRepository, DocumentVersionRepository
from writing_assistant.db.repositories.suggestion_repository import SuggestionRepository
from writing_assistant.domains.analysis import ReadabilityMetrics, fingerprint, score
from writing_assistant.domains.documents.entities import (
    Document, DocumentVersion, SavedDocument, normalize_title
)
from writing_assistant.domains.documents.schemas import DocumentCreate, DocumentUpdate
from writing_assistant.domains.suggestions.entities import Suggestion

logger = logging.getLogger(__name__)


class VersionStore(Protocol):
    async def exists_with_hash(self, document_id: uuid.UUID, content_hash: str) -> bool: ...

    async def create(self, version: DocumentVersion) -> Optional[DocumentVersion]: ...


class VersionStoreCoordinator:
    """Запись версии только если у документа еще нет версии с тем же отпечатком"""

    def __init__(self, store: VersionStore):
        self.store = store

    async def maybe_snapshot(
        self,
        document_id: uuid.UUID,
        text: str,
        metrics: Optional[ReadabilityMetrics] = None
    ) -> bool:
        content_hash = fingerprint(text)

        try:
            exists = await self.store.exists_with_hash(document_id, content_hash)
        except Exception as e:
            # Лучше лишняя версия, чем потерянная
            logger.warning(f"Version check failed for document {document_id}, writing anyway: {e}")
            exists = False

        if exists:
            logger.debug(f"Version {content_hash} already exists for document {document_id}")
            return False

        version = DocumentVersion.create_version(
            document_id=document_id,
            content=text,
            metrics=metrics if metrics is not None else score(text),
            content_hash=content_hash
        )
        try:
            created = await self.store.create(version)
        except Exception as e:
            logger.error(f"Failed to write version for document {document_id}: {e}")
            return False

        if created is None:
            return False

        logger.info(f"Created version {content_hash} for document {document_id}")
        return True


class DocumentService:
    """Сервис для работы с документами"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.document_repository = DocumentRepository(session)
        self.version_repository = DocumentVersionRepository(session)
        self.versions = VersionStoreCoordinator(self.version_repository)

    async def create_document(self, document_data: DocumentCreate, owner_id: uuid.UUID) -> Document:
        """Создание нового документа"""
        document = Document.create_document(
            title=document_data.title,
            owner_id=owner_id,
            content=document_data.content,
            metrics=score(document_data.content)
        )
        created_document = await self.document_repository.create(document)

        # Начальная версия, если документ создан не пустым
        if created_document.content.strip():
            await self.versions.maybe_snapshot(created_document.uuid, created_document.content, created_document.metrics)

        return created_document

    async def get_document(self, document_uuid: uuid.UUID, owner_id: uuid.UUID) -> Document:
        """Получение документа владельца; чужой документ считается отсутствующим"""
        document = await self.document_repository.get_by_uuid(document_uuid)
        if not document or not document.is_owned_by(owner_id):
            raise DocumentNotFoundError(document_uuid)
        return document

    async def get_user_documents(
        self,
        owner_id: uuid.UUID,
        limit: int = 100,
        offset: int = 0
    ) -> Tuple[List[Document], int]:
        documents = await self.document_repository.get_by_owner(owner_id, limit, offset)
        total = await self.document_repository.count_by_owner(owner_id)
        return documents, total

    async def persist_document(
        self,
        document_uuid: uuid.UUID,
        title: Optional[str],
        content: str
    ) -> SavedDocument:
        """Одна запись: заголовок, содержимое и свежие метрики"""
        metrics = score(content)
        with timed(f"persist document {document_uuid}"):
            return await self.document_repository.persist(
                document_uuid, normalize_title(title), content, metrics
            )

    async def update_document(
        self,
        document_uuid: uuid.UUID,
        update_data: DocumentUpdate,
        owner_id: uuid.UUID
    ) -> Tuple[SavedDocument, bool]:
        """Сохранение документа и снимок содержимого, бывшего до правки"""
        document = await self.get_document(document_uuid, owner_id)

        title = update_data.title if update_data.title is not None else document.title
        content = update_data.content if update_data.content is not None else document.content

        saved = await self.persist_document(document_uuid, title, content)

        version_created = False
        if document.content.strip() and document.content != content:
            version_created = await self.versions.maybe_snapshot(
                document_uuid, document.content, document.metrics
            )
        return saved, version_created

    async def delete_document(self, document_uuid: uuid.UUID, owner_id: uuid.UUID) -> bool:
        await self.get_document(document_uuid, owner_id)
        return await self.document_repository.delete(document_uuid)


class DocumentVersionService:
    """Сервис для работы с версиями документов"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.document_service = DocumentService(session)
        self.version_repository = self.document_service.version_repository
        self.versions = self.document_service.versions

    async def get_document_versions(
        self,
        document_uuid: uuid.UUID,
        owner_id: uuid.UUID,
        limit: Optional[int] = None
    ) -> Tuple[List[DocumentVersion], int]:
        """Последние версии документа, новые первыми"""
        await self.document_service.get_document(document_uuid, owner_id)
        limit = min(limit or settings.version_history_limit, settings.version_history_limit)
        versions = await self.version_repository.get_by_document(document_uuid, limit)
        total = await self.version_repository.count_by_document(document_uuid)
        return versions, total

    async def create_snapshot(self, document_uuid: uuid.UUID, content: str, owner_id: uuid.UUID) -> bool:
        """Явный снимок, дубликаты по отпечатку не пишутся"""
        await self.document_service.get_document(document_uuid, owner_id)
        return await self.versions.maybe_snapshot(document_uuid, content, score(content))

    async def restore_version(
        self,
        document_uuid: uuid.UUID,
        version_uuid: uuid.UUID,
        owner_id: uuid.UUID
    ) -> Tuple[SavedDocument, bool]:
        """Восстановление документа из версии"""
        document = await self.document_service.get_document(document_uuid, owner_id)

        version = await self.version_repository.get_by_uuid(version_uuid)
        if not version or version.document_id != document_uuid:
            raise VersionNotFoundError(version_uuid)

        saved = await self.document_service.persist_document(document_uuid, document.title, version.content)

        # Текущее состояние сохраняется в истории до перезаписи
        version_created = False
        if document.content.strip() and document.content != version.content:
            version_created = await self.versions.maybe_snapshot(document_uuid, document.content, document.metrics)
        return saved, version_created


class SuggestionMirrorService:
    """Сохранение и чтение копии подсказок"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.document_service = DocumentService(session)
        self.suggestion_repository = SuggestionRepository(session)

    async def store(self, document_uuid: uuid.UUID, suggestions: List[Suggestion], owner_id: uuid.UUID) -> int:
        await self.document_service.get_document(document_uuid, owner_id)
        return await self.suggestion_repository.replace_for_document(document_uuid, suggestions)

    async def load(self, document_uuid: uuid.UUID, owner_id: uuid.UUID) -> List[Suggestion]:
        await self.document_service.get_document(document_uuid, owner_id)
        return await self.suggestion_repository.get_by_document(document_uuid)


class DocumentStore:
    """Внешние операции для планировщика сохранений.

    Каждый вызов открывает свою сессию БД: планировщик живет дольше
    одного запроса и не держит сессию между сохранениями.
    """

    def __init__(self, session_factory: Callable[[], AsyncSession]):
        self.session_factory = session_factory

    async def fetch_document(self, document_uuid: uuid.UUID) -> Optional[Document]:
        async with self.session_factory() as session:
            return await DocumentRepository(session).get_by_uuid(document_uuid)

    async def persist_document(
        self,
        document_uuid: uuid.UUID,
        title: str,
        content: str,
        metrics: ReadabilityMetrics
    ) -> SavedDocument:
        async with self.session_factory() as session:
            return await DocumentRepository(session).persist(document_uuid, title, content, metrics)

    async def snapshot(self, document_uuid: uuid.UUID, content: str, metrics: ReadabilityMetrics) -> bool:
        async with self.session_factory() as session:
            coordinator = VersionStoreCoordinator(DocumentVersionRepository(session))
            return await coordinator.maybe_snapshot(document_uuid, content, metrics)

    async def mirror_suggestions(self, document_uuid: uuid.UUID, suggestions: List[Suggestion]) -> None:
        async with self.session_factory() as session:
            try:
                await SuggestionRepository(session).replace_for_document(document_uuid, suggestions)
            except PersistenceError as e:
                logger.warning(f"Suggestions for document {document_uuid} were not mirrored: {e}")
