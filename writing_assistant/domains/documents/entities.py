import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from writing_assistant.domains.analysis import ReadabilityMetrics, fingerprint

DEFAULT_TITLE = "Untitled Document"


def normalize_title(title: Optional[str]) -> str:
    """Пустой заголовок превращается в заголовок по умолчанию"""
    title = (title or "").strip()
    return title or DEFAULT_TITLE


class Document:
    """Сущность документа домена Documents"""

    def __init__(
        self,
        uuid: uuid.UUID,
        title: str,
        owner_id: uuid.UUID,
        content: str = "",
        metrics: Optional[ReadabilityMetrics] = None,
        last_edited_at: Optional[datetime] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.uuid = uuid
        self.title = title
        self.owner_id = owner_id
        self.content = content
        self.metrics = metrics or ReadabilityMetrics()
        self.last_edited_at = last_edited_at
        self.created_at = created_at or datetime.now(timezone.utc)
        self.updated_at = updated_at or self.created_at

    def is_owned_by(self, user_id: uuid.UUID) -> bool:
        return self.owner_id == user_id

    def get_word_count(self) -> int:
        return self.metrics.word_count

    def get_content_length(self) -> int:
        return len(self.content)

    @classmethod
    def create_document(
        cls,
        title: Optional[str],
        owner_id: uuid.UUID,
        content: str = "",
        metrics: Optional[ReadabilityMetrics] = None
    ) -> "Document":
        """Создание нового документа"""
        return cls(
            uuid=uuid.uuid4(),
            title=normalize_title(title),
            owner_id=owner_id,
            content=content,
            metrics=metrics,
            last_edited_at=datetime.now(timezone.utc)
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Document):
            return False
        return self.uuid == other.uuid

    def __repr__(self) -> str:
        return f"Document(uuid={self.uuid}, title={self.title})"


class DocumentVersion:
    """Неизменяемый снимок документа"""

    def __init__(
        self,
        uuid: uuid.UUID,
        document_id: uuid.UUID,
        content: str,
        content_hash: str,
        metrics: Optional[ReadabilityMetrics] = None,
        created_at: Optional[datetime] = None
    ):
        self.uuid = uuid
        self.document_id = document_id
        self.content = content
        self.content_hash = content_hash
        self.metrics = metrics or ReadabilityMetrics()
        self.created_at = created_at or datetime.now(timezone.utc)

    @classmethod
    def create_version(
        cls,
        document_id: uuid.UUID,
        content: str,
        metrics: ReadabilityMetrics,
        content_hash: Optional[str] = None
    ) -> "DocumentVersion":
        return cls(
            uuid=uuid.uuid4(),
            document_id=document_id,
            content=content,
            content_hash=content_hash or fingerprint(content),
            metrics=metrics
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, DocumentVersion):
            return False
        return self.uuid == other.uuid

    def __repr__(self) -> str:
        return f"DocumentVersion(uuid={self.uuid}, document_id={self.document_id}, hash={self.content_hash})"


@dataclass(frozen=True)
class SavedDocument:
    """Результат сохранения: что реально записано в хранилище"""
    document_id: uuid.UUID
    title: str
    content: str
    metrics: ReadabilityMetrics
    saved_at: datetime
