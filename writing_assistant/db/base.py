import uuid
from datetime import datetime, timezone

from sqlalchemy import UUID, Column, DateTime

from writing_assistant.core.db import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseModel(Base):
    """Общие колонки: UUID-ключ и отметки времени"""
    __abstract__ = True

    uuid = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    # Время ставится на стороне приложения: нужна точность до микросекунд для сортировки версий
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
