from sqlalchemy import JSON, UUID, Column, DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from writing_assistant.db.base import BaseModel


class Document(BaseModel):
    __tablename__ = "documents"

    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False, default="")
    readability = Column(JSON, nullable=True)
    last_edited_at = Column(DateTime(timezone=True), nullable=True)
    # Аккаунт владельца живет во внешнем сервисе идентификации
    owner_id = Column(UUID(as_uuid=True), nullable=False, index=True)

    # Relationships
    versions = relationship("DocumentVersion", back_populates="document", cascade="all, delete-orphan")
    suggestions = relationship("StoredSuggestion", back_populates="document", cascade="all, delete-orphan")


class DocumentVersion(BaseModel):
    __tablename__ = "document_versions"
    __table_args__ = (
        UniqueConstraint("document_id", "content_hash", name="uq_document_versions_document_hash"),
    )

    document_id = Column(UUID(as_uuid=True), ForeignKey("documents.uuid", ondelete="CASCADE"), nullable=False)
    content = Column(Text, nullable=False)
    readability = Column(JSON, nullable=True)
    content_hash = Column(String(16), nullable=False)

    # Relationships
    document = relationship("Document", back_populates="versions")
