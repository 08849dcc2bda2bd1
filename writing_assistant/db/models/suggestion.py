from sqlalchemy import UUID, Column, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from writing_assistant.db.base import BaseModel
from writing_assistant.domains.suggestions.entities import SuggestionType


class StoredSuggestion(BaseModel):
    """Копия подсказок в хранилище; авторитетна копия в памяти движка"""
    __tablename__ = "suggestions"

    document_id = Column(UUID(as_uuid=True), ForeignKey("documents.uuid", ondelete="CASCADE"), nullable=False)
    start_index = Column(Integer, nullable=False)
    end_index = Column(Integer, nullable=False)
    suggestion_type = Column(
        Enum(SuggestionType, values_callable=lambda enum: [item.value for item in enum]),
        nullable=False,
    )
    original_text = Column(Text, nullable=False)
    suggested_text = Column(Text, nullable=False)
    message = Column(String(500), nullable=False)

    # Relationships
    document = relationship("Document", back_populates="suggestions")
