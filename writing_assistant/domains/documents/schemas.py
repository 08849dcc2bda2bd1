from pydantic import BaseModel, Field, field_validator, ConfigDict
from typing import Optional, List
import uuid
from datetime import datetime

from writing_assistant.domains.analysis import ReadabilityMetrics


class ReadabilityResponse(BaseModel):
    """Схема метрик читаемости, имена полей совпадают с хранилищем"""
    word_count: int
    sentence_count: int
    syllable_count: int
    average_words_per_sentence: float
    average_syllables_per_word: float
    flesch_reading_ease: float
    flesch_kincaid_grade: float
    readability_level: str

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_metrics(cls, metrics: ReadabilityMetrics) -> "ReadabilityResponse":
        return cls(**metrics.to_dict())


class DocumentBase(BaseModel):
    """Базовая схема документа"""
    title: str = Field(default="", max_length=255)
    content: str = Field(default="", max_length=1000000)  # 1MB max content


class DocumentCreate(DocumentBase):
    """Схема для создания документа"""
    pass


class DocumentUpdate(BaseModel):
    """Схема для сохранения документа"""
    title: Optional[str] = Field(None, max_length=255)
    content: Optional[str] = Field(None, max_length=1000000)

    @field_validator('title')
    @classmethod
    def strip_title(cls, v):
        return v.strip() if v else v


class DocumentResponse(DocumentBase):
    """Схема для ответа с данными документа"""
    uuid: uuid.UUID
    owner_id: uuid.UUID
    readability: ReadabilityResponse
    last_edited_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    word_count: int
    content_length: int

    @classmethod
    def from_entity(cls, document) -> "DocumentResponse":
        return cls(
            uuid=document.uuid,
            title=document.title,
            content=document.content,
            owner_id=document.owner_id,
            readability=ReadabilityResponse.from_metrics(document.metrics),
            last_edited_at=document.last_edited_at,
            created_at=document.created_at,
            updated_at=document.updated_at,
            word_count=document.get_word_count(),
            content_length=document.get_content_length()
        )


class DocumentListResponse(BaseModel):
    """Схема для списка документов"""
    documents: List[DocumentResponse]
    total: int
    page: int
    per_page: int


class DocumentSaveResponse(BaseModel):
    """Схема ответа на сохранение"""
    document_id: uuid.UUID
    title: str
    content_length: int
    readability: ReadabilityResponse
    saved_at: datetime
    version_created: bool


class DocumentVersionResponse(BaseModel):
    """Схема для ответа с данными версии документа"""
    uuid: uuid.UUID
    document_id: uuid.UUID
    content: str
    content_hash: str
    readability: ReadabilityResponse
    created_at: datetime

    @classmethod
    def from_entity(cls, version) -> "DocumentVersionResponse":
        return cls(
            uuid=version.uuid,
            document_id=version.document_id,
            content=version.content,
            content_hash=version.content_hash,
            readability=ReadabilityResponse.from_metrics(version.metrics),
            created_at=version.created_at
        )


class DocumentVersionListResponse(BaseModel):
    versions: List[DocumentVersionResponse]
    total: int


class DocumentVersionCreate(BaseModel):
    """Схема для явного создания версии"""
    content: str = Field(..., max_length=1000000)


class DocumentVersionCreateResponse(BaseModel):
    created: bool
    message: str
    content_hash: str


class ReadabilityRequest(BaseModel):
    content: str = Field(..., max_length=1000000)


class ReadabilityReportResponse(BaseModel):
    readability: ReadabilityResponse
    recommendations: List[str]
