from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from writing_assistant.domains.suggestions.entities import Suggestion, SuggestionType


class SuggestionResponse(BaseModel):
    """Схема подсказки для ответа"""
    id: str
    start: int
    end: int
    type: SuggestionType
    original_text: str
    suggested_text: str
    message: str

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_entity(cls, suggestion: Suggestion) -> "SuggestionResponse":
        return cls(
            id=suggestion.id,
            start=suggestion.start,
            end=suggestion.end,
            type=suggestion.type,
            original_text=suggestion.original_text,
            suggested_text=suggestion.suggested_text,
            message=suggestion.message,
        )


class SuggestionStatsResponse(BaseModel):
    total_issues: int
    grammar_issues: int
    spelling_issues: int
    style_issues: int
    word_count: int
    issue_rate: float


class SuggestionRequest(BaseModel):
    """Схема запроса на генерацию подсказок"""
    content: str = Field(..., max_length=1000000)


class SuggestionListResponse(BaseModel):
    suggestions: List[SuggestionResponse]
    stats: Optional[SuggestionStatsResponse] = None
    generated_at: Optional[datetime] = None
