from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from writing_assistant.domains.analysis import recommendations, score
from writing_assistant.domains.documents.schemas import (
    ReadabilityReportResponse, ReadabilityRequest, ReadabilityResponse
)
from writing_assistant.domains.suggestions import SuggestionEngine, get_engine, suggestion_stats
from writing_assistant.domains.suggestions.schemas import (
    SuggestionListResponse, SuggestionRequest, SuggestionResponse, SuggestionStatsResponse
)

router = APIRouter(prefix="/analysis", tags=["analysis"])


@router.post("/readability", response_model=ReadabilityReportResponse)
async def analyze_readability(request: ReadabilityRequest):
    """Метрики читаемости и советы для произвольного текста"""
    metrics = score(request.content)
    return ReadabilityReportResponse(
        readability=ReadabilityResponse.from_metrics(metrics),
        recommendations=recommendations(metrics)
    )


@router.post("/suggestions", response_model=SuggestionListResponse)
async def analyze_suggestions(
    request: SuggestionRequest,
    engine: SuggestionEngine = Depends(get_engine)
):
    """Подсказки для текста без сохранения"""
    suggestions = engine.suggest(request.content)
    return SuggestionListResponse(
        suggestions=[SuggestionResponse.from_entity(s) for s in suggestions],
        stats=SuggestionStatsResponse(**suggestion_stats(request.content, suggestions)),
        generated_at=datetime.now(timezone.utc)
    )
