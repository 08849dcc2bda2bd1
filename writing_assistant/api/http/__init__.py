from writing_assistant.api.http.health import router as health_router
from writing_assistant.api.http.documents import router as documents_router
from writing_assistant.api.http.suggestions import router as suggestions_router
from writing_assistant.api.http.analysis import router as analysis_router

__all__ = [
    "health_router",
    "documents_router",
    "suggestions_router",
    "analysis_router"
]
