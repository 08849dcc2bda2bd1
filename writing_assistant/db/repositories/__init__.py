from writing_assistant.db.repositories.document_repository import DocumentRepository, DocumentVersionRepository
from writing_assistant.db.repositories.suggestion_repository import SuggestionRepository

__all__ = [
    "DocumentRepository",
    "DocumentVersionRepository",
    "SuggestionRepository"
]
