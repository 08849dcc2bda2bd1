from writing_assistant.db.models.document import Document, DocumentVersion
from writing_assistant.db.models.suggestion import StoredSuggestion

__all__ = [
    "Document",
    "DocumentVersion",
    "StoredSuggestion"
]
