from writing_assistant.domains.documents.entities import (
    DEFAULT_TITLE, Document, DocumentVersion, SavedDocument, normalize_title
)
from writing_assistant.domains.documents.schemas import (
    ReadabilityResponse, DocumentBase, DocumentCreate, DocumentUpdate, DocumentResponse,
    DocumentListResponse, DocumentSaveResponse, DocumentVersionResponse,
    DocumentVersionListResponse, DocumentVersionCreate, DocumentVersionCreateResponse,
    ReadabilityRequest, ReadabilityReportResponse
)
from writing_assistant.domains.documents.services import (
    DocumentService, DocumentVersionService, DocumentStore,
    SuggestionMirrorService, VersionStoreCoordinator
)

__all__ = [
    "DEFAULT_TITLE", "Document", "DocumentVersion", "SavedDocument", "normalize_title",
    "ReadabilityResponse", "DocumentBase", "DocumentCreate", "DocumentUpdate", "DocumentResponse",
    "DocumentListResponse", "DocumentSaveResponse", "DocumentVersionResponse",
    "DocumentVersionListResponse", "DocumentVersionCreate", "DocumentVersionCreateResponse",
    "ReadabilityRequest", "ReadabilityReportResponse",
    "DocumentService", "DocumentVersionService", "DocumentStore",
    "SuggestionMirrorService", "VersionStoreCoordinator"
]
