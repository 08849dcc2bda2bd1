from datetime import datetime, timezone

from writing_assistant.core.errors import PersistenceError
from writing_assistant.domains.documents import SavedDocument


class FakeBackend:
    """Хранилище в памяти: запоминает вызовы и время по виртуальным часам"""

    def __init__(self, clock):
        self.clock = clock
        self.persisted = []
        self.snapshots = []
        self.fail = False
        self.gate = None

    async def persist(self, document_id, title, content, metrics):
        self.persisted.append((self.clock.now(), title, content))
        if self.gate is not None:
            await self.gate.wait()
        if self.fail:
            raise PersistenceError("storage is down")
        return SavedDocument(
            document_id=document_id,
            title=title,
            content=content,
            metrics=metrics,
            saved_at=datetime.now(timezone.utc)
        )

    async def snapshot(self, document_id, content, metrics):
        self.snapshots.append(content)
        return True


class FakeDocumentStore:
    """Замена DocumentStore для сессий редактирования без базы данных"""

    def __init__(self, *documents):
        self.documents = {document.uuid: document for document in documents}
        self.persisted = []
        self.snapshots = []
        self.mirrored = []

    async def fetch_document(self, document_uuid):
        return self.documents.get(document_uuid)

    async def persist_document(self, document_uuid, title, content, metrics):
        self.persisted.append((title, content))
        return SavedDocument(
            document_id=document_uuid,
            title=title,
            content=content,
            metrics=metrics,
            saved_at=datetime.now(timezone.utc)
        )

    async def snapshot(self, document_uuid, content, metrics):
        self.snapshots.append(content)
        return True

    async def mirror_suggestions(self, document_uuid, suggestions):
        self.mirrored.append([s.id for s in suggestions])
