import uuid

import pytest

from writing_assistant.core.errors import PersistenceError
from writing_assistant.db.repositories import DocumentRepository, DocumentVersionRepository
from writing_assistant.domains.analysis import fingerprint, score
from writing_assistant.domains.documents import Document, DocumentVersion, VersionStoreCoordinator


class InMemoryVersionStore:
    def __init__(self):
        self.versions = {}
        self.fail_lookup = False
        self.fail_write = False

    async def exists_with_hash(self, document_id, content_hash):
        if self.fail_lookup:
            raise PersistenceError("lookup timed out")
        return (document_id, content_hash) in self.versions

    async def create(self, version):
        if self.fail_write:
            raise PersistenceError("write rejected")
        key = (version.document_id, version.content_hash)
        if key in self.versions:
            return None
        self.versions[key] = version
        return version


@pytest.mark.asyncio
async def test_same_text_is_stored_once():
    store = InMemoryVersionStore()
    coordinator = VersionStoreCoordinator(store)
    document_id = uuid.uuid4()

    assert await coordinator.maybe_snapshot(document_id, "Draft one") is True
    assert await coordinator.maybe_snapshot(document_id, "Draft one") is False
    assert len(store.versions) == 1

    version = store.versions[(document_id, fingerprint("Draft one"))]
    assert version.content == "Draft one"
    assert version.metrics == score("Draft one")


@pytest.mark.asyncio
async def test_versions_are_per_document():
    store = InMemoryVersionStore()
    coordinator = VersionStoreCoordinator(store)

    assert await coordinator.maybe_snapshot(uuid.uuid4(), "Shared text")
    assert await coordinator.maybe_snapshot(uuid.uuid4(), "Shared text")
    assert len(store.versions) == 2


@pytest.mark.asyncio
async def test_failed_lookup_still_writes():
    store = InMemoryVersionStore()
    store.fail_lookup = True
    coordinator = VersionStoreCoordinator(store)

    assert await coordinator.maybe_snapshot(uuid.uuid4(), "Keep me") is True
    assert len(store.versions) == 1


@pytest.mark.asyncio
async def test_failed_write_is_reported_not_raised():
    store = InMemoryVersionStore()
    store.fail_write = True
    coordinator = VersionStoreCoordinator(store)

    assert await coordinator.maybe_snapshot(uuid.uuid4(), "Lost") is False
    assert store.versions == {}


@pytest.mark.asyncio
async def test_lost_race_is_not_a_new_version():
    store = InMemoryVersionStore()
    document_id = uuid.uuid4()
    existing = DocumentVersion.create_version(document_id, "Racy", score("Racy"))
    store.versions[(document_id, existing.content_hash)] = existing
    # Проверка говорит "нет", но запись упирается в уже существующую версию
    store.fail_lookup = True

    assert await VersionStoreCoordinator(store).maybe_snapshot(document_id, "Racy") is False
    assert len(store.versions) == 1


async def create_document(session, owner_id, content="Hello world."):
    document = Document.create_document("Notes", owner_id, content, score(content))
    return await DocumentRepository(session).create(document)


@pytest.mark.asyncio
async def test_database_unique_constraint_blocks_duplicates(session_factory):
    async with session_factory() as session:
        document = await create_document(session, uuid.uuid4())

    # Две независимые сессии, как две вкладки
    async with session_factory() as first, session_factory() as second:
        assert await VersionStoreCoordinator(DocumentVersionRepository(first)).maybe_snapshot(
            document.uuid, "Same content"
        )
        duplicate = DocumentVersion.create_version(document.uuid, "Same content", score("Same content"))
        assert await DocumentVersionRepository(second).create(duplicate) is None

    async with session_factory() as session:
        assert await DocumentVersionRepository(session).count_by_document(document.uuid) == 1


@pytest.mark.asyncio
async def test_versions_listed_newest_first_and_bounded(session_factory):
    async with session_factory() as session:
        document = await create_document(session, uuid.uuid4())
        coordinator = VersionStoreCoordinator(DocumentVersionRepository(session))
        for number in range(5):
            assert await coordinator.maybe_snapshot(document.uuid, f"Revision {number}")

        repository = DocumentVersionRepository(session)
        versions = await repository.get_by_document(document.uuid, limit=3)

    assert [version.content for version in versions] == ["Revision 4", "Revision 3", "Revision 2"]
    assert versions[0].content_hash == fingerprint("Revision 4")


@pytest.mark.asyncio
async def test_persist_writes_title_content_and_metrics(session_factory):
    async with session_factory() as session:
        document = await create_document(session, uuid.uuid4())
        repository = DocumentRepository(session)

        saved = await repository.persist(document.uuid, "Renamed", "Cat sat.", score("Cat sat."))
        stored = await repository.get_by_uuid(document.uuid)

    assert saved.title == "Renamed"
    assert stored.title == "Renamed"
    assert stored.content == "Cat sat."
    assert stored.metrics.word_count == 2
    assert stored.last_edited_at is not None


@pytest.mark.asyncio
async def test_persist_unknown_document(session_factory):
    from writing_assistant.core.errors import DocumentNotFoundError

    async with session_factory() as session:
        with pytest.raises(DocumentNotFoundError):
            await DocumentRepository(session).persist(uuid.uuid4(), "Title", "text", score("text"))
