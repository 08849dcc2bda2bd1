import uuid

import pytest

from writing_assistant.domains.suggestions import get_engine


@pytest.fixture(autouse=True)
def predictable_engine(app, rules_engine):
    app.dependency_overrides[get_engine] = lambda: rules_engine


async def create_document(client, headers, title="Notes", content="Hello world."):
    response = await client.post("/documents/", json={"title": title, "content": content}, headers=headers)
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_health(async_client):
    response = await async_client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "database": "ok"}


@pytest.mark.asyncio
async def test_identity_is_required(async_client):
    response = await async_client.post("/documents/", json={"title": "x"})
    assert response.status_code == 401

    response = await async_client.get("/documents/", headers={"X-User-Id": "not-a-uuid"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid user id"


@pytest.mark.asyncio
async def test_create_and_read_document(async_client, auth_headers, user_id):
    created = await create_document(async_client, auth_headers, title="   ", content="Cat sat.")

    assert created["title"] == "Untitled Document"
    assert created["owner_id"] == str(user_id)
    assert created["readability"]["word_count"] == 2
    assert created["readability"]["readability_level"] == "Very Easy"
    assert created["word_count"] == 2

    response = await async_client.get(f"/documents/{created['uuid']}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["content"] == "Cat sat."

    response = await async_client.get("/documents/", headers=auth_headers)
    assert response.json()["total"] == 1


@pytest.mark.asyncio
async def test_documents_are_private(async_client, auth_headers):
    created = await create_document(async_client, auth_headers)
    stranger = {"X-User-Id": str(uuid.uuid4())}

    response = await async_client.get(f"/documents/{created['uuid']}", headers=stranger)
    assert response.status_code == 404

    response = await async_client.put(f"/documents/{created['uuid']}", json={"content": "x"}, headers=stranger)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_save_snapshots_previous_content(async_client, auth_headers):
    created = await create_document(async_client, auth_headers, content="Hello world.")
    url = f"/documents/{created['uuid']}"

    # Исходный текст уже сохранен как версия при создании
    response = await async_client.put(url, json={"content": "Hello there world."}, headers=auth_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["version_created"] is False
    assert body["readability"]["word_count"] == 3
    assert body["content_length"] == len("Hello there world.")

    response = await async_client.put(url, json={"content": "Third draft."}, headers=auth_headers)
    assert response.json()["version_created"] is True

    # Смена только заголовка версию не создает
    response = await async_client.put(url, json={"title": "Renamed"}, headers=auth_headers)
    assert response.json()["version_created"] is False
    assert response.json()["title"] == "Renamed"

    response = await async_client.get(f"{url}/versions", headers=auth_headers)
    assert response.status_code == 200
    versions = response.json()
    assert versions["total"] == 2
    assert [v["content"] for v in versions["versions"]] == ["Hello there world.", "Hello world."]


@pytest.mark.asyncio
async def test_explicit_snapshot_is_deduplicated(async_client, auth_headers):
    created = await create_document(async_client, auth_headers)
    url = f"/documents/{created['uuid']}/versions"

    response = await async_client.post(url, json={"content": "Checkpoint"}, headers=auth_headers)
    assert response.status_code == 201
    assert response.json()["created"] is True

    response = await async_client.post(url, json={"content": "Checkpoint"}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {
        "created": False,
        "message": "Version already exists",
        "content_hash": response.json()["content_hash"],
    }


@pytest.mark.asyncio
async def test_restore_version(async_client, auth_headers):
    created = await create_document(async_client, auth_headers, content="First draft.")
    url = f"/documents/{created['uuid']}"
    await async_client.put(url, json={"content": "Second draft."}, headers=auth_headers)

    versions = (await async_client.get(f"{url}/versions", headers=auth_headers)).json()["versions"]
    first = next(v for v in versions if v["content"] == "First draft.")

    response = await async_client.post(f"{url}/versions/{first['uuid']}/restore", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["version_created"] is True

    document = (await async_client.get(url, headers=auth_headers)).json()
    assert document["content"] == "First draft."

    response = await async_client.post(f"{url}/versions/{uuid.uuid4()}/restore", headers=auth_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_document(async_client, auth_headers):
    created = await create_document(async_client, auth_headers)
    url = f"/documents/{created['uuid']}"

    response = await async_client.delete(url, headers=auth_headers)
    assert response.status_code == 204

    response = await async_client.get(url, headers=auth_headers)
    assert response.status_code == 404

    response = await async_client.delete(url, headers=auth_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_document_suggestions_are_stored(async_client, auth_headers):
    created = await create_document(async_client, auth_headers, content="I teh best, would of known")
    url = f"/documents/{created['uuid']}/suggestions"

    response = await async_client.post(url, headers=auth_headers)
    assert response.status_code == 200
    body = response.json()
    assert [s["id"] for s in body["suggestions"]] == ["spelling-2-5", "grammar-12-20"]
    assert body["suggestions"][1]["suggested_text"] == "would have"
    assert body["stats"]["total_issues"] == 2

    response = await async_client.get(url, headers=auth_headers)
    assert [s["id"] for s in response.json()["suggestions"]] == ["spelling-2-5", "grammar-12-20"]

    # Подсказки к черновику, который не совпадает с документом, не сохраняются
    response = await async_client.post(url, json={"content": "All fine here."}, headers=auth_headers)
    assert response.json()["suggestions"] == []
    response = await async_client.get(url, headers=auth_headers)
    assert [s["id"] for s in response.json()["suggestions"]] == ["spelling-2-5", "grammar-12-20"]

    # Новый набор для сохраненного текста полностью заменяет прежний
    response = await async_client.put(
        f"/documents/{created['uuid']}", json={"content": "All fine here."}, headers=auth_headers
    )
    assert response.status_code == 200
    response = await async_client.post(url, json={"content": "All fine here."}, headers=auth_headers)
    assert response.json()["suggestions"] == []
    response = await async_client.get(url, headers=auth_headers)
    assert response.json()["suggestions"] == []


@pytest.mark.asyncio
async def test_analysis_endpoints(async_client):
    response = await async_client.post("/analysis/readability", json={"content": "Cat sat."})
    assert response.status_code == 200
    body = response.json()
    assert body["readability"]["sentence_count"] == 1
    assert body["readability"]["word_count"] == 2
    assert body["recommendations"]

    response = await async_client.post("/analysis/readability", json={"content": ""})
    assert response.json()["readability"]["readability_level"] == "No Content"
    assert response.json()["recommendations"] == []

    response = await async_client.post("/analysis/suggestions", json={"content": "would of gone"})
    suggestions = response.json()["suggestions"]
    assert suggestions[0]["type"] == "grammar"
    assert suggestions[0]["original_text"] == "would of"
    assert suggestions[0]["suggested_text"] == "would have"
