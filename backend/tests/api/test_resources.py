"""Tests for resource endpoints."""
from uuid import UUID

from httpx import AsyncClient


async def create_resource(client: AsyncClient, **body: object) -> dict:
    response = await client.post("/resources/", json=body)
    assert response.status_code == 201, response.text
    return response.json()


# =============================================================================
# Create
# =============================================================================


async def test_create_bookmark(client: AsyncClient) -> None:
    response = await client.post(
        "/resources/",
        json={
            "type": "bookmark",
            "title": "Python docs",
            "url": "https://docs.python.org",
            "description": "Official docs",
            "tags": ["Python", "reference"],
        },
    )

    assert response.status_code == 201
    data = response.json()
    assert data["type"] == "bookmark"
    assert data["title"] == "Python docs"
    assert data["url"] == "https://docs.python.org"
    assert data["description"] == "Official docs"
    assert data["tags"] == ["python", "reference"]
    assert data["favorite"] is False
    assert data["folder_id"] is None
    assert data["content"] is None
    assert isinstance(data["id"], str)


async def test_create_bookmark_without_url(client: AsyncClient) -> None:
    response = await client.post("/resources/", json={"type": "bookmark", "title": "Docs"})

    assert response.status_code == 422
    body = response.json()
    assert body["error"] == "validation_error"
    assert any(error.startswith("bookmark.url:") for error in body["errors"])

    response = await client.post(
        "/resources/",
        json={"type": "bookmark", "title": "Docs", "url": "https://docs.python.org"},
    )
    assert response.status_code == 201


async def test_create_note_without_content(client: AsyncClient) -> None:
    response = await client.post("/resources/", json={"type": "note", "title": "Empty"})

    assert response.status_code == 422
    assert any("content" in error for error in response.json()["errors"])


async def test_create_unknown_type(client: AsyncClient) -> None:
    response = await client.post("/resources/", json={"type": "video", "title": "x"})

    assert response.status_code == 422


async def test_create_in_other_users_folder(client: AsyncClient, other_user_id: UUID) -> None:
    response = await client.post(
        "/folders/", json={"name": "Theirs"}, headers={"X-User-Id": str(other_user_id)},
    )
    theirs = response.json()

    response = await client.post(
        "/resources/",
        json={"type": "note", "title": "x", "content": "y", "folder_id": theirs["id"]},
    )

    assert response.status_code == 404
    assert response.json()["message"] == "Folder not found"


# =============================================================================
# Get / update / delete / favorite
# =============================================================================


async def test_get_resource_of_other_user(client: AsyncClient, other_user_id: UUID) -> None:
    note = await create_resource(client, type="note", title="Private", content="x")

    mine = await client.get(f"/resources/{note['id']}")
    theirs = await client.get(
        f"/resources/{note['id']}", headers={"X-User-Id": str(other_user_id)},
    )

    assert mine.status_code == 200
    assert theirs.status_code == 404
    assert theirs.json()["error"] == "not_found"


async def test_update_resource(client: AsyncClient) -> None:
    snippet = await create_resource(
        client, type="snippet", title="Hello", content="print('hi')", code_language="Python",
    )
    assert snippet["code_language"] == "python"

    response = await client.patch(
        f"/resources/{snippet['id']}",
        json={"title": "Hello world", "content": "print('hello world')", "tags": ["demo"]},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "Hello world"
    assert data["content"] == "print('hello world')"
    assert data["code_language"] == "python"
    assert data["tags"] == ["demo"]


async def test_update_resource_type_change_rejected(client: AsyncClient) -> None:
    note = await create_resource(client, type="note", title="n", content="x")

    response = await client.patch(f"/resources/{note['id']}", json={"type": "bookmark"})

    assert response.status_code == 400
    assert response.json()["error"] == "invalid_operation"


async def test_update_resource_foreign_field_rejected(client: AsyncClient) -> None:
    note = await create_resource(client, type="note", title="n", content="x")

    response = await client.patch(
        f"/resources/{note['id']}", json={"url": "https://example.com"},
    )

    assert response.status_code == 422
    assert response.json() == {
        "error": "validation_error",
        "message": "Validation failed",
        "errors": ["Field 'url' does not apply to note resources"],
    }


async def test_update_resource_move_between_folders(client: AsyncClient) -> None:
    folder = (await client.post("/folders/", json={"name": "Work"})).json()
    note = await create_resource(client, type="note", title="n", content="x")

    filed = await client.patch(f"/resources/{note['id']}", json={"folder_id": folder["id"]})
    assert filed.json()["folder_id"] == folder["id"]

    unfiled = await client.patch(f"/resources/{note['id']}", json={"folder_id": None})
    assert unfiled.json()["folder_id"] is None
    assert unfiled.json()["folder"] is None


async def test_resource_responses_include_folder_name_and_color(client: AsyncClient) -> None:
    folder = (
        await client.post("/folders/", json={"name": "Reading", "color": "#10B981"})
    ).json()
    note = await create_resource(
        client, type="note", title="n", content="x", folder_id=folder["id"],
    )
    expected = {"id": folder["id"], "name": "Reading", "color": "#10B981"}

    assert note["folder"] == expected
    fetched = (await client.get(f"/resources/{note['id']}")).json()
    assert fetched["folder"] == expected
    listed = (await client.get("/resources/", params={"folder_id": folder["id"]})).json()
    assert listed["items"][0]["folder"] == expected


async def test_create_resource_with_empty_folder_id_is_unfiled(client: AsyncClient) -> None:
    response = await client.post(
        "/resources/", json={"type": "note", "title": "n", "content": "x", "folder_id": ""},
    )

    assert response.status_code == 201
    assert response.json()["folder_id"] is None
    assert response.json()["folder"] is None


async def test_delete_resource(client: AsyncClient) -> None:
    note = await create_resource(client, type="note", title="n", content="x")

    response = await client.delete(f"/resources/{note['id']}")

    assert response.status_code == 204
    assert (await client.get(f"/resources/{note['id']}")).status_code == 404
    assert (await client.delete(f"/resources/{note['id']}")).status_code == 404


async def test_toggle_favorite(client: AsyncClient) -> None:
    note = await create_resource(client, type="note", title="n", content="x")

    first = await client.post(f"/resources/{note['id']}/favorite")
    second = await client.post(f"/resources/{note['id']}/favorite")

    assert first.json()["favorite"] is True
    assert second.json()["favorite"] is False


# =============================================================================
# List
# =============================================================================


async def test_list_resources_tag_filter(client: AsyncClient) -> None:
    """Resources tagged [react], [vue], [react, vue]: tags=react returns the first and third."""
    react = await create_resource(client, type="note", title="react", content="x", tags=["react"])
    await create_resource(client, type="note", title="vue", content="x", tags=["vue"])
    both = await create_resource(
        client, type="note", title="both", content="x", tags=["react", "vue"],
    )

    response = await client.get("/resources/", params={"tags": "react"})

    assert response.status_code == 200
    assert [item["id"] for item in response.json()["items"]] == [both["id"], react["id"]]


async def test_list_resources_tags_repeated_or_comma_separated(client: AsyncClient) -> None:
    await create_resource(client, type="note", title="react", content="x", tags=["react"])
    await create_resource(client, type="note", title="vue", content="x", tags=["vue"])
    await create_resource(client, type="note", title="go", content="x", tags=["go"])

    repeated = await client.get("/resources/", params=[("tags", "react"), ("tags", "vue")])
    comma = await client.get("/resources/", params={"tags": "react,vue"})

    assert repeated.json()["total"] == 2
    assert comma.json()["total"] == 2


async def test_list_resources_pagination(client: AsyncClient) -> None:
    for i in range(25):
        await create_resource(client, type="note", title=f"note {i:02d}", content="x")

    everything = (await client.get("/resources/", params={"limit": 100})).json()
    page_two = (await client.get("/resources/", params={"page": 2, "limit": 10})).json()

    assert page_two["total"] == 25
    assert page_two["page"] == 2
    assert page_two["limit"] == 10
    assert page_two["pages"] == 3
    assert [item["id"] for item in page_two["items"]] == [
        item["id"] for item in everything["items"][10:20]
    ]


async def test_list_resources_limit_out_of_range(client: AsyncClient) -> None:
    response = await client.get("/resources/", params={"limit": 101})

    assert response.status_code == 422
    assert response.json()["error"] == "validation_error"


async def test_list_resources_folder_filter(client: AsyncClient) -> None:
    folder = (await client.post("/folders/", json={"name": "Work"})).json()
    filed = await create_resource(
        client, type="note", title="filed", content="x", folder_id=folder["id"],
    )
    unfiled = await create_resource(client, type="note", title="unfiled", content="x")

    by_folder = (await client.get("/resources/", params={"folder_id": folder["id"]})).json()
    root = (await client.get("/resources/", params={"folder_id": "root"})).json()
    null = (await client.get("/resources/", params={"folder_id": "null"})).json()

    assert [item["id"] for item in by_folder["items"]] == [filed["id"]]
    assert [item["id"] for item in root["items"]] == [unfiled["id"]]
    assert [item["id"] for item in null["items"]] == [unfiled["id"]]


async def test_list_resources_bad_folder_filter(client: AsyncClient) -> None:
    response = await client.get("/resources/", params={"folder_id": "nope"})

    assert response.status_code == 422


async def test_list_resources_search_and_type(client: AsyncClient) -> None:
    await create_resource(
        client, type="bookmark", title="FastAPI docs", url="https://fastapi.tiangolo.com",
    )
    await create_resource(client, type="note", title="FastAPI notes", content="x")
    await create_resource(client, type="note", title="Other", content="x")

    response = await client.get("/resources/", params={"search": "fastapi", "type": "note"})

    data = response.json()
    assert data["total"] == 1
    assert data["items"][0]["title"] == "FastAPI notes"


# =============================================================================
# Stats
# =============================================================================


async def test_stats(client: AsyncClient) -> None:
    await create_resource(client, type="note", title="n", content="x", favorite=True)
    await create_resource(client, type="bookmark", title="b", url="https://example.com")

    response = await client.get("/resources/stats")

    assert response.status_code == 200
    data = response.json()
    assert data["counts"] == {
        "bookmark": 1,
        "prompt": 0,
        "snippet": 0,
        "document": 0,
        "note": 1,
    }
    assert data["total"] == 2
    assert data["favorites"] == 1
