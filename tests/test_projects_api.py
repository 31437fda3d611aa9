"""
Project endpoint tests: CRUD, narrow projection and admin authentication.
"""

import pytest

BRAND_DATA = {"brand_page": {"id": "page-1", "brand_name": "Northwind"}}


async def _create(client, headers, **overrides):
    payload = {
        "id": 1700000000000,
        "title": "Northwind Rebrand",
        "client": "Northwind",
        "category": "Brand Identity",
        "brand_data": BRAND_DATA,
        "page_blocks": [{"id": "b1", "type": "text", "content": {"text": "Hello"}, "order": 0}],
    }
    payload.update(overrides)
    return await client.post("/api/v1/projects", json=payload, headers=headers)


@pytest.mark.asyncio
async def test_create_project_keeps_client_id(test_client, admin_headers):
    response = await _create(test_client, admin_headers)

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["project"]["id"] == "1700000000000"
    assert body["project"]["status"] == "Planning"


@pytest.mark.asyncio
async def test_create_project_without_id_gets_one(test_client, admin_headers):
    response = await _create(test_client, admin_headers, id=None)

    assert response.status_code == 201
    assert response.json()["project"]["id"]


@pytest.mark.asyncio
async def test_duplicate_project_id_conflicts(test_client, admin_headers):
    await _create(test_client, admin_headers)
    response = await _create(test_client, admin_headers)

    assert response.status_code == 409
    assert "already exists" in response.json()["error"]["message"]


@pytest.mark.asyncio
async def test_list_projects_omits_heavy_fields_by_default(test_client, admin_headers):
    await _create(test_client, admin_headers)

    narrow = await test_client.get("/api/v1/projects", headers=admin_headers)
    full = await test_client.get("/api/v1/projects?include_content=true", headers=admin_headers)

    assert narrow.status_code == 200
    project = narrow.json()["projects"][0]
    assert project["brand_data"] is None
    assert project["page_blocks"] == []
    assert project["title"] == "Northwind Rebrand"

    project = full.json()["projects"][0]
    assert project["brand_data"] == BRAND_DATA
    assert project["page_blocks"][0]["id"] == "b1"


@pytest.mark.asyncio
async def test_get_single_project_includes_content(test_client, admin_headers):
    await _create(test_client, admin_headers)

    response = await test_client.get("/api/v1/projects/1700000000000", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["brand_data"] == BRAND_DATA


@pytest.mark.asyncio
async def test_update_project(test_client, admin_headers):
    await _create(test_client, admin_headers)

    response = await test_client.put(
        "/api/v1/projects/1700000000000",
        json={"status": "In Progress", "progress": 40},
        headers=admin_headers,
    )

    assert response.status_code == 200
    project = response.json()["project"]
    assert project["status"] == "In Progress"
    assert project["progress"] == 40
    assert project["title"] == "Northwind Rebrand"


@pytest.mark.asyncio
async def test_update_missing_project_is_404(test_client, admin_headers):
    response = await test_client.put("/api/v1/projects/nope", json={"title": "X"}, headers=admin_headers)

    assert response.status_code == 404
    assert response.json()["error"]["message"] == "Project not found"


@pytest.mark.asyncio
async def test_delete_project(test_client, admin_headers):
    await _create(test_client, admin_headers)

    response = await test_client.delete("/api/v1/projects/1700000000000", headers=admin_headers)
    assert response.status_code == 204

    response = await test_client.get("/api/v1/projects/1700000000000", headers=admin_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_invalid_progress_is_rejected(test_client, admin_headers):
    response = await _create(test_client, admin_headers, progress=150)

    assert response.status_code == 422
    assert response.json()["error"]["message"] == "Validation error"


@pytest.mark.asyncio
async def test_admin_routes_require_token(test_client):
    response = await test_client.get("/api/v1/projects")

    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_admin_routes_reject_wrong_token(test_client):
    response = await test_client.get(
        "/api/v1/projects",
        headers={"Authorization": "Bearer not-the-token"},
    )

    assert response.status_code == 401
