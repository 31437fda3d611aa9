"""
Bulk project sync endpoint tests.
"""

import pytest


@pytest.mark.asyncio
async def test_sync_inserts_updates_and_skips(test_client, admin_headers):
    await test_client.post(
        "/api/v1/projects",
        json={"id": "p-existing", "title": "Old title", "client": "Acme"},
        headers=admin_headers,
    )

    response = await test_client.post(
        "/api/v1/admin/sync-projects",
        json={"projects": [
            {"id": "p-new", "title": "New project"},
            {"id": "p-existing", "title": "New title", "client": None},
            {"id": "demo-studio-showcase", "title": "Showcase"},
        ]},
        headers=admin_headers,
    )

    assert response.status_code == 200
    report = response.json()
    assert report["inserted"] == 1
    assert report["updated"] == 1
    assert report["skipped"] == 1
    assert report["synced"] == 2
    assert report["total"] == 3
    assert {"id": "demo-studio-showcase", "action": "skipped (demo)"} in report["results"]

    existing = (await test_client.get("/api/v1/projects/p-existing", headers=admin_headers)).json()
    assert existing["title"] == "New title"
    assert existing["client"] == "Acme"

    listing = (await test_client.get("/api/v1/projects", headers=admin_headers)).json()
    assert {p["id"] for p in listing["projects"]} == {"p-new", "p-existing"}


@pytest.mark.asyncio
async def test_sync_skips_records_without_id(test_client, admin_headers):
    response = await test_client.post(
        "/api/v1/admin/sync-projects",
        json={"projects": [{"title": "No id"}, {"id": 42, "title": "Numeric id"}]},
        headers=admin_headers,
    )

    report = response.json()
    assert report["skipped"] == 1
    assert report["inserted"] == 1
    assert report["results"] == [{"id": "42", "action": "inserted"}]


@pytest.mark.asyncio
async def test_sync_reports_invalid_records_and_continues(test_client, admin_headers):
    response = await test_client.post(
        "/api/v1/admin/sync-projects",
        json={"projects": [{"id": "bad", "title": ""}, {"id": "good", "title": "Fine"}]},
        headers=admin_headers,
    )

    report = response.json()
    assert report["failed"] == 1
    assert report["inserted"] == 1
    assert {"id": "bad", "action": "failed"} in report["results"]


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{"projects": []}, {}])
async def test_sync_without_projects_is_rejected(test_client, admin_headers, body):
    response = await test_client.post("/api/v1/admin/sync-projects", json=body, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "No projects provided"


@pytest.mark.asyncio
async def test_sync_requires_admin_token(test_client):
    response = await test_client.post("/api/v1/admin/sync-projects", json={"projects": [{"id": "x"}]})

    assert response.status_code == 401
