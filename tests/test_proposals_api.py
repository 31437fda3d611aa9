"""
Proposal endpoint tests.
"""

import pytest


def _proposal(**overrides):
    payload = {
        "id": "prop-1",
        "title": "Brand identity package",
        "client_name": "Northwind",
        "currency": "USD",
        "tax_rate": 20,
        "items": [
            {"id": 1, "description": "Logo", "quantity": 2, "unit_price": 1500},
            {"id": 2, "description": "Guidelines", "total": 1000, "direct_total": True},
        ],
    }
    payload.update(overrides)
    return payload


@pytest.mark.asyncio
async def test_create_proposal_computes_total(test_client, admin_headers):
    response = await test_client.post("/api/v1/proposals", json=_proposal(), headers=admin_headers)

    assert response.status_code == 201
    proposal = response.json()["proposal"]
    assert proposal["id"] == "prop-1"
    assert proposal["total_amount"] == 4000.0
    assert proposal["items"][0]["total"] == 3000.0
    assert proposal["status"] == "Draft"


@pytest.mark.asyncio
async def test_proposal_totals(test_client, admin_headers):
    await test_client.post("/api/v1/proposals", json=_proposal(), headers=admin_headers)

    response = await test_client.get("/api/v1/proposals/prop-1/totals", headers=admin_headers)

    assert response.status_code == 200
    totals = response.json()
    assert totals["subtotal"] == 4000.0
    assert totals["tax"] == 800.0
    assert totals["grand_total"] == 4800.0
    assert totals["formatted_grand_total"] == "$4,800.00"


@pytest.mark.asyncio
async def test_update_items_recomputes_total(test_client, admin_headers):
    await test_client.post("/api/v1/proposals", json=_proposal(), headers=admin_headers)

    response = await test_client.put(
        "/api/v1/proposals/prop-1",
        json={"items": [{"id": 1, "quantity": 1, "unit_price": 250}], "status": "Sent"},
        headers=admin_headers,
    )

    assert response.status_code == 200
    proposal = response.json()["proposal"]
    assert proposal["total_amount"] == 250.0
    assert proposal["status"] == "Sent"


@pytest.mark.asyncio
async def test_delete_proposal(test_client, admin_headers):
    await test_client.post("/api/v1/proposals", json=_proposal(), headers=admin_headers)

    assert (await test_client.delete("/api/v1/proposals/prop-1", headers=admin_headers)).status_code == 204
    assert (await test_client.get("/api/v1/proposals/prop-1", headers=admin_headers)).status_code == 404


@pytest.mark.asyncio
async def test_duplicate_proposal_conflicts(test_client, admin_headers):
    await test_client.post("/api/v1/proposals", json=_proposal(), headers=admin_headers)
    response = await test_client.post("/api/v1/proposals", json=_proposal(), headers=admin_headers)

    assert response.status_code == 409
