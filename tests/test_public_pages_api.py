"""
Public brand page and project page endpoint tests.
"""

import pytest

BRAND_PAGE = {
    "id": "page-1",
    "brand_name": "Northwind <Studio>",
    "tagline": "Quiet confidence",
    "template": "minimal-clean",
    "colors": {"primary": "#112233", "colors": [{"name": "Navy", "hex": "#112233"}]},
}


async def _create(client, headers, published):
    return await client.post(
        "/api/v1/projects",
        json={
            "id": "p1",
            "title": "Northwind",
            "brand_data": {"brand_page": BRAND_PAGE},
            "page_blocks": [
                {"id": "b2", "type": "quote", "content": {"quote": "Second"}, "order": 2},
                {"id": "b1", "type": "text", "content": {"text": "First"}, "order": 1},
                {"id": "b3", "type": "hologram", "content": {}, "order": 3},
            ],
            "is_page_published": published,
        },
        headers=headers,
    )


@pytest.mark.asyncio
async def test_published_brand_page_is_rendered(test_client, admin_headers):
    await _create(test_client, admin_headers, published=True)

    response = await test_client.get("/api/v1/public/projects/p1/brand-page")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    html = response.text
    assert "Northwind &lt;Studio&gt;" in html
    assert "<Studio>" not in html
    assert "template-minimal-clean" in html
    assert "Navy" in html


@pytest.mark.asyncio
async def test_unpublished_project_is_not_found(test_client, admin_headers):
    await _create(test_client, admin_headers, published=False)

    brand_page = await test_client.get("/api/v1/public/projects/p1/brand-page")
    project_page = await test_client.get("/api/v1/public/projects/p1/page")

    assert brand_page.status_code == 404
    assert project_page.status_code == 404


@pytest.mark.asyncio
async def test_missing_project_is_not_found(test_client):
    response = await test_client.get("/api/v1/public/projects/nope/brand-page")

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_project_page_renders_blocks_in_order(test_client, admin_headers):
    await _create(test_client, admin_headers, published=True)

    response = await test_client.get("/api/v1/public/projects/p1/page")

    assert response.status_code == 200
    html = response.text
    assert html.index("First") < html.index("Second")
    assert "hologram" not in html
