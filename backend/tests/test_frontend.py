"""
Foundry — Frontend Shell & Middleware Tests
============================================

The test environment runs with VITE_DEV_MODE=true, so the shell references
the Vite dev server and no manifest is needed.
"""

import pytest


@pytest.mark.asyncio
async def test_index_renders_shell(test_client):
    response = await test_client.get("/")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert '<div id="root"></div>' in response.text
    assert "@vite/client" in response.text
    assert "resources/main.tsx" in response.text


@pytest.mark.asyncio
async def test_client_side_routes_fall_back_to_shell(test_client):
    response = await test_client.get("/teams/42/settings")
    assert response.status_code == 200
    assert '<div id="root"></div>' in response.text


@pytest.mark.asyncio
async def test_unknown_api_path_is_json_404(test_client):
    response = await test_client.get("/api/does-not-exist")
    assert response.status_code == 404
    assert response.json()["error"] == "not_found"


@pytest.mark.asyncio
async def test_request_id_is_echoed(test_client):
    response = await test_client.get("/", headers={"X-Request-ID": "abc123"})
    assert response.headers["x-request-id"] == "abc123"


@pytest.mark.asyncio
async def test_request_id_generated_when_absent(test_client):
    response = await test_client.get("/")
    assert len(response.headers["x-request-id"]) == 8
