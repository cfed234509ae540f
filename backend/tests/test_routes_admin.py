"""
Foundry — Superuser Endpoint Tests (users, roles, system) and Health
=====================================================================
"""

from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
import pytest_asyncio

from foundry.exceptions import QueueError


@pytest_asyncio.fixture
async def admin_headers(make_user, auth_headers):
    _, token = await make_user("admin@example.com", is_superuser=True)
    return auth_headers(token)


class TestUsers:
    @pytest.mark.asyncio
    async def test_regular_user_forbidden(self, test_client, make_user, auth_headers):
        _, token = await make_user("alice@example.com")
        response = await test_client.get("/api/users", headers=auth_headers(token))
        assert response.status_code == 403
        assert response.json()["error"] == "permission_denied"

    @pytest.mark.asyncio
    async def test_list_with_search_and_total_header(self, test_client, make_user, admin_headers):
        for name in ("alpha", "beta", "gamma"):
            await make_user(f"{name}@example.com")

        response = await test_client.get(
            "/api/users", params={"limit": 2, "offset": 0}, headers=admin_headers
        )
        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 4
        assert len(body["items"]) == 2
        assert response.headers["x-total-count"] == "4"

        response = await test_client.get(
            "/api/users", params={"search": "BETA"}, headers=admin_headers
        )
        assert [u["email"] for u in response.json()["items"]] == ["beta@example.com"]

    @pytest.mark.asyncio
    async def test_crud(self, test_client, admin_headers):
        response = await test_client.post(
            "/api/users",
            json={"email": "carol@example.com", "password": "correct-horse", "is_verified": True},
            headers=admin_headers,
        )
        assert response.status_code == 201
        user_id = response.json()["id"]
        assert response.json()["is_verified"] is True

        response = await test_client.patch(
            f"/api/users/{user_id}", json={"is_active": False}, headers=admin_headers
        )
        assert response.status_code == 200
        assert response.json()["is_active"] is False

        response = await test_client.get(f"/api/users/{user_id}", headers=admin_headers)
        assert response.json()["email"] == "carol@example.com"

        response = await test_client.delete(f"/api/users/{user_id}", headers=admin_headers)
        assert response.status_code == 204

        response = await test_client.get(f"/api/users/{user_id}", headers=admin_headers)
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_deleting_team_owner_conflicts(
        self, test_client, make_user, auth_headers, admin_headers
    ):
        owner, token = await make_user("owner@example.com")
        response = await test_client.post(
            "/api/teams", json={"name": "Ops"}, headers=auth_headers(token)
        )
        team_id = response.json()["id"]

        response = await test_client.delete(f"/api/users/{owner.id}", headers=admin_headers)
        assert response.status_code == 409
        assert response.json()["error"] == "conflict"
        assert response.json()["details"]["owned_teams"] == 1

        response = await test_client.get(f"/api/teams/{team_id}", headers=auth_headers(token))
        assert response.status_code == 200
        assert response.json()["members"][0]["is_owner"] is True

    @pytest.mark.asyncio
    async def test_get_unknown_user(self, test_client, admin_headers):
        response = await test_client.get(f"/api/users/{uuid4()}", headers=admin_headers)
        assert response.status_code == 404


class TestRoles:
    @pytest.mark.asyncio
    async def test_assign_superuser_role_grants_access(
        self, test_client, default_roles, make_user, auth_headers, admin_headers
    ):
        _, token = await make_user("bob@example.com")
        assert (await test_client.get("/api/users", headers=auth_headers(token))).status_code == 403

        response = await test_client.post(
            "/api/roles/superuser/assign",
            json={"user_email": "bob@example.com"},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert "superuser" in [r["role_slug"] for r in response.json()["roles"]]

        assert (await test_client.get("/api/users", headers=auth_headers(token))).status_code == 200

        response = await test_client.post(
            "/api/roles/superuser/revoke",
            json={"user_email": "bob@example.com"},
            headers=admin_headers,
        )
        assert "superuser" not in [r["role_slug"] for r in response.json()["roles"]]
        assert (await test_client.get("/api/users", headers=auth_headers(token))).status_code == 403

    @pytest.mark.asyncio
    async def test_list_and_create(self, test_client, default_roles, admin_headers):
        response = await test_client.post(
            "/api/roles", json={"name": "Billing Admin"}, headers=admin_headers
        )
        assert response.status_code == 201
        assert response.json()["slug"] == "billing-admin"

        response = await test_client.get("/api/roles", headers=admin_headers)
        assert {r["slug"] for r in response.json()} == {
            "superuser",
            "application-access",
            "billing-admin",
        }

    @pytest.mark.asyncio
    async def test_assign_to_unknown_user(self, test_client, default_roles, admin_headers):
        response = await test_client.post(
            "/api/roles/superuser/assign",
            json={"user_email": "ghost@example.com"},
            headers=admin_headers,
        )
        assert response.status_code == 404


class TestSystem:
    @pytest.mark.asyncio
    async def test_queue_info(self, test_client, admin_headers):
        info = {"name": "background-tasks", "workers": 1, "queued": 2, "active": 0, "scheduled": 0}
        with patch("foundry.routes.system.queue_info", new_callable=AsyncMock, return_value=info):
            response = await test_client.get("/api/system/queue", headers=admin_headers)
        assert response.status_code == 200
        assert response.json() == info

    @pytest.mark.asyncio
    async def test_queue_unavailable(self, test_client, admin_headers):
        with patch(
            "foundry.routes.system.queue_info", new_callable=AsyncMock, side_effect=QueueError()
        ):
            response = await test_client.get("/api/system/queue", headers=admin_headers)
        assert response.status_code == 503
        assert response.json()["error"] == "queue_unavailable"

    @pytest.mark.asyncio
    async def test_enqueue_echo(self, test_client, admin_headers):
        job = MagicMock(key="saq:job:echo", function="background_worker_task", status="queued")
        with patch(
            "foundry.routes.system.enqueue", new_callable=AsyncMock, return_value=job
        ) as mock_enqueue:
            response = await test_client.post(
                "/api/system/jobs/echo", json={"message": "hi"}, headers=admin_headers
            )
        assert response.status_code == 202
        assert response.json() == {
            "job_key": "saq:job:echo",
            "function": "background_worker_task",
            "status": "queued",
        }
        mock_enqueue.assert_awaited_once_with("background_worker_task", message="hi")


class TestHealth:
    @pytest.mark.asyncio
    async def test_healthy(self, test_client):
        with patch("foundry.routes.health.check_cache", new_callable=AsyncMock, return_value=True):
            response = await test_client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert body["cache"] == "connected"

    @pytest.mark.asyncio
    async def test_degraded_without_redis(self, test_client):
        with patch("foundry.routes.health.check_cache", new_callable=AsyncMock, return_value=False):
            response = await test_client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "degraded"

    @pytest.mark.asyncio
    async def test_unhealthy_without_database(self, test_client):
        with patch(
            "foundry.routes.health.check_database", new_callable=AsyncMock, return_value=False
        ), patch("foundry.routes.health.check_cache", new_callable=AsyncMock, return_value=True):
            response = await test_client.get("/health")
        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"
