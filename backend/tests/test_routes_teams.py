"""
Foundry — Team Endpoint Tests
==============================

What we test:
    ✅ Creator becomes owner; members can read the team, non-members get 403
    ✅ Admin-only membership management; owner cannot be removed
    ✅ Only the owner deletes; listings are scoped to the caller's teams
"""

from uuid import uuid4

import pytest


async def create_team(client, headers, name="Platform"):
    response = await client.post("/api/teams", json={"name": name}, headers=headers)
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_create_team_makes_creator_owner(test_client, make_user, auth_headers):
    owner, token = await make_user("owner@example.com")
    team = await create_team(test_client, auth_headers(token), "Platform Team")

    assert team["slug"] == "platform-team"
    assert team["members"] == [
        {
            "user_id": str(owner.id),
            "email": "owner@example.com",
            "name": None,
            "role": "ADMIN",
            "is_owner": True,
        }
    ]

    response = await test_client.get("/api/me", headers=auth_headers(token))
    assert response.json()["teams"][0]["team_name"] == "Platform Team"


@pytest.mark.asyncio
async def test_non_member_cannot_read_team(test_client, make_user, auth_headers):
    _, owner_token = await make_user("owner@example.com")
    _, outsider_token = await make_user("outsider@example.com")
    team = await create_team(test_client, auth_headers(owner_token))

    response = await test_client.get(f"/api/teams/{team['id']}", headers=auth_headers(outsider_token))
    assert response.status_code == 403

    response = await test_client.get(f"/api/teams/{team['id']}", headers=auth_headers(owner_token))
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_membership_management(test_client, make_user, auth_headers):
    owner, owner_token = await make_user("owner@example.com")
    member, member_token = await make_user("member@example.com")
    team = await create_team(test_client, auth_headers(owner_token))
    members_url = f"/api/teams/{team['id']}/members"

    response = await test_client.post(
        members_url, json={"user_email": "member@example.com"}, headers=auth_headers(owner_token)
    )
    assert response.status_code == 201
    assert {m["email"] for m in response.json()["members"]} == {
        "owner@example.com",
        "member@example.com",
    }

    # Duplicate add
    response = await test_client.post(
        members_url, json={"user_email": "member@example.com"}, headers=auth_headers(owner_token)
    )
    assert response.status_code == 409

    # Unknown user
    response = await test_client.post(
        members_url, json={"user_email": "ghost@example.com"}, headers=auth_headers(owner_token)
    )
    assert response.status_code == 404

    # Plain members cannot manage membership
    response = await test_client.post(
        members_url, json={"user_email": "owner@example.com"}, headers=auth_headers(member_token)
    )
    assert response.status_code == 403

    # Owner cannot be removed
    response = await test_client.delete(
        f"{members_url}/{owner.id}", headers=auth_headers(owner_token)
    )
    assert response.status_code == 400
    assert response.json()["error"] == "validation_error"

    response = await test_client.delete(
        f"{members_url}/{member.id}", headers=auth_headers(owner_token)
    )
    assert response.status_code == 200
    assert [m["email"] for m in response.json()["members"]] == ["owner@example.com"]


@pytest.mark.asyncio
async def test_plain_member_reads_team(test_client, make_user, auth_headers):
    _, owner_token = await make_user("owner@example.com")
    _, member_token = await make_user("member@example.com")
    team = await create_team(test_client, auth_headers(owner_token))
    await test_client.post(
        f"/api/teams/{team['id']}/members",
        json={"user_email": "member@example.com"},
        headers=auth_headers(owner_token),
    )

    response = await test_client.get(f"/api/teams/{team['id']}", headers=auth_headers(member_token))
    assert response.status_code == 200
    assert {(m["email"], m["role"]) for m in response.json()["members"]} == {
        ("owner@example.com", "ADMIN"),
        ("member@example.com", "MEMBER"),
    }


@pytest.mark.asyncio
async def test_deactivated_user_is_unauthenticated(test_client, make_user, auth_headers):
    _, token = await make_user("gone@example.com", is_active=False)
    response = await test_client.get("/api/teams", headers=auth_headers(token))
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_update_requires_admin(test_client, make_user, auth_headers):
    _, owner_token = await make_user("owner@example.com")
    _, member_token = await make_user("member@example.com")
    team = await create_team(test_client, auth_headers(owner_token))
    await test_client.post(
        f"/api/teams/{team['id']}/members",
        json={"user_email": "member@example.com"},
        headers=auth_headers(owner_token),
    )

    response = await test_client.patch(
        f"/api/teams/{team['id']}", json={"name": "Renamed"}, headers=auth_headers(member_token)
    )
    assert response.status_code == 403

    response = await test_client.patch(
        f"/api/teams/{team['id']}", json={"name": "Renamed"}, headers=auth_headers(owner_token)
    )
    assert response.status_code == 200
    assert response.json()["slug"] == "renamed"


@pytest.mark.asyncio
async def test_only_owner_deletes(test_client, make_user, auth_headers):
    _, owner_token = await make_user("owner@example.com")
    _, admin_token = await make_user("admin@example.com")
    team = await create_team(test_client, auth_headers(owner_token))
    await test_client.post(
        f"/api/teams/{team['id']}/members",
        json={"user_email": "admin@example.com", "role": "ADMIN"},
        headers=auth_headers(owner_token),
    )

    response = await test_client.delete(f"/api/teams/{team['id']}", headers=auth_headers(admin_token))
    assert response.status_code == 403

    response = await test_client.delete(f"/api/teams/{team['id']}", headers=auth_headers(owner_token))
    assert response.status_code == 204

    response = await test_client.get("/api/teams", headers=auth_headers(owner_token))
    assert response.json()["total"] == 0


@pytest.mark.asyncio
async def test_listing_is_scoped(test_client, make_user, auth_headers):
    _, alice_token = await make_user("alice@example.com")
    _, bob_token = await make_user("bob@example.com")
    _, root_token = await make_user("root@example.com", is_superuser=True)
    await create_team(test_client, auth_headers(alice_token), "Alpha")
    await create_team(test_client, auth_headers(bob_token), "Beta")

    response = await test_client.get("/api/teams", headers=auth_headers(alice_token))
    assert [t["name"] for t in response.json()["items"]] == ["Alpha"]
    assert response.headers["x-total-count"] == "1"

    response = await test_client.get("/api/teams", headers=auth_headers(root_token))
    assert response.json()["total"] == 2


@pytest.mark.asyncio
async def test_superuser_gets_404_for_missing_team(test_client, make_user, auth_headers):
    _, root_token = await make_user("root@example.com", is_superuser=True)
    response = await test_client.get(f"/api/teams/{uuid4()}", headers=auth_headers(root_token))
    assert response.status_code == 404
