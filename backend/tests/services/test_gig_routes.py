"""Gig Routes — HTTP contract for /api/v1/gigs.

Invariants:
    - All routes require a bearer token (401 otherwise)
    - Domain errors surface through the structured error envelope
"""

from uuid import uuid4

import pytest

from gigmarket.core.domain_types import GigStatus, UserRole

GIG_BODY = {
    "title": "Data pipeline",
    "description": "Nightly ETL from S3 into Postgres",
    "budget": "$2000",
    "skills": ["Python", "SQL"],
}


@pytest.fixture
async def owner(make_user):
    return await make_user(UserRole.CLIENT)


@pytest.fixture
async def developer(make_user):
    return await make_user(UserRole.DEVELOPER)


async def test_create_gig_returns_201_open(client, owner, auth_headers):
    res = await client.post("/api/v1/gigs", json=GIG_BODY, headers=auth_headers(owner))
    assert res.status_code == 201
    body = res.json()
    assert body["status"] == "OPEN"
    assert body["owner_id"] == str(owner.id)
    assert body["applications"] == []


async def test_create_gig_without_token_is_401(client):
    res = await client.post("/api/v1/gigs", json=GIG_BODY)
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "AUTHENTICATION_REQUIRED"


async def test_create_gig_with_bad_token_is_401(client):
    res = await client.post(
        "/api/v1/gigs", json=GIG_BODY, headers={"Authorization": "Bearer junk"},
    )
    assert res.status_code == 401


async def test_developer_cannot_create_gig(client, developer, auth_headers):
    res = await client.post("/api/v1/gigs", json=GIG_BODY, headers=auth_headers(developer))
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "FORBIDDEN"


async def test_developer_with_invalid_gig_body_is_403(client, developer, auth_headers):
    res = await client.post(
        "/api/v1/gigs", json={"title": "", "description": "short", "skills": []},
        headers=auth_headers(developer),
    )
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "FORBIDDEN"


async def test_create_gig_missing_fields_is_400(client, owner, auth_headers):
    res = await client.post("/api/v1/gigs", json={}, headers=auth_headers(owner))
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_create_gig_short_description_is_400(client, owner, auth_headers):
    res = await client.post(
        "/api/v1/gigs", json={**GIG_BODY, "description": "short"},
        headers=auth_headers(owner),
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_get_gig_visibility(client, owner, developer, make_gig, auth_headers):
    gig = await make_gig(owner, status=GigStatus.IN_PROGRESS)

    assert (await client.get(
        f"/api/v1/gigs/{gig.id}", headers=auth_headers(owner),
    )).status_code == 200
    assert (await client.get(
        f"/api/v1/gigs/{gig.id}", headers=auth_headers(developer),
    )).status_code == 403


async def test_get_missing_gig_is_404(client, owner, auth_headers):
    res = await client.get(f"/api/v1/gigs/{uuid4()}", headers=auth_headers(owner))
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_update_gig_partial(client, owner, make_gig, auth_headers):
    gig = await make_gig(owner, budget="$100")
    res = await client.put(
        f"/api/v1/gigs/{gig.id}", json={"timeline": "2 weeks"},
        headers=auth_headers(owner),
    )
    assert res.status_code == 200
    assert res.json()["timeline"] == "2 weeks"
    assert res.json()["budget"] == "$100"


async def test_update_gig_status_to_completed(client, owner, make_gig, auth_headers):
    gig = await make_gig(owner, status=GigStatus.IN_PROGRESS)
    res = await client.put(
        f"/api/v1/gigs/{gig.id}", json={"status": "COMPLETED"},
        headers=auth_headers(owner),
    )
    assert res.status_code == 200
    assert res.json()["status"] == "COMPLETED"


async def test_update_gig_unknown_status_is_400(client, owner, make_gig, auth_headers):
    gig = await make_gig(owner)
    res = await client.put(
        f"/api/v1/gigs/{gig.id}", json={"status": "ARCHIVED"},
        headers=auth_headers(owner),
    )
    assert res.status_code == 400


async def test_delete_gig(client, owner, make_gig, auth_headers):
    gig = await make_gig(owner)
    res = await client.delete(f"/api/v1/gigs/{gig.id}", headers=auth_headers(owner))
    assert res.status_code == 200
    assert (await client.get(
        f"/api/v1/gigs/{gig.id}", headers=auth_headers(owner),
    )).status_code == 404


async def test_list_gigs_for_developer(
    client, owner, developer, make_gig, auth_headers,
):
    open_gig = await make_gig(owner)
    await make_gig(owner, status=GigStatus.COMPLETED)
    res = await client.get("/api/v1/gigs", headers=auth_headers(developer))
    assert res.status_code == 200
    assert [g["id"] for g in res.json()] == [str(open_gig.id)]
