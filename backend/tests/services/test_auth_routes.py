"""Auth, Profile & Health Routes — signup to login over HTTP, probes, error envelope."""

from unittest.mock import AsyncMock, patch

from httpx import ASGITransport, AsyncClient
from sqlalchemy import select

from gigmarket.core.domain_types import UserRole
from gigmarket.main import app
from gigmarket.models.verification_token import VerificationToken
from gigmarket.services.gig_service import GigService

SIGNUP = {
    "name": "Grace",
    "email": "grace@example.com",
    "password": "secret1",
    "role": "CLIENT",
}


async def _token_for(session_factory, email):
    async with session_factory() as session:
        return await session.scalar(
            select(VerificationToken.token).where(VerificationToken.identifier == email),
        )


async def test_signup_verify_login(client, test_session_factory, email_outbox):
    res = await client.post("/api/v1/auth/signup", json=SIGNUP)
    assert res.status_code == 201
    assert res.json()["email_sent"] is True

    login = await client.post(
        "/api/v1/auth/login", json={"email": SIGNUP["email"], "password": "secret1"},
    )
    assert login.status_code == 403

    token = await _token_for(test_session_factory, SIGNUP["email"])
    verify = await client.post("/api/v1/auth/verify-email", json={"token": token})
    assert verify.status_code == 200

    login = await client.post(
        "/api/v1/auth/login", json={"email": SIGNUP["email"], "password": "secret1"},
    )
    assert login.status_code == 200
    access = login.json()["access_token"]
    assert login.json()["user"]["role"] == "CLIENT"

    profile = await client.get(
        "/api/v1/profile", headers={"Authorization": f"Bearer {access}"},
    )
    assert profile.json()["email"] == SIGNUP["email"]
    assert "password_hash" not in profile.json()


async def test_signup_with_email_outage_still_201(client, email_outbox):
    email_outbox["status_code"] = 503
    res = await client.post("/api/v1/auth/signup", json=SIGNUP)
    assert res.status_code == 201
    assert res.json()["email_sent"] is False
    assert res.json()["warning"]


async def test_signup_duplicate_email_is_400(client):
    await client.post("/api/v1/auth/signup", json=SIGNUP)
    res = await client.post("/api/v1/auth/signup", json=SIGNUP)
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "EMAIL_TAKEN"


async def test_signup_invalid_payload_is_400(client):
    res = await client.post(
        "/api/v1/auth/signup",
        json={**SIGNUP, "email": "not-an-email", "role": "ADMIN"},
    )
    assert res.status_code == 400
    fields = {d["field"] for d in res.json()["error"]["details"]}
    assert "body.email" in fields
    assert "body.role" in fields


async def test_verify_invalid_token_is_400(client):
    res = await client.post("/api/v1/auth/verify-email", json={"token": "bogus"})
    assert res.status_code == 400


async def test_resend_is_uniform(client):
    res = await client.post(
        "/api/v1/auth/resend-verification", json={"email": "ghost@example.com"},
    )
    assert res.status_code == 200
    assert "verification email" in res.json()["message"]


async def test_login_bad_credentials_is_401(client):
    res = await client.post(
        "/api/v1/auth/login", json={"email": "ghost@example.com", "password": "secret1"},
    )
    assert res.status_code == 401


async def test_profile_update(client, make_user, auth_headers):
    user = await make_user(UserRole.DEVELOPER)
    res = await client.put(
        "/api/v1/profile",
        json={"bio": "Backend developer", "website": "https://grace.dev", "phone": ""},
        headers=auth_headers(user),
    )
    assert res.status_code == 200
    assert res.json()["bio"] == "Backend developer"
    assert res.json()["role"] == "DEVELOPER"


async def test_profile_rejects_bad_website(client, make_user, auth_headers):
    user = await make_user()
    res = await client.put(
        "/api/v1/profile", json={"website": "grace.dev"}, headers=auth_headers(user),
    )
    assert res.status_code == 400


async def test_profile_requires_auth(client):
    assert (await client.get("/api/v1/profile")).status_code == 401


# ─── Probes & catch-all ──────────────────────────────────────────

async def test_health_liveness(client):
    res = await client.get("/api/v1/health/")
    assert res.status_code == 200
    assert res.json()["status"] == "healthy"


async def test_health_readiness(client):
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 200
    assert res.json()["checks"]["database"] == "healthy"


async def test_unexpected_error_is_opaque_500(
    client, make_user, auth_headers,
):
    user = await make_user()
    with patch.object(
        GigService, "list_gigs",
        AsyncMock(side_effect=RuntimeError("password=hunter2 in driver text")),
    ):
        async with AsyncClient(
            transport=ASGITransport(app=app, raise_app_exceptions=False),
            base_url="http://test",
        ) as raw:
            res = await raw.get("/api/v1/gigs", headers=auth_headers(user))
    assert res.status_code == 500
    assert res.json()["error"]["code"] == "INTERNAL_ERROR"
    assert "hunter2" not in res.text
