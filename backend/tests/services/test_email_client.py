"""Verification Email Client — Resend request shape and failure mapping."""

import json

import httpx
import pytest

from gigmarket.core.errors import EmailDeliveryError
from gigmarket.infrastructure.email_client import (
    ResendEmailClient, build_verification_url,
)


def _client(handler) -> ResendEmailClient:
    return ResendEmailClient(
        api_key="re_123",
        api_url="https://api.resend.test/emails",
        sender="Freelance App <noreply@example.com>",
        app_url="https://app.example.com/",
        transport=httpx.MockTransport(handler),
    )


def test_build_verification_url():
    assert (
        build_verification_url("https://app.example.com/", "abc123")
        == "https://app.example.com/auth/verify-email?token=abc123"
    )


async def test_send_posts_to_resend_with_bearer_key():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"id": "1"})

    await _client(handler).send_verification_email("ada@example.com", "Ada", "tok")

    request = seen[0]
    body = json.loads(request.content)
    assert request.headers["Authorization"] == "Bearer re_123"
    assert body["to"] == ["ada@example.com"]
    assert body["subject"] == "Verify your email address"
    assert "https://app.example.com/auth/verify-email?token=tok" in body["html"]
    assert "Hi Ada," in body["html"]


async def test_name_is_html_escaped():
    seen = []

    def handler(request):
        seen.append(json.loads(request.content))
        return httpx.Response(200, json={})

    await _client(handler).send_verification_email("a@b.c", "<b>Ada</b>", "tok")
    assert "&lt;b&gt;Ada&lt;/b&gt;" in seen[0]["html"]


async def test_provider_rejection_raises_delivery_error():
    client = _client(lambda request: httpx.Response(422, json={"message": "bad"}))
    with pytest.raises(EmailDeliveryError) as exc:
        await client.send_verification_email("a@b.c", "Ada", "tok")
    assert exc.value.status_code == 422


async def test_transport_failure_raises_delivery_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(EmailDeliveryError):
        await _client(handler).send_verification_email("a@b.c", "Ada", "tok")
