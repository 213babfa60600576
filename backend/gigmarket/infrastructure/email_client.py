"""Verification Email Client — sends transactional email through the Resend REST API.

Invariants:
    - One attempt per send: no retry loop (signup must return promptly)
    - Transport failures and non-2xx responses map to EmailDeliveryError
    - Never raises anything else for network/provider problems

Design Decisions:
    - httpx.AsyncClient over the Resend SDK: async, and the transport can be
      swapped for httpx.MockTransport in tests
    - HTML rendered inline: a single template does not justify a template engine
"""

import logging
from html import escape
from urllib.parse import quote

import httpx

from gigmarket.core.errors import EmailDeliveryError

logger = logging.getLogger(__name__)

_VERIFICATION_TEMPLATE = """\
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2 style="color: #333;">Welcome to Freelance App!</h2>
  <p>Hi {name},</p>
  <p>Thank you for signing up! Please click the button below to verify your email address:</p>
  <div style="text-align: center; margin: 30px 0;">
    <a href="{url}" style="background-color: #3b82f6; color: white; padding: 12px 24px; text-decoration: none; border-radius: 6px; display: inline-block;">Verify Email</a>
  </div>
  <p>Or copy and paste this link into your browser:</p>
  <p style="word-break: break-all; color: #666;">{url}</p>
  <p>This link will expire in {ttl_hours} hours.</p>
  <p>If you didn't create an account, please ignore this email.</p>
</div>
"""


def build_verification_url(app_url: str, token: str) -> str:
    return f"{app_url.rstrip('/')}/auth/verify-email?token={quote(token)}"


class ResendEmailClient:
    """Thin async wrapper over POST /emails."""

    def __init__(
        self,
        api_key: str,
        api_url: str,
        sender: str,
        app_url: str,
        timeout_seconds: float = 10.0,
        ttl_hours: int = 24,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.api_url = api_url
        self.sender = sender
        self.app_url = app_url
        self.timeout_seconds = timeout_seconds
        self.ttl_hours = ttl_hours
        self._transport = transport

    async def send_verification_email(
        self, email: str, name: str | None, token: str,
    ) -> None:
        url = build_verification_url(self.app_url, token)
        html = _VERIFICATION_TEMPLATE.format(
            name=escape(name or "there"), url=escape(url), ttl_hours=self.ttl_hours,
        )
        await self._send(
            to=email, subject="Verify your email address", html=html,
        )

    async def _send(self, *, to: str, subject: str, html: str) -> None:
        payload = {"from": self.sender, "to": [to], "subject": subject, "html": html}
        headers = {"Authorization": f"Bearer {self.api_key}"}
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds, transport=self._transport,
            ) as client:
                response = await client.post(self.api_url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"Email transport error: {e}")
            raise EmailDeliveryError("provider unreachable")

        if response.status_code >= 300:
            logger.error(
                f"Email provider rejected message: {response.status_code}",
                extra={"status": response.status_code},
            )
            raise EmailDeliveryError(
                "provider rejected message", status_code=response.status_code,
            )
        logger.info("Verification email sent")
