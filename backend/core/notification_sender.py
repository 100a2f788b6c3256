"""
Notification Sender

Transactional email through the Resend HTTP API. Sending is fire-and-forget:
every public method returns ``True``/``False`` and never raises, so a mail
outage cannot fail the request that triggered it.
"""

import os
import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

import httpx

from . import email_templates


logger = logging.getLogger(__name__)


@dataclass
class NotificationConfig:
    """Email provider settings"""
    api_key: str
    from_email: str
    client_url: str
    api_url: str = "https://api.resend.com/emails"
    timeout: float = 10.0

    def __post_init__(self):
        self.client_url = self.client_url.rstrip("/")

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)


@lru_cache(maxsize=1)
def get_notification_config() -> NotificationConfig:
    """Load notification configuration from environment variables"""
    return NotificationConfig(
        api_key=os.getenv("RESEND_API_KEY", ""),
        from_email=os.getenv("NOTIFICATION_FROM_EMAIL", "team@charandhul.com"),
        client_url=os.getenv("CLIENT_URL", "http://localhost:3000"),
        api_url=os.getenv("RESEND_API_URL", "https://api.resend.com/emails"),
        timeout=float(os.getenv("NOTIFICATION_TIMEOUT", "10")),
    )


class NotificationSender:
    """Sends the platform's templated emails"""

    def __init__(self, config: NotificationConfig = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config or get_notification_config()
        self._transport = transport

    def invite_url(self, invite_token: str) -> str:
        return f"{self.config.client_url}/accept-invite?token={invite_token}"

    async def send_premium_confirmation(self, user_email: str, user_name: str) -> bool:
        html = email_templates.premium_confirmation(
            user_name, f"{self.config.client_url}/dashboard"
        )
        return await self._send(user_email, "Welcome to Premium Contract Analysis", html)

    async def send_enterprise_welcome(self, user_email: str, user_name: str, organization_name: str) -> bool:
        html = email_templates.enterprise_welcome(
            user_name, organization_name, f"{self.config.client_url}/enterprise/dashboard"
        )
        return await self._send(
            user_email, f"Your Enterprise Workspace for {organization_name} is Ready", html
        )

    async def send_enterprise_invite(
        self,
        user_email: str,
        organization_name: str,
        inviter_name: str,
        invite_token: str,
        role: str
    ) -> bool:
        html = email_templates.enterprise_invite(
            organization_name, inviter_name, role, self.invite_url(invite_token)
        )
        return await self._send(
            user_email,
            f"You've been invited to join {organization_name} on Contract Analysis",
            html,
        )

    async def send_contract_comment(
        self,
        user_email: str,
        user_name: str,
        commenter_name: str,
        contract_name: str,
        comment_text: str,
        contract_url: str
    ) -> bool:
        html = email_templates.contract_comment(
            user_name, commenter_name, contract_name, comment_text, contract_url
        )
        return await self._send(user_email, f"New comment on contract: {contract_name}", html)

    async def _send(self, to: str, subject: str, html: str) -> bool:
        if not self.config.enabled:
            logger.warning(f"Email provider not configured; skipping '{subject}' to {to}")
            return False

        headers = {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "from": self.config.from_email,
            "to": [to],
            "subject": subject,
            "html": html,
        }

        try:
            async with httpx.AsyncClient(timeout=self.config.timeout, transport=self._transport) as client:
                response = await client.post(self.config.api_url, json=payload, headers=headers)
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Error sending email '{subject}' to {to}: {e}")
            return False

        logger.info(f"Email '{subject}' sent to {to}")
        return True


def get_notification_sender() -> NotificationSender:
    return NotificationSender()
