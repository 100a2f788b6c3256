"""
Tests for the Resend-backed notification sender
"""

import json

import httpx
import pytest

from core.notification_sender import NotificationConfig, NotificationSender


@pytest.fixture
def config():
    return NotificationConfig(
        api_key="re_test_key",
        from_email="team@example.com",
        client_url="https://app.example.com/",
        api_url="https://api.resend.test/emails",
    )


def sender_with(config, handler):
    requests = []

    def record(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return handler(request)

    return NotificationSender(config, transport=httpx.MockTransport(record)), requests


@pytest.mark.asyncio
async def test_invite_email_request(config):
    sender, requests = sender_with(config, lambda request: httpx.Response(200, json={"id": "email_1"}))

    sent = await sender.send_enterprise_invite(
        user_email="new@acme.com",
        organization_name="Acme Legal",
        inviter_name="Ada Admin",
        invite_token="ab" * 32,
        role="manager",
    )

    assert sent is True
    assert len(requests) == 1
    request = requests[0]
    assert str(request.url) == "https://api.resend.test/emails"
    assert request.headers["Authorization"] == "Bearer re_test_key"
    body = json.loads(request.content)
    assert body["from"] == "team@example.com"
    assert body["to"] == ["new@acme.com"]
    assert body["subject"] == "You've been invited to join Acme Legal on Contract Analysis"
    assert f"https://app.example.com/accept-invite?token={'ab' * 32}" in body["html"]
    assert "manager" in body["html"]
    assert "7 days" in body["html"]


@pytest.mark.asyncio
async def test_provider_error_returns_false(config):
    sender, _ = sender_with(config, lambda request: httpx.Response(500, json={"message": "down"}))

    assert await sender.send_premium_confirmation("solo@example.com", "Sol") is False


@pytest.mark.asyncio
async def test_transport_error_returns_false(config):
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    sender, _ = sender_with(config, refuse)

    assert await sender.send_enterprise_welcome("founder@acme.com", "Fran", "Acme") is False


@pytest.mark.asyncio
async def test_disabled_without_api_key(config):
    config.api_key = ""
    sender, requests = sender_with(config, lambda request: httpx.Response(200))

    assert await sender.send_premium_confirmation("solo@example.com", "Sol") is False
    assert requests == []


@pytest.mark.asyncio
async def test_comment_is_escaped(config):
    sender, requests = sender_with(config, lambda request: httpx.Response(200, json={"id": "email_2"}))

    await sender.send_contract_comment(
        user_email="ada@acme.com",
        user_name="Ada",
        commenter_name="Bob",
        contract_name="Employment contract",
        comment_text="<script>alert('x')</script>",
        contract_url="https://app.example.com/enterprise/contracts/1",
    )

    html = json.loads(requests[0].content)["html"]
    assert "<script>" not in html
    assert "&lt;script&gt;" in html
