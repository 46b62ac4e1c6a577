"""Unit tests for EmailService delivery and templates."""
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from app.services.email_service import EmailService


@pytest.fixture
def email_service():
    service = EmailService()
    service.api_url = "https://notify.example.com/send"
    service.api_key = "secret"
    return service


def _client_returning(response=None, error=None):
    client = MagicMock()
    client.post = AsyncMock(return_value=response, side_effect=error)
    client_cls = MagicMock()
    client_cls.return_value.__aenter__.return_value = client
    return client_cls, client


class TestSendEmail:

    @pytest.mark.asyncio
    async def test_unconfigured_url_skips(self):
        service = EmailService()
        service.api_url = ""
        assert await service.send_email("a@b.com", "Hi", "body") is False

    @pytest.mark.asyncio
    async def test_success(self, email_service):
        response = MagicMock()
        client_cls, client = _client_returning(response)
        with patch("app.services.email_service.httpx.AsyncClient", client_cls):
            assert await email_service.send_email("a@b.com", "Hi", "body") is True

        payload = client.post.call_args.kwargs["json"]
        assert payload == {"title": "Email to a@b.com: Hi", "content": "To: a@b.com\n\nbody"}
        assert client_cls.call_args.kwargs["headers"] == {"Authorization": "Bearer secret"}

    @pytest.mark.asyncio
    async def test_transport_error_is_swallowed(self, email_service):
        client_cls, _ = _client_returning(error=httpx.ConnectError("refused"))
        with patch("app.services.email_service.httpx.AsyncClient", client_cls):
            assert await email_service.send_email("a@b.com", "Hi", "body") is False

    @pytest.mark.asyncio
    async def test_http_status_error_is_swallowed(self, email_service):
        response = MagicMock()
        response.raise_for_status.side_effect = httpx.HTTPStatusError(
            "500", request=MagicMock(), response=MagicMock()
        )
        client_cls, _ = _client_returning(response)
        with patch("app.services.email_service.httpx.AsyncClient", client_cls):
            assert await email_service.send_email("a@b.com", "Hi", "body") is False


class TestTemplates:

    @pytest.mark.asyncio
    async def test_subscription_confirmation(self, email_service):
        email_service.send_email = AsyncMock(return_value=True)
        await email_service.send_subscription_confirmation_email("a@b.com", "Sam", "premium", 5900)

        to, subject, content = email_service.send_email.call_args[0]
        assert subject == "Welcome to Premium! Your subscription is active 🎉"
        assert "• Price: $59.00" in content
        assert "• Daily Predictions: 100 per day" in content
        assert "Priority support" in content

    @pytest.mark.asyncio
    async def test_failed_payment(self, email_service):
        email_service.send_email = AsyncMock(return_value=True)
        await email_service.send_failed_payment_email("a@b.com", "Sam", 1999)
        _, subject, content = email_service.send_email.call_args[0]
        assert subject == "Payment Failed - Action Required"
        assert "$19.99 USD" in content

    @pytest.mark.asyncio
    async def test_weekly_summary_free_tier_upsell(self, email_service):
        email_service.send_email = AsyncMock(return_value=True)
        await email_service.send_weekly_summary_email("a@b.com", "Sam", 4, "career", "free")
        content = email_service.send_email.call_args[0][2]
        assert "Upgrade Now" in content
        assert "• Current Plan: Free" in content
