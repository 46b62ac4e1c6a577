"""
Predicsure AI — Transactional email.

Messages are delivered through the notification HTTP API configured by
``NOTIFICATION_API_URL``.  Every send is best-effort: failures are logged and
reported as ``False``, never raised to the caller.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

import httpx
import structlog

from app.config import get_settings
from app.services.plans import TIER_DAILY_LIMITS

logger = structlog.get_logger("predicsure.email_service")

_SIGNATURE = """Best regards,
The AI Predictions Team

---
Questions? Reply to this email or visit your account settings."""

_TIER_FEATURES = {
    "plus": """• 20 predictions per day
• 30-day trajectory forecasts
• Deep Prediction Mode
• File attachments for context""",
    "pro": """• 20 predictions per day
• Full prediction history
• AI personalization that learns from your feedback
• File attachments for context
• Advanced categories""",
    "premium": """• 100 predictions per day
• Everything in Pro
• Priority support
• Early access to new features
• Premium AI models""",
}


def _dollars(amount_cents: int) -> str:
    return f"${amount_cents / 100:.2f}"


class EmailService:
    """Renders email templates and posts them to the notification API."""

    TIMEOUT_SECONDS: float = 10.0

    def __init__(self) -> None:
        settings = get_settings()
        self.api_url = settings.NOTIFICATION_API_URL
        self.api_key = settings.NOTIFICATION_API_KEY

    async def send_email(self, to: str, subject: str, content: str) -> bool:
        """Deliver one message; return ``True`` only on a 2xx response."""
        log = logger.bind(to=to, subject=subject)
        if not self.api_url:
            log.warning("email_skipped", reason="NOTIFICATION_API_URL not configured")
            return False

        headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}
        payload = {
            "title": f"Email to {to}: {subject}",
            "content": f"To: {to}\n\n{content}",
        }
        try:
            async with httpx.AsyncClient(timeout=self.TIMEOUT_SECONDS, headers=headers) as client:
                response = await client.post(self.api_url, json=payload)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            log.error("email_send_failed", error=str(exc))
            return False

        log.info("email_sent")
        return True

    # ══════════════════════════════════════════════════════════════════════
    # Templates
    # ══════════════════════════════════════════════════════════════════════

    async def send_welcome_email(self, email: str, name: str) -> bool:
        return await self.send_email(
            email,
            "Welcome to AI Predictions! 🔮",
            f"""Hi {name},

Welcome to AI Predictions! We're excited to have you on board.

You've started with our Free plan, which includes:
• 3 total predictions to explore our AI-powered insights
• Access to all prediction categories (career, love, finance, health, general)
• Personalized predictions based on your questions

Ready to get started? Head to your dashboard and ask your first question!

If you love the experience and want unlimited predictions, you can upgrade to Pro or Premium anytime.

{_SIGNATURE}""",
        )

    async def send_subscription_confirmation_email(
        self, email: str, name: str, tier: str, amount_cents: int
    ) -> bool:
        tier_name = tier.capitalize()
        daily_limit = TIER_DAILY_LIMITS.get(tier, TIER_DAILY_LIMITS["pro"])
        features = _TIER_FEATURES.get(tier, _TIER_FEATURES["pro"])
        return await self.send_email(
            email,
            f"Welcome to {tier_name}! Your subscription is active 🎉",
            f"""Hi {name},

Congratulations! Your {tier_name} subscription is now active.

Subscription Details:
• Plan: {tier_name} Plan
• Price: {_dollars(amount_cents)}
• Daily Predictions: {daily_limit} per day
• Billing Cycle: Renews automatically

What's Included:
{features}

Start exploring unlimited predictions now! Visit your dashboard to begin.

Manage Your Subscription:
You can update your payment method, view invoices, or cancel anytime from your account settings.

Thank you for upgrading!
The AI Predictions Team

---
Questions? Reply to this email or visit your account settings.""",
        )

    async def send_payment_receipt_email(
        self,
        email: str,
        name: str,
        amount_cents: int,
        invoice_url: Optional[str] = None,
    ) -> bool:
        invoice_line = f"• Invoice: {invoice_url}" if invoice_url else ""
        today = datetime.now(timezone.utc).strftime("%Y-%m-%d")
        return await self.send_email(
            email,
            "Payment Receipt - AI Predictions",
            f"""Hi {name},

Thank you for your payment! Your subscription has been renewed.

Payment Details:
• Amount: {_dollars(amount_cents)} USD
• Date: {today}
• Status: Paid
{invoice_line}

Your subscription remains active and you can continue enjoying unlimited predictions.

If you have any questions about this payment, please don't hesitate to reach out.

{_SIGNATURE}""",
        )

    async def send_failed_payment_email(self, email: str, name: str, amount_cents: int) -> bool:
        return await self.send_email(
            email,
            "Payment Failed - Action Required",
            f"""Hi {name},

We were unable to process your recent payment of {_dollars(amount_cents)} USD.

What This Means:
Your subscription is currently at risk. If we cannot process payment within the next few days, your account may be downgraded to the Free plan.

How to Fix This:
1. Visit your account settings
2. Click "Manage Subscription"
3. Update your payment method
4. We'll automatically retry the payment

Common Reasons for Failed Payments:
• Expired credit card
• Insufficient funds
• Card issuer declined the transaction
• Billing address mismatch

Need Help?
If you're experiencing issues updating your payment method, please reply to this email and we'll assist you right away.

{_SIGNATURE}""",
        )

    async def send_weekly_summary_email(
        self,
        email: str,
        name: str,
        prediction_count: int,
        favorite_category: str,
        tier: str,
    ) -> bool:
        if tier == "free":
            plan_note = (
                "You're on the Free plan with limited predictions. Upgrade to Pro or Premium "
                "for unlimited daily predictions and advanced features!\n\n"
                "Upgrade Now: Visit your dashboard to explore Pro and Premium plans."
            )
        else:
            plan_note = (
                f"Keep the insights flowing! You have {TIER_DAILY_LIMITS.get(tier, 20)} "
                "predictions available per day."
            )
        return await self.send_email(
            email,
            "Your Weekly Prediction Summary 📊",
            f"""Hi {name},

Here's your prediction activity for the past week:

This Week's Stats:
• Predictions Generated: {prediction_count}
• Favorite Category: {favorite_category}
• Current Plan: {tier.capitalize()}

{plan_note}

Popular This Week:
Our community has been asking about career changes, relationship advice, and financial planning. What will you explore next?

Visit Your Dashboard: Continue your journey and discover what the future holds.

{_SIGNATURE}""",
        )
