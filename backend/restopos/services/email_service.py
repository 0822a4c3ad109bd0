"""Transactional email through the Brevo API."""

import html
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import httpx

from restopos.core.config import settings
from restopos.schemas.config import AppConfig
from restopos.schemas.customer import Customer

logger = logging.getLogger(__name__)

BREVO_API_URL = "https://api.brevo.com/v3/smtp/email"


def welcome_email_html(customer: Customer, config: AppConfig) -> str:
    title = html.escape(config.title)
    name = html.escape(customer.name)
    year = datetime.now(timezone.utc).year
    return f"""<!DOCTYPE html>
<html>
<body style="font-family: sans-serif; background-color: #f4f4f4;">
  <div style="max-width: 600px; margin: 20px auto; background: #ffffff; border-radius: 8px;">
    <div style="background: #007bff; color: #ffffff; padding: 40px; text-align: center;">
      <h1>Welcome to {title}!</h1>
    </div>
    <div style="padding: 30px; line-height: 1.6; color: #333333;">
      <h2>Hi {name},</h2>
      <p>We are thrilled to welcome you to the {title} family.</p>
      <p>As a valued member, you've been automatically enrolled in our loyalty program.
      You'll earn points on every order that you can redeem for discounts!</p>
      <p><strong>The {title} Team</strong></p>
    </div>
    <div style="text-align: center; padding: 20px; font-size: 12px; color: #6c757d;">
      <p>&copy; {year} {title}. All Rights Reserved.</p>
    </div>
  </div>
</body>
</html>"""


class BrevoEmailService:
    """Sends welcome emails; simulates them when no API key is set."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        sender_email: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._api_key = api_key if api_key is not None else settings.brevo_api_key
        self._sender_email = sender_email or settings.brevo_sender_email
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    async def send_welcome_email(self, customer: Customer, config: AppConfig) -> bool:
        """Send the welcome email. Errors are logged and swallowed."""
        if not customer.email:
            logger.info(f"Customer {customer.id} has no email address; skipping welcome email")
            return False

        payload: Dict[str, Any] = {
            "subject": f"Welcome to {config.title}!",
            "htmlContent": welcome_email_html(customer, config),
            "sender": {"name": config.title, "email": self._sender_email},
            "to": [{"email": customer.email, "name": customer.name}],
        }

        if not self.is_configured:
            logger.info(f"Simulated welcome email to {customer.email}: {payload['subject']}")
            return False

        try:
            async with httpx.AsyncClient(timeout=15.0, transport=self._transport) as client:
                resp = await client.post(
                    BREVO_API_URL,
                    json=payload,
                    headers={"api-key": self._api_key, "Content-Type": "application/json"},
                )
            if resp.status_code >= 400:
                logger.error(f"Brevo rejected welcome email for {customer.id}: {resp.status_code} {resp.text}")
                return False
        except httpx.HTTPError as e:
            logger.error(f"Failed to send welcome email to {customer.id}: {e}")
            return False

        logger.info(f"Welcome email sent to {customer.email}")
        return True


_service: Optional[BrevoEmailService] = None


def get_email_service() -> BrevoEmailService:
    global _service
    if _service is None:
        _service = BrevoEmailService()
    return _service
