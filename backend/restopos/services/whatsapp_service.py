"""WhatsApp Business API integration for order confirmations.

Messages go out through the WhatsApp Cloud API. When the service is not
configured the message is logged instead, so order flow works the same in
development.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx

from restopos.core.config import settings
from restopos.core.exceptions import ExternalServiceError
from restopos.schemas.config import AppConfig
from restopos.schemas.customer import Customer
from restopos.schemas.order import Order
from restopos.services.pricing import format_money

logger = logging.getLogger(__name__)

WHATSAPP_API_BASE = "https://graph.facebook.com/v21.0"


class WhatsAppService:
    """WhatsApp Cloud API integration."""

    def __init__(
        self,
        phone_number_id: Optional[str] = None,
        access_token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._phone_number_id = phone_number_id or settings.whatsapp_phone_number_id
        self._access_token = access_token or settings.whatsapp_access_token
        self._configured = bool(self._phone_number_id and self._access_token)
        self._transport = transport
        self._message_log: List[Dict[str, Any]] = []

        if not self._configured:
            logger.warning(
                "WhatsApp not configured. Set WHATSAPP_PHONE_NUMBER_ID and "
                "WHATSAPP_ACCESS_TOKEN environment variables."
            )

    @property
    def is_configured(self) -> bool:
        return self._configured

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self._access_token}",
            "Content-Type": "application/json",
        }

    @property
    def _messages_url(self) -> str:
        return f"{WHATSAPP_API_BASE}/{self._phone_number_id}/messages"

    async def send_text(self, to: str, text: str) -> Dict[str, Any]:
        """Send a plain text message."""
        body = {
            "messaging_product": "whatsapp",
            "to": self._normalize_phone(to),
            "type": "text",
            "text": {"preview_url": False, "body": text},
        }
        return await self._send(body)

    @staticmethod
    def order_confirmation_text(customer: Customer, order: Order, config: AppConfig) -> str:
        return "\n".join([
            f"Hello {customer.name},",
            "",
            f"Thank you for your order at {config.title}! "
            "This is a digital confirmation to help save paper.",
            "",
            f"Order ID: {order.id}",
            f"Total: {format_money(order.total, config.currency)}",
            f"Points Earned: {order.points_earned}",
            "",
            "We've received your order and will have it ready for you shortly.",
        ])

    async def send_order_confirmation(self, customer: Customer, order: Order, config: AppConfig) -> bool:
        """Send a digital receipt. Failures are logged, never raised."""
        if not customer.phone:
            logger.info(f"Cannot send WhatsApp message: customer {customer.id} has no phone number")
            return False

        text = self.order_confirmation_text(customer, order, config)
        if not self._configured:
            logger.info(f"Simulated WhatsApp message to {customer.phone}:\n{text}")
            return False

        try:
            await self.send_text(customer.phone, text)
        except (ExternalServiceError, httpx.HTTPError, ValueError) as e:
            logger.error(f"WhatsApp order confirmation for {order.id} failed: {e}")
            return False
        return True

    async def _send(self, body: Dict[str, Any]) -> Dict[str, Any]:
        """Send a message via WhatsApp API."""
        async with httpx.AsyncClient(timeout=15.0, transport=self._transport) as client:
            resp = await client.post(
                self._messages_url,
                json=body,
                headers=self._headers(),
            )
            data = resp.json()

            log_entry = {
                "to": body.get("to"),
                "type": body.get("type"),
                "status_code": resp.status_code,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "message_id": None,
            }

            if resp.status_code == 200:
                messages = data.get("messages", [])
                if messages:
                    log_entry["message_id"] = messages[0].get("id")
            else:
                log_entry["error"] = data.get("error", {}).get("message", "Unknown error")
                logger.error(f"WhatsApp send failed: {data}")

            self._message_log.append(log_entry)
            if len(self._message_log) > 1000:
                self._message_log = self._message_log[-500:]

            if resp.status_code != 200:
                raise ExternalServiceError("whatsapp", log_entry["error"])
            return data

    @staticmethod
    def _normalize_phone(phone: str) -> str:
        """Normalize phone number to the digits-only form the API expects."""
        phone = phone.replace(" ", "").replace("-", "").replace("(", "").replace(")", "")
        return phone.lstrip("+")

    def get_message_log(self, limit: int = 50) -> List[Dict[str, Any]]:
        return self._message_log[-limit:]


# ---------------------------------------------------------------------------
# Singleton
# ---------------------------------------------------------------------------

_service: Optional[WhatsAppService] = None


def get_whatsapp_service() -> WhatsAppService:
    global _service
    if _service is None:
        _service = WhatsAppService()
    return _service
