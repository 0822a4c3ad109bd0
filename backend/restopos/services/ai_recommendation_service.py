"""AI menu recommendations.

Calls an OpenAI-compatible chat completions endpoint and asks for a JSON
object with ``recommendations`` and ``reasoning``. The result is advisory
only; nothing here touches order state.
"""

import json
import logging
from typing import Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from restopos.core.config import settings
from restopos.core.exceptions import ExternalServiceError
from restopos.schemas.ai import RecommendationResponse
from restopos.schemas.order import Order

logger = logging.getLogger(__name__)

AI_FAILURE_MESSAGE = "Failed to get AI recommendations. Please try again later."

SYSTEM_PROMPT = (
    "You are a helpful restaurant menu recommendation system. Based on the order "
    "and any dietary restrictions, recommend additional menu items or modifications "
    "to the current order and explain your reasoning. Respond with a JSON object "
    'with "recommendations" (an array of strings) and "reasoning" (a string).'
)


def build_order_summary(order: Order) -> str:
    """One line per order line, e.g. ``2x Samosa``."""
    return ", ".join(f"{line.quantity}x {line.menu_item.name}" for line in order.items)


def build_prompt(order_summary: str, dietary_restrictions: Optional[str] = None) -> str:
    return (
        f"Order Summary: {order_summary}\n\n"
        f"Dietary Restrictions: {dietary_restrictions or 'None'}"
    )


class AIRecommendationService:
    """Thin client around the completion endpoint."""

    def __init__(
        self,
        api_url: Optional[str] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_url = api_url or settings.ai_api_url
        self.api_key = api_key if api_key is not None else settings.ai_api_key
        self.model = model or settings.ai_model
        self.timeout = timeout or settings.ai_timeout_seconds
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self.api_url and self.api_key)

    async def get_recommendations(
        self, order_summary: str, dietary_restrictions: Optional[str] = None
    ) -> RecommendationResponse:
        if not self.is_configured:
            logger.error("AI recommendations requested but AI_API_KEY is not set")
            raise ExternalServiceError("ai", AI_FAILURE_MESSAGE)

        body = {
            "model": self.model,
            "response_format": {"type": "json_object"},
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_prompt(order_summary, dietary_restrictions)},
            ],
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.post(self.api_url, json=body, headers=headers)
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPError as e:
            logger.error(f"AI recommendation request failed: {e}")
            raise ExternalServiceError("ai", AI_FAILURE_MESSAGE)
        except ValueError as e:
            logger.error(f"AI recommendation response was not JSON: {e}")
            raise ExternalServiceError("ai", AI_FAILURE_MESSAGE)

        return self._parse(data)

    @staticmethod
    def _parse(data) -> RecommendationResponse:
        try:
            content = data["choices"][0]["message"]["content"]
            return RecommendationResponse.model_validate(json.loads(content))
        except (KeyError, IndexError, TypeError, json.JSONDecodeError, PydanticValidationError) as e:
            logger.error(f"Malformed AI recommendation output: {e}")
            raise ExternalServiceError("ai", AI_FAILURE_MESSAGE)


_service: Optional[AIRecommendationService] = None


def get_ai_service() -> AIRecommendationService:
    global _service
    if _service is None:
        _service = AIRecommendationService()
    return _service
