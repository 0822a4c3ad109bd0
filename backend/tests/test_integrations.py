"""Tests for the outbound HTTP collaborators (AI, WhatsApp, Brevo)."""

import asyncio
import json

import httpx
import pytest

from restopos.core.exceptions import ExternalServiceError
from restopos.services.ai_recommendation_service import (
    AI_FAILURE_MESSAGE,
    AIRecommendationService,
    build_order_summary,
)
from restopos.services.email_service import BrevoEmailService, welcome_email_html
from restopos.services.order_builder import OrderBuilder
from restopos.services.whatsapp_service import WhatsAppService


@pytest.fixture
def order(menu, customer):
    builder = OrderBuilder()
    builder.add_item(menu[0])
    builder.add_item(menu[0])
    builder.add_item(menu[2])
    return builder.submit(table_number=3, customer=customer)


def _completion(content: str) -> dict:
    return {"choices": [{"message": {"content": content}}]}


class TestAIRecommendations:
    def test_order_summary(self, order):
        assert build_order_summary(order) == "2x Samosa, 1x Masala Chai"

    def test_successful_recommendation(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            payload = {"recommendations": ["Mango Lassi"], "reasoning": "Cools the spice."}
            return httpx.Response(200, json=_completion(json.dumps(payload)))

        service = AIRecommendationService(
            api_url="https://ai.test/v1/chat/completions", api_key="k",
            transport=httpx.MockTransport(handler),
        )
        result = asyncio.run(service.get_recommendations("2x Samosa", "vegetarian"))

        assert result.recommendations == ["Mango Lassi"]
        assert result.reasoning == "Cools the spice."
        assert seen["auth"] == "Bearer k"
        assert "vegetarian" in seen["body"]["messages"][1]["content"]

    def test_unconfigured_service_fails_cleanly(self):
        service = AIRecommendationService(api_url="https://ai.test", api_key="")
        with pytest.raises(ExternalServiceError) as exc_info:
            asyncio.run(service.get_recommendations("1x Samosa"))
        assert exc_info.value.message == AI_FAILURE_MESSAGE

    def test_http_error(self):
        service = AIRecommendationService(
            api_url="https://ai.test", api_key="k",
            transport=httpx.MockTransport(lambda request: httpx.Response(500, text="boom")),
        )
        with pytest.raises(ExternalServiceError):
            asyncio.run(service.get_recommendations("1x Samosa"))

    def test_malformed_output(self):
        service = AIRecommendationService(
            api_url="https://ai.test", api_key="k",
            transport=httpx.MockTransport(lambda request: httpx.Response(200, json=_completion("not json"))),
        )
        with pytest.raises(ExternalServiceError) as exc_info:
            asyncio.run(service.get_recommendations("1x Samosa"))
        assert exc_info.value.message == AI_FAILURE_MESSAGE


class TestWhatsApp:
    def test_confirmation_sent(self, order, customer, app_config):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"messages": [{"id": "wamid.1"}]})

        service = WhatsAppService("12345", "token", transport=httpx.MockTransport(handler))
        assert asyncio.run(service.send_order_confirmation(customer, order, app_config)) is True
        assert seen["url"].endswith("/12345/messages")
        assert seen["body"]["to"] == "919876543210"
        assert order.id in seen["body"]["text"]["body"]
        assert service.get_message_log()[-1]["message_id"] == "wamid.1"

    def test_api_error_is_swallowed(self, order, customer, app_config):
        transport = httpx.MockTransport(
            lambda request: httpx.Response(400, json={"error": {"message": "bad number"}})
        )
        service = WhatsAppService("12345", "token", transport=transport)
        assert asyncio.run(service.send_order_confirmation(customer, order, app_config)) is False

    def test_customer_without_phone(self, order, customer, app_config):
        service = WhatsAppService("12345", "token")
        no_phone = customer.model_copy(update={"phone": ""})
        assert asyncio.run(service.send_order_confirmation(no_phone, order, app_config)) is False

    def test_confirmation_text(self, order, customer, app_config):
        text = WhatsAppService.order_confirmation_text(customer, order, app_config)
        assert text.startswith("Hello John Doe,")
        assert "Total: ₹14.48" in text


class TestBrevoEmail:
    def test_welcome_email_sent(self, customer, app_config):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["key"] = request.headers["api-key"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(201, json={"messageId": "<1@brevo>"})

        service = BrevoEmailService(api_key="xkey", transport=httpx.MockTransport(handler))
        assert asyncio.run(service.send_welcome_email(customer, app_config)) is True
        assert seen["key"] == "xkey"
        assert seen["body"]["to"] == [{"email": "john@example.com", "name": "John Doe"}]

    def test_without_api_key_is_simulated(self, customer, app_config):
        service = BrevoEmailService(api_key="")
        assert asyncio.run(service.send_welcome_email(customer, app_config)) is False

    def test_rejection_is_swallowed(self, customer, app_config):
        service = BrevoEmailService(
            api_key="xkey",
            transport=httpx.MockTransport(lambda request: httpx.Response(401, json={"code": "unauthorized"})),
        )
        assert asyncio.run(service.send_welcome_email(customer, app_config)) is False

    def test_html_escapes_names(self, customer, app_config):
        html = welcome_email_html(customer.model_copy(update={"name": "<b>Jo</b>"}), app_config)
        assert "&lt;b&gt;Jo&lt;/b&gt;" in html
