"""
Unit tests for StripeConnector

HTTP is served by httpx.MockTransport; no network access.
"""
import asyncio
from unittest.mock import AsyncMock, patch
from urllib.parse import parse_qs

import httpx
import pytest

from app.connectors.stripe_connector import StripeConnector
from app.core.exceptions import PaymentGatewayError
from app.domain.order import CheckoutLine

LINES = [
    CheckoutLine(name="Phone X", unit_amount=49900, quantity=2),
    CheckoutLine(name="Case", unit_amount=999, quantity=1),
]


def form_of(request: httpx.Request) -> dict:
    return {key: values[0] for key, values in parse_qs(request.content.decode()).items()}


class TestStripeConnector:

    def test_build_form_flattens_line_items(self, settings):
        form = StripeConnector(settings).build_form(LINES)

        assert form["mode"] == "payment"
        assert form["payment_method_types[0]"] == "card"
        assert form["success_url"] == settings.CHECKOUT_SUCCESS_URL
        assert form["line_items[0][price_data][currency]"] == "inr"
        assert form["line_items[0][price_data][product_data][name]"] == "Phone X"
        assert form["line_items[0][price_data][unit_amount]"] == "49900"
        assert form["line_items[0][quantity]"] == "2"
        assert form["line_items[1][price_data][unit_amount]"] == "999"

    def test_creates_session(self, settings):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"id": "cs_test_abc"})

        connector = StripeConnector(settings, transport=httpx.MockTransport(handler))

        session_id = asyncio.run(connector.create_checkout_session(LINES))

        assert session_id == "cs_test_abc"
        request = seen[0]
        assert str(request.url) == "https://stripe.test/v1/checkout/sessions"
        assert request.headers["Authorization"] == "Bearer sk_test_123"
        assert request.headers["Idempotency-Key"]
        assert form_of(request)["line_items[1][price_data][product_data][name]"] == "Case"

    @patch('app.connectors.stripe_connector.asyncio.sleep', new_callable=AsyncMock)
    def test_retries_5xx_with_same_idempotency_key(self, mock_sleep, settings):
        responses = [httpx.Response(503, json={}), httpx.Response(200, json={"id": "cs_retry"})]
        keys = []

        def handler(request):
            keys.append(request.headers["Idempotency-Key"])
            return responses.pop(0)

        connector = StripeConnector(settings, transport=httpx.MockTransport(handler))

        assert asyncio.run(connector.create_checkout_session(LINES)) == "cs_retry"
        assert connector.api_calls == 2
        assert keys[0] == keys[1]
        mock_sleep.assert_awaited_once()

    @patch('app.connectors.stripe_connector.asyncio.sleep', new_callable=AsyncMock)
    def test_gives_up_after_max_retries(self, mock_sleep, settings):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        connector = StripeConnector(settings, transport=httpx.MockTransport(handler))

        with pytest.raises(PaymentGatewayError):
            asyncio.run(connector.create_checkout_session(LINES))

        # PAYMENT_MAX_RETRIES=1 in the test settings: one retry, so one sleep
        assert mock_sleep.await_count == 1

    def test_client_error_is_not_retried(self, settings):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(400, json={"error": {"message": "Invalid currency"}})

        connector = StripeConnector(settings, transport=httpx.MockTransport(handler))

        with pytest.raises(PaymentGatewayError) as exc_info:
            asyncio.run(connector.create_checkout_session(LINES))

        assert "Invalid currency" in exc_info.value.message
        assert len(calls) == 1

    def test_missing_secret_key(self, settings):
        connector = StripeConnector(settings.model_copy(update={"STRIPE_SECRET_KEY": ""}))

        with pytest.raises(PaymentGatewayError):
            asyncio.run(connector.create_checkout_session(LINES))
