"""
Stripe Checkout Connector
Creates hosted checkout sessions through the Stripe REST API

Only the contract we rely on is used: given priced line items, Stripe
returns an opaque session id that the storefront redirects to.
"""
import asyncio
import logging
import uuid
from typing import Dict, List, Optional, Sequence

import httpx

from app.core.config import Settings
from app.core.exceptions import PaymentGatewayError
from app.domain.order import CheckoutLine

logger = logging.getLogger(__name__)


class StripeConnector:
    """
    Connector for Stripe Checkout

    Handles:
    - Form-encoding line items the way the Stripe API expects
    - Bounded timeouts
    - Retrying transport errors and 5xx responses with an idempotency key,
      so a retried request can never open two sessions
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.secret_key = settings.STRIPE_SECRET_KEY
        self.base_url = settings.STRIPE_API_BASE.rstrip("/")
        self.currency = settings.CHECKOUT_CURRENCY
        self.success_url = settings.CHECKOUT_SUCCESS_URL
        self.cancel_url = settings.CHECKOUT_CANCEL_URL
        self.timeout = settings.PAYMENT_TIMEOUT_SECONDS
        self.max_retries = max(0, settings.PAYMENT_MAX_RETRIES)
        self.transport = transport
        self.api_calls = 0

    def build_form(self, lines: Sequence[CheckoutLine]) -> Dict[str, str]:
        """
        Flatten line items into Stripe's bracketed form fields

        Example:
            line_items[0][price_data][currency]=inr
            line_items[0][price_data][product_data][name]=Phone
            line_items[0][price_data][unit_amount]=49900
            line_items[0][quantity]=2
        """
        form = {
            "mode": "payment",
            "payment_method_types[0]": "card",
            "success_url": self.success_url,
            "cancel_url": self.cancel_url,
        }
        for index, line in enumerate(lines):
            prefix = f"line_items[{index}]"
            form[f"{prefix}[price_data][currency]"] = self.currency
            form[f"{prefix}[price_data][product_data][name]"] = line.name
            form[f"{prefix}[price_data][unit_amount]"] = str(line.unit_amount)
            form[f"{prefix}[quantity]"] = str(line.quantity)
        return form

    async def create_checkout_session(self, lines: List[CheckoutLine]) -> str:
        """
        Open a checkout session for the given lines

        Returns:
            The Stripe session id

        Raises:
            PaymentGatewayError: not configured, rejected, or unreachable after retries
        """
        if not self.secret_key:
            raise PaymentGatewayError("Payment gateway is not configured")

        url = f"{self.base_url}/v1/checkout/sessions"
        headers = {
            "Authorization": f"Bearer {self.secret_key}",
            "Idempotency-Key": str(uuid.uuid4()),
        }
        form = self.build_form(lines)

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            for attempt in range(1, self.max_retries + 2):
                try:
                    response = await client.post(url, data=form, headers=headers)
                    self.api_calls += 1
                except httpx.TransportError as e:
                    logger.warning(f"Stripe request failed on attempt {attempt}: {e}")
                    if attempt > self.max_retries:
                        raise PaymentGatewayError(f"Payment gateway unreachable: {e}") from e
                    await asyncio.sleep(0.5 * attempt)
                    continue

                if response.status_code >= 500 and attempt <= self.max_retries:
                    logger.warning(f"Stripe returned {response.status_code} on attempt {attempt}, retrying")
                    await asyncio.sleep(0.5 * attempt)
                    continue

                if response.status_code >= 400:
                    message = self._error_message(response)
                    logger.error(f"Stripe rejected checkout session: {response.status_code} {message}")
                    raise PaymentGatewayError(f"Checkout session cannot be created: {message}")

                session_id = response.json().get("id")
                if not session_id:
                    raise PaymentGatewayError("Payment gateway returned no session id")

                logger.info(f"Created checkout session {session_id} with {len(lines)} line(s)")
                return session_id

        raise PaymentGatewayError("Checkout session cannot be created")

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            return response.json().get("error", {}).get("message") or response.text
        except ValueError:
            return response.text
