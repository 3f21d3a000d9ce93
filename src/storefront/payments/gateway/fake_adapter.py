"""Configurable fake payment gateway for development and testing.

Simulates the processor without any external calls. Intents are keyed by
idempotency key, so retried calls hand back the intent created first, and
webhooks are signed with an HMAC-SHA256 of the raw body under the webhook
secret so signature handling is exercised end to end.
"""

import hashlib
import hmac
import json
from uuid import uuid4

from storefront.payments.gateway.port import (
    GatewayEvent,
    PaymentGateway,
    PaymentGatewayError,
    PaymentIntentResult,
    WebhookSignatureError,
)

DEFAULT_WEBHOOK_SECRET = "whsec_test"


def sign_payload(payload: bytes, secret: str = DEFAULT_WEBHOOK_SECRET) -> str:
    return hmac.new(secret.encode(), payload, hashlib.sha256).hexdigest()


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self, webhook_secret: str = DEFAULT_WEBHOOK_SECRET) -> None:
        self.webhook_secret = webhook_secret
        self.should_succeed: bool = True
        self.failure_reason: str = "Payment processor unavailable"
        self.intents: dict[str, PaymentIntentResult] = {}
        self.calls: list[dict] = []
        self.cancelled: list[str] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Payment processor unavailable") -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def create_payment_intent(
        self,
        amount_cents: int,
        currency: str,
        description: str,
        metadata: dict,
        idempotency_key: str,
    ) -> PaymentIntentResult:
        self.calls.append(
            {
                "method": "create_payment_intent",
                "amount_cents": amount_cents,
                "currency": currency,
                "description": description,
                "metadata": dict(metadata),
                "idempotency_key": idempotency_key,
            }
        )

        if not self.should_succeed:
            raise PaymentGatewayError(self.failure_reason)

        if idempotency_key in self.intents:
            return self.intents[idempotency_key]

        intent_id = f"pi_fake_{uuid4().hex[:16]}"
        intent = PaymentIntentResult(
            intent_id=intent_id,
            client_secret=f"{intent_id}_secret_{uuid4().hex[:12]}",
            amount_cents=amount_cents,
            currency=currency,
        )
        self.intents[idempotency_key] = intent
        return intent

    def cancel_payment_intent(self, intent_id: str) -> None:
        self.calls.append({"method": "cancel_payment_intent", "intent_id": intent_id})
        if not self.should_succeed:
            raise PaymentGatewayError(self.failure_reason)
        self.cancelled.append(intent_id)

    def construct_event(self, payload: bytes, signature: str) -> GatewayEvent:
        if not signature:
            raise WebhookSignatureError("No signatures found matching the expected signature for payload")
        if not hmac.compare_digest(sign_payload(payload, self.webhook_secret), signature):
            raise WebhookSignatureError("No signatures found matching the expected signature for payload")

        try:
            event = json.loads(payload)
        except ValueError as exc:
            raise WebhookSignatureError(f"Invalid payload: {exc}") from exc

        intent = event.get("data", {}).get("object", {})
        return GatewayEvent(
            event_id=event.get("id", ""),
            type=event.get("type", ""),
            intent_id=intent.get("id"),
            metadata=dict(intent.get("metadata") or {}),
        )

    def build_event(self, event_type: str, order_id: str | None, intent_id: str = "pi_fake") -> tuple[bytes, str]:
        """Return a signed ``(payload, signature)`` pair for tests and local runs."""
        metadata = {"order_id": order_id} if order_id else {}
        payload = json.dumps(
            {
                "id": f"evt_{uuid4().hex[:16]}",
                "type": event_type,
                "data": {"object": {"id": intent_id, "metadata": metadata}},
            }
        ).encode()
        return payload, sign_payload(payload, self.webhook_secret)
