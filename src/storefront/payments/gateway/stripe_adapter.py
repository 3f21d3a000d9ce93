"""Stripe payment gateway adapter.

Uses the stripe-python SDK to create PaymentIntents and to verify webhook
signatures with the endpoint's signing secret.
"""

import stripe

from storefront.payments.gateway.port import (
    GatewayEvent,
    PaymentGateway,
    PaymentGatewayError,
    PaymentIntentResult,
    WebhookSignatureError,
)


class StripeGateway(PaymentGateway):
    """Production Stripe gateway adapter."""

    def __init__(self, api_key: str, webhook_secret: str) -> None:
        self.api_key = api_key
        self.webhook_secret = webhook_secret

    def create_payment_intent(
        self,
        amount_cents: int,
        currency: str,
        description: str,
        metadata: dict,
        idempotency_key: str,
    ) -> PaymentIntentResult:
        try:
            intent = stripe.PaymentIntent.create(
                api_key=self.api_key,
                amount=amount_cents,
                currency=currency,
                automatic_payment_methods={"enabled": True},
                description=description,
                metadata=metadata,
                idempotency_key=idempotency_key,
            )
        except stripe.StripeError as exc:
            raise PaymentGatewayError(str(exc)) from exc

        return PaymentIntentResult(
            intent_id=intent["id"],
            client_secret=intent["client_secret"],
            amount_cents=intent["amount"],
            currency=intent["currency"],
        )

    def cancel_payment_intent(self, intent_id: str) -> None:
        try:
            stripe.PaymentIntent.cancel(intent_id, api_key=self.api_key)
        except stripe.StripeError as exc:
            raise PaymentGatewayError(str(exc)) from exc

    def construct_event(self, payload: bytes, signature: str) -> GatewayEvent:
        try:
            event = stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
        except (ValueError, stripe.SignatureVerificationError) as exc:
            raise WebhookSignatureError(str(exc)) from exc

        intent = event["data"]["object"]
        metadata = intent.get("metadata") or {}
        return GatewayEvent(
            event_id=event["id"],
            type=event["type"],
            intent_id=intent.get("id"),
            metadata=dict(metadata),
        )
