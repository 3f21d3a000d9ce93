"""Payment gateway port (abstract interface).

Defines the contract that all payment gateway adapters must implement.
This enables swapping between FakeGateway (dev/test) and StripeGateway
(production) without changing any domain or application code.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

PAYMENT_SUCCEEDED = "payment_intent.succeeded"
PAYMENT_FAILED = "payment_intent.payment_failed"


@dataclass(frozen=True)
class PaymentIntentResult:
    """A payment intent prepared by the processor."""

    intent_id: str
    client_secret: str
    amount_cents: int
    currency: str


@dataclass(frozen=True)
class GatewayEvent:
    """A verified webhook event, reduced to what reconciliation needs."""

    event_id: str
    type: str
    intent_id: str | None = None
    metadata: dict = field(default_factory=dict)

    @property
    def order_id(self) -> str | None:
        return self.metadata.get("order_id")


class PaymentGatewayError(Exception):
    """Raised by adapters when the processor rejects or fails a call."""


class WebhookSignatureError(Exception):
    """Raised by adapters when a webhook payload fails verification."""


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def create_payment_intent(
        self,
        amount_cents: int,
        currency: str,
        description: str,
        metadata: dict,
        idempotency_key: str,
    ) -> PaymentIntentResult:
        """Prepare a charge for ``amount_cents``.

        Calls repeated with the same ``idempotency_key`` must return the same
        intent rather than creating another.
        """
        ...

    @abstractmethod
    def construct_event(self, payload: bytes, signature: str) -> GatewayEvent:
        """Verify ``payload`` against ``signature`` and parse it.

        Raises WebhookSignatureError when verification fails.
        """
        ...

    @abstractmethod
    def cancel_payment_intent(self, intent_id: str) -> None:
        """Cancel an intent that will never be paid."""
        ...
