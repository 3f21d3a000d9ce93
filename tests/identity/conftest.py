"""Signed identity provider callbacks for the identity tests."""

import base64
import json
from datetime import UTC, datetime
from uuid import uuid4

import pytest
from svix.webhooks import Webhook

IDENTITY_WEBHOOK_SECRET = "whsec_" + base64.b64encode(b"storefront-identity-signing-key").decode()


@pytest.fixture()
def identity_webhook_secret():
    return IDENTITY_WEBHOOK_SECRET


@pytest.fixture()
def signed_identity_event(identity_webhook_secret):
    """Build ``(body, headers)`` for an event signed the way the provider signs it."""

    def _signed(event_type, data, secret=None):
        body = json.dumps({"type": event_type, "object": "event", "data": data})
        message_id = f"msg_{uuid4().hex}"
        sent_at = datetime.now(UTC)
        signature = Webhook(secret or identity_webhook_secret).sign(message_id, sent_at, body)
        headers = {
            "svix-id": message_id,
            "svix-timestamp": str(int(sent_at.timestamp())),
            "svix-signature": signature,
        }
        return body.encode(), headers

    return _signed
