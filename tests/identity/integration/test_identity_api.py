"""Integration tests for the identity provider callback endpoint."""

import pytest
from fastapi.testclient import TestClient
from storefront.api.application import create_app
from storefront.config import Settings


@pytest.fixture()
def client(identity_webhook_secret):
    return TestClient(create_app(Settings(environment="test", clerk_webhook_secret=identity_webhook_secret)))


class TestClerkWebhook:
    def test_user_created_seeds_role(self, client, identity_provider, signed_identity_event):
        body, headers = signed_identity_event("user.created", {"id": "user_new"})

        response = client.post("/api/webhooks/clerk", content=body, headers=headers)

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert identity_provider.roles == {"user_new": "user"}

    def test_unsigned_callback_is_rejected(self, client, identity_provider, signed_identity_event):
        body, _ = signed_identity_event("user.created", {"id": "user_new"})

        response = client.post("/api/webhooks/clerk", content=body)

        assert response.status_code == 400
        assert response.json()["error"].startswith("Webhook Error:")
        assert identity_provider.roles == {}

    def test_callbacks_are_not_rate_limited(self, identity_webhook_secret, identity_provider, signed_identity_event):
        client = TestClient(
            create_app(Settings(environment="test", clerk_webhook_secret=identity_webhook_secret, rate_limit="1/minute"))
        )

        for n in range(3):
            body, headers = signed_identity_event("user.created", {"id": f"user_{n}"})
            assert client.post("/api/webhooks/clerk", content=body, headers=headers).status_code == 200
