"""Tests for identity provider adapters and the provider registry."""

import time
from types import SimpleNamespace

import jwt
import pytest
import requests
from cryptography.hazmat.primitives.asymmetric import rsa
from storefront.config import Settings
from storefront.identity.access import Role, resolve_role
from storefront.identity.provider import build_provider, get_provider, reset_provider, set_provider
from storefront.identity.provider.clerk_adapter import ClerkIdentityProvider
from storefront.identity.provider.fake_adapter import FakeIdentityProvider
from storefront.shared.errors import UpstreamFailure

API_URL = "https://clerk.test/v1"


class StaticKeySet:
    """Stands in for PyJWKClient with a single known signing key."""

    def __init__(self, public_key, error=None):
        self.public_key = public_key
        self.error = error

    def get_signing_key_from_jwt(self, token):
        if self.error:
            raise self.error
        return SimpleNamespace(key=self.public_key)


class StubResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self.payload = payload or {}

    def json(self):
        return self.payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


class StubSession:
    """Records backend API calls and answers with canned user records."""

    def __init__(self):
        self.users = {}
        self.calls = []
        self.error = None

    def get(self, url, **kwargs):
        self.calls.append(("GET", url, kwargs))
        if self.error:
            raise self.error
        user_id = url.rsplit("/", 1)[-1]
        if user_id not in self.users:
            return StubResponse(404)
        return StubResponse(200, self.users[user_id])

    def patch(self, url, **kwargs):
        self.calls.append(("PATCH", url, kwargs))
        if self.error:
            raise self.error
        return StubResponse(200)


@pytest.fixture(scope="module")
def signing_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture()
def session():
    return StubSession()


@pytest.fixture()
def clerk(signing_key, session):
    return ClerkIdentityProvider(
        secret_key="sk_test",
        authorized_parties=["https://shop.example.com"],
        api_url=API_URL,
        jwks_client=StaticKeySet(signing_key.public_key()),
        session=session,
    )


@pytest.fixture()
def session_token(signing_key):
    def _token(sub="user_123", expires_in=60, key=None, **claims):
        payload = {"sub": sub, "exp": int(time.time()) + expires_in, "azp": "https://shop.example.com", **claims}
        return jwt.encode(payload, key or signing_key, algorithm="RS256")

    return _token


class TestFakeIdentityProvider:
    def test_registered_admin_resolves_to_admin(self):
        provider = FakeIdentityProvider()
        provider.register_admin("tok")

        assert resolve_role(provider.authenticate("tok")) is Role.ADMIN

    def test_registered_user_resolves_to_user(self):
        provider = FakeIdentityProvider()
        provider.register_user("tok")

        assert resolve_role(provider.authenticate("tok")) is Role.USER

    def test_unknown_token(self):
        assert FakeIdentityProvider().authenticate("nope") is None

    def test_assign_role_updates_registered_principal(self):
        provider = FakeIdentityProvider()
        provider.register_user("tok", user_id="user_1")

        provider.assign_role("user_1", "admin")

        assert provider.roles == {"user_1": "admin"}
        assert resolve_role(provider.authenticate("tok")) is Role.ADMIN


class TestClerkAuthentication:
    def test_valid_token_loads_user_metadata(self, clerk, session, session_token):
        session.users["user_123"] = {
            "id": "user_123",
            "public_metadata": {"role": "admin"},
            "private_metadata": {"tier": "gold"},
            "unsafe_metadata": None,
        }

        principal = clerk.authenticate(session_token())

        assert principal.user_id == "user_123"
        assert principal.private_metadata == {"tier": "gold"}
        assert principal.unsafe_metadata == {}
        assert principal.session_claims["azp"] == "https://shop.example.com"
        assert resolve_role(principal) is Role.ADMIN
        method, url, kwargs = session.calls[0]
        assert (method, url) == ("GET", f"{API_URL}/users/user_123")
        assert kwargs["headers"] == {"Authorization": "Bearer sk_test"}

    def test_expired_token(self, clerk, session, session_token):
        assert clerk.authenticate(session_token(expires_in=-60)) is None
        assert session.calls == []

    def test_token_signed_with_another_key(self, clerk, session_token):
        stranger = rsa.generate_private_key(public_exponent=65537, key_size=2048)

        assert clerk.authenticate(session_token(key=stranger)) is None

    def test_garbage_token(self, clerk):
        assert clerk.authenticate("not-a-jwt") is None

    def test_unauthorized_party(self, clerk, session, session_token):
        session.users["user_123"] = {"id": "user_123"}

        assert clerk.authenticate(session_token(azp="https://evil.example.com")) is None

    def test_deleted_user(self, clerk, session_token):
        assert clerk.authenticate(session_token(sub="user_gone")) is None

    def test_unreachable_key_set(self, signing_key, session, session_token):
        clerk = ClerkIdentityProvider(
            secret_key="sk_test",
            api_url=API_URL,
            jwks_client=StaticKeySet(signing_key.public_key(), error=jwt.PyJWKClientConnectionError("down")),
            session=session,
        )

        with pytest.raises(UpstreamFailure):
            clerk.authenticate(session_token())

    def test_backend_api_failure(self, clerk, session, session_token):
        session.error = requests.ConnectionError("down")

        with pytest.raises(UpstreamFailure):
            clerk.authenticate(session_token())


class TestClerkRoleAssignment:
    def test_assign_role_patches_public_metadata(self, clerk, session):
        clerk.assign_role("user_123", "user")

        method, url, kwargs = session.calls[0]
        assert (method, url) == ("PATCH", f"{API_URL}/users/user_123/metadata")
        assert kwargs["json"] == {"public_metadata": {"role": "user"}}

    def test_assign_role_failure(self, clerk, session):
        session.error = requests.Timeout("slow")

        with pytest.raises(UpstreamFailure):
            clerk.assign_role("user_123", "user")


class TestProviderRegistry:
    def test_production_uses_clerk(self):
        provider = build_provider(
            Settings(environment="production", clerk_secret_key="sk", cors_origins=["https://shop.example.com"])
        )

        assert isinstance(provider, ClerkIdentityProvider)
        assert provider.authorized_parties == ("https://shop.example.com",)
        assert isinstance(provider.jwks_client, jwt.PyJWKClient)

    def test_development_uses_fake(self):
        assert isinstance(build_provider(Settings()), FakeIdentityProvider)

    def test_set_and_reset(self):
        fake = FakeIdentityProvider()
        set_provider(fake)
        assert get_provider() is fake

        reset_provider()
        assert get_provider() is not fake
