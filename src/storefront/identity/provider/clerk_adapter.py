"""Clerk identity provider adapter.

Session tokens are RS256 JWTs signed with a key published on Clerk's JWKS
endpoint. A verified token only says who the user is; the role lives in the
user's metadata, so the user record is fetched from the Clerk backend API
and its public, private and unsafe metadata are copied onto the principal.
"""

import jwt
import requests
import structlog

from storefront.identity.access import Principal
from storefront.identity.provider.port import IdentityProvider
from storefront.shared.errors import UpstreamFailure

logger = structlog.get_logger(__name__)

CLERK_API_URL = "https://api.clerk.com/v1"
CLOCK_SKEW_SECONDS = 5


class ClerkIdentityProvider(IdentityProvider):
    """Production Clerk adapter."""

    def __init__(
        self,
        secret_key: str,
        authorized_parties=(),
        api_url: str = CLERK_API_URL,
        jwks_client=None,
        session=None,
        timeout: float = 10.0,
    ) -> None:
        self.secret_key = secret_key
        self.authorized_parties = tuple(authorized_parties)
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.jwks_client = jwks_client or jwt.PyJWKClient(f"{self.api_url}/jwks", headers=self._headers)
        self.session = session or requests.Session()

    @property
    def _headers(self) -> dict:
        return {"Authorization": f"Bearer {self.secret_key}"}

    def authenticate(self, token: str) -> Principal | None:
        claims = self._verify(token)
        if claims is None:
            return None

        user = self._fetch_user(claims["sub"])
        if user is None:
            logger.info("auth.unknown_user", user_id=claims["sub"])
            return None

        return Principal(
            user_id=claims["sub"],
            public_metadata=user.get("public_metadata") or {},
            private_metadata=user.get("private_metadata") or {},
            unsafe_metadata=user.get("unsafe_metadata") or {},
            session_claims=claims,
        )

    def assign_role(self, user_id: str, role: str) -> None:
        """Merge ``role`` into the user's public metadata."""
        try:
            response = self.session.patch(
                f"{self.api_url}/users/{user_id}/metadata",
                json={"public_metadata": {"role": role}},
                headers=self._headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            raise UpstreamFailure(f"Failed to update user {user_id}: {exc}") from exc

    def _verify(self, token: str) -> dict | None:
        try:
            signing_key = self.jwks_client.get_signing_key_from_jwt(token)
            claims = jwt.decode(
                token,
                signing_key.key,
                algorithms=["RS256"],
                options={"require": ["exp", "sub"]},
                leeway=CLOCK_SKEW_SECONDS,
            )
        except jwt.PyJWKClientConnectionError as exc:
            raise UpstreamFailure(f"Identity provider unavailable: {exc}") from exc
        except jwt.PyJWTError as exc:
            logger.info("auth.token_rejected", reason=str(exc))
            return None

        party = claims.get("azp")
        if party and self.authorized_parties and party not in self.authorized_parties:
            logger.info("auth.token_rejected", reason="unauthorized party", azp=party)
            return None
        return claims

    def _fetch_user(self, user_id: str) -> dict | None:
        try:
            response = self.session.get(
                f"{self.api_url}/users/{user_id}",
                headers=self._headers,
                timeout=self.timeout,
            )
            if response.status_code == 404:
                return None
            response.raise_for_status()
        except requests.RequestException as exc:
            raise UpstreamFailure(f"Identity provider request failed: {exc}") from exc
        return response.json()
