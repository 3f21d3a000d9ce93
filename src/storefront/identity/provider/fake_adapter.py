"""In-memory identity provider for development and testing.

Tokens are registered up front and map straight to principals, which keeps
admin-guarded routes exercisable without a real identity provider.
"""

from dataclasses import replace

from storefront.identity.access import Principal
from storefront.identity.provider.port import IdentityProvider


class FakeIdentityProvider(IdentityProvider):
    def __init__(self) -> None:
        self.principals: dict[str, Principal] = {}
        self.roles: dict[str, str] = {}

    def register(self, token: str, principal: Principal) -> None:
        self.principals[token] = principal

    def register_admin(self, token: str, user_id: str = "user_admin") -> Principal:
        principal = Principal(user_id=user_id, public_metadata={"role": "admin"})
        self.register(token, principal)
        return principal

    def register_user(self, token: str, user_id: str = "user_shopper") -> Principal:
        principal = Principal(user_id=user_id, public_metadata={"role": "user"})
        self.register(token, principal)
        return principal

    def authenticate(self, token: str) -> Principal | None:
        return self.principals.get(token)

    def assign_role(self, user_id: str, role: str) -> None:
        self.roles[user_id] = role
        for token, principal in self.principals.items():
            if principal.user_id == user_id:
                metadata = {**principal.public_metadata, "role": role}
                self.principals[token] = replace(principal, public_metadata=metadata)
