"""Admin guard for back-office routes."""

from fastapi import Header

from storefront.identity.access import Role, resolve_role
from storefront.identity.provider import get_provider
from storefront.shared.errors import Forbidden, Unauthorized


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def require_admin(authorization: str | None = Header(default=None)):
    """FastAPI dependency: 401 without a valid session, 403 without the admin role."""
    token = _bearer_token(authorization)
    principal = get_provider().authenticate(token) if token else None
    if principal is None:
        raise Unauthorized()
    if resolve_role(principal) is not Role.ADMIN:
        raise Forbidden()
    return principal
