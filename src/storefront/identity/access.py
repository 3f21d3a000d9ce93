"""Principal and role resolution.

The identity provider may assert a user's role in several places. They are
checked in ``ROLE_CLAIM_PATHS`` order and the first non-empty value wins.
"""

from dataclasses import dataclass, field
from enum import Enum


class Role(Enum):
    ANONYMOUS = "anonymous"
    USER = "user"
    ADMIN = "admin"


@dataclass(frozen=True)
class Principal:
    user_id: str
    public_metadata: dict = field(default_factory=dict)
    private_metadata: dict = field(default_factory=dict)
    unsafe_metadata: dict = field(default_factory=dict)
    session_claims: dict = field(default_factory=dict)


ROLE_CLAIM_PATHS: tuple[tuple[str, ...], ...] = (
    ("public_metadata", "role"),
    ("private_metadata", "role"),
    ("unsafe_metadata", "role"),
    ("session_claims", "publicMetadata", "role"),
    ("session_claims", "metadata", "role"),
)


def _lookup(principal: Principal, path: tuple[str, ...]):
    value = getattr(principal, path[0], None)
    for key in path[1:]:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


def resolve_role(principal: Principal | None) -> Role:
    if principal is None:
        return Role.ANONYMOUS

    for path in ROLE_CLAIM_PATHS:
        claimed = _lookup(principal, path)
        if claimed:
            try:
                return Role(str(claimed).lower())
            except ValueError:
                return Role.USER
    return Role.USER
