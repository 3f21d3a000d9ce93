"""Identity provider port.

Authentication is delegated to an external identity provider. Adapters turn
a bearer token into a ``Principal`` carrying whatever metadata the provider
asserts about the user; role resolution happens in ``identity.access``.
"""

from abc import ABC, abstractmethod

from storefront.identity.access import Principal


class IdentityProvider(ABC):
    """Abstract identity provider interface."""

    @abstractmethod
    def authenticate(self, token: str) -> Principal | None:
        """Return the principal for ``token``, or None when it is not valid."""
        ...

    @abstractmethod
    def assign_role(self, user_id: str, role: str) -> None:
        """Record ``role`` in the user's public metadata."""
        ...
