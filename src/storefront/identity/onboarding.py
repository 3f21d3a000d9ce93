"""Identity provider callbacks.

New accounts get the ``user`` role in their public metadata as soon as the
provider reports them, so role checks never depend on a missing claim.
Callbacks are signed with svix and rejected before the payload is read when
the signature does not verify.
"""

import structlog
from svix.webhooks import Webhook
from svix.webhooks import WebhookVerificationError as SignatureMismatch

from storefront.identity.access import Role
from storefront.shared.errors import UpstreamFailure, WebhookVerificationError

logger = structlog.get_logger(__name__)

USER_CREATED = "user.created"
SIGNATURE_HEADERS = ("svix-id", "svix-timestamp", "svix-signature")


def handle_identity_webhook(raw_body: bytes, headers, provider, secret: str) -> dict:
    """Verify a provider callback and seed the role of newly created users.

    A failed role update is logged and acknowledged; the user simply keeps
    resolving to the default role until an admin assigns one.
    """
    if not secret:
        logger.error("identity_webhook.unconfigured")
        raise WebhookVerificationError("signing secret is not configured")

    signed = {name: headers.get(name, "") for name in SIGNATURE_HEADERS}
    try:
        payload = Webhook(secret).verify(raw_body, signed)
    except SignatureMismatch as exc:
        logger.warning("identity_webhook.rejected", reason=str(exc))
        raise WebhookVerificationError(str(exc)) from exc

    event_type = payload.get("type")
    user_id = (payload.get("data") or {}).get("id")

    if event_type != USER_CREATED or not user_id:
        logger.info("identity_webhook.ignored", type=event_type)
        return {"success": True}

    try:
        provider.assign_role(user_id, Role.USER.value)
    except UpstreamFailure as exc:
        logger.error("identity_webhook.role_seed_failed", user_id=user_id, error=exc.message)
    else:
        logger.info("identity_webhook.role_seeded", user_id=user_id, role=Role.USER.value)
    return {"success": True}
