"""Application settings read from the environment.

Protean's own configuration (databases, brokers, event store) lives in
``domain.toml``; everything the storefront needs on top of that is collected
here.
"""

import os
from dataclasses import dataclass, field
from functools import lru_cache

import structlog

logger = structlog.get_logger(__name__)

_REQUIRED_IN_PRODUCTION = (
    "STRIPE_SECRET_KEY",
    "STRIPE_WEBHOOK_SECRET",
    "CLERK_SECRET_KEY",
    "CLERK_WEBHOOK_SECRET",
)


def _split_origins(value: str) -> list[str]:
    return [origin.strip() for origin in value.split(",") if origin.strip()]


@dataclass(frozen=True)
class Settings:
    environment: str = "development"
    port: int = 4000
    cors_origins: list[str] = field(default_factory=lambda: ["http://localhost:5173"])
    currency: str = "sgd"
    payment_gateway: str = "fake"
    stripe_secret_key: str = ""
    stripe_webhook_secret: str = ""
    clerk_secret_key: str = ""
    clerk_webhook_secret: str = ""
    clerk_api_url: str = "https://api.clerk.com/v1"
    rate_limit: str = "120/minute"
    stock_hold_minutes: int = 30

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


def load_settings(environ=None) -> Settings:
    """Build settings from ``environ`` (defaults to ``os.environ``).

    Missing secrets raise in production and are only warned about elsewhere.
    """
    env = os.environ if environ is None else environ
    environment = (env.get("ENVIRONMENT") or env.get("PROTEAN_ENV") or "development").lower()

    missing = [key for key in _REQUIRED_IN_PRODUCTION if not env.get(key)]
    if missing:
        if environment == "production":
            raise RuntimeError(f"Missing required environment variables: {', '.join(missing)}")
        logger.warning("settings.missing_secrets", keys=missing, environment=environment)

    return Settings(
        environment=environment,
        port=int(env.get("PORT", "4000")),
        cors_origins=_split_origins(env.get("CORS_ORIGIN", "http://localhost:5173")),
        currency=env.get("CURRENCY", "sgd").lower(),
        payment_gateway=env.get("PAYMENT_GATEWAY", "stripe" if environment == "production" else "fake").lower(),
        stripe_secret_key=env.get("STRIPE_SECRET_KEY", ""),
        stripe_webhook_secret=env.get("STRIPE_WEBHOOK_SECRET", ""),
        clerk_secret_key=env.get("CLERK_SECRET_KEY", ""),
        clerk_webhook_secret=env.get("CLERK_WEBHOOK_SECRET", ""),
        clerk_api_url=env.get("CLERK_API_URL", "https://api.clerk.com/v1"),
        rate_limit=env.get("RATE_LIMIT", "120/minute"),
        stock_hold_minutes=int(env.get("STOCK_HOLD_MINUTES", "30")),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
