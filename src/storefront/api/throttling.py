"""Per-client request rate limiting.

Every route shares one limit keyed by client address. Processor and identity
provider callbacks are exempt: they arrive from a handful of addresses in
bursts and are already authenticated by their signatures.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

logger = structlog.get_logger(__name__)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    # SlowAPIMiddleware calls this without awaiting it
    logger.warning("request.rate_limited", client=get_remote_address(request), limit=str(exc.detail))
    return JSONResponse(status_code=429, content={"error": "Too many requests"})


def install_rate_limiting(app: FastAPI, limit: str, exempt=()) -> Limiter:
    limiter = Limiter(key_func=get_remote_address, default_limits=[limit])
    for endpoint in exempt:
        limiter.exempt(endpoint)

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)
    return limiter
