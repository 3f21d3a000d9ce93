"""FastAPI application factory.

Every request runs inside the storefront domain context; the domain itself
must already be initialized by the caller.
"""

from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront.api.errors import install_error_handlers
from storefront.api.throttling import install_rate_limiting
from storefront.catalogue.api import category_router, product_router
from storefront.config import get_settings
from storefront.domain import storefront
from storefront.identity.api import identity_router
from storefront.identity.api.routes import clerk_webhook
from storefront.ordering.api import order_router
from storefront.payments.api import checkout_router
from storefront.payments.api.routes import payment_webhook
from storefront.promotions.api import coupon_router
from storefront.utils.logging import bind_request_context, clear_request_context

REQUEST_ID_HEADER = "X-Request-ID"


def create_app(settings=None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(
        title="Storefront API",
        description="Catalogue, promotions, ordering and checkout",
    )
    app.dependency_overrides[get_settings] = lambda: settings

    install_rate_limiting(app, settings.rate_limit, exempt=(payment_webhook, clerk_webhook))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the storefront domain context and tag logs with the request id."""
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
        bind_request_context(request_id, request.method, request.url.path)
        try:
            with storefront.domain_context():
                response = await call_next(request)
        finally:
            clear_request_context()
        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    install_error_handlers(app)

    app.include_router(product_router)
    app.include_router(category_router)
    app.include_router(coupon_router)
    app.include_router(order_router)
    app.include_router(checkout_router)
    app.include_router(identity_router)

    @app.get("/health")
    async def health():
        return JSONResponse(content={"status": "ok", "domain": storefront.name, "environment": settings.environment})

    return app
