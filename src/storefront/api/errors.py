"""Maps exceptions to ``{"error": message}`` JSON responses."""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError, ValidationError

from storefront.shared.errors import StorefrontError

logger = structlog.get_logger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _describe(messages) -> str:
    if isinstance(messages, dict):
        return "; ".join(f"{field}: {', '.join(map(str, errors))}" for field, errors in messages.items())
    return str(messages)


async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    log = logger.warning if exc.status_code < 500 else logger.error
    log("request.failed", path=request.url.path, kind=exc.kind.value, error=exc.message)
    return _error(exc.status_code, exc.message)


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return _error(400, _describe(exc.messages))


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'] if part != 'body')}: {error['msg']}" for error in exc.errors()
    )
    return _error(400, details or "Invalid request")


async def not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return _error(404, str(exc) or "Not found")


async def version_conflict_handler(request: Request, exc: ExpectedVersionError) -> JSONResponse:
    logger.warning("request.concurrent_update", path=request.url.path, error=str(exc))
    return _error(409, "The resource was modified concurrently, please retry")


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("request.unhandled_error", path=request.url.path)
    return _error(500, "Internal server error")


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StorefrontError, storefront_error_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(ObjectNotFoundError, not_found_handler)
    app.add_exception_handler(ExpectedVersionError, version_conflict_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
