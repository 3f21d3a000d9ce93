"""Logging setup and per-request log context.

structlog renders every event; stdlib logging owns the handlers so Protean,
uvicorn and the HTTP client libraries end up in the same streams. Events are
JSON in production and staging and coloured console lines elsewhere.

Request handling binds a request id, method and path into structlog's
context variables, so every event logged while serving a request carries
them without each call site passing them along.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path

import structlog

LEVELS_BY_ENVIRONMENT = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}
JSON_ENVIRONMENTS = ("production", "staging")
QUIET_LOGGERS = ("protean", "stripe", "urllib3", "slowapi", "asyncio")
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5

_configured = False


def current_environment() -> str:
    return (os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development").lower()


def level_for(environment: str) -> str:
    """``LOG_LEVEL`` wins; otherwise the environment's default level."""
    return os.getenv("LOG_LEVEL", LEVELS_BY_ENVIRONMENT.get(environment, "INFO"))


def _rotating_file(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8"
    )
    handler.setLevel(level)
    return handler


def setup_handlers(environment: str, log_dir: str | None = None) -> None:
    level = level_for(environment)
    log_path = Path(log_dir or os.getenv("LOG_DIR", "logs"))
    log_path.mkdir(parents=True, exist_ok=True)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [
        console,
        _rotating_file(log_path / "storefront.log", level),
        _rotating_file(log_path / "storefront_error.log", logging.ERROR),
    ]

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def setup_structlog(environment: str) -> None:
    renderer = (
        structlog.processors.JSONRenderer()
        if environment in JSON_ENVIRONMENTS
        else structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.CallsiteParameterAdder(
                parameters=[
                    structlog.processors.CallsiteParameter.FILENAME,
                    structlog.processors.CallsiteParameter.LINENO,
                ]
            ),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(log_dir: str | None = None) -> None:
    """Configure handlers and structlog once per process."""
    global _configured
    if _configured:
        return
    environment = current_environment()
    setup_handlers(environment, log_dir)
    setup_structlog(environment)
    _configured = True


def bind_request_context(request_id: str, method: str, path: str) -> None:
    """Start a fresh log context for the request being served."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id, method=method, path=path)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()
