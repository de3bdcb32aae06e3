"""structlog setup for the listing API.

Everything goes through one stdlib handler rendered by structlog, including
uvicorn's own loggers, so a deployment sees a single log format. Per-request
keys (request id, path) are bound by ``request_context_middleware`` and picked
up by every log line emitted while the request is served.
"""

import logging
import os
import time
import uuid
from collections.abc import Awaitable, Callable

import structlog
from fastapi import Request, Response

# Loggers owned by libraries. uvicorn installs its own handlers; those are
# removed so records reach the root handler.
ROUTED_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")

# Libraries that are chatty below WARNING (web3 logs every provider request).
QUIET_LOGGERS = ("web3", "aiohttp.access", "uvicorn.access")

REQUEST_ID_HEADER = "X-Request-ID"


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def setup_logging(log_level: str = "INFO") -> None:
    """Route structlog and stdlib records through one rendered handler.

    ``LOG_FORMAT`` selects ``json`` or ``console`` (default) rendering.
    """
    shared: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            # Records from plain stdlib loggers (uvicorn, aiohttp) get the same keys
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(os.environ.get("LOG_FORMAT", "console").lower()),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    for name in ROUTED_LOGGERS:
        library_logger = logging.getLogger(name)
        library_logger.handlers.clear()
        library_logger.propagate = True
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a bound structlog logger with the given name."""
    return structlog.get_logger(name)


async def request_context_middleware(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Bind request_id and path for the duration of one HTTP request.

    An incoming X-Request-ID is reused; otherwise a short id is generated.
    The id is echoed back on the response.
    """
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:12]
    started = time.perf_counter()
    with structlog.contextvars.bound_contextvars(
        request_id=request_id, path=request.url.path
    ):
        response = await call_next(request)
        get_logger("market_api.http").debug(
            "request_served",
            status=response.status_code,
            elapsed_ms=round((time.perf_counter() - started) * 1000, 1),
        )
    response.headers[REQUEST_ID_HEADER] = request_id
    return response
