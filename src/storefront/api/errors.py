"""Map domain errors onto HTTP responses.

Every error response has the body ``{"error": messages}`` where `messages`
is the ``{"field": ["message", ...]}`` mapping carried by the exception.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.integrations.fastapi import register_exception_handlers

from storefront.errors import AuthenticationError, ConflictError, ForbiddenError

logger = structlog.get_logger(__name__)

_STATUS_CODES = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (ForbiddenError, 403),
    (ObjectNotFoundError, 404),
    (ConflictError, 409),
)


def _messages(exc):
    messages = getattr(exc, "messages", None)
    return messages if messages else {"_entity": [str(exc)]}


def _handler(status_code):
    async def handle(request: Request, exc: Exception) -> JSONResponse:
        logger.info(
            "Request rejected",
            path=request.url.path,
            status_code=status_code,
            error=type(exc).__name__,
        )
        return JSONResponse(status_code=status_code, content={"error": _messages(exc)})

    return handle


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"] if part != "body") or "_entity"
        messages.setdefault(field, []).append(error["msg"])
    return JSONResponse(status_code=400, content={"error": messages})


async def _server_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", path=request.url.path)
    return JSONResponse(status_code=500, content={"error": {"_entity": ["Server error"]}})


def register_error_handlers(app: FastAPI) -> None:
    """Install Protean's handlers, then the storefront mapping on top of them."""
    register_exception_handlers(app)

    for exc_class, status_code in _STATUS_CODES:
        app.add_exception_handler(exc_class, _handler(status_code))
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(Exception, _server_error_handler)
