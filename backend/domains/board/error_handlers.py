"""Map board-domain failures to HTTP error payloads."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from shared.errors import BoardServiceError, MalformedInputException, create_http_error

logger = logging.getLogger(__name__)


def _error_response(request: Request, status_code: int, message: str, exc_info=None) -> JSONResponse:
    path = request.url.path
    logger.error(
        "Error occurred. status: %s, path: %s, message: %s", status_code, path, message, exc_info=exc_info
    )
    error = create_http_error(status_code, path, message)
    return JSONResponse(status_code=status_code, content=error.model_dump(mode="json"))


def _describe_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(loc) for loc in err.get("loc", ()))
        parts.append(f"{location}: {err.get('msg')}")
    return "; ".join(parts) or "Malformed request"


async def handle_board_service_error(request: Request, exc: BoardServiceError) -> JSONResponse:
    return _error_response(request, exc.status_code, exc.message)


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    malformed = MalformedInputException(_describe_validation_errors(exc), errors=exc.errors())
    return _error_response(request, malformed.status_code, malformed.message)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    return _error_response(
        request, status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc) or exc.__class__.__name__, exc_info=exc
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the board error handlers on ``app``."""
    app.add_exception_handler(BoardServiceError, handle_board_service_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
