"""
HTTP-facing error payloads for the board service.
"""

import datetime
from typing import Optional

from pydantic import BaseModel, Field

from .base import BoardServiceError


def _local_now() -> datetime.datetime:
    return datetime.datetime.now().astimezone()


class HttpError(BaseModel):
    """
    Error body returned for every failed request.

    The shape is fixed: ``path``, ``status``, ``message`` and ``timestamp``.
    """

    path: str
    status: int
    message: str
    timestamp: datetime.datetime = Field(default_factory=_local_now)


class MalformedInputException(BoardServiceError):
    """
    Raised when a request body or path parameter cannot be parsed into
    the expected Board/Comment shape.
    """

    status_code = 400

    def __init__(self, message: str, errors: Optional[list] = None):
        super().__init__(message)
        self.errors = errors or []


def create_http_error(status: int, path: str, message: Optional[str]) -> HttpError:
    """Build the error payload for ``status`` raised while serving ``path``."""
    return HttpError(path=path, status=status, message=message or "")
