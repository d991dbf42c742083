from .base import BoardServiceError
from .api_errors import HttpError, MalformedInputException, create_http_error

__all__ = [
    "BoardServiceError",
    "HttpError",
    "MalformedInputException",
    "create_http_error",
]
