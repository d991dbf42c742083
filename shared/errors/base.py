"""
Base exception classes for the board service.
"""

class BoardServiceError(Exception):
    """
    Base exception class for all board-service errors.

    Subclasses set ``status_code``; the HTTP error handlers use it together
    with ``message`` to build the error payload.
    """

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self):
        """Return a string representation of the error."""
        return self.message
