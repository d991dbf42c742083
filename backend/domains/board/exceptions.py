from shared.errors import BoardServiceError


class BoardException(BoardServiceError):
    """Base exception for the board domain."""
    pass


class BoardNotFoundException(BoardException):
    """Raised when no board matches a boardId."""

    status_code = 404

    def __init__(self, message: str = "Invalid Board id.", board_id: str = None):
        super().__init__(message)
        self.board_id = board_id


class BoardConflictException(BoardException):
    """Raised when a board kept changing underneath a conditional write."""

    status_code = 409

    def __init__(self, board_id: str, attempts: int):
        super().__init__(
            f"Board {board_id} was modified concurrently; gave up after {attempts} attempts.",
        )
        self.board_id = board_id
        self.attempts = attempts
