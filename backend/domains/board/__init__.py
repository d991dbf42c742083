from .schemas import Board, Comment
from .exceptions import BoardException, BoardNotFoundException, BoardConflictException
from .repository import BoardRepository, parse_sort
from .index import build_index_settings, build_index_mappings

__all__ = [
    # Schemas
    "Board",
    "Comment",
    # Exceptions
    "BoardException",
    "BoardNotFoundException",
    "BoardConflictException",
    # Repository
    "BoardRepository",
    "parse_sort",
    # Index
    "build_index_settings",
    "build_index_mappings",
]
