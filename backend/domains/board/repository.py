import logging
import time
import uuid
from typing import AsyncIterator, Dict, Iterable, List, Optional

from backend.domains.board.exceptions import BoardConflictException, BoardNotFoundException
from backend.domains.board.index import BOARD_ID_LOOKUP_FIELD
from backend.domains.board.schemas import Board, Comment
from backend.domains.shared.document_store import (
    BaseDocumentStore,
    DocumentConflictError,
    StoredDocument,
    term_query,
)
from shared.errors import MalformedInputException

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = ("writer", "created", "like", "dislike")


def _now() -> int:
    return int(time.time())


def _new_board(board: Board, board_id: str) -> Board:
    # Comments only exist once attached through comment().
    return board.model_copy(update={"board_id": board_id, "comments": []})


def parse_sort(sort: Optional[str]) -> Optional[List[Dict[str, Dict[str, str]]]]:
    """
    Turn ``field`` or ``field:asc|desc`` into an engine sort clause.

    Raises:
        MalformedInputException: unknown field or direction
    """
    if not sort:
        return None
    field_name, _, order = sort.partition(":")
    order = order or "asc"
    if field_name not in SORTABLE_FIELDS:
        raise MalformedInputException(
            f"Cannot sort by '{field_name}'. Sortable fields: {', '.join(SORTABLE_FIELDS)}"
        )
    if order not in ("asc", "desc"):
        raise MalformedInputException(f"Invalid sort order '{order}'. Use 'asc' or 'desc'.")
    return [{field_name: {"order": order}}]


class BoardRepository:
    """
    Board persistence over a document store.

    Boards are addressed by their logical ``boardId``, which lives inside the
    document body. The store's own document key is never exposed to callers,
    so every lookup is a term search on ``boardId``.
    """

    def __init__(self, store: BaseDocumentStore, comment_max_retries: int = 3):
        self.store = store
        self.comment_max_retries = max(1, comment_max_retries)

    async def _find(self, board_id: str) -> StoredDocument:
        # Ask for two hits so duplicated ids can be detected.
        hits = [
            hit async for hit in self.store.search(
                query=term_query(BOARD_ID_LOOKUP_FIELD, board_id), size=2
            )
        ]
        if not hits:
            raise BoardNotFoundException(board_id=board_id)
        if len(hits) > 1:
            logger.error(
                "boardId %s is not unique (%d+ documents); using document %s",
                board_id, len(hits), hits[0].id,
            )
        return hits[0]

    async def post(self, board: Board) -> Board:
        """
        Create a board.

        A board that already carries a boardId is not written again; the
        stored board with that id is returned instead.
        """
        if board.board_id:
            return await self.load(board.board_id)

        board = _new_board(board, str(uuid.uuid4()))
        saved = await self.store.save(board.to_document())
        logger.info("Board %s created (document %s)", board.board_id, saved.id)
        return Board.from_document(saved.source)

    async def bulk_post(self, boards: Iterable[Board]) -> List[Board]:
        """
        Create many boards in one bulk request.

        A supplied boardId is kept only while it is unused; boards whose id is
        already stored, or repeated earlier in the batch, are skipped.

        Returns:
            The boards that were actually indexed
        """
        prepared: List[Board] = []
        taken = set()
        for board in boards:
            board_id = board.board_id or str(uuid.uuid4())
            if board.board_id and (board_id in taken or await self._exists(board_id)):
                logger.warning("Skipping board %s: boardId already in use", board_id)
                continue
            taken.add(board_id)
            prepared.append(_new_board(board, board_id))

        results = await self.store.bulk_save(board.to_document() for board in prepared)
        indexed = [board for board, ok in zip(prepared, results) if ok]
        if len(indexed) < len(prepared):
            logger.error("Bulk create failed for %d of %d boards", len(prepared) - len(indexed), len(prepared))
        logger.info("Bulk created %d/%d boards", len(indexed), len(prepared))
        return indexed

    async def _exists(self, board_id: str) -> bool:
        try:
            await self._find(board_id)
        except BoardNotFoundException:
            return False
        return True

    async def load(self, board_id: str) -> Board:
        stored = await self._find(board_id)
        return Board.from_document(stored.source)

    async def comment(self, board_id: str, comment: Comment) -> Board:
        """
        Append a comment to a board and write the whole board back.

        The write only succeeds if the board has not changed since it was
        read; otherwise the board is re-read and the append retried.
        """
        for attempt in range(1, self.comment_max_retries + 1):
            stored = await self._find(board_id)
            board = Board.from_document(stored.source)
            board.comments.append(
                comment.model_copy(update={"board_id": board_id, "created": _now()})
            )
            try:
                saved = await self.store.save(
                    board.to_document(),
                    doc_id=stored.id,
                    if_seq_no=stored.seq_no,
                    if_primary_term=stored.primary_term,
                )
            except DocumentConflictError:
                logger.warning(
                    "Concurrent update on board %s (attempt %d/%d)",
                    board_id, attempt, self.comment_max_retries,
                )
                continue
            return Board.from_document(saved.source)

        raise BoardConflictException(board_id, self.comment_max_retries)

    def list(self, page: int, size: int, sort: Optional[str] = None) -> AsyncIterator[Board]:
        """
        Page through all boards.

        Returns a lazy iterator of at most ``size`` boards from page ``page``
        (0-indexed). The sort expression is validated before anything is read.
        """
        return self._iter_page(page, size, parse_sort(sort))

    async def _iter_page(self, page: int, size: int, sort) -> AsyncIterator[Board]:
        async for stored in self.store.search(page=page, size=size, sort=sort):
            yield Board.from_document(stored.source)

    async def delete(self, board_id: str) -> str:
        stored = await self._find(board_id)
        removed = await self.store.delete(stored)
        logger.info("Board %s deleted (document %s)", board_id, stored.id)
        return removed or board_id

    async def count(self) -> int:
        return await self.store.count()

    async def delete_all(self) -> int:
        """Remove every board. Returns the number of boards deleted."""
        deleted = await self.store.delete_all()
        logger.warning("Deleted all %d boards", deleted)
        return deleted
