from typing import AsyncIterator, Optional

from fastapi import APIRouter, Depends, Path, Query
from fastapi.responses import StreamingResponse

from backend.config.dependencies import get_document_store
from backend.config.settings import get_settings
from backend.domains.board.repository import BoardRepository
from backend.domains.board.schemas import Board, Comment
from backend.domains.shared.document_store import BaseDocumentStore

NDJSON_MEDIA_TYPE = "application/x-ndjson"

router = APIRouter()


def get_board_repository(store: BaseDocumentStore = Depends(get_document_store)) -> BoardRepository:
    return BoardRepository(store, comment_max_retries=get_settings().comment_max_retries)


def _to_ndjson_line(board: Board) -> str:
    return board.model_dump_json(by_alias=True) + "\n"


async def _ndjson_stream(first: Optional[Board], rest: AsyncIterator[Board]) -> AsyncIterator[str]:
    if first is None:
        return
    yield _to_ndjson_line(first)
    async for board in rest:
        yield _to_ndjson_line(board)


@router.post("/", response_model=Board)
async def post_board(
    board: Board,
    repository: BoardRepository = Depends(get_board_repository),
) -> Board:
    """Create a board, or return the stored board if a boardId is supplied."""
    return await repository.post(board)


@router.post("/comment/{board_id}", response_model=Board)
async def comment_board(
    comment: Comment,
    board_id: str,
    repository: BoardRepository = Depends(get_board_repository),
) -> Board:
    """Append a comment to a board."""
    return await repository.comment(board_id, comment)


@router.get("/all/{page}/{size}", response_class=StreamingResponse)
async def list_boards(
    page: int = Path(..., ge=0),
    size: int = Path(..., ge=1),
    sort: Optional[str] = Query(None, description="field or field:asc|desc"),
    repository: BoardRepository = Depends(get_board_repository),
) -> StreamingResponse:
    """Stream one page of boards as newline-delimited JSON."""
    boards = repository.list(page, size, sort)
    # Pull the first board before the response starts so store failures
    # still produce an error status.
    try:
        first = await boards.__anext__()
    except StopAsyncIteration:
        first = None
    return StreamingResponse(_ndjson_stream(first, boards), media_type=NDJSON_MEDIA_TYPE)


@router.get("/{board_id}", response_model=Board)
async def load_board(
    board_id: str,
    repository: BoardRepository = Depends(get_board_repository),
) -> Board:
    """Get a board with its comments."""
    return await repository.load(board_id)


@router.delete("/{board_id}", response_model=str)
async def delete_board(
    board_id: str,
    repository: BoardRepository = Depends(get_board_repository),
) -> str:
    """Delete a board and its comments, returning the boardId."""
    return await repository.delete(board_id)
