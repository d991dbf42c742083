"""Board domain schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class BoardDocumentBase(BaseModel):
    """Accepts snake_case or camelCase on input, dumps camelCase."""

    model_config = ConfigDict(populate_by_name=True)

    def to_document(self) -> dict:
        """Serialize to the JSON body stored in the index."""
        return self.model_dump(by_alias=True, mode="json")


# --- Comment Schemas ---
class Comment(BoardDocumentBase):
    board_id: Optional[str] = Field(default=None, alias="boardId")
    writer: str
    password: str
    content: str
    created: Optional[int] = None


# --- Board Schemas ---
class Board(BoardDocumentBase):
    board_id: Optional[str] = Field(default=None, alias="boardId")
    title: str
    content: str
    writer: str
    password: Optional[str] = None
    comments: List[Comment] = Field(default_factory=list)
    like: int
    dislike: int
    created: Optional[int] = None

    @classmethod
    def from_document(cls, source: dict) -> "Board":
        """Build a Board from a stored ``_source`` body."""
        return cls.model_validate(source)
