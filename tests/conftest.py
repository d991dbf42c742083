import copy
import itertools
import os
import sys
from typing import Any, AsyncIterator, Dict, Iterable, List, Optional

import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from backend.config.dependencies import get_document_store
from backend.domains.board.repository import BoardRepository
from backend.domains.shared.document_store import (
    BaseDocumentStore,
    DocumentConflictError,
    StoredDocument,
)
from backend.main import app


class InMemoryDocumentStore(BaseDocumentStore):
    """Document store kept in a dict, understanding term/match_all queries and field sorts."""

    def __init__(self, index_name: str = "board-test", identifier_field: str = "boardId"):
        self.index_name = index_name
        self.identifier_field = identifier_field
        self.indices: Dict[str, Dict[str, Any]] = {}
        self.documents: Dict[str, StoredDocument] = {}
        self.writes = 0
        # Number of upcoming conditional saves that should report a conflict.
        self.conflicts_to_raise = 0
        # Number of upcoming bulk documents the store should reject.
        self.bulk_failures = 0
        self._ids = itertools.count(1)
        self._seq_no = itertools.count(0)

    async def exists(self, index_name: Optional[str] = None) -> bool:
        return (index_name or self.index_name) in self.indices

    async def create_index(self, settings, mappings, index_name=None) -> bool:
        name = index_name or self.index_name
        if name in self.indices:
            return False
        self.indices[name] = {"settings": settings, "mappings": mappings}
        return True

    async def save(self, document, doc_id=None, if_seq_no=None, if_primary_term=None) -> StoredDocument:
        if if_seq_no is not None:
            current = self.documents.get(doc_id)
            if self.conflicts_to_raise > 0:
                self.conflicts_to_raise -= 1
                raise DocumentConflictError(doc_id)
            if current is None or current.seq_no != if_seq_no or current.primary_term != if_primary_term:
                raise DocumentConflictError(doc_id)

        doc_id = doc_id or f"doc-{next(self._ids)}"
        stored = StoredDocument(
            id=doc_id,
            source=copy.deepcopy(document),
            seq_no=next(self._seq_no),
            primary_term=1,
        )
        self.documents[doc_id] = stored
        self.writes += 1
        return copy.deepcopy(stored)

    def _matches(self, query: Optional[Dict[str, Any]], source: Dict[str, Any]) -> bool:
        if not query or "match_all" in query:
            return True
        if "term" in query:
            (field_name, value), = query["term"].items()
            field_name = field_name.removesuffix(".keyword")
            return source.get(field_name) == value
        raise ValueError(f"Unsupported query: {query}")

    async def search(self, query=None, page=None, size=None, sort=None) -> AsyncIterator[StoredDocument]:
        hits = [doc for doc in self.documents.values() if self._matches(query, doc.source)]
        for clause in reversed(sort or []):
            (field_name, options), = clause.items()
            hits.sort(
                key=lambda doc: (doc.source.get(field_name) is None, doc.source.get(field_name)),
                reverse=options.get("order") == "desc",
            )
        size = size if size is not None else 10
        start = (page or 0) * size
        for doc in hits[start:start + size]:
            yield copy.deepcopy(doc)

    async def delete(self, document: StoredDocument) -> Optional[str]:
        removed = self.documents.pop(document.id)
        self.writes += 1
        return removed.source.get(self.identifier_field)

    async def count(self) -> int:
        return len(self.documents)

    async def bulk_save(self, documents: Iterable[Dict[str, Any]]) -> List[bool]:
        results = []
        for document in documents:
            if self.bulk_failures > 0:
                self.bulk_failures -= 1
                results.append(False)
                continue
            await self.save(document)
            results.append(True)
        return results

    async def delete_all(self) -> int:
        deleted = len(self.documents)
        self.documents.clear()
        return deleted


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def repository(store: InMemoryDocumentStore) -> BoardRepository:
    return BoardRepository(store, comment_max_retries=3)


@pytest.fixture
def client(store: InMemoryDocumentStore) -> TestClient:
    """Test client whose routes run against the in-memory store."""
    app.dependency_overrides[get_document_store] = lambda: store
    try:
        yield TestClient(app, raise_server_exceptions=False)
    finally:
        app.dependency_overrides.pop(get_document_store, None)


@pytest.fixture
def board_payload() -> dict:
    return {
        "title": "Hello, world!",
        "content": "Java Hello World Tutorial",
        "writer": "Writer0",
        "like": 0,
        "dislike": 0,
    }
