import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Dict, Iterable, List, Optional

from elasticsearch import AsyncElasticsearch, BadRequestError, ConflictError
from elasticsearch.helpers import async_streaming_bulk

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
# Engine default for index.max_result_window; from + size may not exceed it.
DEFAULT_MAX_RESULT_WINDOW = 10000


class DocumentConflictError(Exception):
    """Raised when a conditional write finds that the stored version has moved on."""

    def __init__(self, doc_id: str, message: str = "Document version conflict"):
        super().__init__(f"{message}: {doc_id}")
        self.doc_id = doc_id


@dataclass
class StoredDocument:
    """A document as held by the store: internal key, body and version tokens."""

    id: str
    source: Dict[str, Any] = field(default_factory=dict)
    seq_no: Optional[int] = None
    primary_term: Optional[int] = None


def term_query(field_name: str, value: Any) -> Dict[str, Any]:
    """Exact-value match on a single field."""
    return {"term": {field_name: value}}


def match_all_query() -> Dict[str, Any]:
    return {"match_all": {}}


class BaseDocumentStore(ABC):
    """Abstract document store defining the capabilities the board layer relies on."""

    @abstractmethod
    async def exists(self, index_name: Optional[str] = None) -> bool:
        """Check whether the index exists."""
        pass

    @abstractmethod
    async def create_index(
        self,
        settings: Dict[str, Any],
        mappings: Dict[str, Any],
        index_name: Optional[str] = None,
    ) -> bool:
        """Create the index. Returns False if it already existed."""
        pass

    @abstractmethod
    async def save(
        self,
        document: Dict[str, Any],
        doc_id: Optional[str] = None,
        if_seq_no: Optional[int] = None,
        if_primary_term: Optional[int] = None,
    ) -> StoredDocument:
        """Insert or fully replace a document."""
        pass

    @abstractmethod
    def search(
        self,
        query: Optional[Dict[str, Any]] = None,
        page: Optional[int] = None,
        size: Optional[int] = None,
        sort: Optional[List[Dict[str, Any]]] = None,
    ) -> AsyncIterator[StoredDocument]:
        """Lazily yield matching documents."""
        pass

    @abstractmethod
    async def delete(self, document: StoredDocument) -> Optional[str]:
        """Delete a document by internal key, returning its logical identifier."""
        pass

    @abstractmethod
    async def count(self) -> int:
        """Count stored documents."""
        pass

    @abstractmethod
    async def bulk_save(self, documents: Iterable[Dict[str, Any]]) -> List[bool]:
        """Index many documents at once. Returns a success flag per document, in input order."""
        pass

    @abstractmethod
    async def delete_all(self) -> int:
        """Remove every document from the index. Returns the number deleted."""
        pass

    async def close(self) -> None:
        """Release underlying resources."""
        pass


def _body(response: Any) -> Dict[str, Any]:
    # ApiResponse wraps the decoded JSON in .body
    return getattr(response, "body", response)


def _error_type(exc: BadRequestError) -> Optional[str]:
    body = exc.body if isinstance(exc.body, dict) else {}
    error = body.get("error")
    if isinstance(error, dict):
        return error.get("type")
    return exc.message


class ElasticsearchDocumentStore(BaseDocumentStore):
    """Elasticsearch implementation of the document store, bound to one index."""

    def __init__(
        self,
        client: AsyncElasticsearch,
        index_name: str,
        identifier_field: str = "boardId",
        refresh: str = "wait_for",
        max_result_window: int = DEFAULT_MAX_RESULT_WINDOW,
    ):
        """
        Initialize the store.

        Args:
            client: Shared async Elasticsearch client
            index_name: Index every operation targets by default
            identifier_field: Source field holding the logical identifier
            refresh: Refresh policy applied to single-document writes
            max_result_window: Deepest position (from + size) a search may reach
        """
        self.client = client
        self.index_name = index_name
        self.identifier_field = identifier_field
        self.refresh = refresh
        self.max_result_window = max_result_window

    async def exists(self, index_name: Optional[str] = None) -> bool:
        response = await self.client.indices.exists(index=index_name or self.index_name)
        return bool(response)

    async def create_index(
        self,
        settings: Dict[str, Any],
        mappings: Dict[str, Any],
        index_name: Optional[str] = None,
    ) -> bool:
        name = index_name or self.index_name
        try:
            await self.client.indices.create(index=name, settings=settings, mappings=mappings)
        except BadRequestError as e:
            if _error_type(e) == "resource_already_exists_exception":
                logger.info("Index %s already exists, create request ignored", name)
                return False
            raise
        return True

    async def save(
        self,
        document: Dict[str, Any],
        doc_id: Optional[str] = None,
        if_seq_no: Optional[int] = None,
        if_primary_term: Optional[int] = None,
    ) -> StoredDocument:
        kwargs: Dict[str, Any] = {}
        if doc_id is not None:
            kwargs["id"] = doc_id
        if if_seq_no is not None and if_primary_term is not None:
            kwargs["if_seq_no"] = if_seq_no
            kwargs["if_primary_term"] = if_primary_term

        try:
            response = await self.client.index(
                index=self.index_name,
                document=document,
                refresh=self.refresh,
                **kwargs,
            )
        except ConflictError as e:
            raise DocumentConflictError(doc_id or "<new>") from e

        body = _body(response)
        return StoredDocument(
            id=body["_id"],
            source=document,
            seq_no=body.get("_seq_no"),
            primary_term=body.get("_primary_term"),
        )

    async def search(
        self,
        query: Optional[Dict[str, Any]] = None,
        page: Optional[int] = None,
        size: Optional[int] = None,
        sort: Optional[List[Dict[str, Any]]] = None,
    ) -> AsyncIterator[StoredDocument]:
        kwargs: Dict[str, Any] = {"seq_no_primary_term": True}
        if query is not None:
            kwargs["query"] = query
        page_size = size if size is not None else DEFAULT_PAGE_SIZE
        start = page * page_size if page is not None else 0
        if start >= self.max_result_window:
            logger.debug(
                "Page %s of %s starts past the result window (%d); nothing to return",
                page, self.index_name, self.max_result_window,
            )
            return
        if size is not None or page_size > self.max_result_window - start:
            kwargs["size"] = min(page_size, self.max_result_window - start)
        if page is not None:
            kwargs["from_"] = start
        if sort:
            kwargs["sort"] = sort

        response = await self.client.search(index=self.index_name, **kwargs)
        for hit in _body(response)["hits"]["hits"]:
            yield StoredDocument(
                id=hit["_id"],
                source=hit.get("_source") or {},
                seq_no=hit.get("_seq_no"),
                primary_term=hit.get("_primary_term"),
            )

    async def delete(self, document: StoredDocument) -> Optional[str]:
        await self.client.delete(index=self.index_name, id=document.id, refresh=self.refresh)
        return document.source.get(self.identifier_field)

    async def count(self) -> int:
        response = await self.client.count(index=self.index_name)
        return int(_body(response)["count"])

    async def bulk_save(self, documents: Iterable[Dict[str, Any]]) -> List[bool]:
        actions = (
            {"_index": self.index_name, "_source": document}
            for document in documents
        )
        results: List[bool] = []
        async for ok, item in async_streaming_bulk(
            self.client, actions, refresh=self.refresh, raise_on_error=False
        ):
            if not ok:
                logger.error("Bulk save to %s failed: %s", self.index_name, item)
            results.append(ok)
        return results

    async def delete_all(self) -> int:
        response = await self.client.delete_by_query(
            index=self.index_name,
            query=match_all_query(),
            refresh=True,
            conflicts="proceed",
        )
        return int(_body(response).get("deleted", 0))

    async def close(self) -> None:
        await self.client.close()
