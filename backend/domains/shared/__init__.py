from .document_store import (
    BaseDocumentStore,
    ElasticsearchDocumentStore,
    DocumentConflictError,
    StoredDocument,
    term_query,
    match_all_query,
)

__all__ = [
    # Document store
    "BaseDocumentStore",
    "ElasticsearchDocumentStore",
    "DocumentConflictError",
    "StoredDocument",
    "term_query",
    "match_all_query",
]
