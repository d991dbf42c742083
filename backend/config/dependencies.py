"""Common dependencies for FastAPI routes."""

from backend.domains.shared.document_store import BaseDocumentStore, ElasticsearchDocumentStore

from .elasticsearch import get_client
from .settings import get_settings


def get_document_store() -> BaseDocumentStore:
    """Document store bound to the configured board index."""
    settings = get_settings()
    return ElasticsearchDocumentStore(
        get_client(),
        settings.index_name,
        refresh=settings.elasticsearch_refresh,
        max_result_window=settings.index_max_result_window,
    )
