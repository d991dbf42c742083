from typing import Optional

from elasticsearch import AsyncElasticsearch

from .settings import Settings, get_settings

# Process-wide client; the underlying connection pool is shared by all requests.
_client: Optional[AsyncElasticsearch] = None


def create_client(settings: Settings) -> AsyncElasticsearch:
    """Build an async Elasticsearch client from settings."""
    basic_auth = None
    if settings.elasticsearch_username and settings.elasticsearch_password:
        basic_auth = (settings.elasticsearch_username, settings.elasticsearch_password)

    return AsyncElasticsearch(
        settings.elasticsearch_url,
        basic_auth=basic_auth,
        request_timeout=settings.elasticsearch_request_timeout,
    )


def get_client() -> AsyncElasticsearch:
    """Get the shared client, creating it on first use."""
    global _client
    if _client is None:
        _client = create_client(get_settings())
    return _client


async def close_client() -> None:
    """Close the shared client's connection pool."""
    global _client
    if _client is not None:
        await _client.close()
        _client = None
