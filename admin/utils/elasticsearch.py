"""
Elasticsearch client utilities for the Business Directory admin tools.

Provides sync and async clients built from the same settings the web
service uses.
"""

from elasticsearch import AsyncElasticsearch, Elasticsearch

from business_directory.config import Settings
from business_directory.dependencies import es_client_kwargs


def get_es_client(settings: Settings) -> Elasticsearch:
    """
    Get a synchronous Elasticsearch client.

    Example:
        >>> es = get_es_client(Settings.load_from_yaml())
        >>> es.info()
    """
    return Elasticsearch(**es_client_kwargs(settings))


def get_async_es_client(settings: Settings) -> AsyncElasticsearch:
    """
    Get an asynchronous Elasticsearch client.

    The caller is responsible for closing it.

    Example:
        >>> async def rebuild():
        ...     es = get_async_es_client(settings)
        ...     try:
        ...         await es.info()
        ...     finally:
        ...         await es.close()
    """
    return AsyncElasticsearch(**es_client_kwargs(settings))
