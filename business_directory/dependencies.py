"""Dependency injection for the Business Directory service."""

from typing import AsyncGenerator, Optional

from elasticsearch import AsyncElasticsearch
from fastapi import Depends

from business_directory.config import Settings, get_settings
from business_directory.services.business_stats import AggregateRecalculator
from business_directory.services.change_notifier import ChangeNotifier
from business_directory.services.document_store import DocumentStore

# Global ES client instance
_es_client: Optional[AsyncElasticsearch] = None


def es_client_kwargs(settings: Settings) -> dict:
    """Build Elasticsearch client connection kwargs from settings."""
    kwargs = {}

    if settings.es_cloud_id:
        # Cloud connection
        kwargs["cloud_id"] = settings.es_cloud_id
    elif settings.elasticsearch_url:
        # Full URL provided (e.g., from ELASTICSEARCH_URL env var)
        kwargs["hosts"] = [settings.elasticsearch_url]
    else:
        # Build from parts
        kwargs["hosts"] = [settings.es_url]

    # Authentication
    if settings.es_api_key:
        kwargs["api_key"] = settings.es_api_key
    elif settings.es_username and settings.es_password:
        kwargs["basic_auth"] = (settings.es_username, settings.es_password)

    kwargs["verify_certs"] = settings.es_verify_certs
    kwargs["request_timeout"] = settings.es_request_timeout

    return kwargs


async def init_es_client() -> AsyncElasticsearch:
    """Initialize the Elasticsearch async client."""
    global _es_client

    if _es_client is not None:
        return _es_client

    _es_client = AsyncElasticsearch(**es_client_kwargs(get_settings()))

    return _es_client


async def close_es_client() -> None:
    """Close the Elasticsearch client connection."""
    global _es_client

    if _es_client is not None:
        await _es_client.close()
        _es_client = None


async def get_es_client() -> AsyncGenerator[AsyncElasticsearch, None]:
    """Dependency to get the ES client."""
    if _es_client is None:
        await init_es_client()

    yield _es_client


def get_app_settings() -> Settings:
    """Dependency to get application settings."""
    return get_settings()


def get_document_store(
    es: AsyncElasticsearch = Depends(get_es_client),
    settings: Settings = Depends(get_app_settings),
) -> DocumentStore:
    """Dependency to get the document store."""
    return DocumentStore(es, settings)


def get_recalculator(
    store: DocumentStore = Depends(get_document_store),
    settings: Settings = Depends(get_app_settings),
) -> AggregateRecalculator:
    """Dependency to get the statistics recalculator."""
    return AggregateRecalculator(store, settings)


def get_change_notifier(
    recalculator: AggregateRecalculator = Depends(get_recalculator),
    settings: Settings = Depends(get_app_settings),
) -> ChangeNotifier:
    """Dependency to get the change notifier."""
    return ChangeNotifier(recalculator, settings)
