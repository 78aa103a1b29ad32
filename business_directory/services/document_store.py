"""Elasticsearch-backed document store for the Business Directory service."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, AsyncIterator, Dict, List, Optional

from elasticsearch import ApiError, AsyncElasticsearch, NotFoundError, TransportError
from elasticsearch.helpers import ScanError, async_scan

from business_directory.config import Settings
from business_directory.exceptions import DocumentStoreError, NotFound, StoreUnavailable

logger = logging.getLogger(__name__)


class Collection(str, Enum):
    """Logical collections kept in the store."""

    BUSINESSES = "businesses"
    REVIEWS = "reviews"
    COMPLAINTS = "complaints"


# Field that carries each collection's document ID inside the source
ID_FIELDS = {
    Collection.BUSINESSES: "business_id",
    Collection.REVIEWS: "review_id",
    Collection.COMPLAINTS: "complaint_id",
}


@dataclass
class FindResult:
    """Documents matched by a query plus the total match count."""

    documents: List[Dict[str, Any]] = field(default_factory=list)
    total_count: int = 0


@dataclass
class AggregateResult:
    """Aggregation values computed over every match, plus the total match count."""

    total_count: int = 0
    aggregations: Dict[str, Any] = field(default_factory=dict)


def _term_value(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def build_filter_query(filters: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Translate an equality filter map into Elasticsearch query DSL.

    Args:
        filters: Mapping of field name to required value

    Returns:
        A bool/filter query of term clauses, or match_all when empty
    """
    if not filters:
        return {"match_all": {}}

    return {
        "bool": {
            "filter": [
                {"term": {name: _term_value(value)}}
                for name, value in filters.items()
            ]
        }
    }


class DocumentStore:
    """Query and partial-update primitives over the directory's indices."""

    def __init__(self, client: AsyncElasticsearch, settings: Settings):
        self.client = client
        self.settings = settings

    def index_for(self, collection: Collection) -> str:
        return self.settings.collection_indices[Collection(collection).value]

    def _translate(self, error: Exception, collection: Collection, document_id: Optional[str] = None) -> Exception:
        """Map an Elasticsearch client error onto the store's error taxonomy."""
        if isinstance(error, NotFoundError):
            return NotFound(Collection(collection).value, document_id or "?")
        if isinstance(error, TransportError):
            return StoreUnavailable(f"Document store unreachable: {error}")
        if isinstance(error, ApiError) and error.meta.status >= 500:
            return StoreUnavailable(f"Document store error {error.meta.status}: {error}")
        return DocumentStoreError(str(error))

    async def search(
        self,
        collection: Collection,
        query: Dict[str, Any],
        size: Optional[int] = None,
        from_: int = 0,
        sort: Optional[List[Dict[str, Any]]] = None,
    ) -> FindResult:
        """
        Run a raw query against a collection.

        Args:
            collection: Collection to search
            query: Elasticsearch query DSL
            size: Maximum documents to return (defaults to max_related_documents)
            from_: Offset for pagination
            sort: Optional sort clauses

        Returns:
            FindResult with the page of documents and the total match count
        """
        kwargs: Dict[str, Any] = {
            "index": self.index_for(collection),
            "query": query,
            "size": size if size is not None else self.settings.max_related_documents,
            "track_total_hits": True,
        }
        if from_:
            kwargs["from_"] = from_
        if sort:
            kwargs["sort"] = sort

        try:
            response = await self.client.search(**kwargs)
        except NotFoundError:
            # Index not created yet, nothing to match
            logger.warning(f"Index {kwargs['index']} does not exist")
            return FindResult()
        except (ApiError, TransportError) as e:
            raise self._translate(e, collection) from e

        id_field = ID_FIELDS[Collection(collection)]
        documents = []
        for hit in response["hits"]["hits"]:
            source = hit["_source"]
            source[id_field] = source.get(id_field, hit["_id"])
            documents.append(source)

        return FindResult(
            documents=documents,
            total_count=response["hits"]["total"]["value"],
        )

    async def find(
        self,
        collection: Collection,
        filters: Optional[Dict[str, Any]] = None,
        size: Optional[int] = None,
        from_: int = 0,
        sort: Optional[List[Dict[str, Any]]] = None,
    ) -> FindResult:
        """Find documents whose fields equal every value in ``filters``."""
        return await self.search(
            collection,
            build_filter_query(filters),
            size=size,
            from_=from_,
            sort=sort,
        )

    async def aggregate(
        self,
        collection: Collection,
        filters: Optional[Dict[str, Any]],
        aggregations: Dict[str, Any],
    ) -> AggregateResult:
        """
        Run aggregations over every document matching ``filters``.

        No documents are returned, so the result covers all matches
        regardless of max_related_documents.

        Args:
            collection: Collection to aggregate over
            filters: Mapping of field name to required value
            aggregations: Elasticsearch aggregation definitions

        Returns:
            AggregateResult with the exact match count and aggregation values
        """
        index = self.index_for(collection)
        try:
            response = await self.client.search(
                index=index,
                query=build_filter_query(filters),
                aggs=aggregations,
                size=0,
                track_total_hits=True,
            )
        except NotFoundError:
            logger.warning(f"Index {index} does not exist")
            return AggregateResult()
        except (ApiError, TransportError) as e:
            raise self._translate(e, collection) from e

        return AggregateResult(
            total_count=response["hits"]["total"]["value"],
            aggregations=response.get("aggregations", {}),
        )

    async def scan_ids(
        self,
        collection: Collection,
        filters: Optional[Dict[str, Any]] = None,
    ) -> AsyncIterator[str]:
        """Yield the ID of every matching document, paging with the scroll API."""
        index = self.index_for(collection)
        try:
            async for hit in async_scan(
                self.client,
                index=index,
                query={"query": build_filter_query(filters), "_source": False},
            ):
                yield hit["_id"]
        except NotFoundError:
            logger.warning(f"Index {index} does not exist")
        except ScanError as e:
            raise StoreUnavailable(f"Scroll over {index} failed: {e}") from e
        except (ApiError, TransportError) as e:
            raise self._translate(e, collection) from e

    async def get(self, collection: Collection, document_id: str) -> Dict[str, Any]:
        """Fetch a single document by ID, raising NotFound if missing."""
        try:
            response = await self.client.get(index=self.index_for(collection), id=document_id)
        except (ApiError, TransportError) as e:
            raise self._translate(e, collection, document_id) from e

        source = response["_source"]
        id_field = ID_FIELDS[Collection(collection)]
        source[id_field] = source.get(id_field, document_id)
        return source

    async def create(self, collection: Collection, document: Dict[str, Any], document_id: str) -> Dict[str, Any]:
        """Index a new document and make it visible to subsequent searches."""
        try:
            await self.client.index(
                index=self.index_for(collection),
                id=document_id,
                document=document,
                refresh=True,
            )
        except (ApiError, TransportError) as e:
            raise self._translate(e, collection, document_id) from e
        return document

    async def update(self, collection: Collection, document_id: str, partial: Dict[str, Any]) -> None:
        """
        Apply a partial update to a document.

        Nested objects in ``partial`` are merged into the stored document,
        so ``{"statistics": {"total_reviews": 3}}`` leaves the other
        statistics fields untouched. Version conflicts from concurrent
        writers are retried by Elasticsearch before failing.

        Raises:
            NotFound: The document does not exist
            StoreUnavailable: The store could not be reached
        """
        try:
            await self.client.update(
                index=self.index_for(collection),
                id=document_id,
                doc=partial,
                refresh=True,
                retry_on_conflict=3,
            )
        except (ApiError, TransportError) as e:
            raise self._translate(e, collection, document_id) from e

    async def ping(self) -> bool:
        """Check that the store answers."""
        try:
            return bool(await self.client.ping())
        except TransportError:
            return False
