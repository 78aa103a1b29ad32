"""Shared pytest fixtures.

Provides:
- Settings with default index names
- An in-memory document store with the same contract as DocumentStore
- Seed helpers for businesses, reviews and complaints
"""
import copy
from typing import Any, Dict, Optional

import pytest

from business_directory.config import Settings
from business_directory.exceptions import NotFound
from business_directory.services.document_store import ID_FIELDS, AggregateResult, Collection, FindResult


def _deep_merge(target: dict, partial: dict) -> None:
    for key, value in partial.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            _deep_merge(target[key], value)
        else:
            target[key] = copy.deepcopy(value)


class InMemoryDocumentStore:
    """Dict-backed stand-in for DocumentStore used by tests."""

    def __init__(self, max_related_documents: int = 10000):
        self.collections: Dict[str, Dict[str, dict]] = {c.value: {} for c in Collection}
        self.update_calls = []
        self.fail_with: Optional[Exception] = None
        self.available = True
        self.max_related_documents = max_related_documents

    def _docs(self, collection) -> Dict[str, dict]:
        return self.collections[Collection(collection).value]

    def _check(self):
        if self.fail_with is not None:
            raise self.fail_with

    async def search(self, collection, query, size=None, from_=0, sort=None) -> FindResult:
        self._check()
        if "match_all" in query:
            filters = {}
        else:
            clauses = query["bool"].get("filter", []) + query["bool"].get("must", [])
            filters = {}
            for clause in clauses:
                if "term" not in clause:
                    raise ValueError(f"Unsupported clause in test store: {clause}")
                filters.update(clause["term"])
        return await self.find(collection, filters, size=size, from_=from_, sort=sort)

    def _matches(self, collection, filters) -> list:
        filters = filters or {}
        return [
            copy.deepcopy(doc)
            for doc in self._docs(collection).values()
            if all(doc.get(name) == value for name, value in filters.items())
        ]

    async def find(self, collection, filters=None, size=None, from_=0, sort=None) -> FindResult:
        self._check()
        matches = self._matches(collection, filters)
        size = self.max_related_documents if size is None else size
        return FindResult(documents=matches[from_:from_ + size], total_count=len(matches))

    async def aggregate(self, collection, filters, aggregations) -> AggregateResult:
        self._check()
        matches = self._matches(collection, filters)
        values = {}
        for name, definition in aggregations.items():
            (kind, params), = definition.items()
            present = [doc[params["field"]] for doc in matches if doc.get(params["field"]) is not None]
            if kind == "avg":
                values[name] = {"value": sum(present) / len(present) if present else None}
            elif kind == "value_count":
                values[name] = {"value": len(present)}
            else:
                raise ValueError(f"Unsupported aggregation in test store: {kind}")
        return AggregateResult(total_count=len(matches), aggregations=values)

    async def scan_ids(self, collection, filters=None):
        self._check()
        for doc in self._matches(collection, filters):
            yield doc[ID_FIELDS[Collection(collection)]]

    async def get(self, collection, document_id: str) -> Dict[str, Any]:
        self._check()
        docs = self._docs(collection)
        if document_id not in docs:
            raise NotFound(Collection(collection).value, document_id)
        return copy.deepcopy(docs[document_id])

    async def create(self, collection, document: Dict[str, Any], document_id: str) -> Dict[str, Any]:
        self._check()
        self._docs(collection)[document_id] = copy.deepcopy(document)
        return document

    async def update(self, collection, document_id: str, partial: Dict[str, Any]) -> None:
        self._check()
        docs = self._docs(collection)
        if document_id not in docs:
            raise NotFound(Collection(collection).value, document_id)
        self.update_calls.append((Collection(collection).value, document_id, copy.deepcopy(partial)))
        _deep_merge(docs[document_id], partial)

    async def ping(self) -> bool:
        return self.available

    # Seed helpers, bypassing triggers

    def add_business(self, business_id: str, name: str = "Acme Roofing", **fields) -> dict:
        doc = {
            "business_id": business_id,
            "name": name,
            "status": "published",
            "statistics": {
                "average_rating": 0.0,
                "total_reviews": 0,
                "total_complaints": 0,
                "view_count": 0,
            },
            **fields,
        }
        self._docs(Collection.BUSINESSES)[business_id] = doc
        return doc

    def add_review(self, review_id: str, business_id: str, rating: int, status: str = "approved") -> dict:
        doc = {
            ID_FIELDS[Collection.REVIEWS]: review_id,
            "business_id": business_id,
            "user_id": "user_1",
            "rating": rating,
            "review_text": "Solid work, would hire again.",
            "terms_accepted": True,
            "status": status,
        }
        self._docs(Collection.REVIEWS)[review_id] = doc
        return doc

    def add_complaint(
        self,
        complaint_id: str,
        business_id: str,
        visible_to_public: bool = True,
        status: str = "submitted",
    ) -> dict:
        doc = {
            ID_FIELDS[Collection.COMPLAINTS]: complaint_id,
            "business_id": business_id,
            "submitted_by": "user_2",
            "complaint_type": "billing",
            "complaint_summary": "Charged twice",
            "complaint_details": "I was billed twice for the same inspection and nobody answers the phone at all.",
            "status": status,
            "visible_to_public": visible_to_public,
        }
        self._docs(Collection.COMPLAINTS)[complaint_id] = doc
        return doc

    def statistics(self, business_id: str) -> dict:
        return self._docs(Collection.BUSINESSES)[business_id]["statistics"]


@pytest.fixture
def settings():
    """Settings with default index names and no recompute-on-exit."""
    return Settings(recompute_on_review_exit=False)


@pytest.fixture
def store():
    """Empty in-memory document store."""
    return InMemoryDocumentStore()
