"""Domain exceptions for the Business Directory service."""

from typing import Optional


class DocumentStoreError(Exception):
    """Base class for document store failures."""


class StoreUnavailable(DocumentStoreError):
    """The document store could not be reached or failed transiently."""


class NotFound(DocumentStoreError):
    """A requested document does not exist."""

    def __init__(self, collection: str, document_id: str, message: Optional[str] = None):
        self.collection = collection
        self.document_id = document_id
        super().__init__(message or f"{collection} document {document_id} not found")
