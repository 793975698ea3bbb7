"""In-memory document store owning document identity for one session."""

from __future__ import annotations

from collections.abc import Iterable

from deepnotes.core.exceptions import DuplicateDocumentError
from deepnotes.core.logging import get_logger
from deepnotes.documents.models import Document

logger = get_logger(__name__)


class DocumentStore:
    """Insertion-ordered mapping of document id to Document.

    Performs no I/O. Only the session controller and the ingestion pipeline
    write to it.
    """

    def __init__(self) -> None:
        self._documents: dict[str, Document] = {}

    def add(self, document: Document) -> str:
        """Commit a fully-formed document.

        Args:
            document: Document to store

        Returns:
            The document id

        Raises:
            DuplicateDocumentError: If the id is already present
        """
        if document.id in self._documents:
            raise DuplicateDocumentError(document.id)
        self._documents[document.id] = document
        logger.debug("document_added", document_id=document.id, kind=document.kind.value)
        return document.id

    def add_many(self, documents: Iterable[Document]) -> list[str]:
        """Commit a batch of documents, all or nothing.

        Every id is checked before anything is inserted, so a conflict
        leaves the store unchanged.
        """
        batch = list(documents)
        seen: set[str] = set()
        for document in batch:
            if document.id in self._documents or document.id in seen:
                raise DuplicateDocumentError(document.id)
            seen.add(document.id)

        for document in batch:
            self._documents[document.id] = document

        logger.debug("documents_added", count=len(batch))
        return [document.id for document in batch]

    def remove(self, document_id: str) -> Document | None:
        """Delete a document; absent ids are ignored."""
        removed = self._documents.pop(document_id, None)
        if removed is not None:
            logger.debug("document_removed", document_id=document_id)
        return removed

    def get(self, document_id: str) -> Document | None:
        """Get a document by id."""
        return self._documents.get(document_id)

    def list(self) -> list[Document]:
        """All documents in insertion order."""
        return list(self._documents.values())

    def ids(self) -> list[str]:
        """All document ids in insertion order."""
        return list(self._documents)

    def __contains__(self, document_id: object) -> bool:
        return document_id in self._documents

    def __len__(self) -> int:
        return len(self._documents)
