"""Protocol interfaces for the external collaborators."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from deepnotes.conversation.models import Answer, AnswerRequest
    from deepnotes.ingestion.models import FileBlob, IngestedSource


@runtime_checkable
class IngestionBackend(Protocol):
    """Storage/upload backend that turns raw uploads into document metadata."""

    async def ingest_file(self, blob: FileBlob) -> IngestedSource:
        """Ingest one uploaded file.

        Args:
            blob: Raw file content and name

        Returns:
            Metadata for the document to commit

        Raises:
            IngestionError: If the file cannot be ingested
        """
        ...

    async def ingest_link(self, url: str) -> IngestedSource:
        """Ingest a document referenced by URL.

        Args:
            url: Absolute http(s) URL, already validated

        Returns:
            Metadata for the document to commit

        Raises:
            IngestionError: If the link cannot be ingested
        """
        ...


@runtime_checkable
class Answerer(Protocol):
    """Answering collaborator that grounds a reply in selected documents."""

    @property
    def name(self) -> str:
        """Answerer identifier used in logs and errors."""
        ...

    async def answer(self, request: AnswerRequest) -> Answer:
        """Answer a question against a non-empty document selection.

        Raises:
            AnsweringError: If no answer can be produced
        """
        ...
