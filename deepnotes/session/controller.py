"""Composition root for one workspace session."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from deepnotes.conversation.engine import ConversationEngine
from deepnotes.conversation.models import ConversationTurn, QueryOutcome
from deepnotes.core.logging import get_logger
from deepnotes.documents.models import Document
from deepnotes.documents.store import DocumentStore
from deepnotes.ingestion.models import FileBlob, JobStatus, UploadJob, UploadResult
from deepnotes.ingestion.pipeline import IngestionPipeline
from deepnotes.selection.model import SelectionModel
from deepnotes.session.transcript import render_transcript

logger = get_logger(__name__)


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of everything the presentation layer renders."""

    session_id: str
    documents: tuple[Document, ...]
    selected_ids: tuple[str, ...]
    history: tuple[ConversationTurn, ...]
    upload_progress: int
    upload_status: JobStatus | None
    is_answering: bool
    last_outcome: QueryOutcome | None
    taken_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def all_selected(self) -> bool:
        return bool(self.documents) and len(self.selected_ids) == len(self.documents)


class SessionController:
    """Single external-facing API of a session.

    Wires the document store, selection, ingestion pipeline and conversation
    engine together. All mutation goes through these methods; the only rule
    enforced here is the removal transaction (store removal plus selection
    purge) and optional auto-selection of new uploads.
    """

    def __init__(
        self,
        session_id: str,
        store: DocumentStore,
        selection: SelectionModel,
        pipeline: IngestionPipeline,
        engine: ConversationEngine,
        auto_select_uploads: bool = False,
    ):
        self.session_id = session_id
        self.created_at = datetime.now(UTC)
        self._store = store
        self._selection = selection
        self._pipeline = pipeline
        self._engine = engine
        self._auto_select = auto_select_uploads

    # --- Uploads ---

    async def upload_files(self, blobs: Iterable[FileBlob]) -> UploadResult:
        """Upload files as one batch; failures come back in the result."""
        result = await self._pipeline.upload_files(blobs)
        self._after_upload(result)
        return result

    async def upload_link(self, url: str) -> UploadResult:
        """Upload a document by link; failures come back in the result."""
        result = await self._pipeline.upload_link(url)
        self._after_upload(result)
        return result

    def cancel_upload(self) -> bool:
        return self._pipeline.cancel()

    def _after_upload(self, result: UploadResult) -> None:
        if result.succeeded and self._auto_select:
            for document in result.documents:
                self._selection.select(document.id)

    # --- Documents and selection ---

    def remove_document(self, document_id: str) -> bool:
        """Remove a document and purge it from the selection in one step.

        Past conversation turns keep their citations untouched.
        """
        removed = self._store.remove(document_id)
        self._selection.purge(document_id)
        if removed is None:
            return False
        logger.info("document_removed", session_id=self.session_id, document_id=document_id)
        return True

    def toggle_document(self, document_id: str) -> bool:
        """Flip selection of one document; returns the new state."""
        return self._selection.toggle(document_id)

    def toggle_all(self) -> None:
        self._selection.toggle_all()

    # --- Questions ---

    async def ask(self, question_text: str) -> QueryOutcome | None:
        """Ask a question against the current selection.

        Returns:
            Outcome of the question, or None if it was ignored (empty text or
            another question still pending)
        """
        task = self._engine.submit(question_text, self._selection.selected_ids())
        if task is None:
            return None
        return await task

    def cancel_question(self) -> bool:
        return self._engine.cancel()

    # --- Read-only snapshots ---

    @property
    def documents(self) -> tuple[Document, ...]:
        return tuple(self._store.list())

    @property
    def selected_ids(self) -> tuple[str, ...]:
        return tuple(self._selection.selected_ids())

    def is_selected(self, document_id: str) -> bool:
        return self._selection.is_selected(document_id)

    @property
    def history(self) -> tuple[ConversationTurn, ...]:
        return self._engine.history

    @property
    def upload_progress(self) -> int:
        return self._pipeline.progress

    @property
    def active_upload(self) -> UploadJob | None:
        return self._pipeline.active_job

    @property
    def is_answering(self) -> bool:
        return self._engine.in_flight

    @property
    def last_outcome(self) -> QueryOutcome | None:
        return self._engine.last_outcome

    @property
    def pipeline(self) -> IngestionPipeline:
        """Ingestion pipeline, exposed for progress subscriptions."""
        return self._pipeline

    def transcript(self) -> str:
        """Full conversation history with citations, as Markdown."""
        return render_transcript(self.session_id, self.history)

    def snapshot(self) -> SessionSnapshot:
        """Aggregate all read-only state into one immutable value."""
        active = self._pipeline.active_job
        return SessionSnapshot(
            session_id=self.session_id,
            documents=self.documents,
            selected_ids=self.selected_ids,
            history=self.history,
            upload_progress=self._pipeline.progress,
            upload_status=active.status if active else None,
            is_answering=self._engine.in_flight,
            last_outcome=self.last_outcome,
        )
