"""API routes for the document workspace."""

import asyncio
import json

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.responses import PlainTextResponse
from sse_starlette.sse import EventSourceResponse

from deepnotes.api.dependencies import get_container_dependency, get_session
from deepnotes.api.schemas import (
    CancelResponse,
    CitationInfo,
    DocumentInfo,
    FailureInfo,
    HealthResponse,
    LinkUploadRequest,
    QuestionRequest,
    QuestionResponse,
    SelectionResponse,
    SessionCreate,
    SessionListResponse,
    SessionResponse,
    TurnInfo,
    UploadResponse,
)
from deepnotes.conversation.models import ConversationTurn
from deepnotes.core.container import Container
from deepnotes.documents.models import Document
from deepnotes.ingestion.models import FileBlob, ProgressEvent, UploadResult
from deepnotes.session.controller import SessionController

router = APIRouter()


# --- Converters ---


def _document_info(document: Document, selected: bool = False) -> DocumentInfo:
    return DocumentInfo(
        id=document.id,
        name=document.name,
        kind=document.kind.value,
        uploaded_at=document.uploaded_at,
        size_bytes=document.size_bytes,
        display_size=document.display_size,
        source=document.source.value,
        url=document.url,
        selected=selected,
    )


def _turn_info(turn: ConversationTurn) -> TurnInfo:
    return TurnInfo(
        id=turn.id,
        role=turn.role.value,
        text=turn.text,
        created_at=turn.created_at,
        query_id=turn.query_id,
        citations=[
            CitationInfo(label=c.label, source_name=c.source_name, page=c.page)
            for c in turn.citations
        ],
        confidence=turn.confidence.value if turn.confidence else None,
        confidence_label=turn.confidence.label if turn.confidence else None,
    )


def _upload_response(session: SessionController, result: UploadResult) -> UploadResponse:
    return UploadResponse(
        job_id=result.job_id,
        origin=result.origin.value,
        status=result.status.value,
        documents=[_document_info(doc, session.is_selected(doc.id)) for doc in result.documents],
        failure=(
            FailureInfo(code=result.failure.code, reason=result.failure.reason)
            if result.failure
            else None
        ),
    )


def _session_response(session: SessionController) -> SessionResponse:
    snapshot = session.snapshot()
    selected = set(snapshot.selected_ids)
    return SessionResponse(
        session_id=snapshot.session_id,
        documents=[_document_info(doc, doc.id in selected) for doc in snapshot.documents],
        selected_ids=list(snapshot.selected_ids),
        all_selected=snapshot.all_selected,
        history=[_turn_info(turn) for turn in snapshot.history],
        upload_progress=snapshot.upload_progress,
        upload_status=snapshot.upload_status.value if snapshot.upload_status else None,
        is_answering=snapshot.is_answering,
    )


def _selection_response(session: SessionController) -> SelectionResponse:
    return SelectionResponse(
        selected_ids=list(session.selected_ids),
        all_selected=session.snapshot().all_selected,
    )


def _progress_payload(event: ProgressEvent) -> str:
    return json.dumps(
        {"job_id": event.job_id, "progress": event.progress, "status": event.status.value}
    )


def _is_stale(event: ProgressEvent, last: ProgressEvent | None) -> bool:
    """True for a non-terminal event of the same job that does not move progress forward."""
    if last is None or event.terminal or event.job_id != last.job_id:
        return False
    return event.progress <= last.progress


# --- Health ---


@router.get("/health", response_model=HealthResponse)
async def health_check(
    container: Container = Depends(get_container_dependency),  # noqa: B008
) -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        ingestion_backend=container.config.ingestion.backend,
        answerer=container.answerer.name,
        active_sessions=len(container.session_registry),
    )


# --- Sessions ---


@router.post("/sessions", response_model=SessionResponse, status_code=201)
async def create_session(
    request: SessionCreate | None = None,
    container: Container = Depends(get_container_dependency),  # noqa: B008
) -> SessionResponse:
    """Create a new workspace session."""
    session_id = request.session_id if request else None
    session = container.session_registry.create(session_id)
    return _session_response(session)


@router.get("/sessions", response_model=SessionListResponse)
async def list_sessions(
    container: Container = Depends(get_container_dependency),  # noqa: B008
) -> SessionListResponse:
    """List live sessions."""
    return SessionListResponse(session_ids=container.session_registry.list_ids())


@router.get("/sessions/{session_id}", response_model=SessionResponse)
async def get_session_state(
    session: SessionController = Depends(get_session),  # noqa: B008
) -> SessionResponse:
    """Get the full state of a session."""
    return _session_response(session)


@router.delete("/sessions/{session_id}")
async def delete_session(
    session_id: str,
    container: Container = Depends(get_container_dependency),  # noqa: B008
):
    """Delete a session, cancelling any upload or question in flight."""
    if not container.session_registry.delete(session_id):
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")
    return {"status": "deleted", "session_id": session_id}


# --- Documents ---


@router.post("/sessions/{session_id}/documents/files", response_model=UploadResponse)
async def upload_files(
    files: list[UploadFile] = File(...),  # noqa: B008
    session: SessionController = Depends(get_session),  # noqa: B008
) -> UploadResponse:
    """Upload one or more files as a single batch.

    Failures are reported in the body with status ``failed``; nothing from
    a failed batch is added to the session.
    """
    blobs = [
        FileBlob(
            filename=upload.filename or "",
            content=await upload.read(),
            content_type=upload.content_type,
        )
        for upload in files
    ]
    result = await session.upload_files(blobs)
    return _upload_response(session, result)


@router.post("/sessions/{session_id}/documents/link", response_model=UploadResponse)
async def upload_link(
    request: LinkUploadRequest,
    session: SessionController = Depends(get_session),  # noqa: B008
) -> UploadResponse:
    """Upload a document by link."""
    result = await session.upload_link(request.url)
    return _upload_response(session, result)


@router.delete("/sessions/{session_id}/documents/{document_id}")
async def remove_document(
    document_id: str,
    session: SessionController = Depends(get_session),  # noqa: B008
):
    """Remove a document; it is also dropped from the selection."""
    if not session.remove_document(document_id):
        raise HTTPException(status_code=404, detail="Document not found")
    return {"status": "deleted", "document_id": document_id}


# --- Selection ---


@router.post(
    "/sessions/{session_id}/selection/{document_id}/toggle",
    response_model=SelectionResponse,
)
async def toggle_document(
    document_id: str,
    session: SessionController = Depends(get_session),  # noqa: B008
) -> SelectionResponse:
    """Flip selection of one document. Unknown IDs leave the selection unchanged."""
    session.toggle_document(document_id)
    return _selection_response(session)


@router.post("/sessions/{session_id}/selection/toggle-all", response_model=SelectionResponse)
async def toggle_all(
    session: SessionController = Depends(get_session),  # noqa: B008
) -> SelectionResponse:
    """Select every document, or clear the selection if all are selected."""
    session.toggle_all()
    return _selection_response(session)


# --- Questions ---


@router.post("/sessions/{session_id}/questions", response_model=QuestionResponse)
async def ask_question(
    request: QuestionRequest,
    session: SessionController = Depends(get_session),  # noqa: B008
) -> QuestionResponse:
    """Ask a question against the current selection.

    Empty questions, and questions sent while another is pending, are
    ignored and reported with status ``ignored``.
    """
    outcome = await session.ask(request.question)
    if outcome is None:
        return QuestionResponse(status="ignored", question=request.question)

    return QuestionResponse(
        query_id=outcome.query_id,
        status=outcome.status.value,
        question=outcome.question,
        answer=_turn_info(outcome.assistant_turn) if outcome.assistant_turn else None,
        failure=(
            FailureInfo(code=outcome.failure.code, reason=outcome.failure.reason)
            if outcome.failure
            else None
        ),
    )


@router.post("/sessions/{session_id}/questions/cancel", response_model=CancelResponse)
async def cancel_question(
    session: SessionController = Depends(get_session),  # noqa: B008
) -> CancelResponse:
    """Cancel the pending question, if any."""
    return CancelResponse(cancelled=session.cancel_question())


# --- Transcript ---


@router.get("/sessions/{session_id}/transcript", response_class=PlainTextResponse)
async def export_transcript(
    session: SessionController = Depends(get_session),  # noqa: B008
) -> PlainTextResponse:
    """Download the Q&A transcript (full history with citations) as Markdown."""
    return PlainTextResponse(
        session.transcript(),
        media_type="text/markdown",
        headers={
            "Content-Disposition": f'attachment; filename="transcript-{session.session_id}.md"'
        },
    )


# --- Upload progress ---


@router.post("/sessions/{session_id}/uploads/cancel", response_model=CancelResponse)
async def cancel_upload(
    session: SessionController = Depends(get_session),  # noqa: B008
) -> CancelResponse:
    """Cancel the running upload, if any."""
    return CancelResponse(cancelled=session.cancel_upload())


@router.get("/sessions/{session_id}/uploads/progress")
async def upload_progress(
    session: SessionController = Depends(get_session),  # noqa: B008
):
    """Stream upload progress (SSE).

    Sends the current job state first (if one is shown), then every change
    that moves progress forward until the job reaches a terminal status.
    """
    async def event_generator():
        # Snapshot and subscription happen with no await in between
        job = session.active_upload
        last = job.event() if job is not None else None
        queue: asyncio.Queue[ProgressEvent] = asyncio.Queue()
        unsubscribe = session.pipeline.subscribe(queue.put_nowait)
        try:
            if last is not None:
                yield {"event": "progress", "data": _progress_payload(last)}
                if last.terminal:
                    yield {"event": "done", "data": ""}
                    return

            while True:
                event = await queue.get()
                if _is_stale(event, last):
                    continue
                last = event
                yield {"event": "progress", "data": _progress_payload(event)}
                if event.terminal:
                    break
            yield {"event": "done", "data": ""}
        finally:
            unsubscribe()

    return EventSourceResponse(event_generator())
