"""Request and response schemas for the API."""

from datetime import datetime

from pydantic import BaseModel, Field

# --- Request Models ---


class SessionCreate(BaseModel):
    """Session creation request."""

    session_id: str | None = Field(default=None, description="Optional explicit session ID")


class LinkUploadRequest(BaseModel):
    """Upload a document referenced by URL."""

    url: str = Field(..., description="http(s) URL of the document")


class QuestionRequest(BaseModel):
    """Question against the current selection."""

    question: str = Field(..., description="Question text")


# --- Response Models ---


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Service status")
    ingestion_backend: str = Field(..., description="Active ingestion backend")
    answerer: str = Field(..., description="Active answering collaborator")
    active_sessions: int = Field(..., description="Number of live sessions")


class DocumentInfo(BaseModel):
    """Document information for listing."""

    id: str = Field(..., description="Document identifier")
    name: str = Field(..., description="Display name")
    kind: str = Field(..., description="Document kind (pdf, word-document, email)")
    uploaded_at: datetime = Field(..., description="When the document was committed")
    size_bytes: int = Field(..., description="Size in bytes, 0 when unknown")
    display_size: str = Field(..., description="Human readable size")
    source: str = Field(..., description="How the document entered the session (file, link)")
    url: str | None = Field(default=None, description="Source URL for link uploads")
    selected: bool = Field(default=False, description="Whether the document is selected")


class CitationInfo(BaseModel):
    """Citation attached to an assistant reply."""

    label: str = Field(..., description="Citation label, e.g. section name")
    source_name: str = Field(..., description="Cited source")
    page: int | None = Field(default=None, description="Page number when known")


class TurnInfo(BaseModel):
    """One conversation turn."""

    id: str = Field(..., description="Turn identifier")
    role: str = Field(..., description="user or assistant")
    text: str = Field(..., description="Turn text")
    created_at: datetime = Field(..., description="Turn timestamp")
    query_id: str = Field(..., description="Question this turn belongs to")
    citations: list[CitationInfo] = Field(default_factory=list, description="Citations")
    confidence: str | None = Field(default=None, description="Confidence grade of the reply")
    confidence_label: str | None = Field(default=None, description="Badge text for the grade")


class FailureInfo(BaseModel):
    """Reason an operation ended without a result."""

    code: str = Field(..., description="Machine readable failure code")
    reason: str = Field(..., description="Human readable reason")


class UploadResponse(BaseModel):
    """Result of an upload request."""

    job_id: str = Field(..., description="Upload job identifier")
    origin: str = Field(..., description="files or link")
    status: str = Field(..., description="Terminal job status")
    documents: list[DocumentInfo] = Field(default_factory=list, description="Committed documents")
    failure: FailureInfo | None = Field(default=None, description="Failure details")


class QuestionResponse(BaseModel):
    """Outcome of a question."""

    query_id: str | None = Field(default=None, description="Question identifier")
    status: str = Field(..., description="answered, failed, cancelled or ignored")
    question: str = Field(..., description="Submitted question")
    answer: TurnInfo | None = Field(default=None, description="Assistant turn when answered")
    failure: FailureInfo | None = Field(default=None, description="Failure details")


class SelectionResponse(BaseModel):
    """Selection after a toggle."""

    selected_ids: list[str] = Field(..., description="Selected document IDs in upload order")
    all_selected: bool = Field(..., description="Whether every document is selected")


class CancelResponse(BaseModel):
    """Result of a cancel request."""

    cancelled: bool = Field(..., description="Whether something was cancelled")


class SessionResponse(BaseModel):
    """Full session state."""

    session_id: str = Field(..., description="Session identifier")
    documents: list[DocumentInfo] = Field(default_factory=list, description="Documents in upload order")
    selected_ids: list[str] = Field(default_factory=list, description="Selected document IDs")
    all_selected: bool = Field(default=False, description="Whether every document is selected")
    history: list[TurnInfo] = Field(default_factory=list, description="Conversation history")
    upload_progress: int = Field(default=0, description="Upload indicator progress (0-100)")
    upload_status: str | None = Field(default=None, description="Status of the shown upload job")
    is_answering: bool = Field(default=False, description="Whether a question is pending")


class SessionListResponse(BaseModel):
    """List of live sessions."""

    session_ids: list[str] = Field(..., description="Session IDs in creation order")
