"""Upload jobs, raw uploads and ingestion results."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum

from deepnotes.documents.models import Document, DocumentKind, DocumentSource


class UploadOrigin(str, Enum):
    """Entry protocol that started a job."""

    FILES = "files"
    LINK = "link"


class JobStatus(str, Enum):
    """Lifecycle of an upload job."""

    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self is not JobStatus.RUNNING


@dataclass(frozen=True)
class FileBlob:
    """Raw file content as received from the user."""

    filename: str
    content: bytes = b""
    content_type: str | None = None

    @property
    def size_bytes(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class IngestedSource:
    """What an ingestion backend learned about one upload.

    The pipeline turns each source into a Document at commit time, assigning
    the id and upload timestamp.
    """

    name: str
    kind: DocumentKind
    size_bytes: int = 0
    source: DocumentSource = DocumentSource.FILE
    url: str | None = None


@dataclass(frozen=True)
class UploadFailure:
    """Why a job did not produce documents."""

    code: str
    reason: str
    retryable: bool = True


@dataclass(frozen=True)
class ProgressEvent:
    """One notification on the upload progress side channel."""

    job_id: str
    progress: int
    status: JobStatus

    @property
    def terminal(self) -> bool:
        return self.status.is_terminal


@dataclass(frozen=True)
class UploadResult:
    """Terminal outcome of an upload, returned instead of raising."""

    job_id: str
    origin: UploadOrigin
    status: JobStatus
    documents: tuple[Document, ...] = ()
    failure: UploadFailure | None = None

    @property
    def succeeded(self) -> bool:
        return self.status is JobStatus.SUCCEEDED


def new_job_id() -> str:
    """Generate an upload job identifier."""
    return f"job-{uuid.uuid4().hex[:12]}"


@dataclass
class UploadJob:
    """Mutable state of one upload while it runs."""

    origin: UploadOrigin
    id: str = field(default_factory=new_job_id)
    progress: int = 0
    status: JobStatus = JobStatus.RUNNING
    documents: tuple[Document, ...] = ()
    failure: UploadFailure | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    finished_at: datetime | None = None

    def event(self) -> ProgressEvent:
        """Current progress as a side-channel event."""
        return ProgressEvent(job_id=self.id, progress=self.progress, status=self.status)

    def result(self) -> UploadResult:
        """Snapshot of the job as a tagged result."""
        return UploadResult(
            job_id=self.id,
            origin=self.origin,
            status=self.status,
            documents=self.documents,
            failure=self.failure,
        )
