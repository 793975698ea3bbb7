"""Upload orchestration: progress reporting, batch commit and failure handling."""

import asyncio
from collections.abc import Awaitable, Callable, Iterable
from datetime import UTC, datetime

from deepnotes.core.config import IngestionConfig
from deepnotes.core.exceptions import IngestionError
from deepnotes.core.logging import get_logger, mask_url_credentials
from deepnotes.core.protocols import IngestionBackend
from deepnotes.core.validators import validate_file_upload, validate_link_url
from deepnotes.documents.models import Document, new_document_id
from deepnotes.documents.store import DocumentStore
from deepnotes.ingestion.models import (
    FileBlob,
    IngestedSource,
    JobStatus,
    ProgressEvent,
    UploadFailure,
    UploadJob,
    UploadOrigin,
    UploadResult,
)

logger = get_logger(__name__)

ProgressListener = Callable[[ProgressEvent], None]

POLICY_SERIALIZE = "serialize"
POLICY_REJECT = "reject"


class IngestionPipeline:
    """Turns raw uploads into committed documents with observable progress.

    At most one job is active at a time. With the ``serialize`` policy a
    second upload waits for the first to finish; with ``reject`` it fails
    immediately with ``INGESTION_BUSY``. Either way only one job drives the
    progress counter.

    Failures never raise out of ``upload_files``/``upload_link``; they come
    back as an ``UploadResult`` with status ``failed``.
    """

    def __init__(
        self,
        store: DocumentStore,
        backend: IngestionBackend,
        config: IngestionConfig,
    ):
        self._store = store
        self._backend = backend
        self._config = config
        self._lock = asyncio.Lock()
        self._active: UploadJob | None = None
        self._operation: asyncio.Task | None = None
        self._release_handle: asyncio.TimerHandle | None = None
        self._listeners: list[ProgressListener] = []

    # --- Read-only state ---

    @property
    def active_job(self) -> UploadJob | None:
        """Job shown by the upload indicator, if any."""
        return self._active

    @property
    def progress(self) -> int:
        """Progress of the active job; 0 when nothing is shown."""
        return self._active.progress if self._active else 0

    @property
    def is_running(self) -> bool:
        return self._active is not None and self._active.status is JobStatus.RUNNING

    # --- Progress side channel ---

    def subscribe(self, listener: ProgressListener) -> Callable[[], None]:
        """Register a progress listener.

        Returns:
            Callable that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # --- Entry points ---

    async def upload_files(self, blobs: Iterable[FileBlob]) -> UploadResult:
        """Ingest one or more files as a single all-or-nothing batch."""
        batch = list(blobs)
        if not batch:
            return self._reject(UploadOrigin.FILES, "EMPTY_UPLOAD", "No files were provided")

        for blob in batch:
            valid, error = validate_file_upload(
                blob.filename, blob.size_bytes, self._config.max_file_size_bytes
            )
            if not valid:
                code = (
                    "FILE_TOO_LARGE"
                    if blob.size_bytes > self._config.max_file_size_bytes
                    else "INVALID_FILE"
                )
                return self._reject(UploadOrigin.FILES, code, error or "Invalid file")

        return await self._run(
            UploadOrigin.FILES,
            lambda: self._ingest_files(batch),
            filenames=[blob.filename for blob in batch],
        )

    async def upload_link(self, url: str) -> UploadResult:
        """Ingest a document referenced by URL."""
        valid, error = validate_link_url(url)
        if not valid:
            return self._reject(UploadOrigin.LINK, "INVALID_LINK", error or "Invalid link")

        url = url.strip()
        return await self._run(
            UploadOrigin.LINK,
            lambda: self._ingest_link(url),
            url=mask_url_credentials(url),
        )

    def cancel(self) -> bool:
        """Cancel the running job.

        Idempotent. Once this returns, the job is ``cancelled`` and will not
        commit any document.

        Returns:
            True if a running job was cancelled by this call
        """
        job = self._active
        if job is None or job.status is not JobStatus.RUNNING:
            return False

        self._finish(job, JobStatus.CANCELLED)
        if self._operation is not None:
            self._operation.cancel()
        logger.info("upload_cancelled", job_id=job.id)
        return True

    # --- Job execution ---

    async def _run(
        self,
        origin: UploadOrigin,
        operation: Callable[[], Awaitable[list[IngestedSource]]],
        **log_context: object,
    ) -> UploadResult:
        if self._config.concurrency_policy == POLICY_REJECT and self._lock.locked():
            return self._reject(origin, "INGESTION_BUSY", "Another upload is still running")

        async with self._lock:
            job = UploadJob(origin=origin)
            self._activate(job)
            logger.info("upload_started", job_id=job.id, origin=origin.value, **log_context)

            ticker = asyncio.create_task(self._tick(job))
            self._operation = asyncio.create_task(self._with_timeout(operation))
            try:
                sources = await self._operation
            except asyncio.CancelledError:
                if job.status is not JobStatus.CANCELLED:
                    # The caller was cancelled rather than the job
                    self._finish(job, JobStatus.CANCELLED)
                    raise
            except IngestionError as e:
                self._fail(job, UploadFailure(code=e.code, reason=e.message))
            except TimeoutError:
                self._fail(job, UploadFailure(code="TIMEOUT", reason="Upload timed out"))
            except Exception as e:
                logger.exception("upload_backend_error", job_id=job.id, error=str(e))
                self._fail(job, UploadFailure(code="UPLOAD_FAILED", reason=str(e)))
            else:
                if job.status is JobStatus.RUNNING:
                    self._commit(job, sources)
            finally:
                ticker.cancel()
                self._operation = None

            return job.result()

    async def _with_timeout(
        self, operation: Callable[[], Awaitable[list[IngestedSource]]]
    ) -> list[IngestedSource]:
        if self._config.timeout_seconds is None:
            return await operation()
        return await asyncio.wait_for(operation(), timeout=self._config.timeout_seconds)

    async def _ingest_files(self, blobs: list[FileBlob]) -> list[IngestedSource]:
        sources = []
        for blob in blobs:
            sources.append(await self._backend.ingest_file(blob))
        return sources

    async def _ingest_link(self, url: str) -> list[IngestedSource]:
        return [await self._backend.ingest_link(url)]

    async def _tick(self, job: UploadJob) -> None:
        """Advance progress in steps while the operation is outstanding."""
        cap = self._config.progress_cap
        while job.status is JobStatus.RUNNING and job.progress < cap:
            await asyncio.sleep(self._config.tick_interval)
            self._advance(job, min(job.progress + self._config.tick_step, cap))

    # --- State transitions ---

    def _activate(self, job: UploadJob) -> None:
        if self._release_handle is not None:
            self._release_handle.cancel()
            self._release_handle = None
        self._active = job
        self._notify(job)

    def _advance(self, job: UploadJob, value: int) -> None:
        if job.status is not JobStatus.RUNNING or value <= job.progress:
            return
        job.progress = value
        self._notify(job)

    def _commit(self, job: UploadJob, sources: list[IngestedSource]) -> None:
        uploaded_at = datetime.now(UTC)
        documents = tuple(
            Document(
                id=new_document_id(),
                name=source.name,
                kind=source.kind,
                uploaded_at=uploaded_at,
                size_bytes=source.size_bytes,
                source=source.source,
                url=mask_url_credentials(source.url) if source.url else None,
            )
            for source in sources
        )
        self._store.add_many(documents)

        job.documents = documents
        job.status = JobStatus.SUCCEEDED
        job.progress = 100
        job.finished_at = datetime.now(UTC)
        self._notify(job)
        logger.info(
            "upload_succeeded",
            job_id=job.id,
            document_ids=[doc.id for doc in documents],
        )
        self._schedule_release(job)

    def _fail(self, job: UploadJob, failure: UploadFailure) -> None:
        job.failure = failure
        self._finish(job, JobStatus.FAILED)
        logger.warning("upload_failed", job_id=job.id, code=failure.code, reason=failure.reason)

    def _finish(self, job: UploadJob, status: JobStatus) -> None:
        job.status = status
        job.progress = 0
        job.finished_at = datetime.now(UTC)
        self._notify(job)

    def _schedule_release(self, job: UploadJob) -> None:
        hold = self._config.completion_hold
        if hold <= 0:
            self._release(job)
            return
        loop = asyncio.get_running_loop()
        self._release_handle = loop.call_later(hold, self._release, job)

    def _release(self, job: UploadJob) -> None:
        """Clear the indicator once the success hold has elapsed."""
        if self._active is job:
            self._active = None
            self._release_handle = None

    def _reject(self, origin: UploadOrigin, code: str, reason: str) -> UploadResult:
        """Fail an upload before it becomes the active job."""
        job = UploadJob(
            origin=origin,
            status=JobStatus.FAILED,
            failure=UploadFailure(code=code, reason=reason),
            finished_at=datetime.now(UTC),
        )
        logger.warning("upload_rejected", job_id=job.id, code=code, reason=reason)
        return job.result()

    def _notify(self, job: UploadJob) -> None:
        event = job.event()
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("progress_listener_failed", job_id=job.id)
