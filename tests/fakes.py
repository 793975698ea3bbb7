"""Fake collaborators and helpers shared by the test suite."""

import asyncio

from deepnotes.conversation.models import Answer, AnswerRequest, Citation, Confidence
from deepnotes.core.exceptions import AnsweringError, IngestionError
from deepnotes.documents.models import DocumentSource
from deepnotes.ingestion.models import FileBlob, IngestedSource
from deepnotes.ingestion.naming import infer_kind, name_from_link


class FakeAnswerer:
    """Answerer returning a fixed graded answer, optionally held on a gate."""

    name = "fake"

    def __init__(
        self,
        confidence: Confidence = Confidence.HIGH,
        error: Exception | None = None,
    ):
        self.confidence = confidence
        self.error = error
        self.gate: asyncio.Event | None = None
        self.requests: list[AnswerRequest] = []

    async def answer(self, request: AnswerRequest) -> Answer:
        self.requests.append(request)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return Answer(
            answer_text=f"Answer to: {request.question_text}",
            citations=(Citation(label="Section 1", source_name="Test Source", page=1),),
            confidence=self.confidence,
        )


class FakeIngestionBackend:
    """Ingestion backend that accepts everything, optionally held on a gate."""

    def __init__(self, error: Exception | None = None):
        self.error = error
        self.gate: asyncio.Event | None = None
        self.files: list[FileBlob] = []
        self.links: list[str] = []

    async def _wait(self) -> None:
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error

    async def ingest_file(self, blob: FileBlob) -> IngestedSource:
        self.files.append(blob)
        await self._wait()
        return IngestedSource(
            name=blob.filename,
            kind=infer_kind(blob.filename),
            size_bytes=blob.size_bytes,
        )

    async def ingest_link(self, url: str) -> IngestedSource:
        self.links.append(url)
        await self._wait()
        return IngestedSource(
            name=name_from_link(url),
            kind=infer_kind(name_from_link(url)),
            source=DocumentSource.LINK,
            url=url,
        )


def answering_error(code: str = "ANSWERING_FAILED") -> AnsweringError:
    return AnsweringError("Answerer unavailable", answerer="fake", code=code)


def ingestion_error(code: str = "UPLOAD_FAILED") -> IngestionError:
    return IngestionError("Storage unavailable", source="test", code=code)


async def wait_until(predicate, timeout: float = 1.0) -> None:
    """Yield to the event loop until ``predicate()`` holds."""
    async with asyncio.timeout(timeout):
        while not predicate():
            await asyncio.sleep(0)


