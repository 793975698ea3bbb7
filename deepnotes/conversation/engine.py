"""Question pipeline: binds a question to a selection and records the reply."""

import asyncio
from collections.abc import Iterable
from datetime import UTC, datetime

from deepnotes.conversation.models import (
    Answer,
    AnsweringFailure,
    AnswerRequest,
    Confidence,
    ConversationTurn,
    QueryOutcome,
    QueryRecord,
    QueryStatus,
    Role,
    new_turn_id,
)
from deepnotes.core.config import ConversationConfig
from deepnotes.core.exceptions import AnsweringError, EmptyInputError
from deepnotes.core.logging import get_logger
from deepnotes.core.protocols import Answerer
from deepnotes.core.validators import MAX_QUESTION_LENGTH, validate_question

logger = get_logger(__name__)

GUIDANCE_MESSAGE = (
    "I'd be happy to help you analyze documents! Please upload a PDF, Word document, "
    "or email file first, then ask me anything about its content."
)


class ConversationEngine:
    """Runs one question at a time through ``pending`` to a terminal state.

    The user turn is appended synchronously by ``submit``; the assistant turn
    is appended by the answer task before the in-flight flag clears, so a
    caller never sees ``in_flight`` false next to an unanswered user turn
    (unless the question failed or was cancelled, which is recorded in
    ``last_outcome``).
    """

    def __init__(self, answerer: Answerer, config: ConversationConfig):
        self._answerer = answerer
        self._config = config
        self._history: list[ConversationTurn] = []
        self._current: QueryRecord | None = None
        self._answer_task: asyncio.Task | None = None
        self._last: QueryRecord | None = None

    @property
    def history(self) -> tuple[ConversationTurn, ...]:
        """All turns in submission order."""
        return tuple(self._history)

    @property
    def in_flight(self) -> bool:
        """True while a question is pending."""
        return self._current is not None

    @property
    def last_outcome(self) -> QueryOutcome | None:
        """Outcome of the most recently settled question."""
        return self._last.outcome() if self._last else None

    def submit(
        self,
        question_text: str,
        selected_ids: Iterable[str],
    ) -> "asyncio.Task[QueryOutcome] | None":
        """Submit a question against a selection snapshot.

        Must be called with a running event loop. Empty questions and
        submissions while another question is pending are ignored.

        Returns:
            Task resolving to the question's outcome, or None if ignored
        """
        try:
            question = validate_question(question_text)
        except EmptyInputError:
            return None

        if self._current is not None:
            logger.warning("question_ignored_while_pending", pending_query_id=self._current.id)
            return None

        record = QueryRecord(question=question, selected_ids=tuple(selected_ids))
        self._history.append(
            ConversationTurn(
                id=new_turn_id(),
                role=Role.USER,
                text=question,
                created_at=datetime.now(UTC),
                query_id=record.id,
            )
        )
        self._current = record
        logger.info(
            "question_submitted",
            query_id=record.id,
            selected_count=len(record.selected_ids),
        )

        return asyncio.create_task(self._resolve(record))

    def cancel(self) -> bool:
        """Cancel the pending question.

        Idempotent. After this returns no assistant turn is appended for the
        cancelled question, and the task returned by ``submit`` resolves to a
        ``cancelled`` outcome instead of raising.

        Returns:
            True if a pending question was cancelled by this call
        """
        record = self._current
        if record is None:
            return False

        answer_task = self._answer_task
        self._settle(record, QueryStatus.CANCELLED)
        if answer_task is not None and not answer_task.done():
            answer_task.cancel()
        logger.info("question_cancelled", query_id=record.id)
        return True

    async def _resolve(self, record: QueryRecord) -> QueryOutcome:
        if record.status is not QueryStatus.PENDING:
            # Cancelled before the task got to run
            return record.outcome()

        self._answer_task = asyncio.create_task(self._with_timeout(record))
        try:
            answer = await self._answer_task
        except asyncio.CancelledError:
            if record.status is not QueryStatus.CANCELLED:
                # Cancelled from outside the engine
                self._settle(record, QueryStatus.CANCELLED)
                raise
        except AnsweringError as e:
            self._fail(record, AnsweringFailure(code=e.code, reason=e.message))
        except TimeoutError:
            self._fail(record, AnsweringFailure(code="TIMEOUT", reason="Answer timed out"))
        except Exception as e:
            logger.exception("answerer_error", query_id=record.id, error=str(e))
            self._fail(record, AnsweringFailure(code="ANSWERING_FAILED", reason=str(e)))
        else:
            if record.status is QueryStatus.PENDING:
                self._append_answer(record, answer)

        return record.outcome()

    async def _answer(self, record: QueryRecord) -> Answer:
        if not record.selected_ids:
            return Answer(answer_text=GUIDANCE_MESSAGE, citations=(), confidence=Confidence.NONE)

        answer = await self._answerer.answer(
            AnswerRequest(
                question_text=record.question[:MAX_QUESTION_LENGTH],
                selected_document_ids=record.selected_ids,
            )
        )
        if answer.confidence is Confidence.NONE:
            raise AnsweringError(
                "Answer for a non-empty selection must be graded",
                answerer=self._answerer.name,
                code="UNGRADED_ANSWER",
            )
        return answer

    async def _with_timeout(self, record: QueryRecord) -> Answer:
        if self._config.timeout_seconds is None:
            return await self._answer(record)
        return await asyncio.wait_for(self._answer(record), timeout=self._config.timeout_seconds)

    def _append_answer(self, record: QueryRecord, answer: Answer) -> None:
        turn = ConversationTurn(
            id=new_turn_id(),
            role=Role.ASSISTANT,
            text=answer.answer_text,
            created_at=datetime.now(UTC),
            query_id=record.id,
            citations=tuple(answer.citations),
            confidence=answer.confidence,
        )
        self._history.append(turn)
        record.assistant_turn = turn
        self._settle(record, QueryStatus.ANSWERED)
        logger.info(
            "question_answered",
            query_id=record.id,
            confidence=answer.confidence.value,
            citation_count=len(turn.citations),
        )

    def _fail(self, record: QueryRecord, failure: AnsweringFailure) -> None:
        record.failure = failure
        self._settle(record, QueryStatus.FAILED)
        logger.warning("question_failed", query_id=record.id, code=failure.code, reason=failure.reason)

    def _settle(self, record: QueryRecord, status: QueryStatus) -> None:
        record.status = status
        record.finished_at = datetime.now(UTC)
        self._last = record
        if self._current is record:
            self._current = None
            self._answer_task = None
