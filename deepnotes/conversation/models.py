"""Conversation turns, answers and per-question records."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class Confidence(str, Enum):
    """Coarse reliability grade attached to an assistant reply.

    ``NONE`` means the reply was not graded because no documents were
    selected when the question was asked.
    """

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    NONE = "none"

    @property
    def label(self) -> str:
        """Badge text, e.g. ``High Confidence``; empty when ungraded."""
        if self is Confidence.NONE:
            return ""
        return f"{self.value.capitalize()} Confidence"


class QueryStatus(str, Enum):
    """Lifecycle of one submitted question."""

    PENDING = "pending"
    ANSWERED = "answered"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class Citation:
    """Pointer from a reply back to a source location."""

    label: str
    source_name: str
    page: int | None = None


@dataclass(frozen=True)
class ConversationTurn:
    """One message in the append-only history."""

    id: str
    role: Role
    text: str
    created_at: datetime
    query_id: str
    citations: tuple[Citation, ...] = ()
    confidence: Confidence | None = None


@dataclass(frozen=True)
class AnswerRequest:
    """Request sent to the answering collaborator."""

    question_text: str
    selected_document_ids: tuple[str, ...]


@dataclass(frozen=True)
class Answer:
    """Reply produced by the answering collaborator."""

    answer_text: str
    citations: tuple[Citation, ...]
    confidence: Confidence


@dataclass(frozen=True)
class AnsweringFailure:
    """Why a question ended without an assistant turn."""

    code: str
    reason: str


@dataclass(frozen=True)
class QueryOutcome:
    """Terminal (or current) state of a question, returned instead of raising."""

    query_id: str
    question: str
    status: QueryStatus
    assistant_turn: ConversationTurn | None = None
    failure: AnsweringFailure | None = None

    @property
    def answered(self) -> bool:
        return self.status is QueryStatus.ANSWERED


def new_turn_id() -> str:
    return f"turn-{uuid.uuid4().hex[:12]}"


def new_query_id() -> str:
    return f"query-{uuid.uuid4().hex[:12]}"


@dataclass
class QueryRecord:
    """Mutable bookkeeping for the question currently in flight."""

    question: str
    selected_ids: tuple[str, ...]
    id: str = field(default_factory=new_query_id)
    status: QueryStatus = QueryStatus.PENDING
    assistant_turn: ConversationTurn | None = None
    failure: AnsweringFailure | None = None
    submitted_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    finished_at: datetime | None = None

    def outcome(self) -> QueryOutcome:
        return QueryOutcome(
            query_id=self.id,
            question=self.question,
            status=self.status,
            assistant_turn=self.assistant_turn,
            failure=self.failure,
        )
