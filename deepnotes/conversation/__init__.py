"""Conversation layer - answerers, factory and the question engine."""

# Import answerers first to trigger registration via decorators
from deepnotes.conversation import simulated
from deepnotes.conversation.engine import GUIDANCE_MESSAGE, ConversationEngine
from deepnotes.conversation.factory import AnswererFactory
from deepnotes.conversation.models import (
    Answer,
    AnsweringFailure,
    AnswerRequest,
    Citation,
    Confidence,
    ConversationTurn,
    QueryOutcome,
    QueryStatus,
    Role,
)

__all__ = [
    "GUIDANCE_MESSAGE",
    "Answer",
    "AnswerRequest",
    "AnswererFactory",
    "AnsweringFailure",
    "Citation",
    "Confidence",
    "ConversationEngine",
    "ConversationTurn",
    "QueryOutcome",
    "QueryStatus",
    "Role",
]
