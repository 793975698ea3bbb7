"""Fixed-delay, fixed-content answerer standing in for a retrieval backend."""

import asyncio

from deepnotes.conversation.factory import AnswererFactory
from deepnotes.conversation.models import Answer, AnswerRequest, Citation, Confidence
from deepnotes.core.config import ConversationConfig

REFERENCE_CITATIONS: tuple[Citation, ...] = (
    Citation(label="Section 2.1", source_name="Document Analysis", page=15),
    Citation(label="Executive Summary", source_name="Key Findings", page=3),
)


@AnswererFactory.register("simulated")
class SimulatedAnswerer:
    """Echoes the question back with placeholder citations and high confidence."""

    name = "simulated"

    def __init__(self, config: ConversationConfig):
        self.delay = config.response_delay

    async def answer(self, request: AnswerRequest) -> Answer:
        await asyncio.sleep(self.delay)

        count = len(request.selected_document_ids)
        scope = "the uploaded document" if count == 1 else f"the {count} selected documents"
        text = (
            f'Based on {scope}, here\'s what I found regarding "{request.question_text}". '
            "The document contains relevant information that directly addresses your "
            "question with specific details and context."
        )
        return Answer(answer_text=text, citations=REFERENCE_CITATIONS, confidence=Confidence.HIGH)
