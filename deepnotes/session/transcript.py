"""Markdown export of a session's question and answer history."""

from collections.abc import Iterable

from deepnotes.conversation.models import ConversationTurn, Role

NO_ANSWER_TEXT = "_No answer recorded._"


def render_transcript(session_id: str, history: Iterable[ConversationTurn]) -> str:
    """Render the conversation as a Markdown Q&A transcript.

    Turns are grouped by question. Each question is followed by its reply,
    the confidence badge when the reply was graded, and the cited sources.
    Questions that failed or were cancelled show a placeholder instead of a
    reply.

    Args:
        session_id: Session the history belongs to
        history: Conversation turns in chronological order

    Returns:
        Markdown document
    """
    questions: list[ConversationTurn] = []
    replies: dict[str, ConversationTurn] = {}
    for turn in history:
        if turn.role is Role.USER:
            questions.append(turn)
        else:
            replies[turn.query_id] = turn

    lines = ["# Q&A Transcript", "", f"Session: `{session_id}`", ""]
    if not questions:
        lines.append("_No questions asked yet._")
        return "\n".join(lines) + "\n"

    for number, question in enumerate(questions, start=1):
        lines.append(f"## Q{number}: {question.text}")
        lines.append(f"_Asked {question.created_at.isoformat(timespec='seconds')}_")
        lines.append("")

        reply = replies.get(question.query_id)
        if reply is None:
            lines.extend([NO_ANSWER_TEXT, ""])
            continue

        lines.extend([reply.text, ""])
        if reply.confidence is not None and reply.confidence.label:
            lines.extend([f"**{reply.confidence.label}**", ""])
        if reply.citations:
            lines.append("Sources:")
            for citation in reply.citations:
                page = f", p. {citation.page}" if citation.page is not None else ""
                lines.append(f"- {citation.label} ({citation.source_name}{page})")
            lines.append("")

    return "\n".join(lines)
