"""In-memory registry of live sessions."""

import uuid
from collections.abc import Callable

from deepnotes.core.exceptions import SessionNotFoundError
from deepnotes.core.logging import get_logger
from deepnotes.session.controller import SessionController

logger = get_logger(__name__)

SessionFactory = Callable[[str], SessionController]


class SessionRegistry:
    """Maps session ids to controllers for the lifetime of the process.

    Not persistent - sessions are lost on restart.
    """

    def __init__(self, factory: SessionFactory) -> None:
        self._factory = factory
        self._sessions: dict[str, SessionController] = {}

    def create(self, session_id: str | None = None) -> SessionController:
        """Create a new session.

        Args:
            session_id: Optional explicit id; a random one is generated otherwise

        Returns:
            The new session controller
        """
        session_id = session_id or str(uuid.uuid4())
        if session_id in self._sessions:
            return self._sessions[session_id]

        controller = self._factory(session_id)
        self._sessions[session_id] = controller
        logger.info("session_created", session_id=session_id)
        return controller

    def get(self, session_id: str) -> SessionController:
        """Get a session by id.

        Raises:
            SessionNotFoundError: If no such session exists
        """
        controller = self._sessions.get(session_id)
        if controller is None:
            raise SessionNotFoundError(session_id)
        return controller

    def delete(self, session_id: str) -> bool:
        """Delete a session, cancelling any work it still has in flight."""
        controller = self._sessions.pop(session_id, None)
        if controller is None:
            return False
        controller.cancel_upload()
        controller.cancel_question()
        logger.info("session_deleted", session_id=session_id)
        return True

    def exists(self, session_id: str) -> bool:
        return session_id in self._sessions

    def list_ids(self) -> list[str]:
        """Session ids in creation order."""
        return list(self._sessions)

    def __len__(self) -> int:
        return len(self._sessions)
