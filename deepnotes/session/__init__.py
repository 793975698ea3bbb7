"""Session module."""

from deepnotes.session.controller import SessionController, SessionSnapshot
from deepnotes.session.registry import SessionRegistry

__all__ = ["SessionController", "SessionRegistry", "SessionSnapshot"]
