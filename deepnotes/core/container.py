"""Dependency Injection container."""

from dataclasses import dataclass, field
from functools import cached_property

from deepnotes.core.config import AppConfig
from deepnotes.core.protocols import Answerer, IngestionBackend
from deepnotes.session.controller import SessionController
from deepnotes.session.registry import SessionRegistry


@dataclass
class Container:
    """Manual DI container.

    - Explicit dependency resolution (no framework magic)
    - Lazy initialization (created on actual use)
    - override() for test fake replacement

    Collaborators (answerer, ingestion backend) are shared across sessions;
    every session gets its own store, selection, pipeline and engine.
    """

    config: AppConfig

    # --- override slots (for testing) ---
    _answerer_override: Answerer | None = field(default=None, repr=False)
    _ingestion_backend_override: IngestionBackend | None = field(default=None, repr=False)

    # --- Provider accessors ---

    @cached_property
    def answerer(self) -> Answerer:
        """Get answering collaborator instance."""
        if self._answerer_override:
            return self._answerer_override
        from deepnotes.conversation import AnswererFactory

        return AnswererFactory.create(self.config.conversation)

    @cached_property
    def ingestion_backend(self) -> IngestionBackend:
        """Get ingestion collaborator instance."""
        if self._ingestion_backend_override:
            return self._ingestion_backend_override
        from deepnotes.ingestion import IngestionBackendFactory

        return IngestionBackendFactory.create(self.config.ingestion)

    @cached_property
    def session_registry(self) -> SessionRegistry:
        """Get the process-wide session registry."""
        return SessionRegistry(self.create_session)

    def create_session(self, session_id: str) -> SessionController:
        """Wire a fresh session around the shared collaborators."""
        from deepnotes.conversation.engine import ConversationEngine
        from deepnotes.documents.store import DocumentStore
        from deepnotes.ingestion.pipeline import IngestionPipeline
        from deepnotes.selection.model import SelectionModel

        store = DocumentStore()
        return SessionController(
            session_id=session_id,
            store=store,
            selection=SelectionModel(store),
            pipeline=IngestionPipeline(store, self.ingestion_backend, self.config.ingestion),
            engine=ConversationEngine(self.answerer, self.config.conversation),
            auto_select_uploads=self.config.auto_select_uploads,
        )

    # --- Test support ---

    def override(self, **kwargs) -> "Container":
        """Create a new container with overridden dependencies.

        Usage:
            test_container = container.override(answerer=fake_answerer)
        """
        new = Container(config=self.config)
        for key, value in kwargs.items():
            if hasattr(new, f"_{key}_override"):
                setattr(new, f"_{key}_override", value)
        return new
