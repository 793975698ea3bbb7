"""Common test fixtures."""

import pytest

from deepnotes.conversation.engine import ConversationEngine
from deepnotes.core.config import AppConfig, ConversationConfig, IngestionConfig
from deepnotes.core.container import Container
from deepnotes.documents.store import DocumentStore
from deepnotes.ingestion.pipeline import IngestionPipeline
from deepnotes.selection.model import SelectionModel
from deepnotes.session.controller import SessionController
from tests.fakes import FakeAnswerer, FakeIngestionBackend


@pytest.fixture
def ingestion_config() -> IngestionConfig:
    """Ingestion configuration with near-zero timings."""
    return IngestionConfig(
        backend="simulated",
        simulated_delay=0,
        tick_interval=0.001,
        tick_step=10,
        progress_cap=90,
        completion_hold=0,
        concurrency_policy="serialize",
        timeout_seconds=None,
    )


@pytest.fixture
def conversation_config() -> ConversationConfig:
    """Conversation configuration with zero delay."""
    return ConversationConfig(answerer="simulated", response_delay=0, timeout_seconds=None)


@pytest.fixture
def test_config(ingestion_config, conversation_config) -> AppConfig:
    """Create test configuration."""
    return AppConfig(
        debug=True,
        log_level="DEBUG",
        auto_select_uploads=False,
        ingestion=ingestion_config,
        conversation=conversation_config,
    )


@pytest.fixture
def fake_answerer() -> FakeAnswerer:
    """Create fake answering collaborator."""
    return FakeAnswerer()


@pytest.fixture
def fake_backend() -> FakeIngestionBackend:
    """Create fake ingestion collaborator."""
    return FakeIngestionBackend()


@pytest.fixture
def store() -> DocumentStore:
    return DocumentStore()


@pytest.fixture
def selection(store) -> SelectionModel:
    return SelectionModel(store)


@pytest.fixture
def pipeline(store, fake_backend, ingestion_config) -> IngestionPipeline:
    return IngestionPipeline(store, fake_backend, ingestion_config)


@pytest.fixture
def engine(fake_answerer, conversation_config) -> ConversationEngine:
    return ConversationEngine(fake_answerer, conversation_config)


@pytest.fixture
def controller(store, selection, pipeline, engine) -> SessionController:
    """Session controller wired around the fakes."""
    return SessionController("test-session", store, selection, pipeline, engine)


@pytest.fixture
def test_container(test_config, fake_answerer, fake_backend) -> Container:
    """Create test container with fake collaborators."""
    container = Container(config=test_config)
    return container.override(answerer=fake_answerer, ingestion_backend=fake_backend)
