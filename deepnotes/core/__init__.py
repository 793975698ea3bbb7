"""Core infrastructure module - config, protocols, exceptions, logging."""

from deepnotes.core.config import AppConfig, ConversationConfig, IngestionConfig, get_config
from deepnotes.core.exceptions import (
    AnsweringError,
    AppError,
    ConfigurationError,
    DuplicateDocumentError,
    EmptyInputError,
    IngestionError,
    SessionNotFoundError,
)

__all__ = [
    "AppConfig",
    "ConversationConfig",
    "IngestionConfig",
    "get_config",
    "AppError",
    "AnsweringError",
    "ConfigurationError",
    "DuplicateDocumentError",
    "EmptyInputError",
    "IngestionError",
    "SessionNotFoundError",
]
