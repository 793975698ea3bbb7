"""Custom exception hierarchy."""

from typing import Any


class AppError(Exception):
    """Base application exception."""

    def __init__(self, message: str, code: str = "INTERNAL_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for API responses."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
            }
        }


class EmptyInputError(AppError):
    """Question text is empty after trimming."""

    def __init__(self, message: str = "Question is empty"):
        super().__init__(message, code="EMPTY_INPUT")


class IngestionError(AppError):
    """Ingestion backend could not turn an upload into a document."""

    def __init__(self, message: str, source: str, code: str = "UPLOAD_FAILED"):
        self.source = source
        super().__init__(message, code=code)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["error"]["details"] = {"source": self.source}
        return result


class AnsweringError(AppError):
    """Answering collaborator failed to produce a reply."""

    def __init__(self, message: str, answerer: str, code: str = "ANSWERING_FAILED"):
        self.answerer = answerer
        super().__init__(message, code=code)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["error"]["details"] = {"answerer": self.answerer}
        return result


class DuplicateDocumentError(AppError):
    """A document id is already present in the store."""

    def __init__(self, document_id: str):
        self.document_id = document_id
        super().__init__(f"Document already exists: {document_id}", code="DUPLICATE_DOCUMENT")


class SessionNotFoundError(AppError):
    """No session registered under the given id."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session not found: {session_id}", code="SESSION_NOT_FOUND")


class ConfigurationError(AppError):
    """Configuration error."""

    def __init__(self, message: str):
        super().__init__(message, code="CONFIG_ERROR")
