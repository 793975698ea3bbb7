"""Document models for the workspace."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

SIZE_UNITS = ("B", "KB", "MB", "GB")


class DocumentKind(str, Enum):
    """Kinds of document the workspace distinguishes."""

    PDF = "pdf"
    WORD_DOCUMENT = "word-document"
    EMAIL = "email"


class DocumentSource(str, Enum):
    """How a document entered the session."""

    FILE = "file"
    LINK = "link"


def new_document_id() -> str:
    """Generate a session-unique document identifier."""
    return f"doc-{uuid.uuid4().hex}"


def format_file_size(size_bytes: int) -> str:
    """Render a byte count for display.

    Examples:
        >>> format_file_size(0)
        '0 B'
        >>> format_file_size(1536)
        '1.5 KB'
    """
    if size_bytes <= 0:
        return "0 B"
    value = float(size_bytes)
    unit = 0
    while value >= 1024 and unit < len(SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {SIZE_UNITS[unit]}"


@dataclass(frozen=True)
class Document:
    """A committed, immutable record of an ingested file or link."""

    id: str
    name: str
    kind: DocumentKind
    uploaded_at: datetime
    size_bytes: int = 0
    source: DocumentSource = DocumentSource.FILE
    url: str | None = None

    @property
    def display_size(self) -> str:
        """Human readable size; ``0 B`` for unknown sizes."""
        return format_file_size(self.size_bytes)
