"""Document records and the per-session document store."""

from deepnotes.documents.models import (
    Document,
    DocumentKind,
    DocumentSource,
    format_file_size,
    new_document_id,
)
from deepnotes.documents.store import DocumentStore

__all__ = [
    "Document",
    "DocumentKind",
    "DocumentSource",
    "DocumentStore",
    "format_file_size",
    "new_document_id",
]
