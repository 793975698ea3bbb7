"""Derive document kind and display name from an upload."""

from pathlib import PurePosixPath
from urllib.parse import unquote, urlsplit

from deepnotes.documents.models import DocumentKind

LINK_FALLBACK_NAME = "Document from link"

# Anything not listed here falls back to EMAIL
EXTENSION_KINDS: dict[str, DocumentKind] = {
    ".pdf": DocumentKind.PDF,
    ".docx": DocumentKind.WORD_DOCUMENT,
    ".doc": DocumentKind.WORD_DOCUMENT,
}

CONTENT_TYPE_KINDS: dict[str, DocumentKind] = {
    "application/pdf": DocumentKind.PDF,
    "application/msword": DocumentKind.WORD_DOCUMENT,
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": (
        DocumentKind.WORD_DOCUMENT
    ),
    "message/rfc822": DocumentKind.EMAIL,
}


def infer_kind(filename: str) -> DocumentKind:
    """Map a filename suffix to a document kind.

    Examples:
        >>> infer_kind("report.pdf")
        <DocumentKind.PDF: 'pdf'>
        >>> infer_kind("memo.txt")
        <DocumentKind.EMAIL: 'email'>
    """
    suffix = PurePosixPath(filename.strip()).suffix.lower()
    return EXTENSION_KINDS.get(suffix, DocumentKind.EMAIL)


def kind_from_content_type(content_type: str | None) -> DocumentKind | None:
    """Map a MIME type (parameters ignored) to a kind, if recognised."""
    if not content_type:
        return None
    mime = content_type.split(";", 1)[0].strip().lower()
    return CONTENT_TYPE_KINDS.get(mime)


def name_from_link(url: str) -> str:
    """Use the last non-empty URL path segment as the document name."""
    path = urlsplit(url.strip()).path
    segments = [segment for segment in path.split("/") if segment]
    if not segments:
        return LINK_FALLBACK_NAME
    return unquote(segments[-1]) or LINK_FALLBACK_NAME
