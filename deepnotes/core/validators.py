"""Input validation utilities for the workspace.

Validation helpers return tuples of (is_valid, error_message) so callers can
turn a rejection into a result object without exception handling. The one
exception is ``validate_question``, whose rejection is a silent no-op for the
caller and is therefore signalled with ``EmptyInputError``.
"""

from urllib.parse import urlsplit

from deepnotes.core.exceptions import EmptyInputError

# =============================================================================
# Constants
# =============================================================================

# Upper bound on question text forwarded to the answering collaborator
MAX_QUESTION_LENGTH: int = 10000
MAX_URL_LENGTH: int = 2048
ALLOWED_URL_SCHEMES: frozenset[str] = frozenset({"http", "https"})


# =============================================================================
# Question Validation
# =============================================================================


def validate_question(text: str | None) -> str:
    """Normalize a question and reject empty input.

    Args:
        text: Raw question text as typed by the user

    Returns:
        Question with surrounding whitespace removed

    Raises:
        EmptyInputError: If nothing remains after trimming

    Examples:
        >>> validate_question("  What is the revenue?  ")
        'What is the revenue?'
    """
    question = (text or "").strip()
    if not question:
        raise EmptyInputError()
    return question


# =============================================================================
# Upload Validation
# =============================================================================


def validate_link_url(url: str | None) -> tuple[bool, str | None]:
    """Validate a link submitted for ingestion.

    Args:
        url: URL string supplied by the user

    Returns:
        Tuple of (is_valid, error_message). Returns (True, None) if valid.

    Examples:
        >>> validate_link_url("https://example.com/report.pdf")
        (True, None)

        >>> validate_link_url("ftp://example.com/report.pdf")
        (False, 'Only http and https links are supported')
    """
    if not isinstance(url, str) or not url.strip():
        return False, "Link is empty"

    url = url.strip()
    if len(url) > MAX_URL_LENGTH:
        return False, f"Link exceeds maximum length of {MAX_URL_LENGTH} characters"

    try:
        parts = urlsplit(url)
    except ValueError:
        return False, "Link is not a valid URL"

    if parts.scheme.lower() not in ALLOWED_URL_SCHEMES:
        return False, "Only http and https links are supported"
    if not parts.netloc:
        return False, "Link has no host"

    return True, None


def validate_file_upload(
    filename: str,
    size_bytes: int,
    max_size_bytes: int,
) -> tuple[bool, str | None]:
    """Validate a single uploaded file.

    Zero-byte files are accepted; a size of zero is valid document metadata.

    Args:
        filename: Original filename
        size_bytes: Length of the uploaded content
        max_size_bytes: Upper bound from configuration

    Returns:
        Tuple of (is_valid, error_message). Returns (True, None) if valid.
    """
    if not filename or not filename.strip():
        return False, "File has no name"
    if "\x00" in filename:
        return False, "Filename contains null bytes"
    if size_bytes > max_size_bytes:
        return False, f"{filename} exceeds maximum size of {max_size_bytes} bytes"
    return True, None
