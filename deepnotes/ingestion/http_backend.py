"""Ingestion backend that inspects links over HTTP before accepting them."""

import httpx

from deepnotes.core.config import IngestionConfig
from deepnotes.core.exceptions import IngestionError
from deepnotes.core.logging import get_logger, mask_url_credentials
from deepnotes.documents.models import DocumentKind, DocumentSource
from deepnotes.ingestion.factory import IngestionBackendFactory
from deepnotes.ingestion.models import FileBlob, IngestedSource
from deepnotes.ingestion.naming import infer_kind, kind_from_content_type, name_from_link

logger = get_logger(__name__)

# Servers that refuse HEAD get a streamed GET instead; the body is never read
HEAD_UNSUPPORTED = {405, 501}


@IngestionBackendFactory.register("http")
class HttpIngestionBackend:
    """Sniffs link content type and size from response headers.

    Files are accepted as-is using the filename rules. Links whose content
    type is not recognised are recorded as PDFs.
    """

    def __init__(self, config: IngestionConfig, client: httpx.AsyncClient | None = None):
        self.timeout = config.http_timeout
        self._client = client

    async def ingest_file(self, blob: FileBlob) -> IngestedSource:
        return IngestedSource(
            name=blob.filename,
            kind=infer_kind(blob.filename),
            size_bytes=blob.size_bytes,
        )

    async def ingest_link(self, url: str) -> IngestedSource:
        safe_url = mask_url_credentials(url)
        try:
            headers = await self._fetch_headers(url)
        except httpx.HTTPStatusError as e:
            logger.warning("link_rejected", url=safe_url, status_code=e.response.status_code)
            raise IngestionError(
                f"Link returned HTTP {e.response.status_code}",
                source=safe_url,
                code="LINK_UNREACHABLE",
            ) from e
        except httpx.HTTPError as e:
            logger.warning("link_unreachable", url=safe_url, error=str(e))
            raise IngestionError(
                f"Could not reach link: {e.__class__.__name__}",
                source=safe_url,
                code="LINK_UNREACHABLE",
            ) from e

        kind = kind_from_content_type(headers.get("content-type")) or DocumentKind.PDF
        length = headers.get("content-length", "")
        size_bytes = int(length) if length.isdigit() else 0

        logger.debug("link_inspected", url=safe_url, kind=kind.value, size_bytes=size_bytes)
        return IngestedSource(
            name=name_from_link(url),
            kind=kind,
            size_bytes=size_bytes,
            source=DocumentSource.LINK,
            url=url,
        )

    async def _fetch_headers(self, url: str) -> httpx.Headers:
        """Return response headers for a URL, preferring HEAD."""
        if self._client is not None:
            return await self._request_headers(self._client, url)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await self._request_headers(client, url)

    async def _request_headers(self, client: httpx.AsyncClient, url: str) -> httpx.Headers:
        response = await client.head(url, follow_redirects=True)
        if response.status_code in HEAD_UNSUPPORTED:
            async with client.stream("GET", url, follow_redirects=True) as streamed:
                streamed.raise_for_status()
                return streamed.headers
        response.raise_for_status()
        return response.headers
