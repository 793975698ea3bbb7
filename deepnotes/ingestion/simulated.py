"""Fixed-delay ingestion backend used when no storage service is configured."""

import asyncio

from deepnotes.core.config import IngestionConfig
from deepnotes.documents.models import DocumentKind, DocumentSource
from deepnotes.ingestion.factory import IngestionBackendFactory
from deepnotes.ingestion.models import FileBlob, IngestedSource
from deepnotes.ingestion.naming import infer_kind, name_from_link


@IngestionBackendFactory.register("simulated")
class SimulatedIngestionBackend:
    """Accepts every upload after ``simulated_delay`` seconds.

    Links are always recorded as PDFs of unknown size; no content-type
    sniffing happens here.
    """

    def __init__(self, config: IngestionConfig):
        self.delay = config.simulated_delay

    async def ingest_file(self, blob: FileBlob) -> IngestedSource:
        await asyncio.sleep(self.delay)
        return IngestedSource(
            name=blob.filename,
            kind=infer_kind(blob.filename),
            size_bytes=blob.size_bytes,
        )

    async def ingest_link(self, url: str) -> IngestedSource:
        await asyncio.sleep(self.delay)
        return IngestedSource(
            name=name_from_link(url),
            kind=DocumentKind.PDF,
            size_bytes=0,
            source=DocumentSource.LINK,
            url=url,
        )
