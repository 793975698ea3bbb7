"""Ingestion layer - backends, factory and the upload pipeline."""

# Import backends first to trigger registration via decorators
from deepnotes.ingestion import http_backend, simulated
from deepnotes.ingestion.factory import IngestionBackendFactory
from deepnotes.ingestion.models import (
    FileBlob,
    IngestedSource,
    JobStatus,
    ProgressEvent,
    UploadFailure,
    UploadJob,
    UploadOrigin,
    UploadResult,
)
from deepnotes.ingestion.pipeline import IngestionPipeline

__all__ = [
    "FileBlob",
    "IngestedSource",
    "IngestionBackendFactory",
    "IngestionPipeline",
    "JobStatus",
    "ProgressEvent",
    "UploadFailure",
    "UploadJob",
    "UploadOrigin",
    "UploadResult",
]
