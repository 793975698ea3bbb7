"""Tests for package importability."""

import subprocess
import sys

import pytest

MODULES = [
    "deepnotes",
    "deepnotes.core",
    "deepnotes.core.container",
    "deepnotes.documents.store",
    "deepnotes.selection.model",
    "deepnotes.ingestion.pipeline",
    "deepnotes.ingestion.http_backend",
    "deepnotes.conversation.engine",
    "deepnotes.session",
    "deepnotes.session.transcript",
    "deepnotes.api.routes",
    "deepnotes.main",
]


class TestPackageImports:
    """Test cases for importing the package in a fresh interpreter."""

    @pytest.mark.parametrize("module", MODULES)
    def test_module_imports_cleanly(self, module):
        """Test that each module imports in a new process without errors."""
        result = subprocess.run(
            [sys.executable, "-c", f"import {module}"],
            capture_output=True,
            text=True,
            timeout=60,
        )
        assert result.returncode == 0, result.stderr

    def test_document_store_annotations_resolve(self):
        """Test that store method annotations survive the list method name."""
        from deepnotes.documents.store import DocumentStore

        store = DocumentStore()
        assert store.ids() == []
        assert DocumentStore.ids.__annotations__["return"] == "list[str]"

    def test_version(self):
        """Test that the package exposes its version."""
        import deepnotes

        assert deepnotes.__version__ == "0.1.0"
