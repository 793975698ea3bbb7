"""DeepNotes workspace: document question answering with cited, graded replies."""

__version__ = "0.1.0"
