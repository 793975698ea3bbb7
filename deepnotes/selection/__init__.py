"""Document selection module."""

from deepnotes.selection.model import SelectionModel

__all__ = ["SelectionModel"]
