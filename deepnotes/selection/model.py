"""Multi-document selection for question answering."""

from deepnotes.core.logging import get_logger
from deepnotes.documents.store import DocumentStore

logger = get_logger(__name__)


class SelectionModel:
    """Tracks which documents are active context for the next question.

    Every selected id references a live document in the backing store.
    Bulk operations read the store at call time; nothing is cached.
    """

    def __init__(self, store: DocumentStore) -> None:
        self._store = store
        self._selected: set[str] = set()

    def toggle(self, document_id: str) -> bool:
        """Flip membership of a document.

        Unknown ids are ignored.

        Returns:
            Whether the document is selected afterwards
        """
        if document_id not in self._store:
            logger.debug("selection_toggle_ignored", document_id=document_id)
            return False

        if document_id in self._selected:
            self._selected.discard(document_id)
        else:
            self._selected.add(document_id)
        return document_id in self._selected

    def select(self, document_id: str) -> None:
        """Add a live document to the selection."""
        if document_id in self._store:
            self._selected.add(document_id)

    def select_all(self) -> None:
        """Select every document currently in the store."""
        self._selected = set(self._store.ids())

    def clear(self) -> None:
        """Deselect everything."""
        self._selected.clear()

    def toggle_all(self) -> None:
        """Clear when everything is selected, otherwise select everything."""
        total = len(self._store)
        if total and len(self._selected) == total:
            self.clear()
        else:
            self.select_all()

    def purge(self, document_id: str) -> None:
        """Drop an id that no longer references a document."""
        self._selected.discard(document_id)

    def is_selected(self, document_id: str) -> bool:
        """Check whether a document is selected."""
        return document_id in self._selected

    def selected_ids(self) -> list[str]:
        """Selected ids in document insertion order."""
        return [doc_id for doc_id in self._store.ids() if doc_id in self._selected]

    def __len__(self) -> int:
        return len(self._selected)
