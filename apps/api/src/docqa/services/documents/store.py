from __future__ import annotations

from threading import Lock

from docqa.services.documents.types import DocumentPair


class DocumentStore:
    """Current document pair; the lock never spans I/O."""

    def __init__(self, initial: DocumentPair | None = None) -> None:
        self._lock = Lock()
        self._pair = initial or DocumentPair.empty()

    def snapshot(self) -> DocumentPair:
        with self._lock:
            return self._pair

    def replace(self, pair: DocumentPair) -> DocumentPair:
        """Publish ``pair`` and return the one it replaced."""
        with self._lock:
            previous = self._pair
            self._pair = pair
        return previous
