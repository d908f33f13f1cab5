"""
Document Index holding the current set of processed policy documents.
"""

import logging
from typing import Dict, Any, Iterable, Optional, Tuple

from .models import ProcessedDocument

logger = logging.getLogger(__name__)


class DocumentIndex:
    """
    Snapshot store for uploaded documents.

    The index never patches its contents in place. Every change publishes a
    new immutable tuple, so a reader that took a snapshot keeps seeing one
    consistent document set for the whole of its invocation.
    """

    def __init__(self, documents: Optional[Iterable[ProcessedDocument]] = None):
        self._documents: Tuple[ProcessedDocument, ...] = tuple(documents or ())

    def snapshot(self) -> Tuple[ProcessedDocument, ...]:
        """Return the current document set."""
        return self._documents

    def replace(self, documents: Iterable[ProcessedDocument]) -> None:
        """Publish a new document set, replacing the previous one wholesale."""
        self._documents = tuple(documents)
        logger.info(f"Document index now holds {len(self._documents)} documents")

    def remove(self, document_id: str) -> bool:
        """Publish a snapshot without the given document."""
        remaining = tuple(doc for doc in self._documents if doc.id != document_id)
        if len(remaining) == len(self._documents):
            return False
        self.replace(remaining)
        return True

    def clear(self) -> None:
        self.replace(())

    def __len__(self) -> int:
        return len(self._documents)

    def __bool__(self) -> bool:
        return bool(self._documents)

    def get_stats(self) -> Dict[str, Any]:
        """Get index statistics."""
        documents = self._documents
        total_chunks = sum(len(doc.chunks) for doc in documents)
        total_words = sum(doc.word_count for doc in documents)

        return {
            "total_documents": len(documents),
            "total_chunks": total_chunks,
            "total_words": total_words,
            "documents": [doc.name for doc in documents],
            "avg_chunk_length": total_words / total_chunks if total_chunks > 0 else 0
        }
