"""
Fixed-size word chunking for policy documents.
"""

from typing import List

from .models import DocumentChunk

DEFAULT_CHUNK_SIZE = 500


def chunk_text(text: str, document_id: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> List[DocumentChunk]:
    """
    Split text into consecutive, non-overlapping windows of words.

    Args:
        text: Raw document text
        document_id: Id of the document the chunks belong to
        chunk_size: Number of words per chunk; the last chunk may be shorter

    Returns:
        Ordered chunks whose [start_index, end_index) ranges tile the word
        sequence of ``text.split()`` with no gaps
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")

    words = text.split()
    chunks = []

    for start in range(0, len(words), chunk_size):
        end = min(start + chunk_size, len(words))
        chunks.append(DocumentChunk(
            id=f"{document_id}-chunk-{start // chunk_size}",
            document_id=document_id,
            content=" ".join(words[start:end]),
            start_index=start,
            end_index=end
        ))

    return chunks
