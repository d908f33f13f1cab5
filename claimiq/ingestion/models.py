"""
Data models for the ingestion module.
"""

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class RawDocument:
    """Plain text of an uploaded policy document."""
    id: str
    name: str
    content: str
    size: int
    uploaded_at: str
    media_type: str = "text/plain"


@dataclass(frozen=True)
class DocumentChunk:
    """A contiguous window of words from a document."""
    id: str
    document_id: str
    content: str
    start_index: int
    end_index: int
    embedding: Optional[Tuple[float, ...]] = None

    @property
    def word_count(self) -> int:
        return self.end_index - self.start_index


@dataclass(frozen=True)
class ProcessedDocument:
    """A document together with the chunks that cover it."""
    document: RawDocument
    chunks: Tuple[DocumentChunk, ...]
    word_count: int

    @property
    def id(self) -> str:
        return self.document.id

    @property
    def name(self) -> str:
        return self.document.name
