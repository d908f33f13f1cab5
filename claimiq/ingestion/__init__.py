"""
Document ingestion: text extraction, chunking and the document index.
"""

from .chunker import chunk_text, DEFAULT_CHUNK_SIZE
from .document_index import DocumentIndex
from .document_processor import DocumentProcessor
from .ingestion_pipeline import IngestionPipeline, IngestionResult
from .models import RawDocument, DocumentChunk, ProcessedDocument

__all__ = [
    "chunk_text", "DEFAULT_CHUNK_SIZE", "DocumentIndex", "DocumentProcessor",
    "IngestionPipeline", "IngestionResult", "RawDocument", "DocumentChunk",
    "ProcessedDocument"
]
