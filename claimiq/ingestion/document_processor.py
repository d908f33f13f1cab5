"""
Document Processor for extracting text from uploaded policy files.
"""

import logging
import mimetypes
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Any, Optional

import pypdf
from docx import Document

from ..exceptions import DocumentExtractionError, UnsupportedDocumentError
from .chunker import DEFAULT_CHUNK_SIZE, chunk_text
from .models import ProcessedDocument, RawDocument

logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"
DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
TEXT_MEDIA_TYPE = "text/plain"

SUPPORTED_MEDIA_TYPES = (PDF_MEDIA_TYPE, DOCX_MEDIA_TYPE, TEXT_MEDIA_TYPE)


def guess_media_type(file_path: Path) -> str:
    """Guess a media type from the file name, defaulting to octet-stream."""
    if file_path.suffix.lower() == ".docx":
        return DOCX_MEDIA_TYPE
    media_type, _ = mimetypes.guess_type(file_path.name)
    return media_type or "application/octet-stream"


class DocumentProcessor:
    """Turns files into chunked ProcessedDocuments."""

    def __init__(self, config: Dict[str, Any]):
        self.config = config
        self.chunk_size = config.get("chunk_size", DEFAULT_CHUNK_SIZE)

    def process_file(self, file_path: Path, media_type: Optional[str] = None) -> ProcessedDocument:
        """
        Extract, wrap and chunk a single file.

        Args:
            file_path: Path to the file to process
            media_type: Declared media type; guessed from the name when omitted

        Returns:
            ProcessedDocument ready for the document index

        Raises:
            UnsupportedDocumentError: The media type has no extractor
            DocumentExtractionError: The file could not be read
        """
        file_path = Path(file_path)
        media_type = media_type or guess_media_type(file_path)

        content = self.extract_content(file_path, media_type)
        document = RawDocument(
            id=f"doc-{uuid.uuid4().hex[:12]}",
            name=file_path.name,
            content=content,
            size=file_path.stat().st_size,
            uploaded_at=datetime.now(timezone.utc).isoformat(),
            media_type=media_type
        )
        return self.process_document(document)

    def process_document(self, document: RawDocument) -> ProcessedDocument:
        """Chunk an already extracted document."""
        chunks = chunk_text(document.content, document.id, self.chunk_size)
        logger.info(f"Processed {document.name}: {len(chunks)} chunks")
        return ProcessedDocument(
            document=document,
            chunks=tuple(chunks),
            word_count=len(document.content.split())
        )

    def extract_content(self, file_path: Path, media_type: str) -> str:
        """Extract plain text from a file based on its media type."""
        if media_type == PDF_MEDIA_TYPE:
            extractor = self._extract_pdf_content
        elif media_type == DOCX_MEDIA_TYPE:
            extractor = self._extract_docx_content
        elif media_type == TEXT_MEDIA_TYPE:
            extractor = self._extract_text_content
        else:
            raise UnsupportedDocumentError(file_path.name, media_type)

        try:
            return extractor(file_path)
        except Exception as e:
            logger.error(f"Failed to extract content from {file_path}: {e}")
            raise DocumentExtractionError(file_path.name, f"Failed to extract text: {e}") from e

    def _extract_pdf_content(self, file_path: Path) -> str:
        """Extract text content from PDF file."""
        with open(file_path, 'rb') as file:
            pdf_reader = pypdf.PdfReader(file)
            return "\n".join(page.extract_text() or "" for page in pdf_reader.pages)

    def _extract_docx_content(self, file_path: Path) -> str:
        """Extract text content from DOCX file."""
        doc = Document(str(file_path))
        return "\n".join(paragraph.text for paragraph in doc.paragraphs)

    def _extract_text_content(self, file_path: Path) -> str:
        """Extract content from text file."""
        with open(file_path, 'r', encoding='utf-8') as file:
            return file.read()
