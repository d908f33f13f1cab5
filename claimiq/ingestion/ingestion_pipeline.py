"""
Ingestion Pipeline for publishing uploaded policy files to the document index.
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any, List, Optional, Sequence, Union

from ..exceptions import DocumentError
from .document_index import DocumentIndex
from .document_processor import DocumentProcessor
from .models import ProcessedDocument

logger = logging.getLogger(__name__)


@dataclass
class IngestionResult:
    """Result of ingesting one file."""
    file_path: str
    success: bool
    document_id: Optional[str] = None
    chunks_added: int = 0
    word_count: int = 0
    errors: List[str] = field(default_factory=list)
    processing_time: float = 0.0


class IngestionPipeline:
    """Processes uploads one file at a time and republishes the index."""

    def __init__(self, config: Dict[str, Any], document_index: DocumentIndex,
                 document_processor: Optional[DocumentProcessor] = None):
        self.config = config
        self.document_index = document_index
        self.document_processor = document_processor or DocumentProcessor(config)

    def ingest(self, file_paths: Sequence[Union[str, Path]], replace: bool = False,
               media_types: Optional[Dict[str, str]] = None) -> List[IngestionResult]:
        """
        Ingest files in submission order.

        A failing file is reported on its own result and never rolls back the
        files processed before it. The index is republished once, holding the
        previous upload set (unless ``replace``) plus every file that succeeded.

        Args:
            file_paths: Files to ingest
            replace: Drop the previously indexed documents
            media_types: Optional declared media type per file path

        Returns:
            One IngestionResult per file, in submission order
        """
        media_types = media_types or {}
        results: List[IngestionResult] = []
        processed: List[ProcessedDocument] = []

        for file_path in file_paths:
            path = Path(file_path)
            start_time = time.perf_counter()
            try:
                document = self.document_processor.process_file(path, media_types.get(str(file_path)))
            except (DocumentError, OSError) as e:
                logger.error(f"Failed to ingest {path}: {e}")
                results.append(IngestionResult(
                    file_path=str(path),
                    success=False,
                    errors=[str(e)],
                    processing_time=time.perf_counter() - start_time
                ))
                continue

            processed.append(document)
            results.append(IngestionResult(
                file_path=str(path),
                success=True,
                document_id=document.id,
                chunks_added=len(document.chunks),
                word_count=document.word_count,
                processing_time=time.perf_counter() - start_time
            ))

        previous = () if replace else self.document_index.snapshot()
        if processed or replace:
            self.document_index.replace(list(previous) + processed)

        succeeded = sum(1 for result in results if result.success)
        logger.info(f"Ingested {succeeded}/{len(results)} files")
        return results
