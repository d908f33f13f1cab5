"""
Keyword-based evidence retrieval over indexed policy documents.
"""

from .evidence_retriever import EvidenceRetriever, FALLBACK_CLAUSES
from .models import Clause, ClauseCategory

__all__ = ["EvidenceRetriever", "FALLBACK_CLAUSES", "Clause", "ClauseCategory"]
