"""
Evidence Retriever for finding policy clauses relevant to a structured claim.

Retrieval is a bag-of-words keyword match, not an embedding search: every
search token counts as matched when it is contained in some chunk token or
contains one.
"""

import logging
from typing import Dict, Any, List, Optional, Sequence, Tuple

from ..ingestion.models import ProcessedDocument
from ..query.models import StructuredQuery
from .models import Clause, ClauseCategory

logger = logging.getLogger(__name__)

RELEVANCE_THRESHOLD = 0.3
MAX_CLAUSES = 5

# First matching rule wins.
CATEGORY_RULES: List[Tuple[Tuple[str, ...], ClauseCategory]] = [
    (("surgery", "surgical"), ClauseCategory.SURGICAL_COVERAGE),
    (("age", "eligibility"), ClauseCategory.ELIGIBILITY),
    (("waiting", "period"), ClauseCategory.WAITING_PERIOD),
    (("geographic", "location"), ClauseCategory.GEOGRAPHIC_COVERAGE),
    (("emergency",), ClauseCategory.EMERGENCY_COVERAGE),
]

FALLBACK_CLAUSES: Tuple[Clause, ...] = (
    Clause(
        id="clause-1",
        document_id="doc-1",
        content=(
            "Knee replacement surgery is covered under the comprehensive plan for patients "
            "aged 40-70 years with a minimum policy tenure of 2 months."
        ),
        category=ClauseCategory.SURGICAL_COVERAGE,
        confidence=0.92,
        section="Section 4.2 - Surgical Procedures"
    ),
    Clause(
        id="clause-2",
        document_id="doc-2",
        content=(
            "Coverage is available across all major cities in India including Mumbai, Delhi, "
            "Bangalore, Chennai, Hyderabad, and Pune."
        ),
        category=ClauseCategory.GEOGRAPHIC_COVERAGE,
        confidence=0.85,
        section="Section 1.3 - Geographic Coverage"
    ),
)


def build_search_query(query: StructuredQuery) -> str:
    """Concatenate the present query fields in a fixed order."""
    parts = []
    if query.procedure:
        parts.append(query.procedure)
    if query.age:
        parts.append(f"age {query.age}")
    if query.location:
        parts.append(query.location)
    if query.policy_duration:
        parts.append(f"policy {query.policy_duration}")
    return " ".join(parts)


def relevance(search_query: str, content: str) -> float:
    """Fraction of search tokens found in the content, capped at 1.0."""
    query_words = search_query.lower().split()
    if not query_words:
        return 0.0

    content_words = content.lower().split()
    matches = sum(
        1 for word in query_words
        if any(word in content_word or content_word in word for content_word in content_words)
    )
    return min(matches / len(query_words), 1.0)


def categorize(content: str) -> ClauseCategory:
    """Assign a clause category from keywords in its text."""
    lower = content.lower()
    for keywords, category in CATEGORY_RULES:
        if any(keyword in lower for keyword in keywords):
            return category
    return ClauseCategory.GENERAL


class EvidenceRetriever:
    """Scores indexed chunks against a structured query."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        config = config or {}
        self.relevance_threshold = config.get("relevance_threshold", RELEVANCE_THRESHOLD)
        self.max_clauses = config.get("max_clauses", MAX_CLAUSES)

    async def search(self, query: StructuredQuery, documents: Sequence[ProcessedDocument],
                     debug: bool = False) -> List[Clause]:
        """
        Retrieve the best-scoring clauses for a query.

        Args:
            query: Structured claim attributes
            documents: One snapshot of the document index
            debug: Whether to enable debug logging

        Returns:
            At most ``max_clauses`` clauses by descending confidence, or the
            illustrative fallback pair when no documents are indexed
        """
        if not documents:
            logger.info("No documents indexed, returning fallback clauses")
            return self.fallback_clauses()

        search_query = build_search_query(query)
        logger.info(f"Searching {len(documents)} documents for: {search_query!r}")

        clauses: List[Clause] = []
        for document in documents:
            clauses.extend(self._find_relevant_clauses(search_query, document))

        clauses.sort(key=lambda clause: clause.confidence, reverse=True)
        clauses = clauses[:self.max_clauses]

        if debug:
            logger.info(f"Retrieved {len(clauses)} clauses: {[c.id for c in clauses]}")

        return clauses

    def fallback_clauses(self) -> List[Clause]:
        """Illustrative clauses returned whatever the query when no documents are loaded."""
        return list(FALLBACK_CLAUSES)

    def _find_relevant_clauses(self, search_query: str, document: ProcessedDocument) -> List[Clause]:
        """Wrap every chunk scoring above the threshold as a Clause."""
        clauses = []
        for index, chunk in enumerate(document.chunks):
            score = relevance(search_query, chunk.content)
            if score > self.relevance_threshold:
                clauses.append(Clause(
                    id=f"{document.id}-clause-{index}",
                    document_id=document.id,
                    content=chunk.content,
                    category=categorize(chunk.content),
                    confidence=score,
                    section=f"Section {index + 1} (words {chunk.start_index}-{chunk.end_index})"
                ))
        return clauses
