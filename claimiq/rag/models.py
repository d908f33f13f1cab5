"""
Data models for the evidence retrieval module.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any


class ClauseCategory(Enum):
    """Closed set of policy clause categories."""
    SURGICAL_COVERAGE = "surgical-coverage"
    ELIGIBILITY = "eligibility"
    WAITING_PERIOD = "waiting-period"
    GEOGRAPHIC_COVERAGE = "geographic-coverage"
    EMERGENCY_COVERAGE = "emergency-coverage"
    GENERAL = "general"


@dataclass(frozen=True)
class Clause:
    """A scored, categorized excerpt of policy text offered as evidence."""
    id: str
    document_id: str
    content: str
    category: ClauseCategory
    confidence: float
    section: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "documentId": self.document_id,
            "content": self.content,
            "category": self.category.value,
            "confidence": self.confidence,
            "section": self.section
        }
