"""
Data models for the decision module.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any, Optional, Tuple

from ..rag.models import Clause

NO_AMOUNT_TEXT = "No coverage amount"


class Outcome(Enum):
    """Possible claim outcomes."""
    APPROVED = "approved"
    REJECTED = "rejected"
    PENDING = "pending"


def format_inr(amount: Optional[float]) -> str:
    """Render an amount with Indian digit grouping, e.g. 500000 -> ₹5,00,000."""
    if not amount or amount <= 0:
        return NO_AMOUNT_TEXT

    digits = str(int(round(amount)))
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return "₹" + ",".join(groups + [tail])


@dataclass(frozen=True)
class Decision:
    """Final outcome for one claim query."""
    id: str
    query_id: str
    outcome: Outcome
    amount: Optional[float]
    confidence: float
    justification: str
    relevant_clauses: Tuple[Clause, ...]
    created_at: str

    @property
    def amount_display(self) -> str:
        return format_inr(self.amount)

    def to_export_dict(self) -> Dict[str, Any]:
        """Durable JSON shape consumed downstream."""
        return {
            "decision": self.outcome.value,
            "amount": self.amount if self.amount and self.amount > 0 else None,
            "confidence": self.confidence,
            "justification": self.justification,
            "relevantClauses": [
                {
                    "section": clause.section,
                    "content": clause.content,
                    "confidence": clause.confidence
                }
                for clause in self.relevant_clauses
            ],
            "timestamp": self.created_at
        }
