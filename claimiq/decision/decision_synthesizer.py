"""
Decision Synthesizer for combining a structured claim with retrieved clauses.
"""

import json
import logging
import math
import uuid
from datetime import datetime, timezone
from typing import Dict, Any, List, Optional, Sequence

from ..exceptions import LLMResponseError
from ..models.llm_manager import LLMManager, StrategyMode
from ..query.models import StructuredQuery
from ..rag.models import Clause
from .models import Decision, Outcome

logger = logging.getLogger(__name__)

DEFAULT_COVERAGE_AMOUNT = 500000
APPROVAL_CONFIDENCE = 0.89
REJECTION_CONFIDENCE = 0.95
MIN_ELIGIBLE_AGE = 40
MAX_ELIGIBLE_AGE = 70

APPROVAL_JUSTIFICATION = (
    "Claim approved based on policy coverage for knee surgery in eligible age group and location."
)
AGE_REJECTION_JUSTIFICATION = (
    f"Claim rejected: Patient age is outside the eligible range of "
    f"{MIN_ELIGIBLE_AGE}-{MAX_ELIGIBLE_AGE} years for knee surgery coverage."
)

DECISION_PROMPT = """Based on the following insurance query and policy clauses, make a decision:

Query Details:
{query}

Relevant Policy Clauses:
{clauses}

Analyze the query against the clauses and return a JSON decision with:
- decision: "approved" | "rejected" | "pending"
- amount: number (coverage amount if applicable)
- confidence: number (0-1, confidence in decision)
- justification: string (detailed explanation)

Consider factors like age eligibility, procedure coverage, policy tenure, and geographic coverage.
Return only valid JSON, no additional text."""


def _new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


class DecisionSynthesizer:
    """Produces a Decision via the LLM or the fixed eligibility rule."""

    def __init__(self, llm_manager: LLMManager):
        self.llm_manager = llm_manager

    async def decide(self, query: StructuredQuery, clauses: Sequence[Clause],
                     query_id: Optional[str] = None, debug: bool = False) -> Decision:
        """
        Decide a claim.

        Args:
            query: Structured claim attributes
            clauses: Evidence from the retriever, attached to the decision verbatim
            query_id: Id of the originating query submission
            debug: Whether to enable debug logging

        Returns:
            A new immutable Decision
        """
        query_id = query_id or _new_id("query")
        clauses = tuple(clauses)

        fields = None
        if self.llm_manager.mode is StrategyMode.LLM:
            try:
                fields = await self._llm_decide(query, clauses)
            except Exception as e:
                logger.warning(f"Decision making failed: {e}, using fallback")

        if fields is None:
            fields = self._heuristic_decide(query)

        decision = Decision(
            id=_new_id("decision"),
            query_id=query_id,
            relevant_clauses=clauses,
            created_at=datetime.now(timezone.utc).isoformat(),
            **fields
        )

        logger.info(f"Decision {decision.id}: {decision.outcome.value} "
                    f"({decision.amount_display}, confidence {decision.confidence:.2f})")
        if debug:
            logger.info(f"Justification: {decision.justification}")

        return decision

    async def _llm_decide(self, query: StructuredQuery, clauses: Sequence[Clause]) -> Dict[str, Any]:
        """Ask the completion service for a decision."""
        prompt = DECISION_PROMPT.format(
            query=json.dumps(query.to_dict(), indent=2),
            clauses="\n".join(f"- {clause.section}: {clause.content}" for clause in clauses)
        )
        data = await self.llm_manager.generate_json(prompt)
        return self._validate_llm_decision(data)

    def _validate_llm_decision(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Map the model's JSON onto Decision fields, rejecting unusable replies."""
        try:
            outcome = Outcome(str(data.get("decision", "")).strip().lower())
        except ValueError as e:
            raise LLMResponseError(f"Unknown decision outcome: {data.get('decision')!r}") from e

        try:
            confidence = float(data["confidence"])
            amount = data.get("amount")
            amount = float(amount) if amount not in (None, "") else None
        except (KeyError, TypeError, ValueError) as e:
            raise LLMResponseError(f"Malformed decision fields: {e}") from e

        if not math.isfinite(confidence) or (amount is not None and not math.isfinite(amount)):
            raise LLMResponseError(f"Non-finite decision fields: confidence={confidence}, amount={amount}")

        return {
            "outcome": outcome,
            "amount": amount if amount and amount > 0 else None,
            "confidence": min(max(confidence, 0.0), 1.0),
            "justification": str(data.get("justification") or "")
        }

    def _heuristic_decide(self, query: StructuredQuery) -> Dict[str, Any]:
        """
        Fixed demo rule: approve unless a known age falls outside 40-70.

        No field other than age affects the outcome.
        """
        if query.age is not None and not MIN_ELIGIBLE_AGE <= query.age <= MAX_ELIGIBLE_AGE:
            return {
                "outcome": Outcome.REJECTED,
                "amount": None,
                "confidence": REJECTION_CONFIDENCE,
                "justification": AGE_REJECTION_JUSTIFICATION
            }

        return {
            "outcome": Outcome.APPROVED,
            "amount": DEFAULT_COVERAGE_AMOUNT,
            "confidence": APPROVAL_CONFIDENCE,
            "justification": APPROVAL_JUSTIFICATION
        }

    def get_rules(self) -> List[str]:
        """Describe the heuristic rule for display."""
        return [
            f"Age outside {MIN_ELIGIBLE_AGE}-{MAX_ELIGIBLE_AGE}: rejected ({REJECTION_CONFIDENCE:.0%})",
            f"Otherwise: approved for {DEFAULT_COVERAGE_AMOUNT} ({APPROVAL_CONFIDENCE:.0%})"
        ]
