"""
Evaluation Harness for scoring the claim pipeline against labeled cases.
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any, List, Optional, Sequence

import yaml

from ..decision.models import Outcome
from ..exceptions import ClaimIQError
from ..ingestion.models import ProcessedDocument
from ..pipeline import ClaimPipeline

logger = logging.getLogger(__name__)

AMOUNT_TOLERANCE = 10000


@dataclass(frozen=True)
class EvaluationCase:
    """A labeled claim query."""
    query: str
    expected_decision: Outcome
    expected_amount: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EvaluationCase":
        """
        Build a case from its YAML mapping.

        Raises:
            ClaimIQError: A required key is missing or the outcome is unknown
        """
        if not isinstance(data, dict) or "query" not in data or "expected_decision" not in data:
            raise ClaimIQError(f"Evaluation case needs 'query' and 'expected_decision': {data!r}")
        try:
            expected_decision = Outcome(str(data["expected_decision"]).strip().lower())
        except ValueError as e:
            raise ClaimIQError(
                f"Unknown expected_decision {data['expected_decision']!r} for case {data['query']!r}"
            ) from e
        return cls(
            query=data["query"],
            expected_decision=expected_decision,
            expected_amount=data.get("expected_amount")
        )


@dataclass
class CaseResult:
    """Outcome of running one case through the pipeline."""
    query: str
    correct: bool
    confidence: float
    response_time_ms: float
    decision: Optional[str] = None
    amount: Optional[float] = None
    error: Optional[str] = None


@dataclass
class EvaluationMetrics:
    """
    Aggregate metrics of an evaluation run.

    No confusion matrix is tracked, so precision, recall and f1_score all
    report the accuracy.
    """
    accuracy: float = 0.0
    precision: float = 0.0
    recall: float = 0.0
    f1_score: float = 0.0
    response_time: float = 0.0  # mean milliseconds per case
    confidence_score: float = 0.0
    total_cases: int = 0
    correct_cases: int = 0
    per_case: List[CaseResult] = field(default_factory=list)


DEFAULT_EVALUATION_CASES: List[EvaluationCase] = [
    EvaluationCase("46-year-old male, knee surgery in Pune, 3-month-old insurance policy",
                   Outcome.APPROVED, 500000),
    EvaluationCase("35F, appendectomy, Mumbai, 6 months policy duration",
                   Outcome.APPROVED, 300000),
    EvaluationCase("75M, knee surgery, Delhi, 1-year policy",
                   Outcome.REJECTED, 0),
    EvaluationCase("28F, cosmetic surgery, Bangalore, 2-year policy",
                   Outcome.REJECTED, 0),
    EvaluationCase("52M, emergency heart surgery, Chennai, 1-day policy",
                   Outcome.APPROVED, 1000000),
]


def load_cases(path: Path) -> List[EvaluationCase]:
    """Load labeled cases from a YAML list of {query, expected_decision, expected_amount}."""
    with open(path, 'r') as f:
        data = yaml.safe_load(f) or []
    if isinstance(data, dict):
        data = data.get("cases", [])
    return [EvaluationCase.from_dict(item) for item in data]


class EvaluationHarness:
    """Runs labeled cases sequentially through a ClaimPipeline."""

    def __init__(self, pipeline: ClaimPipeline, config: Optional[Dict[str, Any]] = None):
        config = config or {}
        self.pipeline = pipeline
        self.amount_tolerance = config.get("amount_tolerance", AMOUNT_TOLERANCE)

    def is_correct(self, case: EvaluationCase, decision: Outcome, amount: Optional[float]) -> bool:
        """Outcome must match; the amount only counts when a non-zero one is expected."""
        if decision is not case.expected_decision:
            return False
        if not case.expected_amount:
            return True
        return abs((amount or 0) - case.expected_amount) < self.amount_tolerance

    async def evaluate(self, cases: Sequence[EvaluationCase],
                       documents: Optional[Sequence[ProcessedDocument]] = None) -> EvaluationMetrics:
        """
        Score the pipeline on a batch of cases.

        A case whose run raises is scored incorrect with confidence 0; the
        batch always completes.

        Args:
            cases: Labeled cases, run one after another
            documents: Document set to search; defaults to one index snapshot

        Returns:
            EvaluationMetrics with per-case results
        """
        if not cases:
            logger.warning("No evaluation cases given")
            return EvaluationMetrics()

        documents = list(self.pipeline.document_index.snapshot() if documents is None else documents)
        results: List[CaseResult] = []
        start_time = time.perf_counter()

        for case in cases:
            case_start = time.perf_counter()
            try:
                analysis = await self.pipeline.process(case.query, documents=documents)
                decision = analysis.decision
                results.append(CaseResult(
                    query=case.query,
                    correct=self.is_correct(case, decision.outcome, decision.amount),
                    confidence=decision.confidence,
                    response_time_ms=(time.perf_counter() - case_start) * 1000,
                    decision=decision.outcome.value,
                    amount=decision.amount
                ))
            except Exception as e:
                logger.error(f"Evaluation case failed: {case.query!r}: {e}")
                results.append(CaseResult(
                    query=case.query,
                    correct=False,
                    confidence=0.0,
                    response_time_ms=(time.perf_counter() - case_start) * 1000,
                    error=str(e)
                ))

        total_ms = (time.perf_counter() - start_time) * 1000
        correct = sum(1 for result in results if result.correct)
        accuracy = correct / len(results)

        metrics = EvaluationMetrics(
            accuracy=accuracy,
            precision=accuracy,
            recall=accuracy,
            f1_score=accuracy,
            response_time=total_ms / len(results),
            confidence_score=sum(result.confidence for result in results) / len(results),
            total_cases=len(results),
            correct_cases=correct,
            per_case=results
        )
        logger.info(f"Evaluation complete: {correct}/{len(results)} correct, accuracy {accuracy:.2f}")
        return metrics
