"""
Accuracy evaluation of the claim pipeline.
"""

from .evaluation_harness import (
    EvaluationHarness, EvaluationCase, EvaluationMetrics, CaseResult,
    DEFAULT_EVALUATION_CASES, load_cases
)

__all__ = [
    "EvaluationHarness", "EvaluationCase", "EvaluationMetrics", "CaseResult",
    "DEFAULT_EVALUATION_CASES", "load_cases"
]
