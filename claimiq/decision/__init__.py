"""
Decision synthesis for structured insurance claims.
"""

from .decision_synthesizer import DecisionSynthesizer
from .models import Decision, Outcome, format_inr

__all__ = ["DecisionSynthesizer", "Decision", "Outcome", "format_inr"]
