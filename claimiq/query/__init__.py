"""
Query interpretation for free-text insurance claims.
"""

from .models import StructuredQuery, CLAIM_CATEGORY
from .query_interpreter import QueryInterpreter

__all__ = ["StructuredQuery", "CLAIM_CATEGORY", "QueryInterpreter"]
