"""
Query Interpreter for turning free-text claim queries into structured attributes.
"""

import logging
import re
from typing import Dict, Any, Optional

from ..models.llm_manager import LLMManager, StrategyMode
from .models import CLAIM_CATEGORY, StructuredQuery, normalize_gender

logger = logging.getLogger(__name__)

KNOWN_PROCEDURES = ["knee surgery", "appendectomy", "heart bypass", "cataract surgery"]
KNOWN_LOCATIONS = ["pune", "mumbai", "delhi", "bangalore", "chennai"]

AGE_PATTERN = re.compile(r"(\d{1,2})[^\d]*(?:year|yr|y)?", re.IGNORECASE)
GENDER_PATTERN = re.compile(r"(male|female|M|F)", re.IGNORECASE)
DURATION_PATTERN = re.compile(r"(\d+)[^\d]*(?:month|year|yr)", re.IGNORECASE)

PARSE_PROMPT = """Parse the following insurance query and extract structured information:
Query: "{query}"

Extract and return JSON with these fields:
- age: number (if mentioned)
- gender: "male" | "female" (if mentioned)
- procedure: string (medical procedure if mentioned)
- location: string (city/location if mentioned)
- policyDuration: string (policy tenure if mentioned)
- amount: number (claim amount if mentioned)
- category: string (always "insurance-claim")

Return only valid JSON, no additional text."""


class QueryInterpreter:
    """Extracts a StructuredQuery from claim text via the LLM or local patterns."""

    def __init__(self, llm_manager: LLMManager):
        self.llm_manager = llm_manager

    async def parse(self, query: str, debug: bool = False) -> StructuredQuery:
        """
        Parse a claim query.

        The LLM variant runs only when a credential is configured; any failure
        it raises is logged and answered by the heuristic variant instead.

        Args:
            query: Free-text claim description
            debug: Whether to enable debug logging

        Returns:
            StructuredQuery with category always set
        """
        logger.info(f"Parsing query: {query}")

        parsed = None
        if self.llm_manager.mode is StrategyMode.LLM:
            try:
                parsed = await self._llm_parse(query)
            except Exception as e:
                logger.warning(f"LLM query parsing failed: {e}, using fallback")

        if parsed is None:
            parsed = self._heuristic_parse(query)

        if debug:
            logger.info(f"Structured query: {parsed.to_dict()}")

        return parsed

    async def _llm_parse(self, query: str) -> StructuredQuery:
        """Extract attributes with the completion service."""
        data = await self.llm_manager.generate_json(PARSE_PROMPT.format(query=query))
        return StructuredQuery.from_dict(data)

    def _heuristic_parse(self, query: str) -> StructuredQuery:
        """Extract attributes with fixed patterns and vocabularies."""
        query_lower = query.lower()
        age_match = AGE_PATTERN.search(query)

        return StructuredQuery(
            category=CLAIM_CATEGORY,
            age=self._extract_age(age_match),
            gender=self._extract_gender(query),
            procedure=next((proc for proc in KNOWN_PROCEDURES if proc in query_lower), None),
            location=self._extract_location(query_lower),
            policy_duration=self._extract_policy_duration(query, age_match)
        )

    def _extract_age(self, age_match: Optional[re.Match]) -> Optional[int]:
        if not age_match:
            return None
        age = int(age_match.group(1))
        return age if age > 0 else None

    def _extract_gender(self, query: str) -> Optional[str]:
        match = GENDER_PATTERN.search(query)
        return normalize_gender(match.group(1)) if match else None

    def _extract_location(self, query_lower: str) -> Optional[str]:
        location = next((loc for loc in KNOWN_LOCATIONS if loc in query_lower), None)
        return location.capitalize() if location else None

    def _extract_policy_duration(self, query: str, age_match: Optional[re.Match]) -> Optional[str]:
        """
        Find the policy tenure phrase.

        A phrase such as "46-year-old" also matches the tenure pattern, so a
        candidate starting at the number already taken as the age is skipped
        whenever a later candidate exists.
        """
        candidates = list(DURATION_PATTERN.finditer(query))
        if not candidates:
            return None

        age_start = age_match.start(1) if age_match else None
        for candidate in candidates:
            if candidate.start(1) != age_start:
                return candidate.group(0)
        return candidates[0].group(0)

    def get_vocabularies(self) -> Dict[str, Any]:
        """Get the heuristic vocabularies for debugging."""
        return {
            "procedures": KNOWN_PROCEDURES,
            "locations": KNOWN_LOCATIONS
        }
