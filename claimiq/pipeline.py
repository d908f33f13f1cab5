"""
Claim Pipeline wiring query interpretation, evidence retrieval and decision synthesis.
"""

import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional

from .decision.decision_synthesizer import DecisionSynthesizer
from .decision.models import Decision
from .ingestion.document_index import DocumentIndex
from .ingestion.models import ProcessedDocument
from .models.llm_manager import LLMManager
from .query.models import StructuredQuery
from .query.query_interpreter import QueryInterpreter
from .rag.evidence_retriever import EvidenceRetriever
from .rag.models import Clause

logger = logging.getLogger(__name__)


@dataclass
class ClaimAnalysis:
    """Everything one query submission produced."""
    query_id: str
    query: str
    structured_query: StructuredQuery
    clauses: List[Clause]
    decision: Decision
    stage_timings: Dict[str, float] = field(default_factory=dict)

    @property
    def processing_time(self) -> float:
        return sum(self.stage_timings.values())


class ClaimPipeline:
    """Runs the three analysis stages in order for each submission."""

    def __init__(self, llm_manager: LLMManager, document_index: DocumentIndex,
                 config: Optional[Dict[str, Any]] = None):
        config = config or {}
        self.llm_manager = llm_manager
        self.document_index = document_index
        self.interpreter = QueryInterpreter(llm_manager)
        self.retriever = EvidenceRetriever(config.get("retrieval", {}))
        self.synthesizer = DecisionSynthesizer(llm_manager)

    async def process(self, query: str, debug: bool = False,
                      documents: Optional[List[ProcessedDocument]] = None) -> ClaimAnalysis:
        """
        Analyze one claim query.

        Args:
            query: Free-text claim description
            debug: Whether to enable debug logging
            documents: Explicit document set; defaults to one snapshot of the index

        Returns:
            ClaimAnalysis with the intermediate results and the decision
        """
        query_id = f"query-{uuid.uuid4().hex[:12]}"
        snapshot = self.document_index.snapshot() if documents is None else tuple(documents)
        timings: Dict[str, float] = {}

        start = time.perf_counter()
        structured_query = await self.interpreter.parse(query, debug=debug)
        timings["parse"] = time.perf_counter() - start

        start = time.perf_counter()
        clauses = await self.retriever.search(structured_query, snapshot, debug=debug)
        timings["search"] = time.perf_counter() - start

        start = time.perf_counter()
        decision = await self.synthesizer.decide(structured_query, clauses, query_id=query_id, debug=debug)
        timings["decide"] = time.perf_counter() - start

        if debug:
            logger.info(f"Stage timings for {query_id}: {timings}")

        return ClaimAnalysis(
            query_id=query_id,
            query=query,
            structured_query=structured_query,
            clauses=clauses,
            decision=decision,
            stage_timings=timings
        )
