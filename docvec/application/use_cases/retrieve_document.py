from __future__ import annotations

from typing import List, Optional, Union

from ..dto import QueryRequest, SearchRequest
from ...domain.errors import DependencyTimeoutError, GenerationError, InvalidInputError
from ...domain.interfaces import AnswerGenerator, EmbeddingService, DocumentStore
from ...domain.models import NoMatch, QueryResult, ScoredRecord
from ...domain.similarity import best_match, rank
from ...infrastructure.logging import get_logger

logger = get_logger("docvec.application.retrieve")


def _require_query(query: str) -> str:
    q = query or ""
    if not q.strip():
        raise InvalidInputError("Query text cannot be empty")
    return q


class RetrieveDocumentUseCase:
    """Use-case: embed a query, scan every stored record and return the closest one.

    Retrieval is a linear scan (O(N*D)) over a snapshot from ``list_all``. When an answer
    generator is configured, the matched content and the query are passed to it; a failed
    generation leaves the match intact and is reported in ``warnings``.
    """

    def __init__(
        self,
        embeddings: EmbeddingService,
        store: DocumentStore,
        generator: Optional[AnswerGenerator] = None,
    ) -> None:
        self._emb = embeddings
        self._store = store
        self._gen = generator

    def execute(self, req: QueryRequest) -> Union[QueryResult, NoMatch]:
        query = _require_query(req.query)
        qvec = self._emb.embed(query)
        records = self._store.list_all()

        hit = best_match(qvec.values, records)
        if hit is None:
            logger.info("No match | candidates=%d", len(records))
            return NoMatch(query=query, candidates=len(records))

        rec = hit.record
        logger.info("Match | id=%s | score=%.4f | candidates=%d", rec.id, hit.score, len(records))

        answer: Optional[str] = None
        warnings: List[str] = []
        if req.generate_answer and self._gen is not None:
            if rec.content is None:
                warnings.append(f"Document '{rec.id}' has no stored content; answer skipped")
            else:
                try:
                    answer = self._gen.generate(rec.content, query)
                except (GenerationError, DependencyTimeoutError) as ex:
                    logger.warning("Answer generation failed | id=%s | %s: %s", rec.id, type(ex).__name__, ex)
                    warnings.append(f"Answer generation failed: {ex}")

        return QueryResult(
            document_id=rec.id,
            score=hit.score,
            content=rec.content,
            answer=answer,
            warnings=warnings,
        )

    def search(self, req: SearchRequest) -> List[ScoredRecord]:
        """Ranked top-k records for the query; an empty list when nothing is comparable."""
        query = _require_query(req.query)
        qvec = self._emb.embed(query)
        return rank(qvec.values, self._store.list_all(), req.k)
